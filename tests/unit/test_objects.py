"""Tests for Slope runtime values and operator semantics."""

from __future__ import annotations

import math

import pytest

from slope.core.errors import OperatorError, ValueKindError
from slope.core.expression_lang import operations
from slope.core.expression_lang.objects import (
    FALSE,
    TRUE,
    UNDEFINED,
    Boolean,
    BuiltinFunction,
    Function,
    Integer,
    ObjectKind,
    Real,
    Set,
    make_real,
)
from slope.core.expression_lang.parser import parse_expr
from slope.core.ir import Symbol


def ints(*values: int) -> Set:
    return Set.of(Integer(v) for v in values)


# ============================================================================
# Values
# ============================================================================


class TestDisplay:
    def test_scalars(self) -> None:
        assert str(Integer(-42)) == "-42"
        assert str(Real(2.0)) == "2.0"
        assert str(Real(0.5)) == "0.5"
        assert str(TRUE) == "true"
        assert str(FALSE) == "false"
        assert str(UNDEFINED) == "undefined"

    def test_large_real_has_no_exponent(self) -> None:
        assert str(Real(1e20)) == "100000000000000000000.0"

    def test_small_real_has_no_exponent(self) -> None:
        assert str(Real(1e-5)) == "0.00001"

    def test_function(self) -> None:
        function = Function(parameters=("x", "y"), body=parse_expr("x + y"))
        assert str(function) == "fn(x, y) = (x + y);"

    def test_builtin(self) -> None:
        builtin = BuiltinFunction(name="max", parameters=("s",), implementation=lambda a: a[0])
        assert str(builtin) == "<builtin max(s)>"
        assert builtin.kind == ObjectKind.BUILTIN


class TestMakeReal:
    def test_finite(self) -> None:
        assert make_real(1.5) == Real(1.5)

    @pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
    def test_non_finite_is_undefined(self, value: float) -> None:
        assert make_real(value) is UNDEFINED

    def test_negative_zero_is_normalized(self) -> None:
        assert str(make_real(-0.0)) == "0.0"


class TestSet:
    """Sets are deduplicated, ordered and single-kind."""

    def test_deduplicates_and_orders(self) -> None:
        s = ints(3, 1, 3, 2)
        assert str(s) == "{1, 2, 3}"
        assert len(s) == 3
        assert s.element_kind == ObjectKind.INTEGER

    def test_empty(self) -> None:
        s = Set.of([])
        assert str(s) == "{}"
        assert s.element_kind is None

    def test_booleans_order_false_first(self) -> None:
        assert str(Set.of([TRUE, FALSE, TRUE])) == "{false, true}"

    def test_reals_keyed_by_value(self) -> None:
        assert str(Set.of([Real(0.5), Real(-1.0), Real(0.5)])) == "{-1.0, 0.5}"

    def test_nested_sets(self) -> None:
        s = Set.of([ints(2), ints(), ints(1), ints(1)])
        assert str(s) == "{{}, {1}, {2}}"
        assert s.element_kind == ObjectKind.SET

    def test_nested_sets_may_differ_in_inner_kind(self) -> None:
        s = Set.of([ints(1), Set.of([TRUE])])
        assert str(s) == "{{true}, {1}}"
        assert s.element_kind == ObjectKind.SET

    def test_equal_sets_compare_equal(self) -> None:
        assert ints(1, 2) == ints(2, 1)
        assert hash(ints(1, 2)) == hash(ints(2, 1))

    def test_rejects_undefined(self) -> None:
        with pytest.raises(ValueKindError, match="undefined"):
            Set.of([Integer(1), UNDEFINED])

    def test_rejects_mixed_kinds(self) -> None:
        with pytest.raises(ValueKindError, match="share one kind"):
            Set.of([Integer(1), Real(1.0)])

    def test_rejects_functions(self) -> None:
        function = Function(parameters=(), body=parse_expr("1"))
        with pytest.raises(ValueKindError):
            Set.of([function])

    def test_integer_and_real_are_distinct_values(self) -> None:
        assert Integer(1) != Real(1.0)
        assert Integer(1) != Boolean(True)


# ============================================================================
# Operations
# ============================================================================


class TestArithmetic:
    def test_integer_closed(self) -> None:
        assert operations.add(Integer(1), Integer(2)) == Integer(3)
        assert operations.subtract(Integer(1), Integer(2)) == Integer(-1)
        assert operations.multiply(Integer(4), Integer(5)) == Integer(20)

    def test_mixed_is_real(self) -> None:
        assert operations.add(Integer(1), Real(0.5)) == Real(1.5)
        assert operations.multiply(Real(2.0), Integer(3)) == Real(6.0)

    def test_integers_are_unbounded(self) -> None:
        big = Integer(2**63 - 1)
        assert operations.add(big, Integer(1)) == Integer(2**63)

    def test_division_is_real(self) -> None:
        assert operations.divide(Integer(1), Integer(2)) == Real(0.5)
        assert operations.divide(Integer(4), Integer(2)) == Real(2.0)

    @pytest.mark.parametrize("divisor", [Integer(0), Real(0.0)])
    def test_division_by_zero_is_undefined(self, divisor: Integer | Real) -> None:
        assert operations.divide(Integer(1), divisor) is UNDEFINED

    def test_remainder_takes_sign_of_dividend(self) -> None:
        assert operations.remainder(Integer(-7), Integer(3)) == Integer(-1)
        assert operations.remainder(Integer(7), Integer(-3)) == Integer(1)
        assert operations.remainder(Real(5.5), Real(2.0)) == Real(1.5)

    def test_remainder_by_zero_is_undefined(self) -> None:
        assert operations.remainder(Integer(1), Integer(0)) is UNDEFINED
        assert operations.remainder(Real(1.0), Integer(0)) is UNDEFINED

    def test_power_is_real(self) -> None:
        assert operations.power(Integer(2), Integer(3)) == Real(8.0)
        assert operations.power(Integer(4), Real(0.5)) == Real(2.0)

    @pytest.mark.parametrize(
        "base,exponent",
        [
            (Integer(-1), Real(0.5)),
            (Integer(0), Integer(-1)),
            (Real(10.0), Integer(400)),
        ],
    )
    def test_power_outside_domain_is_undefined(self, base: Integer | Real, exponent: Integer | Real) -> None:
        assert operations.power(base, exponent) is UNDEFINED

    def test_overflow_is_undefined(self) -> None:
        assert operations.multiply(Real(1e308), Real(10.0)) is UNDEFINED

    def test_undefined_propagates(self) -> None:
        assert operations.add(UNDEFINED, Integer(1)) is UNDEFINED
        assert operations.negate(UNDEFINED) is UNDEFINED

    def test_booleans_are_not_numbers(self) -> None:
        with pytest.raises(OperatorError, match="`\\+` is not defined for Boolean and Integer"):
            operations.add(TRUE, Integer(1))

    def test_factorial(self) -> None:
        assert operations.factorial(Integer(4)) == Integer(24)
        assert operations.factorial(Integer(0)) == Integer(1)

    def test_factorial_rejects_negative(self) -> None:
        with pytest.raises(OperatorError, match="negative"):
            operations.factorial(Integer(-1))

    def test_factorial_rejects_reals(self) -> None:
        with pytest.raises(OperatorError):
            operations.factorial(Real(3.0))

    def test_plus_minus(self) -> None:
        assert operations.plus_minus(Integer(2), Integer(3)) == ints(-1, 5)

    def test_absolute(self) -> None:
        assert operations.absolute(Integer(-3)) == Integer(3)
        assert operations.absolute(Real(-2.5)) == Real(2.5)
        assert operations.absolute(ints(4, 5, 6)) == Integer(3)
        with pytest.raises(OperatorError):
            operations.absolute(TRUE)


class TestComparison:
    def test_numeric(self) -> None:
        assert operations.compare(Symbol.LT, Integer(1), Real(1.5)) is TRUE
        assert operations.compare(Symbol.EQ, Integer(1), Real(1.0)) is TRUE
        assert operations.compare(Symbol.NE, Integer(1), Integer(1)) is FALSE

    def test_undefined_equality(self) -> None:
        assert operations.compare(Symbol.EQ, UNDEFINED, UNDEFINED) is FALSE
        assert operations.compare(Symbol.NE, UNDEFINED, UNDEFINED) is TRUE
        assert operations.compare(Symbol.EQ, UNDEFINED, Integer(1)) is FALSE

    def test_undefined_ordering(self) -> None:
        assert operations.compare(Symbol.LT, Integer(1), UNDEFINED) is UNDEFINED

    def test_booleans_only_test_equality(self) -> None:
        assert operations.compare(Symbol.EQ, TRUE, TRUE) is TRUE
        with pytest.raises(OperatorError):
            operations.compare(Symbol.LT, FALSE, TRUE)

    def test_incompatible_kinds_raise(self) -> None:
        with pytest.raises(OperatorError):
            operations.compare(Symbol.EQ, TRUE, Integer(1))

    def test_set_containment(self) -> None:
        small, large = ints(1, 2), ints(1, 2, 3)
        assert operations.compare(Symbol.LT, small, large) is TRUE
        assert operations.compare(Symbol.LT, small, small) is FALSE
        assert operations.compare(Symbol.LE, small, small) is TRUE
        assert operations.compare(Symbol.GT, large, small) is TRUE
        assert operations.compare(Symbol.GE, small, large) is FALSE
        assert operations.compare(Symbol.EQ, small, ints(2, 1)) is TRUE

    def test_empty_set_is_subset_of_anything(self) -> None:
        assert operations.compare(Symbol.LE, ints(), Set.of([TRUE])) is TRUE

    def test_sets_of_different_kinds_raise(self) -> None:
        with pytest.raises(OperatorError, match="sets of one kind"):
            operations.compare(Symbol.LE, ints(1), Set.of([TRUE]))


class TestLogic:
    def test_connectives(self) -> None:
        assert operations.logical(Symbol.AND, TRUE, FALSE) is FALSE
        assert operations.logical(Symbol.OR, TRUE, FALSE) is TRUE
        assert operations.logical(Symbol.XOR, TRUE, TRUE) is FALSE
        assert operations.logical_not(FALSE) is TRUE

    def test_undefined_propagates(self) -> None:
        assert operations.logical(Symbol.AND, UNDEFINED, TRUE) is UNDEFINED
        assert operations.logical_not(UNDEFINED) is UNDEFINED

    def test_numbers_are_not_booleans(self) -> None:
        with pytest.raises(OperatorError):
            operations.logical(Symbol.OR, Integer(0), TRUE)
        with pytest.raises(OperatorError):
            operations.logical_not(Integer(0))

    def test_coalesce(self) -> None:
        assert operations.coalesce(UNDEFINED, Integer(2)) == Integer(2)
        assert operations.coalesce(Integer(1), Integer(2)) == Integer(1)
        assert operations.coalesce(UNDEFINED, UNDEFINED) is UNDEFINED


class TestSetAlgebra:
    def test_union(self) -> None:
        assert operations.union(ints(1, 2, 3), ints(1, 2, 3, 4, 5)) == ints(1, 2, 3, 4, 5)

    def test_difference(self) -> None:
        assert operations.difference(ints(1, 2, 3), ints(1, 2, 3, 4, 5)) == ints()

    def test_intersection(self) -> None:
        assert operations.intersection(ints(1, 2, 3), ints(2, 3, 4)) == ints(2, 3)

    def test_symmetric_difference(self) -> None:
        assert operations.symmetric_difference(ints(1, 2, 3), ints(1, 2, 3, 4, 5)) == ints(4, 5)

    def test_empty_set_is_compatible(self) -> None:
        assert operations.union(ints(), Set.of([TRUE])) == Set.of([TRUE])

    def test_mismatched_kinds_raise(self) -> None:
        with pytest.raises(OperatorError):
            operations.union(ints(1), Set.of([Real(1.0)]))

    def test_non_sets_raise(self) -> None:
        with pytest.raises(OperatorError):
            operations.union(ints(1), Integer(1))

    def test_membership(self) -> None:
        assert operations.contains(Integer(2), ints(1, 2, 3)) is TRUE
        assert operations.contains(Integer(4), ints(1, 2, 3)) is FALSE
        assert operations.contains(Integer(4), ints()) is FALSE
        assert operations.contains(UNDEFINED, ints(1)) is FALSE

    def test_membership_kind_mismatch(self) -> None:
        with pytest.raises(ValueKindError):
            operations.contains(Real(1.0), ints(1))

    def test_membership_needs_a_set(self) -> None:
        with pytest.raises(OperatorError):
            operations.contains(Integer(1), Integer(1))


class TestCast:
    @pytest.mark.parametrize(
        "value,domain,expected",
        [
            (Real(2.7), "Z", Integer(2)),
            (Real(-2.7), "Z", Integer(-2)),
            (TRUE, "Z", Integer(1)),
            (Integer(3), "N", Integer(3)),
            (Integer(3), "R", Real(3.0)),
            (FALSE, "R", Real(0.0)),
            (Integer(0), "B", FALSE),
            (Real(0.1), "B", TRUE),
            (TRUE, "B", TRUE),
        ],
    )
    def test_cast(self, value: Integer | Real | Boolean, domain: str, expected: object) -> None:
        assert operations.cast(value, domain) == expected

    def test_negative_natural_is_undefined(self) -> None:
        assert operations.cast(Real(-2.7), "N") is UNDEFINED

    def test_undefined_stays_undefined(self) -> None:
        assert operations.cast(UNDEFINED, "Z") is UNDEFINED

    def test_unknown_domain(self) -> None:
        with pytest.raises(OperatorError, match="Unknown cast domain `Q`"):
            operations.cast(Integer(1), "Q")

    def test_sets_cannot_be_cast(self) -> None:
        with pytest.raises(OperatorError):
            operations.cast(ints(1), "Z")
