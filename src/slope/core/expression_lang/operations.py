"""
Operator semantics over Slope values.

Each operator is a plain function from evaluated operands to a value.
Undefined operands propagate to an Undefined result unless the operator
says otherwise (equality, coalesce, membership). Operand kinds an
operator does not define raise ``OperatorError`` rather than producing a
silent false.
"""

from __future__ import annotations

import math
import operator
from collections.abc import Callable
from functools import partial

from slope.core.errors import OperatorError, ValueKindError
from slope.core.expression_lang.objects import (
    FALSE,
    TRUE,
    UNDEFINED,
    Boolean,
    Integer,
    Object,
    Real,
    Set,
    Undefined,
    make_boolean,
    make_real,
)
from slope.core.ir.operators import Symbol

Number = Integer | Real

# Domains accepted on the right of `as`
DOMAINS = ("N", "Z", "R", "B")


def _unsupported(symbol: Symbol, *operands: Object) -> OperatorError:
    kinds = " and ".join(str(o.kind) for o in operands)
    return OperatorError(f"Operator `{symbol.value}` is not defined for {kinds}.")


def _is_undefined(*operands: Object) -> bool:
    return any(isinstance(o, Undefined) for o in operands)


def _real(compute: Callable[[], float]) -> Object:
    """Run a float computation, mapping overflow to Undefined."""
    try:
        return make_real(compute())
    except OverflowError:
        return UNDEFINED


# ---------------------------------------------------------------------------
# Arithmetic
# ---------------------------------------------------------------------------


def _arithmetic(
    symbol: Symbol,
    left: Object,
    right: Object,
    on_int: Callable[[int, int], Object],
    on_real: Callable[[float, float], float],
) -> Object:
    if _is_undefined(left, right):
        return UNDEFINED
    if not isinstance(left, Number) or not isinstance(right, Number):
        raise _unsupported(symbol, left, right)
    if isinstance(left, Integer) and isinstance(right, Integer):
        return on_int(left.value, right.value)
    a, b = left.value, right.value
    return _real(lambda: on_real(float(a), float(b)))


def add(left: Object, right: Object) -> Object:
    return _arithmetic(
        Symbol.ADD, left, right, lambda a, b: Integer(a + b), lambda a, b: a + b
    )


def subtract(left: Object, right: Object) -> Object:
    return _arithmetic(
        Symbol.SUB, left, right, lambda a, b: Integer(a - b), lambda a, b: a - b
    )


def multiply(left: Object, right: Object) -> Object:
    return _arithmetic(
        Symbol.MUL, left, right, lambda a, b: Integer(a * b), lambda a, b: a * b
    )


def divide(left: Object, right: Object) -> Object:
    """Real division; a zero divisor gives Undefined."""
    if _is_undefined(left, right):
        return UNDEFINED
    if not isinstance(left, Number) or not isinstance(right, Number):
        raise _unsupported(Symbol.DIV, left, right)
    if right.value == 0:
        return UNDEFINED
    a, b = left.value, right.value
    return _real(lambda: a / b)


def _int_remainder(a: int, b: int) -> Object:
    if b == 0:
        return UNDEFINED
    # Truncated: the result takes the sign of the dividend
    r = abs(a) % abs(b)
    return Integer(-r if a < 0 else r)


def _real_remainder(a: float, b: float) -> float:
    if b == 0:
        return math.nan
    return math.fmod(a, b)


def remainder(left: Object, right: Object) -> Object:
    return _arithmetic(Symbol.MOD, left, right, _int_remainder, _real_remainder)


def power(left: Object, right: Object) -> Object:
    """Exponentiation, always Real; domain errors and overflow give Undefined."""
    if _is_undefined(left, right):
        return UNDEFINED
    if not isinstance(left, Number) or not isinstance(right, Number):
        raise _unsupported(Symbol.POW, left, right)
    try:
        return make_real(math.pow(left.value, right.value))
    except (ValueError, OverflowError):
        return UNDEFINED


def negate(operand: Object) -> Object:
    if isinstance(operand, Undefined):
        return UNDEFINED
    if isinstance(operand, Integer):
        return Integer(-operand.value)
    if isinstance(operand, Real):
        return make_real(-operand.value)
    raise _unsupported(Symbol.SUB, operand)


def factorial(operand: Object) -> Object:
    if isinstance(operand, Undefined):
        return UNDEFINED
    if not isinstance(operand, Integer):
        raise _unsupported(Symbol.FACTORIAL, operand)
    if operand.value < 0:
        raise OperatorError(f"Factorial is not defined for negative integers, got {operand}.")
    return Integer(math.factorial(operand.value))


def plus_minus(left: Object, right: Object) -> Object:
    """Both ``+/-`` and ``-/+`` build the set {left + right, left - right}."""
    if _is_undefined(left, right):
        return UNDEFINED
    if not isinstance(left, Number) or not isinstance(right, Number):
        raise _unsupported(Symbol.PLUS_MINUS, left, right)
    results = [add(left, right), subtract(left, right)]
    if _is_undefined(*results):
        return UNDEFINED
    return Set.of(results)


def absolute(operand: Object) -> Object:
    """Magnitude of a number, or the cardinality of a set."""
    if isinstance(operand, Undefined):
        return UNDEFINED
    if isinstance(operand, Integer):
        return Integer(abs(operand.value))
    if isinstance(operand, Real):
        return make_real(abs(operand.value))
    if isinstance(operand, Set):
        return Integer(len(operand))
    raise OperatorError(f"Absolute value is not defined for {operand.kind}.")


# ---------------------------------------------------------------------------
# Comparison
# ---------------------------------------------------------------------------

# On frozensets these are containment tests: `<` proper subset, `<=` subset
_COMPARISONS: dict[Symbol, Callable[[object, object], bool]] = {
    Symbol.EQ: operator.eq,
    Symbol.NE: operator.ne,
    Symbol.LT: operator.lt,
    Symbol.LE: operator.le,
    Symbol.GT: operator.gt,
    Symbol.GE: operator.ge,
}


def compare(symbol: Symbol, left: Object, right: Object) -> Object:
    """Apply a comparison operator.

    Undefined is unequal to everything, itself included; ordering against
    Undefined is Undefined. Sets compare by containment.
    """
    if _is_undefined(left, right):
        if symbol == Symbol.EQ:
            return FALSE
        if symbol == Symbol.NE:
            return TRUE
        return UNDEFINED

    if isinstance(left, Number) and isinstance(right, Number):
        return make_boolean(_COMPARISONS[symbol](left.value, right.value))

    if isinstance(left, Boolean) and isinstance(right, Boolean):
        if symbol == Symbol.EQ:
            return make_boolean(left.value == right.value)
        if symbol == Symbol.NE:
            return make_boolean(left.value != right.value)
        raise _unsupported(symbol, left, right)

    if isinstance(left, Set) and isinstance(right, Set):
        _require_compatible(symbol, left, right)
        return make_boolean(
            _COMPARISONS[symbol](left.as_frozenset(), right.as_frozenset())
        )

    raise _unsupported(symbol, left, right)


# ---------------------------------------------------------------------------
# Logic
# ---------------------------------------------------------------------------

_LOGICAL: dict[Symbol, Callable[[bool, bool], bool]] = {
    Symbol.AND: lambda a, b: a and b,
    Symbol.OR: lambda a, b: a or b,
    Symbol.XOR: lambda a, b: a != b,
}


def logical(symbol: Symbol, left: Object, right: Object) -> Object:
    if _is_undefined(left, right):
        return UNDEFINED
    if not isinstance(left, Boolean) or not isinstance(right, Boolean):
        raise _unsupported(symbol, left, right)
    return make_boolean(_LOGICAL[symbol](left.value, right.value))


def logical_not(operand: Object) -> Object:
    if isinstance(operand, Undefined):
        return UNDEFINED
    if not isinstance(operand, Boolean):
        raise _unsupported(Symbol.NOT, operand)
    return make_boolean(not operand.value)


def coalesce(left: Object, right: Object) -> Object:
    """``left ? right``: right only when left is Undefined."""
    return right if isinstance(left, Undefined) else left


# ---------------------------------------------------------------------------
# Sets
# ---------------------------------------------------------------------------


def _require_compatible(symbol: Symbol, left: Set, right: Set) -> None:
    if left.element_kind is None or right.element_kind is None:
        return
    if left.element_kind != right.element_kind:
        raise OperatorError(
            f"Operator `{symbol.value}` needs sets of one kind, "
            f"got {left.element_kind} and {right.element_kind}."
        )


def _set_algebra(
    symbol: Symbol,
    combine: Callable[[frozenset, frozenset], frozenset],
) -> Callable[[Object, Object], Object]:
    def apply(left: Object, right: Object) -> Object:
        if _is_undefined(left, right):
            return UNDEFINED
        if not isinstance(left, Set) or not isinstance(right, Set):
            raise _unsupported(symbol, left, right)
        _require_compatible(symbol, left, right)
        return Set.of(combine(left.as_frozenset(), right.as_frozenset()))

    return apply


union = _set_algebra(Symbol.UNION, lambda a, b: a | b)
intersection = _set_algebra(Symbol.INTERSECTION, lambda a, b: a & b)
difference = _set_algebra(Symbol.DIFFERENCE, lambda a, b: a - b)
symmetric_difference = _set_algebra(Symbol.SYMMETRIC_DIFFERENCE, lambda a, b: a ^ b)


def contains(element: Object, container: Object) -> Object:
    """``element in container``.

    An Undefined element is never a member. The element must have the
    container's member kind unless the container is empty.
    """
    if isinstance(container, Undefined):
        return UNDEFINED
    if not isinstance(container, Set):
        raise _unsupported(Symbol.IN, element, container)
    if isinstance(element, Undefined):
        return FALSE
    if container.element_kind is not None and element.kind != container.element_kind:
        raise ValueKindError(
            f"Cannot test a {element.kind} value for membership "
            f"in a set of {container.element_kind}."
        )
    return make_boolean(element in container)


# ---------------------------------------------------------------------------
# Casts
# ---------------------------------------------------------------------------


def cast(value: Object, domain: str) -> Object:
    """``value as domain`` for the domains N, Z, R and B.

    Reals truncate toward zero into N and Z; N additionally maps negative
    results to Undefined. Numbers cast to B are ``true`` when non-zero.
    """
    if domain not in DOMAINS:
        raise OperatorError(
            f"Unknown cast domain `{domain}`, expected one of {', '.join(DOMAINS)}."
        )
    if isinstance(value, Undefined):
        return UNDEFINED
    if not isinstance(value, (Integer, Real, Boolean)):
        raise OperatorError(f"Cannot cast a {value.kind} value to {domain}.")

    if domain == "B":
        if isinstance(value, Boolean):
            return value
        return make_boolean(value.value != 0)

    if domain == "R":
        if isinstance(value, Real):
            return value
        number = value.value
        return _real(lambda: float(number))

    # Z and N
    integer = Integer(int(value.value))
    if domain == "N" and integer.value < 0:
        return UNDEFINED
    return integer


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

INFIX: dict[Symbol, Callable[[Object, Object], Object]] = {
    Symbol.ADD: add,
    Symbol.SUB: subtract,
    Symbol.MUL: multiply,
    Symbol.DIV: divide,
    Symbol.MOD: remainder,
    Symbol.POW: power,
    Symbol.PLUS_MINUS: plus_minus,
    Symbol.MINUS_PLUS: plus_minus,
    Symbol.AND: partial(logical, Symbol.AND),
    Symbol.OR: partial(logical, Symbol.OR),
    Symbol.XOR: partial(logical, Symbol.XOR),
    Symbol.COALESCE: coalesce,
    Symbol.IN: contains,
    Symbol.UNION: union,
    Symbol.INTERSECTION: intersection,
    Symbol.DIFFERENCE: difference,
    Symbol.SYMMETRIC_DIFFERENCE: symmetric_difference,
}
INFIX.update({symbol: partial(compare, symbol) for symbol in _COMPARISONS})

PREFIX: dict[Symbol, Callable[[Object], Object]] = {
    Symbol.SUB: negate,
    Symbol.NOT: logical_not,
}

POSTFIX: dict[Symbol, Callable[[Object], Object]] = {
    Symbol.FACTORIAL: factorial,
}
