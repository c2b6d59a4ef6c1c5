"""
Tree-walking evaluator for the Slope language.

Evaluates statements and expressions against an ``Environment``. Only the
closed set of AST node types is handled; operator semantics live in
``operations``. User recursion is bounded by a configurable call depth so
that runaway programs report an error instead of exhausting the host
stack.
"""

from __future__ import annotations

import logging

from slope.core.errors import (
    ArityError,
    OperatorError,
    RecursionDepthError,
    ValueKindError,
)
from slope.core.expression_lang import operations
from slope.core.expression_lang.environment import Environment
from slope.core.expression_lang.objects import (
    UNDEFINED,
    Boolean,
    BuiltinFunction,
    Function,
    Integer,
    Object,
    Set,
    make_boolean,
    make_real,
)
from slope.core.ir import (
    AbsoluteValue,
    Assignment,
    BooleanLiteral,
    Call,
    Combination,
    Expr,
    ExpressionStatement,
    Fixity,
    FunctionDeclaration,
    Identifier,
    IntegerLiteral,
    PiecewiseBlock,
    RealLiteral,
    SetLiteral,
    Statement,
    Symbol,
    UndefinedLiteral,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_CALL_DEPTH = 128


class Evaluator:
    """Evaluates Slope statements with a bounded user call depth."""

    def __init__(self, max_call_depth: int = DEFAULT_MAX_CALL_DEPTH) -> None:
        self.max_call_depth = max_call_depth

    def execute_statement(self, statement: Statement, env: Environment) -> Object:
        """Execute one statement, binding names in ``env``.

        Assignments and declarations produce Undefined; an expression
        statement produces its value.

        Raises:
            EvaluationError: On the first failure inside the statement.
        """
        try:
            return self._execute(statement, env)
        except RecursionError as e:
            raise RecursionDepthError(
                "Evaluation nested too deeply for the host interpreter."
            ) from e

    def evaluate(self, expr: Expr, env: Environment) -> Object:
        """Evaluate an expression in ``env``."""
        if isinstance(expr, IntegerLiteral):
            return Integer(expr.value)

        if isinstance(expr, RealLiteral):
            return make_real(expr.value)

        if isinstance(expr, BooleanLiteral):
            return make_boolean(expr.value)

        if isinstance(expr, UndefinedLiteral):
            return UNDEFINED

        if isinstance(expr, Identifier):
            return env.lookup(expr.name)

        if isinstance(expr, Combination):
            return self._evaluate_combination(expr, env)

        if isinstance(expr, Call):
            return self._evaluate_call(expr, env)

        if isinstance(expr, PiecewiseBlock):
            return self._evaluate_piecewise(expr, env)

        if isinstance(expr, AbsoluteValue):
            return operations.absolute(self.evaluate(expr.operand, env))

        if isinstance(expr, SetLiteral):
            return Set.of(self.evaluate(member, env) for member in expr.members)

        raise OperatorError(f"Unknown expression type: {type(expr).__name__}")

    # -- Statements --

    def _execute(self, statement: Statement, env: Environment) -> Object:
        if isinstance(statement, Assignment):
            value = self.evaluate(statement.expression, env)
            env.declare(statement.name, value)
            return UNDEFINED

        if isinstance(statement, FunctionDeclaration):
            function = Function(parameters=tuple(statement.parameters), body=statement.body)
            env.declare(statement.name, function)
            return UNDEFINED

        if isinstance(statement, ExpressionStatement):
            return self.evaluate(statement.expression, env)

        raise OperatorError(f"Unknown statement type: {type(statement).__name__}")

    # -- Expressions --

    def _evaluate_combination(self, expr: Combination, env: Environment) -> Object:
        symbol = expr.operator.symbol
        fixity = expr.operator.fixity

        if fixity == Fixity.PREFIX and expr.right is not None:
            apply_prefix = operations.PREFIX.get(symbol)
            if apply_prefix is not None:
                return apply_prefix(self.evaluate(expr.right, env))

        elif fixity == Fixity.POSTFIX and expr.left is not None:
            apply_postfix = operations.POSTFIX.get(symbol)
            if apply_postfix is not None:
                return apply_postfix(self.evaluate(expr.left, env))

        elif fixity == Fixity.INFIX and expr.left is not None and expr.right is not None:
            if symbol == Symbol.AS:
                return self._evaluate_cast(expr.left, expr.right, env)
            apply_infix = operations.INFIX.get(symbol)
            if apply_infix is not None:
                left = self.evaluate(expr.left, env)
                right = self.evaluate(expr.right, env)
                return apply_infix(left, right)

        raise OperatorError(
            f"Illegal combination of operator and fixity: "
            f"operator={symbol.value!r}, fixity={fixity.value}."
        )

    def _evaluate_cast(self, value: Expr, domain: Expr, env: Environment) -> Object:
        # The domain is a name, never a value
        if not isinstance(domain, Identifier):
            raise OperatorError(
                f"Expected a domain name ({', '.join(operations.DOMAINS)}) after `as`, "
                f"got `{domain}`."
            )
        return operations.cast(self.evaluate(value, env), domain.name)

    def _evaluate_call(self, expr: Call, env: Environment) -> Object:
        callee = self.evaluate(expr.function, env)

        if isinstance(callee, BuiltinFunction):
            _check_arity(callee.name, callee.parameters, len(expr.arguments))
            arguments = [self.evaluate(a, env) for a in expr.arguments]
            return callee.implementation(arguments)

        if isinstance(callee, Function):
            name = str(expr.function)
            _check_arity(name, callee.parameters, len(expr.arguments))
            arguments = [self.evaluate(a, env) for a in expr.arguments]

            if env.depth >= self.max_call_depth:
                raise RecursionDepthError(
                    f"Maximum call depth of {self.max_call_depth} exceeded in `{name}`."
                )
            scope = env.child()
            for parameter, argument in zip(callee.parameters, arguments, strict=True):
                scope.declare(parameter, argument)
            logger.debug("Calling %s at depth %d", name, scope.depth)
            return self.evaluate(callee.body, scope)

        raise OperatorError(f"`{expr.function}` is a {callee.kind} value, not a function.")

    def _evaluate_piecewise(self, expr: PiecewiseBlock, env: Environment) -> Object:
        for value, guard in expr.arms:
            condition = self.evaluate(guard, env)
            if not isinstance(condition, Boolean):
                raise ValueKindError(
                    f"A piecewise guard must be a Boolean, `{guard}` is {condition.kind}."
                )
            if condition.value:
                return self.evaluate(value, env)
        return UNDEFINED


def _check_arity(name: str, parameters: tuple[str, ...], given: int) -> None:
    if given != len(parameters):
        raise ArityError(
            f"`{name}` takes {len(parameters)} argument(s), got {given}."
        )


_default = Evaluator()


def evaluate(expr: Expr, env: Environment) -> Object:
    """Evaluate an expression with the default call depth."""
    try:
        return _default.evaluate(expr, env)
    except RecursionError as e:
        raise RecursionDepthError(
            "Evaluation nested too deeply for the host interpreter."
        ) from e


def execute_statement(statement: Statement, env: Environment) -> Object:
    """Execute a statement with the default call depth."""
    return _default.execute_statement(statement, env)
