"""
Expression types for the Slope IR.

A token-agnostic, typed expression AST produced by the parser and
consumed by the evaluator.

Supports:
- Literals: integers, reals, true/false, undefined
- Identifiers: x, fib, PI
- Combinations: prefix (-x, not x), infix (a + b, A \\/ B), postfix (n!)
- Calls: f(a, b), f(a)(b)
- Piecewise blocks: { 0 if x < 0; 1 else; }
- Absolute value: |x|, |A|
- Set literals: { 1, 2, 3 }, { }

Every node renders back to canonical surface text via ``str()``;
parsing that text again yields an equal tree.
"""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from slope.core.ir.operators import Fixity, Operator


def format_real(value: float) -> str:
    """Render a float positionally, always with a decimal point.

    ``repr`` gives the shortest round-tripping digits; Decimal expands any
    exponent so the tokenizer can read the text back.
    """
    text = format(Decimal(repr(value)), "f")
    if "." not in text:
        text += ".0"
    return text


# ---------------------------------------------------------------------------
# AST node types
# ---------------------------------------------------------------------------


class Identifier(BaseModel):
    """A name looked up through the scope chain."""

    name: str = Field(description="Identifier text")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return self.name


class IntegerLiteral(BaseModel):
    value: int

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return str(self.value)


class RealLiteral(BaseModel):
    value: float

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return format_real(self.value)


class BooleanLiteral(BaseModel):
    value: bool

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return "true" if self.value else "false"


class UndefinedLiteral(BaseModel):
    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return "undefined"


class Combination(BaseModel):
    """
    Operator application.

    ``left`` is absent for prefix operators and ``right`` is absent for
    postfix operators; infix operators carry both.
    """

    operator: Operator
    left: Expr | None = None
    right: Expr | None = None

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        op = self.operator
        if op.fixity == Fixity.PREFIX:
            if op.symbol.value.isalpha():
                return f"({op} {self.right})"
            return f"({op}{self.right})"
        if op.fixity == Fixity.POSTFIX:
            return f"({self.left}{op})"
        return f"({self.left} {op} {self.right})"


class Call(BaseModel):
    """Function call: callee(arg1, arg2, ...)."""

    function: Expr = Field(description="Callee expression")
    arguments: list[Expr] = Field(default_factory=list, description="Positional arguments")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        args_str = ", ".join(str(a) for a in self.arguments)
        return f"{self.function}({args_str})"


class PiecewiseBlock(BaseModel):
    """
    Ordered (value, guard) arms; the first guard that is ``true`` wins.

    An ``else`` arm is stored with the guard ``BooleanLiteral(True)``.
    """

    arms: list[tuple[Expr, Expr]] = Field(description="(value, guard) pairs")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        arms_str = " ".join(f"{value} if {guard};" for value, guard in self.arms)
        return f"{{ {arms_str} }}"


class AbsoluteValue(BaseModel):
    """|operand|: magnitude of a number or cardinality of a set."""

    operand: Expr

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"|{self.operand}|"


class SetLiteral(BaseModel):
    """{ e1, e2, ... } in written order; duplicates collapse at evaluation."""

    members: list[Expr] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        if not self.members:
            return "{}"
        return "{" + ", ".join(str(m) for m in self.members) + "}"


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

Expr = (
    Identifier
    | IntegerLiteral
    | RealLiteral
    | BooleanLiteral
    | UndefinedLiteral
    | Combination
    | Call
    | PiecewiseBlock
    | AbsoluteValue
    | SetLiteral
)

# Rebuild models for recursive forward references
Combination.model_rebuild()
Call.model_rebuild()
PiecewiseBlock.model_rebuild()
AbsoluteValue.model_rebuild()
SetLiteral.model_rebuild()
