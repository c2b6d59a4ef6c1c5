"""
Operator model for the Slope IR.

An operator is a (symbol, fixity) pair. Only specific pairs are legal, and
both validity and precedence derive from the pair rather than the symbol
alone: ``-`` is prefix negation *and* infix subtraction, each with its own
binding power.
"""

from __future__ import annotations

from enum import IntEnum, StrEnum

from pydantic import BaseModel, ConfigDict

from slope.core.errors import ParseError


class Symbol(StrEnum):
    """Operator symbols, independent of how the tokenizer spells them."""

    # Arithmetic
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    MOD = "%"
    POW = "^"
    PLUS_MINUS = "+/-"
    MINUS_PLUS = "-/+"
    # Comparison
    EQ = "=="
    NE = "=/="
    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="
    # Logical
    AND = "and"
    OR = "or"
    XOR = "xor"
    NOT = "not"
    # Misc
    COALESCE = "?"
    IN = "in"
    AS = "as"
    FACTORIAL = "!"
    CALL = "("
    # Set algebra
    UNION = "\\/"
    INTERSECTION = "/\\"
    DIFFERENCE = "\\"
    SYMMETRIC_DIFFERENCE = "/_\\"


class Fixity(StrEnum):
    """Where an operator sits relative to its operand(s)."""

    PREFIX = "prefix"
    INFIX = "infix"
    POSTFIX = "postfix"


class Precedence(IntEnum):
    """Binding power, lowest to highest."""

    LOWEST = 0
    AND_OR_XOR = 1
    COMPARISON = 2
    ADDITIVE = 3
    MULTIPLICATIVE = 4
    CAST = 5
    UNARY = 6
    EXPONENT = 7
    POSTFIX = 8
    CALL = 9


_PRECEDENCE: dict[tuple[Symbol, Fixity], Precedence] = {
    # Prefix
    (Symbol.NOT, Fixity.PREFIX): Precedence.UNARY,
    (Symbol.SUB, Fixity.PREFIX): Precedence.UNARY,
    # Infix
    (Symbol.AND, Fixity.INFIX): Precedence.AND_OR_XOR,
    (Symbol.OR, Fixity.INFIX): Precedence.AND_OR_XOR,
    (Symbol.XOR, Fixity.INFIX): Precedence.AND_OR_XOR,
    (Symbol.EQ, Fixity.INFIX): Precedence.COMPARISON,
    (Symbol.NE, Fixity.INFIX): Precedence.COMPARISON,
    (Symbol.LT, Fixity.INFIX): Precedence.COMPARISON,
    (Symbol.LE, Fixity.INFIX): Precedence.COMPARISON,
    (Symbol.GT, Fixity.INFIX): Precedence.COMPARISON,
    (Symbol.GE, Fixity.INFIX): Precedence.COMPARISON,
    (Symbol.COALESCE, Fixity.INFIX): Precedence.COMPARISON,
    (Symbol.IN, Fixity.INFIX): Precedence.COMPARISON,
    (Symbol.ADD, Fixity.INFIX): Precedence.ADDITIVE,
    (Symbol.SUB, Fixity.INFIX): Precedence.ADDITIVE,
    (Symbol.PLUS_MINUS, Fixity.INFIX): Precedence.ADDITIVE,
    (Symbol.MINUS_PLUS, Fixity.INFIX): Precedence.ADDITIVE,
    (Symbol.UNION, Fixity.INFIX): Precedence.ADDITIVE,
    (Symbol.DIFFERENCE, Fixity.INFIX): Precedence.ADDITIVE,
    (Symbol.SYMMETRIC_DIFFERENCE, Fixity.INFIX): Precedence.ADDITIVE,
    (Symbol.MUL, Fixity.INFIX): Precedence.MULTIPLICATIVE,
    (Symbol.DIV, Fixity.INFIX): Precedence.MULTIPLICATIVE,
    (Symbol.MOD, Fixity.INFIX): Precedence.MULTIPLICATIVE,
    (Symbol.INTERSECTION, Fixity.INFIX): Precedence.MULTIPLICATIVE,
    (Symbol.AS, Fixity.INFIX): Precedence.CAST,
    (Symbol.POW, Fixity.INFIX): Precedence.EXPONENT,
    (Symbol.CALL, Fixity.INFIX): Precedence.CALL,
    # Postfix
    (Symbol.FACTORIAL, Fixity.POSTFIX): Precedence.POSTFIX,
}


def lookup_precedence(symbol: Symbol, fixity: Fixity) -> Precedence | None:
    """Return the precedence of a (symbol, fixity) pair, or None if illegal."""
    return _PRECEDENCE.get((symbol, fixity))


class Operator(BaseModel):
    """A legal (symbol, fixity) pair."""

    symbol: Symbol
    fixity: Fixity

    model_config = ConfigDict(frozen=True)

    @property
    def precedence(self) -> Precedence:
        """Binding power of this operator.

        Raises:
            ParseError: If the pair is not a legal operator.
        """
        precedence = lookup_precedence(self.symbol, self.fixity)
        if precedence is None:
            raise ParseError(
                f"Illegal combination of operator and fixity: "
                f"operator={self.symbol.value!r}, fixity={self.fixity.value}."
            )
        return precedence

    def __str__(self) -> str:
        return self.symbol.value


def prefix(symbol: Symbol) -> Operator:
    return Operator(symbol=symbol, fixity=Fixity.PREFIX)


def infix(symbol: Symbol) -> Operator:
    return Operator(symbol=symbol, fixity=Fixity.INFIX)


def postfix(symbol: Symbol) -> Operator:
    return Operator(symbol=symbol, fixity=Fixity.POSTFIX)
