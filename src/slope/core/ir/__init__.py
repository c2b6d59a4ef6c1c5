"""
Slope intermediate representation.

Operators, expressions and statements shared by the parser and the
evaluator. Nothing here depends on how source text is tokenized.
"""

from .expressions import (
    AbsoluteValue,
    BooleanLiteral,
    Call,
    Combination,
    Expr,
    Identifier,
    IntegerLiteral,
    PiecewiseBlock,
    RealLiteral,
    SetLiteral,
    UndefinedLiteral,
    format_real,
)
from .operators import Fixity, Operator, Precedence, Symbol, infix, postfix, prefix
from .statements import Assignment, ExpressionStatement, FunctionDeclaration, Statement

__all__ = [
    # Operators
    "Fixity",
    "Operator",
    "Precedence",
    "Symbol",
    "infix",
    "postfix",
    "prefix",
    # Expressions
    "AbsoluteValue",
    "BooleanLiteral",
    "Call",
    "Combination",
    "Expr",
    "Identifier",
    "IntegerLiteral",
    "PiecewiseBlock",
    "RealLiteral",
    "SetLiteral",
    "UndefinedLiteral",
    "format_real",
    # Statements
    "Assignment",
    "ExpressionStatement",
    "FunctionDeclaration",
    "Statement",
]
