"""
Statement types for the Slope IR.

A program is an ordered list of statements:

- ``let NAME = EXPR;``
- ``fn NAME(P1, P2, ...) = EXPR;``
- ``EXPR;``
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from slope.core.ir.expressions import Expr


class Assignment(BaseModel):
    """Bind the value of an expression to a name in the current scope."""

    name: str
    expression: Expr

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"let {self.name} = {self.expression};"


class FunctionDeclaration(BaseModel):
    """Bind a user function to a name in the current scope."""

    name: str
    parameters: list[str] = Field(default_factory=list, description="Parameter names")
    body: Expr

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"fn {self.name}({', '.join(self.parameters)}) = {self.body};"


class ExpressionStatement(BaseModel):
    """Evaluate an expression; its value is the statement's output."""

    expression: Expr

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"{self.expression};"


Statement = Assignment | FunctionDeclaration | ExpressionStatement
