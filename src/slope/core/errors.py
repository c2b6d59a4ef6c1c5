"""
Error types for Slope parsing and evaluation.

Two disjoint families share one base class:

- ``ParseError`` is raised while turning source text into statements.
- ``EvaluationError`` and its kinds are raised while executing them.

Every error renders as ``<label>: <message>`` so the text boundary can
report it without knowing the concrete class.
"""

from __future__ import annotations


class SlopeError(Exception):
    """Base exception for all Slope errors."""

    label = "Error"

    def __init__(self, message: str, position: int | None = None):
        self.message = message
        self.position = position
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with its kind label."""
        return f"{self.label}: {self.message}"


class ParseError(SlopeError):
    """
    Raised when source text is structurally malformed.

    Examples:
    - Missing ``;``, ``)``, ``=`` or ``,``
    - Duplicate ``else`` arm in a piecewise block
    - Unterminated ``|...|``
    - Illegal operator/fixity combination
    - A token that cannot begin an expression
    """

    label = "SyntaxError"


class EvaluationError(SlopeError):
    """Base class for errors raised while evaluating statements.

    ``output`` holds the rendered lines of statements that completed
    before the failure, filled in by the execution boundary.
    """

    label = "RuntimeError"

    def __init__(self, message: str, position: int | None = None):
        super().__init__(message, position)
        self.output: list[str] = []


class BindingError(EvaluationError):
    """
    Raised for name-binding failures.

    Examples:
    - Reading an identifier with no binding in the scope chain
    - Declaring a name already bound in the same scope
    """

    label = "NameError"


class OperatorError(EvaluationError):
    """
    Raised when an operation is not defined for its operands.

    Examples:
    - ``true + 1``
    - Calling a value that is not a function
    - Set algebra between sets of different element kinds
    - Factorial of a negative integer
    """

    label = "OperatorError"


class ArityError(OperatorError):
    """Raised when a call supplies the wrong number of arguments."""

    label = "ArityError"


class ValueKindError(EvaluationError):
    """
    Raised when a value of the wrong kind reaches a typed position.

    Examples:
    - A piecewise guard that is not a Boolean
    - A set literal mixing integers and reals
    - ``undefined`` inside a set literal
    """

    label = "TypeError"


class RecursionDepthError(EvaluationError):
    """Raised when user-level recursion exceeds the configured call depth."""

    label = "RecursionError"
