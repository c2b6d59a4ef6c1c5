"""Core Slope functionality: IR, expression language, errors and configuration."""

from . import ir
from .config import InterpreterConfig, load_config
from .errors import (
    ArityError,
    BindingError,
    EvaluationError,
    OperatorError,
    ParseError,
    RecursionDepthError,
    SlopeError,
    ValueKindError,
)

__all__ = [
    "ir",
    "SlopeError",
    "ParseError",
    "EvaluationError",
    "BindingError",
    "OperatorError",
    "ArityError",
    "ValueKindError",
    "RecursionDepthError",
    "InterpreterConfig",
    "load_config",
]
