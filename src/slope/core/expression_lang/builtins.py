"""
Built-in constants and functions.

A fresh root environment carries:

- ``PI`` and ``E`` as Real constants
- ``max(s)`` and ``min(s)``, the last and first member of any set in its
  canonical order
- ``sum(s)`` and ``product(s)`` over a set of numbers

The set functions return Undefined for the empty set and reject any
argument that is not a set.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from functools import reduce

from slope.core.errors import ValueKindError
from slope.core.expression_lang import operations
from slope.core.expression_lang.environment import Environment
from slope.core.expression_lang.objects import (
    UNDEFINED,
    BuiltinFunction,
    Integer,
    Object,
    Real,
    Set,
)

CONSTANTS: dict[str, Object] = {
    "PI": Real(math.pi),
    "E": Real(math.e),
}


def _over_set(
    name: str,
    reduce_items: Callable[[tuple[Object, ...]], Object],
    numeric: bool = False,
) -> BuiltinFunction:
    """Wrap a reduction over a non-empty set as a one-argument builtin."""

    def implementation(arguments: list[Object]) -> Object:
        (argument,) = arguments
        if not isinstance(argument, Set):
            raise ValueKindError(f"`{name}` expects a Set, got {argument.kind}.")
        if not argument.items:
            return UNDEFINED
        if numeric and not all(isinstance(item, (Integer, Real)) for item in argument.items):
            raise ValueKindError(
                f"`{name}` expects a set of numbers, got a set of {argument.element_kind}."
            )
        return reduce_items(argument.items)

    return BuiltinFunction(name=name, parameters=("s",), implementation=implementation)


# Items are kept in ascending order, so the extremes are at the ends
FUNCTIONS: dict[str, BuiltinFunction] = {
    "max": _over_set("max", lambda items: items[-1]),
    "min": _over_set("min", lambda items: items[0]),
    "sum": _over_set("sum", lambda items: reduce(operations.add, items), numeric=True),
    "product": _over_set(
        "product", lambda items: reduce(operations.multiply, items), numeric=True
    ),
}


def install_builtins(env: Environment) -> Environment:
    """Declare every constant and builtin function in ``env``."""
    for name, value in CONSTANTS.items():
        env.declare(name, value)
    for name, function in FUNCTIONS.items():
        env.declare(name, function)
    return env


def new_environment() -> Environment:
    """Create a root environment pre-populated with the builtins."""
    return install_builtins(Environment())
