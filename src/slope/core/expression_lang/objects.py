"""
Runtime value model for the Slope language.

Values are immutable and tagged with a closed ``ObjectKind``. Sets keep
their members deduplicated in canonical ascending order together with the
kind shared by every member, so display, membership and subset checks are
deterministic.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import ClassVar

from slope.core.errors import ValueKindError
from slope.core.ir.expressions import Expr, format_real


class ObjectKind(StrEnum):
    """Closed set of runtime value kinds."""

    INTEGER = "Integer"
    REAL = "Real"
    BOOLEAN = "Boolean"
    UNDEFINED = "Undefined"
    FUNCTION = "Function"
    BUILTIN = "BuiltinFunction"
    SET = "Set"


# Kinds allowed as set members, in the order used to rank them.
_MEMBER_RANK: dict[ObjectKind, int] = {
    ObjectKind.BOOLEAN: 0,
    ObjectKind.INTEGER: 1,
    ObjectKind.REAL: 2,
    ObjectKind.SET: 3,
}


class Object(ABC):
    """Base class for all runtime values."""

    kind: ClassVar[ObjectKind]

    @abstractmethod
    def __str__(self) -> str:
        raise NotImplementedError()


@dataclass(frozen=True)
class Integer(Object):
    kind: ClassVar[ObjectKind] = ObjectKind.INTEGER

    value: int

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Real(Object):
    kind: ClassVar[ObjectKind] = ObjectKind.REAL

    value: float

    def __str__(self) -> str:
        return format_real(self.value)


@dataclass(frozen=True)
class Boolean(Object):
    kind: ClassVar[ObjectKind] = ObjectKind.BOOLEAN

    value: bool

    def __str__(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True)
class Undefined(Object):
    kind: ClassVar[ObjectKind] = ObjectKind.UNDEFINED

    def __str__(self) -> str:
        return "undefined"


UNDEFINED = Undefined()
TRUE = Boolean(True)
FALSE = Boolean(False)


@dataclass(frozen=True, eq=False)
class Function(Object):
    """A user function: parameter names plus a body expression."""

    kind: ClassVar[ObjectKind] = ObjectKind.FUNCTION

    parameters: tuple[str, ...]
    body: Expr

    def __str__(self) -> str:
        return f"fn({', '.join(self.parameters)}) = {self.body};"


@dataclass(frozen=True, eq=False)
class BuiltinFunction(Object):
    """A native function over already-evaluated arguments."""

    kind: ClassVar[ObjectKind] = ObjectKind.BUILTIN

    name: str
    parameters: tuple[str, ...]
    implementation: Callable[[list[Object]], Object] = field(repr=False)

    def __str__(self) -> str:
        return f"<builtin {self.name}({', '.join(self.parameters)})>"


@dataclass(frozen=True)
class Set(Object):
    """
    Finite set of same-kind values in canonical ascending order.

    ``element_kind`` is None only for the empty set, which is compatible
    with every other set. Build instances with ``Set.of``.
    """

    kind: ClassVar[ObjectKind] = ObjectKind.SET

    items: tuple[Object, ...] = ()
    element_kind: ObjectKind | None = None

    @classmethod
    def of(cls, members: Iterable[Object]) -> Set:
        """Validate, deduplicate and order members into a set.

        Raises:
            ValueKindError: On an Undefined or non-member kind value, or
                when members do not share one kind.
        """
        unique: dict[Object, None] = {}
        element_kind: ObjectKind | None = None
        for member in members:
            if isinstance(member, Undefined):
                raise ValueKindError("A set cannot contain `undefined`.")
            if member.kind not in _MEMBER_RANK:
                raise ValueKindError(f"A {member.kind} value cannot be a set member.")
            if element_kind is None:
                element_kind = member.kind
            elif member.kind != element_kind:
                raise ValueKindError(
                    f"Set members must share one kind, got {element_kind} and {member.kind}."
                )
            unique[member] = None
        items = tuple(sorted(unique, key=sort_key))
        return cls(items=items, element_kind=element_kind)

    def __len__(self) -> int:
        return len(self.items)

    def __contains__(self, item: object) -> bool:
        return item in self.items

    def as_frozenset(self) -> frozenset[Object]:
        return frozenset(self.items)

    def __str__(self) -> str:
        if not self.items:
            return "{}"
        return "{" + ", ".join(str(i) for i in self.items) + "}"


def sort_key(obj: Object) -> tuple:
    """Canonical ordering key for set members.

    Numbers order by value (reals by their IEEE value), ``false`` before
    ``true``, and sets by their already-ordered member keys.
    """
    rank = _MEMBER_RANK[obj.kind]
    if isinstance(obj, Set):
        return (rank, tuple(sort_key(i) for i in obj.items))
    if isinstance(obj, (Integer, Real, Boolean)):
        return (rank, obj.value)
    raise ValueKindError(f"A {obj.kind} value cannot be ordered.")


def make_real(value: float) -> Object:
    """Wrap a float, collapsing NaN and infinities to Undefined."""
    if math.isnan(value) or math.isinf(value):
        return UNDEFINED
    # -0.0 + 0.0 == 0.0: keep a single zero
    return Real(value + 0.0)


def make_boolean(value: bool) -> Boolean:
    return TRUE if value else FALSE
