"""
Schema expression node definitions.

These nodes represent the compiled output: a tree of combinator calls that a
runtime validation library evaluates. Every expression may carry a chain of
modifiers (`.optional()`, `.min(3)`, `.and(other)`...) applied in order.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Modifier:
    """A chained call on a schema (`.name(args)`).

    When `raw` is set, `name` is appended verbatim after the dot; it is used
    for schema overrides such as `.uuid()` that arrive as source text.
    """

    name: str = ""
    args: tuple[SchemaExpr, ...] = ()
    raw: bool = False


@dataclass(frozen=True)
class SchemaExpr:
    """Base class for all schema expressions."""

    modifiers: tuple[Modifier, ...] = field(default=(), kw_only=True)

    def with_modifiers(self, *modifiers: Modifier) -> SchemaExpr:
        """Return a copy with modifiers appended to the chain."""
        if not modifiers:
            return self
        return dataclasses.replace(self, modifiers=self.modifiers + tuple(modifiers))

    def modifier_names(self) -> list[str]:
        return [m.name for m in self.modifiers]


@dataclass(frozen=True)
class Call(SchemaExpr):
    """A combinator call on the validator namespace (`z.object(...)`)."""

    name: str = ""
    args: tuple[SchemaExpr, ...] = ()


@dataclass(frozen=True)
class Reference(SchemaExpr):
    """A named schema defined elsewhere (`personSchema`)."""

    name: str = ""


@dataclass(frozen=True)
class ObjectLiteral(SchemaExpr):
    """An object literal; values are schemas or plain values (`{ age: true }`)."""

    entries: tuple[tuple[str, SchemaExpr], ...] = ()

    def get(self, key: str) -> SchemaExpr | None:
        return next((v for k, v in self.entries if k == key), None)

    def keys(self) -> list[str]:
        return [k for k, _ in self.entries]


@dataclass(frozen=True)
class ArrayLiteral(SchemaExpr):
    items: tuple[SchemaExpr, ...] = ()


@dataclass(frozen=True)
class Value(SchemaExpr):
    """A plain JSON-like value used as an argument (`"kind"`, `3`, `true`)."""

    value: Any = None


@dataclass(frozen=True)
class Regex(SchemaExpr):
    pattern: str = ""


@dataclass(frozen=True)
class Symbol(SchemaExpr):
    """A bare identifier that is not a schema (`Color.Red`, the `maybe` helper)."""

    name: str = ""


@dataclass(frozen=True)
class HelperCall(SchemaExpr):
    """A call to a helper function emitted next to the schemas (`maybe(...)`)."""

    name: str = ""
    args: tuple[SchemaExpr, ...] = ()


@dataclass(frozen=True)
class FieldAccess(SchemaExpr):
    """A property path on another expression (`personSchema.shape.name`)."""

    target: SchemaExpr | None = None
    path: str = ""


@dataclass(frozen=True)
class NamespaceAccess(SchemaExpr):
    """Source text taken verbatim from a schema override, placed after the namespace."""

    text: str = ""


def combinator(name: str, *args: SchemaExpr, modifiers: list[Modifier] | tuple[Modifier, ...] = ()) -> Call:
    """Build a combinator call."""
    return Call(name=name, args=tuple(args), modifiers=tuple(modifiers))


def modifier(name: str, *args: SchemaExpr) -> Modifier:
    return Modifier(name=name, args=tuple(args))
