"""
Generic environment: generic parameter name -> concrete type expression.

An environment is never mutated. Entering a generic scope forks it, so sibling
branches of the walk cannot observe each other's substitutions.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType

from ..type_ast.nodes import TypeNode


@dataclass(frozen=True)
class Binding:
    """A concrete type bound to a parameter, with the environment it is read in.

    Type arguments are written at the reference site, so the names they
    mention resolve against the caller's environment, not the callee's.
    """

    type: TypeNode
    env: GenericEnvironment


class GenericEnvironment:
    """Immutable substitution map threaded through the compiler."""

    __slots__ = ("_bindings", "depth")

    def __init__(self, bindings: dict[str, Binding] | None = None, depth: int = 0):
        self._bindings = MappingProxyType(dict(bindings or {}))
        self.depth = depth

    @classmethod
    def empty(cls) -> GenericEnvironment:
        return cls()

    def __contains__(self, name: str) -> bool:
        return name in self._bindings

    def __len__(self) -> int:
        return len(self._bindings)

    def __repr__(self) -> str:
        return f"GenericEnvironment({list(self._bindings)}, depth={self.depth})"

    def lookup(self, name: str) -> Binding | None:
        return self._bindings.get(name)

    def names(self) -> list[str]:
        return list(self._bindings)

    def bind(self, name: str, type_node: TypeNode, env: GenericEnvironment | None = None) -> GenericEnvironment:
        """Fork with one more binding; `env` is where the bound type is read (default: self)."""
        bindings = dict(self._bindings)
        bindings[name] = Binding(type=type_node, env=self if env is None else env)
        return GenericEnvironment(bindings, self.depth)

    def without(self, name: str) -> GenericEnvironment:
        """Fork with `name` removed, so a parameter cannot resolve into itself."""
        bindings = {k: v for k, v in self._bindings.items() if k != name}
        return GenericEnvironment(bindings, self.depth)

    def enter_instantiation(self) -> GenericEnvironment:
        """Fresh scope for a generic declaration body, one level deeper."""
        return GenericEnvironment({}, self.depth + 1)
