"""
Reference resolver for cross-declaration references.

Resolves `Omit`/`Pick` projections, builds `extends` chains and rewrites
indexed-access types (`Person["address"]["city"]`) into field projections on
the referenced schema (`personSchema.shape.address.shape.city`).
"""

from __future__ import annotations

import logging

from ..config import CompilerConfig
from ..errors import IndexedAccessError, UnsupportedProjectionError
from ..type_ast.nodes import (
    ArrayType,
    Declaration,
    IndexedAccessType,
    InterfaceDeclaration,
    KeywordType,
    LiteralType,
    ObjectType,
    ParenthesizedType,
    SourceUnit,
    TypeAliasDeclaration,
    TypeNode,
    TypeReference,
    UnionType,
    type_text,
)
from ...utils import is_identifier
from .dependencies import CompilationScope
from .generic_env import GenericEnvironment
from .schema_nodes import FieldAccess, ObjectLiteral, Reference, SchemaExpr, Value, modifier

logger = logging.getLogger(__name__)

PROJECTIONS = ("Omit", "Pick")

# Wrappers whose schema exposes its inner type as `.element`
_ELEMENT_WRAPPERS = ("Array", "ReadonlyArray")


def _unwrap(node: TypeNode | None) -> TypeNode | None:
    while isinstance(node, ParenthesizedType):
        node = node.type
    return node


class ReferenceResolver:
    """Resolves named references against one source unit."""

    def __init__(self, source: SourceUnit, config: CompilerConfig):
        """
        Initialize the resolver.

        Args:
            source: The source unit the references point into
            config: Compiler configuration (dependency naming, maybe type names)
        """
        self.source = source
        self.config = config
        self._declaration_cache: dict[str, Declaration] = {}
        self._build_cache()

    def _build_cache(self) -> None:
        """Index declarations by name; the first declaration of a name wins."""
        for declaration in self.source.declarations:
            self._declaration_cache.setdefault(declaration.name, declaration)

    def find(self, name: str) -> Declaration | None:
        return self._declaration_cache.get(name)

    def reference(self, name: str, scope: CompilationScope) -> Reference:
        """Register `name` as a dependency and return a reference to its schema."""
        dependency = self.config.get_dependency_name(name)
        scope.dependencies.add(dependency)
        return Reference(dependency)

    # Omit / Pick

    def projection_keys(
        self, projection: str, keys: TypeNode | None, env: GenericEnvironment | None = None
    ) -> list[str]:
        """
        Extract the literal key set of `Omit<T, K>` / `Pick<T, K>`.

        Raises:
            UnsupportedProjectionError: If K is not a string literal or a union of them
        """
        node, env = self.resolve_binding(_unwrap(keys), env)
        arms = node.types if isinstance(node, UnionType) else (node,)

        result = []
        for arm in arms:
            arm = self.substitute(_unwrap(arm), env)
            if not (isinstance(arm, LiteralType) and isinstance(arm.value, str)):
                kind = type(arm).__name__ if arm is not None else "Missing"
                raise UnsupportedProjectionError(f"{projection}<T, K> unknown syntax: ({kind} as K not supported)")
            result.append(arm.value)
        return result

    def project(
        self,
        target: SchemaExpr,
        projection: str,
        keys: TypeNode | None,
        env: GenericEnvironment | None = None,
    ) -> SchemaExpr:
        """Chain `.omit({ key: true })` / `.pick({ key: true })` onto target."""
        names = self.projection_keys(projection, keys, env)
        mask = ObjectLiteral(tuple((name, Value(True)) for name in names))
        return target.with_modifiers(modifier(projection.lower(), mask))

    # extends

    def extension_chain(
        self, declaration: InterfaceDeclaration, own_members: ObjectLiteral | None, scope: CompilationScope
    ) -> SchemaExpr:
        """
        Build `base.extend(other.shape)...extend({ own members })`.

        Args:
            declaration: Interface with at least one heritage clause
            own_members: Object literal of the interface's own members, if any
            scope: Compilation scope receiving the dependencies

        Returns:
            The chained schema expression
        """
        chain: SchemaExpr | None = None
        for clause in declaration.heritage:
            schema: SchemaExpr = self.reference(clause.name, scope)
            if clause.projection:
                schema = self.project(schema, clause.projection, clause.keys)
            if chain is None:
                chain = schema
            else:
                chain = chain.with_modifiers(modifier("extend", FieldAccess(schema, "shape")))

        if own_members is not None and own_members.entries:
            chain = chain.with_modifiers(modifier("extend", own_members))
        return chain

    # Indexed access

    def indexed_access(
        self, node: IndexedAccessType, env: GenericEnvironment, scope: CompilationScope, path: str = ""
    ) -> SchemaExpr | None:
        """
        Rewrite an indexed-access chain into a field projection.

        The walk goes from the outermost index inward, prefixing `path` at
        each step, and ends on a named reference.

        Returns:
            The projected schema, or None when the access cannot be resolved
            (the caller degrades it to any())

        Raises:
            IndexedAccessError: If the chain does not end on a named reference
        """
        kind, key = self._index_key(node.index_type, env)
        object_type, object_env = self.resolve_binding(_unwrap(node.object_type), env)

        if not isinstance(object_type, (IndexedAccessType, TypeReference)):
            raise IndexedAccessError(f"Unknown indexed access object type: {type_text(object_type)}")

        if kind == "unsupported":
            scope.warn(f"Unsupported index type in '{type_text(node)}', falling back to any()")
            return None

        if kind == "element":
            wrapper = self._wrapper_path(self._indexed_type(object_type, object_env))
            if wrapper is None:
                scope.warn(f"Indexed access '{type_text(node)}' cannot be resolved, falling back to any()")
                return None
            segment = wrapper
        elif kind == "number":
            segment = f"items[{key}]"
        else:
            segment = self._shape_segment(key)

        if isinstance(object_type, IndexedAccessType):
            return self.indexed_access(object_type, object_env, scope, f"{segment}.{path}")

        target = self.reference(object_type.name, scope)
        return FieldAccess(target, f"{segment}.{path}"[:-1])

    def resolve_binding(
        self, node: TypeNode | None, env: GenericEnvironment | None
    ) -> tuple[TypeNode | None, GenericEnvironment | None]:
        """Follow generic bindings until node is not a bound parameter."""
        while env is not None and isinstance(node, TypeReference) and not node.type_arguments:
            binding = env.lookup(node.name)
            if binding is None:
                break
            node, env = _unwrap(binding.type), binding.env
        return node, env

    def substitute(self, node: TypeNode | None, env: GenericEnvironment | None) -> TypeNode | None:
        return self.resolve_binding(node, env)[0]

    @staticmethod
    def _shape_segment(key: str) -> str:
        if is_identifier(key):
            return f"shape.{key}"
        return f'shape["{key}"]'

    def _index_key(self, index: TypeNode, env: GenericEnvironment) -> tuple[str, str]:
        """Classify an index type: ("string", name), ("number", n) or ("element", "-1")."""
        index = self.substitute(_unwrap(index), env)
        if isinstance(index, KeywordType) and index.keyword == "number":
            return "element", "-1"
        if isinstance(index, LiteralType) and not isinstance(index.value, bool):
            if isinstance(index.value, str):
                return "string", index.value
            if isinstance(index.value, int):
                if index.value == -1:
                    return "element", "-1"
                return "number", str(index.value)
        return "unsupported", type_text(index)

    def _wrapper_path(self, member_type: TypeNode | None) -> str | None:
        """Path segment exposing the inner schema of a wrapper type."""
        member_type = _unwrap(member_type)
        if isinstance(member_type, ArrayType):
            return "element"
        if isinstance(member_type, TypeReference):
            if member_type.name in _ELEMENT_WRAPPERS or member_type.name in self.config.maybe.type_names:
                return "element"
            if member_type.name == "Record":
                return "valueSchema"
        return None

    def _indexed_type(self, node: TypeNode | None, env: GenericEnvironment | None) -> TypeNode | None:
        """Declared type denoted by `Person` or `Person["friends"]`."""
        node, env = self.resolve_binding(_unwrap(node), env)
        if isinstance(node, TypeReference):
            declaration = self.find(node.name)
            return declaration.type if isinstance(declaration, TypeAliasDeclaration) else None
        if not isinstance(node, IndexedAccessType):
            return None
        kind, key = self._index_key(node.index_type, env)
        if kind != "string":
            return None
        container, container_env = self.resolve_binding(_unwrap(node.object_type), env)
        if isinstance(container, IndexedAccessType):
            container = self._indexed_type(container, container_env)
        return self.member_type(container, key)

    def member_type(self, container: TypeNode | None, key: str, _seen: frozenset[str] = frozenset()) -> TypeNode | None:
        """
        Look up the declared type of member `key` on a structural type.

        Follows type aliases, interface bodies and their heritage clauses.
        """
        container = _unwrap(container)
        if isinstance(container, ObjectType):
            member = container.find_member(key)
            return member.type if member else None

        if not isinstance(container, TypeReference) or container.name in _seen:
            return None
        seen = _seen | {container.name}
        declaration = self.find(container.name)

        if isinstance(declaration, TypeAliasDeclaration):
            return self.member_type(declaration.type, key, seen)

        if isinstance(declaration, InterfaceDeclaration):
            member = declaration.body.find_member(key)
            if member is not None:
                return member.type
            for clause in declaration.heritage:
                if clause.projection:
                    names = self.projection_keys(clause.projection, clause.keys)
                    # Omit hides listed keys, Pick hides the others
                    if (clause.projection == "Omit") == (key in names):
                        continue
                found = self.member_type(TypeReference(clause.name), key, seen)
                if found is not None:
                    return found

        logger.debug("Member '%s' not found on '%s'", key, container.name)
        return None
