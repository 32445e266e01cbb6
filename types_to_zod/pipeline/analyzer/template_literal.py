"""
Template-literal expansion.

`x-${Kind}-id` with `type Kind = "a" | "b"` expands to the literal set
`"x-a-id" | "x-b-id"`: every span contributes a list of string values and the
result is the cartesian product of those lists, interleaved with the static
text between the spans.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field

from ..type_ast.nodes import (
    EnumDeclaration,
    EnumMemberType,
    LiteralType,
    ParenthesizedType,
    TemplateLiteralType,
    TypeAliasDeclaration,
    TypeNode,
    TypeReference,
    UnionType,
    type_text,
)
from .dependencies import CompilationScope
from .generic_env import GenericEnvironment
from .reference_resolver import ReferenceResolver
from .schema_nodes import ArrayLiteral, Modifier, SchemaExpr, Value, combinator, modifier


def stringify_literal(value: str | int | float | bool | None) -> str:
    """String form of a literal as it appears inside a template string."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


@dataclass
class SpanValues:
    """Values harvested from one span's embedded type."""

    values: list[str] = field(default_factory=list)
    has_null: bool = False


@dataclass
class TemplateExpansion:
    """Every concrete string a template-literal type admits, in source order."""

    values: list[str] = field(default_factory=list)
    has_null: bool = False

    def to_schema(self, modifiers: list[Modifier]) -> SchemaExpr:
        mods = list(modifiers)
        if self.has_null:
            mods.append(modifier("nullable"))
        literals = [combinator("literal", Value(v)) for v in self.values]
        if len(literals) == 1:
            return literals[0].with_modifiers(*mods)
        return combinator("union", ArrayLiteral(tuple(literals)), modifiers=mods)


class TemplateLiteralExpander:
    """Expands template-literal types against the declarations of a source unit."""

    def __init__(self, resolver: ReferenceResolver):
        self.resolver = resolver

    def expand(
        self, node: TemplateLiteralType, env: GenericEnvironment, scope: CompilationScope
    ) -> TemplateExpansion | None:
        """
        Expand a template-literal type.

        Args:
            node: The template-literal type
            env: Active generic environment (spans may name generic parameters)
            scope: Compilation scope receiving the warnings

        Returns:
            The expansion, or None if any span could not be harvested
        """
        segments: list[list[str]] = [[node.head]]
        has_null = False
        supported = True

        for span in node.spans:
            harvested = self._harvest(span.type, env, scope)
            if harvested is None:
                supported = False
            else:
                segments.append(harvested.values)
                has_null = has_null or harvested.has_null
            segments.append([span.literal])

        if not supported:
            return None

        values = ["".join(parts) for parts in itertools.product(*segments)]
        if not values:
            scope.warn(f"Template literal '{type_text(node)}' admits no value")
            return None
        return TemplateExpansion(values=values, has_null=has_null)

    def _harvest(self, node: TypeNode, env: GenericEnvironment, scope: CompilationScope) -> SpanValues | None:
        node, env = self.resolver.resolve_binding(node, env)
        while isinstance(node, ParenthesizedType):
            node = node.type

        if isinstance(node, LiteralType):
            return SpanValues([stringify_literal(node.value)])

        if isinstance(node, UnionType):
            return self._harvest_union(node, env)

        if isinstance(node, EnumMemberType):
            return self._harvest_enum_member(node, scope)

        if isinstance(node, TypeReference) and not node.type_arguments:
            declaration = self.resolver.find(node.name)
            if isinstance(declaration, TypeAliasDeclaration) and not declaration.type_parameters:
                aliased = declaration.type
                while isinstance(aliased, ParenthesizedType):
                    aliased = aliased.type
                if isinstance(aliased, UnionType):
                    return self._harvest_union(aliased, GenericEnvironment.empty())
                if isinstance(aliased, LiteralType) and not aliased.is_null:
                    return SpanValues([stringify_literal(aliased.value)])
            elif isinstance(declaration, EnumDeclaration):
                return self._harvest_enum(declaration, scope)
            scope.warn(f"Reference not found '{node.name}' in template literal, falling back to any()")
            return None

        scope.warn(f"Node '{type_text(node)}' not supported in template literal, falling back to any()")
        return None

    def _harvest_union(self, node: UnionType, env: GenericEnvironment) -> SpanValues:
        """Literal arms of a union; `null` arms are reported, other arms are skipped."""
        harvested = SpanValues()
        for arm in node.types:
            arm = self.resolver.substitute(arm, env)
            while isinstance(arm, ParenthesizedType):
                arm = arm.type
            if not isinstance(arm, LiteralType):
                continue
            if arm.is_null:
                harvested.has_null = True
            else:
                harvested.values.append(stringify_literal(arm.value))
        return harvested

    def _harvest_enum(self, declaration: EnumDeclaration, scope: CompilationScope) -> SpanValues | None:
        harvested = SpanValues()
        supported = True
        for member in declaration.members:
            if member.initializer is None:
                scope.warn(f"Enum member without initializer '{declaration.name}.{member.name}' is not supported")
                supported = False
            else:
                harvested.values.append(stringify_literal(member.initializer))
        return harvested if supported else None

    def _harvest_enum_member(self, node: EnumMemberType, scope: CompilationScope) -> SpanValues | None:
        declaration = self.resolver.find(node.enum_name)
        if isinstance(declaration, EnumDeclaration):
            for member in declaration.members:
                if member.name == node.member_name and member.initializer is not None:
                    return SpanValues([stringify_literal(member.initializer)])
        scope.warn(f"Enum member '{node.enum_name}.{node.member_name}' has no initializer in template literal")
        return None
