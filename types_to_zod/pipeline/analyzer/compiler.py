"""
Schema compiler that transforms Type AST declarations into schema expressions.

The compiler is a recursive descent over type nodes. Dispatch order matters:
generic substitution first, then generic expansion, reserved boolean-generic
interfaces, built-in generic references, and finally the structural rules.
Contextual flags (optional, nullable, partial, required) and annotation tags
travel down with each call and are turned into the modifier chain of the
schema produced at that level.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field

from ..config import CompilerConfig
from ..errors import (
    CompileError,
    CompileWarning,
    ExtensionIndexSignatureError,
    GenericDeclarationError,
    GenericDepthError,
    MaybeInterfaceArityError,
)
from ..type_ast.nodes import (
    KEYWORDS,
    ArrayType,
    Declaration,
    EnumDeclaration,
    EnumMemberType,
    FunctionType,
    IndexedAccessType,
    InterfaceDeclaration,
    IntersectionType,
    KeywordType,
    LiteralType,
    Member,
    NamedTupleMember,
    ObjectType,
    ParenthesizedType,
    RestType,
    SourceUnit,
    TemplateLiteralType,
    TupleType,
    TypeAliasDeclaration,
    TypeNode,
    TypeReference,
    UnionType,
    type_text,
)
from .annotations import SCHEMA_TAG, AnnotationTags, tags_to_modifiers
from .dependencies import CompilationScope
from .generic_env import GenericEnvironment
from .reference_resolver import PROJECTIONS, ReferenceResolver
from .schema_nodes import (
    ArrayLiteral,
    HelperCall,
    Modifier,
    NamespaceAccess,
    ObjectLiteral,
    SchemaExpr,
    Symbol,
    Value,
    combinator,
    modifier,
)
from .template_literal import TemplateLiteralExpander

logger = logging.getLogger(__name__)

MAYBE_HELPER = "maybe"

_ARRAY_REFERENCES = ("Array", "ReadonlyArray")


@dataclass(frozen=True)
class Context:
    """Flags and tags passed down by the caller of one compile step."""

    optional: bool = False
    nullable: bool = False
    partial: bool = False
    required: bool = False
    tags: AnnotationTags = field(default_factory=AnnotationTags)


@dataclass
class CompileResult:
    """Result of compiling a single type expression."""

    schema: SchemaExpr
    dependencies: list[str] = field(default_factory=list)
    warnings: list[CompileWarning] = field(default_factory=list)
    uses_maybe_helper: bool = False


@dataclass
class CompiledDeclaration:
    """Result of compiling a top-level declaration.

    Attributes:
        name: Declaration name in the source unit
        schema_name: Identifier of the generated schema (`personSchema`)
        dependencies: Schema identifiers referenced by `schema`, deduplicated
        schema: The compiled schema expression
        is_enum: The schema references the runtime enum itself (needs an import)
        warnings: Constructs degraded to `any()` while compiling
        uses_maybe_helper: The schema calls the `maybe(...)` helper
    """

    name: str
    schema_name: str
    dependencies: list[str]
    schema: SchemaExpr
    is_enum: bool = False
    warnings: list[CompileWarning] = field(default_factory=list)
    uses_maybe_helper: bool = False


def _is_null(node: TypeNode) -> bool:
    while isinstance(node, ParenthesizedType):
        node = node.type
    return isinstance(node, LiteralType) and node.is_null


class SchemaCompiler:
    """Compiles the declarations of one source unit into schema expressions.

    The compiler holds no per-declaration state: every compilation gets its
    own scope, so declarations can be compiled independently and in any order.
    """

    def __init__(self, source: SourceUnit, config: CompilerConfig | None = None):
        """
        Initialize the compiler.

        Args:
            source: Source unit whose declarations references resolve against
            config: Compiler configuration
        """
        self.source = source
        self.config = config or CompilerConfig()
        self.resolver = ReferenceResolver(source, self.config)
        self.templates = TemplateLiteralExpander(self.resolver)

    # Public API

    def compile_declaration(self, declaration: Declaration) -> CompiledDeclaration:
        """
        Compile a top-level declaration into a named schema.

        Args:
            declaration: Interface, type alias or enum declaration

        Returns:
            CompiledDeclaration with the schema and its dependencies

        Raises:
            CompileError: If the declaration cannot be compiled
        """
        scope = CompilationScope(declaration=declaration.name)
        env = GenericEnvironment.empty()
        is_enum = False

        try:
            if isinstance(declaration, EnumDeclaration):
                schema = combinator("nativeEnum", Symbol(declaration.name))
                is_enum = True
            elif isinstance(declaration, InterfaceDeclaration):
                if self._is_reserved_interface(declaration):
                    schema = self._compile_reserved_interface(declaration, env, Context(), scope)
                elif declaration.type_parameters:
                    raise GenericDeclarationError("Interface with generics are not supported!")
                else:
                    schema = self._compile_interface(declaration, env, Context(), scope)
            elif isinstance(declaration, TypeAliasDeclaration):
                if declaration.type_parameters:
                    raise GenericDeclarationError("Type with generics are not supported!")
                ctx = Context(tags=self._tags(declaration.tags))
                schema = self._compile(declaration.type, env, ctx, scope)
            else:
                raise CompileError(f"Unknown declaration kind: {type(declaration).__name__}")
        except CompileError as e:
            if e.declaration is None:
                e.declaration = declaration.name
            raise

        return CompiledDeclaration(
            name=declaration.name,
            schema_name=self.config.get_dependency_name(declaration.name),
            dependencies=scope.dependencies.finalize(),
            schema=schema,
            is_enum=is_enum,
            warnings=list(scope.warnings),
            uses_maybe_helper=scope.uses_maybe_helper,
        )

    def compile_type(
        self,
        node: TypeNode,
        env: GenericEnvironment | None = None,
        tags: dict[str, str] | None = None,
    ) -> CompileResult:
        """
        Compile a single type expression.

        Args:
            node: Type expression to compile
            env: Generic environment to compile in (empty by default)
            tags: Annotation tags attached to the expression

        Returns:
            CompileResult with the schema, its dependencies and warnings
        """
        scope = CompilationScope()
        ctx = Context(tags=self._tags(tags))
        schema = self._compile(node, env if env is not None else GenericEnvironment.empty(), ctx, scope)
        return CompileResult(
            schema=schema,
            dependencies=scope.dependencies.finalize(),
            warnings=list(scope.warnings),
            uses_maybe_helper=scope.uses_maybe_helper,
        )

    def compile_import_placeholder(self, name: str) -> CompiledDeclaration:
        """Schema for a name declared in another source unit: accepts anything."""
        return CompiledDeclaration(
            name=name,
            schema_name=self.config.get_dependency_name(name),
            dependencies=[],
            schema=combinator("any"),
        )

    # Helpers

    def _tags(self, raw) -> AnnotationTags:
        if self.config.skip_parse_annotations or not raw:
            return AnnotationTags.empty()
        return AnnotationTags.of(raw)

    def _modifiers(self, ctx: Context) -> list[Modifier]:
        return tags_to_modifiers(
            ctx.tags,
            self.config.custom_format_types,
            optional=ctx.optional,
            nullable=ctx.nullable,
            partial=ctx.partial,
            required=ctx.required,
        )

    def _is_reserved_interface(self, declaration: Declaration | None) -> bool:
        return isinstance(declaration, InterfaceDeclaration) and declaration.name in self.config.maybe.type_names

    # Dispatch

    def _compile(self, node: TypeNode, env: GenericEnvironment, ctx: Context, scope: CompilationScope) -> SchemaExpr:
        override = ctx.tags.schema_override
        if override is None:
            return self._compile_node(node, env, ctx, scope)

        # `@schema email()` replaces the schema, `@schema .email()` is appended to it
        if not override.startswith("."):
            return NamespaceAccess(override)
        ctx = dataclasses.replace(ctx, tags=ctx.tags.without(SCHEMA_TAG))
        schema = self._compile_node(node, env, ctx, scope)
        return schema.with_modifiers(Modifier(name=override[1:], raw=True))

    def _compile_node(
        self, node: TypeNode, env: GenericEnvironment, ctx: Context, scope: CompilationScope
    ) -> SchemaExpr:
        if isinstance(node, TypeReference):
            return self._compile_reference(node, env, ctx, scope)

        if isinstance(node, ObjectType):
            schema = self._compile_object(node, env, scope)
            return schema.with_modifiers(*self._modifiers(ctx))

        if isinstance(node, UnionType):
            return self._compile_union(node, env, ctx, scope)

        if isinstance(node, IntersectionType) and node.types:
            first, *rest = node.types
            schema = self._compile(first, env, Context(), scope)
            for arm in rest:
                schema = schema.with_modifiers(modifier("and", self._compile(arm, env, Context(), scope)))
            return schema.with_modifiers(*self._modifiers(ctx))

        if isinstance(node, TupleType):
            return self._compile_tuple(node, env, ctx, scope)

        if isinstance(node, LiteralType):
            if node.is_null:
                return combinator("null", modifiers=self._modifiers(ctx))
            return combinator("literal", Value(node.value), modifiers=self._modifiers(ctx))

        if isinstance(node, EnumMemberType):
            member = Symbol(f"{node.enum_name}.{node.member_name}")
            return combinator("literal", member, modifiers=self._modifiers(ctx))

        if isinstance(node, ArrayType):
            element_ctx = Context(tags=ctx.tags.element_tags())
            element = self._compile(node.element_type, env, element_ctx, scope)
            return combinator("array", element, modifiers=self._modifiers(ctx))

        if isinstance(node, FunctionType):
            return self._compile_function(node, env, ctx, scope)

        if isinstance(node, IndexedAccessType):
            schema = self.resolver.indexed_access(node, env, scope)
            if schema is None:
                return combinator("any", modifiers=self._modifiers(ctx))
            return schema.with_modifiers(*self._modifiers(ctx))

        if isinstance(node, TemplateLiteralType):
            expansion = self.templates.expand(node, env, scope)
            if expansion is None:
                return combinator("any", modifiers=self._modifiers(ctx))
            return expansion.to_schema(self._modifiers(ctx))

        if isinstance(node, KeywordType) and node.keyword in KEYWORDS:
            if node.keyword == "object":
                return combinator("record", combinator("any"), modifiers=self._modifiers(ctx))
            return combinator(node.keyword, modifiers=self._modifiers(ctx))

        if isinstance(node, ParenthesizedType):
            return self._compile(node.type, env, ctx, scope)

        scope.warn(f"'{type_text(node)}' is not supported, falling back to any()")
        return combinator("any", modifiers=self._modifiers(ctx))

    # References

    def _compile_reference(
        self, node: TypeReference, env: GenericEnvironment, ctx: Context, scope: CompilationScope
    ) -> SchemaExpr:
        name = node.name
        args = node.type_arguments

        binding = env.lookup(name)
        if binding is not None:
            return self._compile(binding.type, binding.env, ctx, scope)

        declaration = self.resolver.find(name)

        if args and isinstance(declaration, (InterfaceDeclaration, TypeAliasDeclaration)):
            if declaration.type_parameters:
                return self._instantiate(declaration, node, env, ctx, scope)

        if self._is_reserved_interface(declaration):
            inner = self._enter(declaration, env)
            return self._compile_reserved_interface(declaration, inner, ctx, scope)

        return self._compile_builtin(node, env, ctx, scope)

    def _enter(self, declaration: Declaration, env: GenericEnvironment) -> GenericEnvironment:
        inner = env.enter_instantiation()
        if inner.depth > self.config.max_generic_depth:
            raise GenericDepthError(
                f"Generic instantiation of '{declaration.name}' exceeds the maximum depth "
                f"of {self.config.max_generic_depth}"
            )
        return inner

    def _instantiate(
        self,
        declaration: InterfaceDeclaration | TypeAliasDeclaration,
        node: TypeReference,
        env: GenericEnvironment,
        ctx: Context,
        scope: CompilationScope,
    ) -> SchemaExpr:
        """Compile a generic declaration's body with its parameters bound to the reference's arguments."""
        inner = self._enter(declaration, env)
        for index, parameter in enumerate(declaration.type_parameters):
            if index < len(node.type_arguments):
                inner = inner.bind(parameter.name, node.type_arguments[index], env)
            elif parameter.default is not None:
                inner = inner.bind(parameter.name, parameter.default, inner)
        logger.debug("Instantiating %s with %s", type_text(node), inner)

        if isinstance(declaration, TypeAliasDeclaration):
            return self._compile(declaration.type, inner, ctx, scope)
        if self._is_reserved_interface(declaration):
            return self._compile_reserved_interface(declaration, inner, ctx, scope)
        return self._compile_interface(declaration, inner, ctx, scope)

    def _compile_builtin(
        self, node: TypeReference, env: GenericEnvironment, ctx: Context, scope: CompilationScope
    ) -> SchemaExpr:
        name = node.name
        args = node.type_arguments

        if name == "Date":
            return combinator("date", modifiers=self._modifiers(ctx))

        if args:
            if name in self.config.maybe.type_names:
                scope.uses_maybe_helper = True
                inner = self._compile(args[0], env, Context(), scope)
                modifiers = (modifier("optional"),) if ctx.optional else ()
                return HelperCall(MAYBE_HELPER, (inner,), modifiers=modifiers)

            if name in _ARRAY_REFERENCES:
                return self._compile(ArrayType(args[0]), env, ctx, scope)

            if name == "Partial":
                return self._compile(args[0], env, dataclasses.replace(ctx, partial=True), scope)

            if name == "Required":
                return self._compile(args[0], env, dataclasses.replace(ctx, required=True), scope)

            if name == "Readonly":
                return self._compile(args[0], env, ctx, scope)

            if name == "Record":
                return self._compile_record(args, env, ctx, scope)

            if name in ("Set", "Promise"):
                inner = [self._compile(arg, env, Context(), scope) for arg in args]
                return combinator(name.lower(), *inner, modifiers=self._modifiers(ctx))

            if name in PROJECTIONS:
                target = self._compile(args[0], env, Context(), scope)
                keys = args[1] if len(args) > 1 else None
                schema = self.resolver.project(target, name, keys, env)
                return schema.with_modifiers(*self._modifiers(ctx))

            logger.debug("Ignoring type arguments of %s", type_text(node))

        return self.resolver.reference(name, scope).with_modifiers(*self._modifiers(ctx))

    def _compile_record(
        self, args: tuple[TypeNode, ...], env: GenericEnvironment, ctx: Context, scope: CompilationScope
    ) -> SchemaExpr:
        key = self.resolver.substitute(args[0], env)
        value = args[1] if len(args) > 1 else KeywordType("any")
        value_schema = self._compile(value, env, Context(), scope)
        if isinstance(key, KeywordType) and key.keyword == "string":
            return combinator("record", value_schema, modifiers=self._modifiers(ctx))
        key_schema = self._compile(args[0], env, Context(), scope)
        return combinator("record", key_schema, value_schema, modifiers=self._modifiers(ctx))

    # Objects

    def _compile_reserved_interface(
        self, declaration: InterfaceDeclaration, env: GenericEnvironment, ctx: Context, scope: CompilationScope
    ) -> SchemaExpr:
        """
        Compile a reserved boolean-generic interface (`interface Select<T extends boolean = true>`).

        With its parameter resolving to literal `true` the body compiles as
        usual; otherwise every member is made optional and/or nullable as
        configured, whatever its own `?` says.
        """
        if len(declaration.type_parameters) != 1:
            raise MaybeInterfaceArityError(
                f"maybeTypeNames interface {declaration.name} must have exactly one generic parameter"
            )
        parameter = declaration.type_parameters[0]

        binding = env.lookup(parameter.name)
        if binding is not None:
            value = self.resolver.substitute(binding.type, binding.env)
        elif parameter.default is not None:
            value = self.resolver.substitute(parameter.default, env)
        else:
            value = LiteralType(True)
        while isinstance(value, ParenthesizedType):
            value = value.type
        enabled = isinstance(value, LiteralType) and value.value is True

        body_env = env.without(parameter.name)
        if enabled:
            return self._compile_interface(declaration, body_env, ctx, scope)

        disabled = Context(optional=self.config.maybe.optional, nullable=self.config.maybe.nullable)
        return self._compile_interface(declaration, body_env, ctx, scope, member_ctx=disabled)

    def _compile_interface(
        self,
        declaration: InterfaceDeclaration,
        env: GenericEnvironment,
        ctx: Context,
        scope: CompilationScope,
        member_ctx: Context | None = None,
    ) -> SchemaExpr:
        if declaration.heritage:
            if declaration.index_signature is not None:
                raise ExtensionIndexSignatureError("interface with `extends` and index signature are not supported!")
            members = self._object_literal(declaration.members, env, scope, member_ctx)
            schema = self.resolver.extension_chain(declaration, members, scope)
        else:
            schema = self._compile_object(declaration.body, env, scope, member_ctx)

        if self._tags(declaration.tags).strict:
            schema = schema.with_modifiers(modifier("strict"))
        return schema.with_modifiers(*self._modifiers(ctx))

    def _object_literal(
        self,
        members: tuple[Member, ...],
        env: GenericEnvironment,
        scope: CompilationScope,
        member_ctx: Context | None = None,
    ) -> ObjectLiteral:
        entries = []
        for member in members:
            if member.type is None:
                continue
            tags = self._tags(member.tags)
            if member_ctx is None:
                ctx = Context(optional=member.optional, tags=tags)
            else:
                ctx = dataclasses.replace(member_ctx, tags=tags)
            entries.append((member.name, self._compile(member.type, env, ctx, scope)))
        return ObjectLiteral(tuple(entries))

    def _compile_object(
        self,
        node: ObjectType,
        env: GenericEnvironment,
        scope: CompilationScope,
        member_ctx: Context | None = None,
    ) -> SchemaExpr:
        """`z.object({...})`; an index signature becomes `z.record(V)`, intersected with the members if any."""
        members = self._object_literal(node.members, env, scope, member_ctx)
        signature = node.index_signature
        if signature is None:
            return combinator("object", members)

        value = self._compile(signature.type or KeywordType("any"), env, Context(), scope)
        record = combinator("record", value)
        if members.entries:
            return record.with_modifiers(modifier("and", combinator("object", members)))
        return record

    # Unions, tuples, functions

    def _compile_union(
        self, node: UnionType, env: GenericEnvironment, ctx: Context, scope: CompilationScope
    ) -> SchemaExpr:
        arms = [arm for arm in node.types if not _is_null(arm)]
        has_null = len(arms) != len(node.types)
        ctx = dataclasses.replace(ctx, nullable=ctx.nullable or has_null)

        if not arms:
            return combinator("null", modifiers=self._modifiers(dataclasses.replace(ctx, nullable=False)))

        # Single-arm unions are not representable
        if len(arms) == 1:
            return self._compile(arms[0], env, ctx, scope)

        compiled = ArrayLiteral(tuple(self._compile(arm, env, Context(), scope) for arm in arms))
        modifiers = self._modifiers(ctx)

        discriminator = ctx.tags.discriminator
        if discriminator and self._is_discriminated(arms, discriminator, env, scope):
            return combinator("discriminatedUnion", Value(discriminator), compiled, modifiers=modifiers)
        return combinator("union", compiled, modifiers=modifiers)

    def _is_discriminated(
        self, arms: list[TypeNode], discriminator: str, env: GenericEnvironment, scope: CompilationScope
    ) -> bool:
        """Every arm is an object literal with the discriminator field, or a named reference."""
        for arm in arms:
            arm = self.resolver.substitute(arm, env)
            while isinstance(arm, ParenthesizedType):
                arm = arm.type
            if isinstance(arm, TypeReference):
                continue
            if not isinstance(arm, ObjectType):
                scope.warn(f'Discriminated union member "{type_text(arm)}" is not a type reference or object literal')
                return False
            if arm.find_member(discriminator) is None:
                scope.warn(
                    f'Discriminated union member "{type_text(arm)}" missing discriminator field "{discriminator}"'
                )
                return False
        return True

    def _compile_tuple(
        self, node: TupleType, env: GenericEnvironment, ctx: Context, scope: CompilationScope
    ) -> SchemaExpr:
        elements = list(node.elements)
        modifiers = self._modifiers(ctx)

        if elements and isinstance(elements[-1], RestType):
            rest, rest_env = self._rest_element(elements[-1], env)
            if rest is not None:
                elements = elements[:-1]
                modifiers.insert(0, modifier("rest", self._compile(rest, rest_env, Context(), scope)))

        slots = []
        for element in elements:
            if isinstance(element, NamedTupleMember):
                slots.append(self._compile(element.type, env, Context(optional=element.optional), scope))
            else:
                slots.append(self._compile(element, env, Context(), scope))
        return combinator("tuple", ArrayLiteral(tuple(slots)), modifiers=modifiers)

    def _rest_element(
        self, node: RestType, env: GenericEnvironment
    ) -> tuple[TypeNode | None, GenericEnvironment]:
        """Element type of `...T[]` / `...Array<T>` and the environment it is read in."""
        inner, env = self.resolver.resolve_binding(node.type, env)
        while isinstance(inner, ParenthesizedType):
            inner = inner.type
        if isinstance(inner, ArrayType):
            return inner.element_type, env
        if isinstance(inner, TypeReference) and inner.name in _ARRAY_REFERENCES and inner.type_arguments:
            return inner.type_arguments[0], env
        return None, env

    def _compile_function(
        self, node: FunctionType, env: GenericEnvironment, ctx: Context, scope: CompilationScope
    ) -> SchemaExpr:
        parameters = [
            self._compile(p.type or KeywordType("any"), env, Context(optional=p.optional), scope)
            for p in node.parameters
        ]
        returns = self._compile(node.return_type, env, Context(), scope)
        chain = [modifier("args", *parameters), modifier("returns", returns)]
        return combinator("function", modifiers=chain + self._modifiers(ctx))
