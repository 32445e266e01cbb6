"""
Type AST node definitions.

These nodes represent a parsed TypeScript source unit: declarations and the
type expressions they are built from. The tree is produced by an external
parser and is read-only for the duration of a compilation pass.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

# Keywords accepted by KeywordType
KEYWORDS = frozenset(
    {
        "string",
        "number",
        "boolean",
        "bigint",
        "any",
        "unknown",
        "never",
        "void",
        "undefined",
        "object",
    }
)


@dataclass(frozen=True)
class TypeNode:
    """Base class for all type expressions."""


@dataclass(frozen=True)
class KeywordType(TypeNode):
    """A primitive keyword such as `string` or `unknown`."""

    keyword: str = "any"


@dataclass(frozen=True)
class TypeReference(TypeNode):
    """A named type, optionally with concrete type arguments (`Box<string>`)."""

    name: str = ""
    type_arguments: tuple[TypeNode, ...] = ()


@dataclass(frozen=True)
class LiteralType(TypeNode):
    """A literal type: string, number (possibly negative), boolean or null."""

    value: str | int | float | bool | None = None

    @property
    def is_null(self) -> bool:
        return self.value is None


@dataclass(frozen=True)
class EnumMemberType(TypeNode):
    """A qualified enum member used as a type (`Color.Red`)."""

    enum_name: str = ""
    member_name: str = ""


@dataclass(frozen=True)
class Member:
    """A property signature of an object literal or interface."""

    name: str = ""
    type: TypeNode | None = None
    optional: bool = False
    readonly: bool = False
    tags: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class IndexSignature:
    """An index signature (`[key: string]: T`)."""

    key_name: str = "key"
    key_type: TypeNode | None = None
    type: TypeNode | None = None


@dataclass(frozen=True)
class ObjectType(TypeNode):
    """An object type literal or an interface body."""

    members: tuple[Member, ...] = ()
    index_signature: IndexSignature | None = None

    def find_member(self, name: str) -> Member | None:
        return next((m for m in self.members if m.name == name), None)


@dataclass(frozen=True)
class ArrayType(TypeNode):
    """`T[]` sugar."""

    element_type: TypeNode = field(default_factory=KeywordType)


@dataclass(frozen=True)
class RestType(TypeNode):
    """A rest element of a tuple (`...T[]`)."""

    type: TypeNode = field(default_factory=KeywordType)


@dataclass(frozen=True)
class NamedTupleMember(TypeNode):
    """A labelled tuple element (`[name: string, age?: number]`)."""

    name: str = ""
    type: TypeNode = field(default_factory=KeywordType)
    optional: bool = False


@dataclass(frozen=True)
class TupleType(TypeNode):
    """A tuple; the last element may be a RestType."""

    elements: tuple[TypeNode, ...] = ()


@dataclass(frozen=True)
class UnionType(TypeNode):
    types: tuple[TypeNode, ...] = ()


@dataclass(frozen=True)
class IntersectionType(TypeNode):
    types: tuple[TypeNode, ...] = ()


@dataclass(frozen=True)
class Parameter:
    """A function type parameter."""

    name: str = ""
    type: TypeNode | None = None
    optional: bool = False


@dataclass(frozen=True)
class FunctionType(TypeNode):
    parameters: tuple[Parameter, ...] = ()
    return_type: TypeNode = field(default_factory=lambda: KeywordType("void"))


@dataclass(frozen=True)
class TemplateSpan:
    """One `${type}literal` segment of a template literal type."""

    type: TypeNode = field(default_factory=KeywordType)
    literal: str = ""


@dataclass(frozen=True)
class TemplateLiteralType(TypeNode):
    head: str = ""
    spans: tuple[TemplateSpan, ...] = ()


@dataclass(frozen=True)
class IndexedAccessType(TypeNode):
    """`Obj["key"]`, `Obj[0]` or `Obj["list"][-1]`."""

    object_type: TypeNode = field(default_factory=KeywordType)
    index_type: TypeNode = field(default_factory=KeywordType)


@dataclass(frozen=True)
class ParenthesizedType(TypeNode):
    type: TypeNode = field(default_factory=KeywordType)


@dataclass(frozen=True)
class UnsupportedType(TypeNode):
    """Any construct the parser emits but the model does not describe
    (conditional types, mapped types, `typeof` queries...)."""

    kind: str = ""
    text: str = ""


# Declarations


@dataclass(frozen=True)
class GenericParameter:
    name: str = ""
    constraint: TypeNode | None = None
    default: TypeNode | None = None


@dataclass(frozen=True)
class HeritageClause:
    """One `extends` entry, optionally wrapped in `Omit<..>` / `Pick<..>`."""

    name: str = ""
    projection: str | None = None  # "Omit" or "Pick"
    keys: TypeNode | None = None


@dataclass(frozen=True)
class Declaration:
    """Base class for top-level declarations."""

    name: str = ""
    tags: Mapping[str, str] = field(default_factory=dict)
    exported: bool = True


@dataclass(frozen=True)
class InterfaceDeclaration(Declaration):
    type_parameters: tuple[GenericParameter, ...] = ()
    heritage: tuple[HeritageClause, ...] = ()
    members: tuple[Member, ...] = ()
    index_signature: IndexSignature | None = None

    @property
    def body(self) -> ObjectType:
        return ObjectType(members=self.members, index_signature=self.index_signature)


@dataclass(frozen=True)
class TypeAliasDeclaration(Declaration):
    type_parameters: tuple[GenericParameter, ...] = ()
    type: TypeNode = field(default_factory=KeywordType)


@dataclass(frozen=True)
class EnumMember:
    name: str = ""
    initializer: str | int | float | None = None


@dataclass(frozen=True)
class EnumDeclaration(Declaration):
    members: tuple[EnumMember, ...] = ()


@dataclass(frozen=True)
class SourceUnit:
    """Root of a parsed source file."""

    path: str = ""
    declarations: tuple[Declaration, ...] = ()

    # Names imported from other modules
    imports: tuple[str, ...] = ()

    def find(self, name: str) -> Declaration | None:
        """Get the first declaration with the given name."""
        return next((d for d in self.declarations if d.name == name), None)


def type_text(node: TypeNode | None) -> str:
    """Render a type expression back to TypeScript-like text (for messages)."""
    if node is None:
        return "any"
    if isinstance(node, KeywordType):
        return node.keyword
    if isinstance(node, TypeReference):
        if node.type_arguments:
            return f"{node.name}<{', '.join(type_text(a) for a in node.type_arguments)}>"
        return node.name
    if isinstance(node, LiteralType):
        if node.value is None:
            return "null"
        if isinstance(node.value, bool):
            return "true" if node.value else "false"
        if isinstance(node.value, str):
            return f'"{node.value}"'
        return str(node.value)
    if isinstance(node, EnumMemberType):
        return f"{node.enum_name}.{node.member_name}"
    if isinstance(node, ObjectType):
        parts = [f"{m.name}{'?' if m.optional else ''}: {type_text(m.type)}" for m in node.members]
        if node.index_signature:
            sig = node.index_signature
            parts.append(f"[{sig.key_name}: {type_text(sig.key_type)}]: {type_text(sig.type)}")
        return "{ " + "; ".join(parts) + " }" if parts else "{}"
    if isinstance(node, ArrayType):
        return f"{type_text(node.element_type)}[]"
    if isinstance(node, RestType):
        return f"...{type_text(node.type)}"
    if isinstance(node, NamedTupleMember):
        return f"{node.name}{'?' if node.optional else ''}: {type_text(node.type)}"
    if isinstance(node, TupleType):
        return f"[{', '.join(type_text(e) for e in node.elements)}]"
    if isinstance(node, UnionType):
        return " | ".join(type_text(t) for t in node.types)
    if isinstance(node, IntersectionType):
        return " & ".join(type_text(t) for t in node.types)
    if isinstance(node, FunctionType):
        params = ", ".join(f"{p.name}{'?' if p.optional else ''}: {type_text(p.type)}" for p in node.parameters)
        return f"({params}) => {type_text(node.return_type)}"
    if isinstance(node, TemplateLiteralType):
        spans = "".join(f"${{{type_text(s.type)}}}{s.literal}" for s in node.spans)
        return f"`{node.head}{spans}`"
    if isinstance(node, IndexedAccessType):
        return f"{type_text(node.object_type)}[{type_text(node.index_type)}]"
    if isinstance(node, ParenthesizedType):
        return f"({type_text(node.type)})"
    if isinstance(node, UnsupportedType):
        return node.text or node.kind
    return type(node).__name__
