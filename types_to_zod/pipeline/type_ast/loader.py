"""
Type AST loader.

Phase 1 of the pipeline: turn the JSON document emitted by the external
TypeScript parser into the immutable Type AST model. No reference resolution
happens here.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any

from ..errors import TypeAstLoadError
from .nodes import (
    KEYWORDS,
    ArrayType,
    Declaration,
    EnumDeclaration,
    EnumMember,
    EnumMemberType,
    FunctionType,
    GenericParameter,
    HeritageClause,
    IndexedAccessType,
    IndexSignature,
    InterfaceDeclaration,
    IntersectionType,
    KeywordType,
    LiteralType,
    Member,
    NamedTupleMember,
    ObjectType,
    Parameter,
    ParenthesizedType,
    RestType,
    SourceUnit,
    TemplateLiteralType,
    TemplateSpan,
    TupleType,
    TypeAliasDeclaration,
    TypeNode,
    TypeReference,
    UnionType,
    UnsupportedType,
)


class TypeAstLoader:
    """Loads a JSON-encoded source unit into the Type AST."""

    def load(self, document: dict[str, Any], path: str = "") -> SourceUnit:
        """
        Load a source unit.

        Args:
            document: Decoded JSON with a top-level "declarations" list
            path: Path of the TypeScript file the document describes

        Returns:
            SourceUnit with every declaration parsed
        """
        if not isinstance(document, dict) or not isinstance(document.get("declarations"), list):
            raise TypeAstLoadError("Type AST document must be an object with a 'declarations' list")

        declarations = tuple(self._parse_declaration(d, f"declarations[{i}]") for i, d in enumerate(document["declarations"]))
        imports = tuple(str(name) for name in document.get("imports", []))
        return SourceUnit(path=document.get("path", path), declarations=declarations, imports=imports)

    def _parse_declaration(self, data: dict[str, Any], path: str) -> Declaration:
        kind = self._require(data, "kind", path)
        name = self._require(data, "name", path)
        tags = self._parse_tags(data.get("tags"))
        exported = bool(data.get("exported", True))

        if kind == "interface":
            index = data.get("indexSignature")
            return InterfaceDeclaration(
                name=name,
                tags=tags,
                exported=exported,
                type_parameters=self._parse_generic_parameters(data.get("typeParameters", []), path),
                heritage=tuple(self._parse_heritage(h, f"{path}.extends") for h in data.get("extends", [])),
                members=tuple(self._parse_member(m, f"{path}.members") for m in data.get("members", [])),
                index_signature=self._parse_index_signature(index, path) if index else None,
            )

        if kind == "alias":
            return TypeAliasDeclaration(
                name=name,
                tags=tags,
                exported=exported,
                type_parameters=self._parse_generic_parameters(data.get("typeParameters", []), path),
                type=self._parse_type(self._require(data, "type", path), f"{path}.type"),
            )

        if kind == "enum":
            members = tuple(
                EnumMember(name=self._require(m, "name", f"{path}.members"), initializer=m.get("initializer"))
                for m in data.get("members", [])
            )
            return EnumDeclaration(name=name, tags=tags, exported=exported, members=members)

        raise TypeAstLoadError(f"{path}: unknown declaration kind '{kind}'")

    def _parse_generic_parameters(self, items: list[dict[str, Any]], path: str) -> tuple[GenericParameter, ...]:
        params = []
        for item in items:
            params.append(
                GenericParameter(
                    name=self._require(item, "name", f"{path}.typeParameters"),
                    constraint=self._parse_optional_type(item.get("constraint"), path),
                    default=self._parse_optional_type(item.get("default"), path),
                )
            )
        return tuple(params)

    def _parse_heritage(self, data: dict[str, Any], path: str) -> HeritageClause:
        projection = data.get("projection")
        if projection is not None and projection not in ("Omit", "Pick"):
            raise TypeAstLoadError(f"{path}: projection must be 'Omit' or 'Pick', got '{projection}'")
        return HeritageClause(
            name=self._require(data, "name", path),
            projection=projection,
            keys=self._parse_optional_type(data.get("keys"), path),
        )

    def _parse_member(self, data: dict[str, Any], path: str) -> Member:
        return Member(
            name=str(self._require(data, "name", path)),
            type=self._parse_optional_type(data.get("type"), path),
            optional=bool(data.get("optional", False)),
            readonly=bool(data.get("readonly", False)),
            tags=self._parse_tags(data.get("tags")),
        )

    def _parse_index_signature(self, data: dict[str, Any], path: str) -> IndexSignature:
        return IndexSignature(
            key_name=data.get("keyName", "key"),
            key_type=self._parse_optional_type(data.get("keyType"), path),
            type=self._parse_optional_type(data.get("type"), path),
        )

    def _parse_tags(self, tags: dict[str, Any] | None) -> MappingProxyType:
        """Tag maps are immutable once loaded."""
        return MappingProxyType({str(k): str(v) for k, v in (tags or {}).items()})

    def _parse_optional_type(self, data: dict[str, Any] | None, path: str) -> TypeNode | None:
        if data is None:
            return None
        return self._parse_type(data, path)

    def _parse_type(self, data: dict[str, Any], path: str) -> TypeNode:
        """
        Parse a type expression recursively.

        Args:
            data: The encoded type node
            path: Current path in the document (for error messages)

        Returns:
            Appropriate TypeNode subclass
        """
        if not isinstance(data, dict):
            raise TypeAstLoadError(f"{path}: expected a type node object, got {type(data).__name__}")

        kind = self._require(data, "kind", path)

        if kind == "keyword":
            keyword = self._require(data, "keyword", path)
            if keyword not in KEYWORDS:
                return UnsupportedType(kind="keyword", text=keyword)
            return KeywordType(keyword=keyword)

        if kind == "reference":
            name = self._require(data, "name", path)
            args = tuple(self._parse_type(a, f"{path}.typeArguments") for a in data.get("typeArguments", []))
            # `Enum.Member` is a qualified name, not a schema reference
            if "." in name and not args:
                enum_name, member_name = name.rsplit(".", 1)
                return EnumMemberType(enum_name=enum_name, member_name=member_name)
            return TypeReference(name=name, type_arguments=args)

        if kind == "enumMember":
            return EnumMemberType(
                enum_name=self._require(data, "enumName", path),
                member_name=self._require(data, "memberName", path),
            )

        if kind == "literal":
            return LiteralType(value=data.get("value"))

        if kind == "object":
            index = data.get("indexSignature")
            return ObjectType(
                members=tuple(self._parse_member(m, f"{path}.members") for m in data.get("members", [])),
                index_signature=self._parse_index_signature(index, path) if index else None,
            )

        if kind == "array":
            return ArrayType(element_type=self._parse_type(self._require(data, "elementType", path), f"{path}.elementType"))

        if kind == "tuple":
            return TupleType(elements=tuple(self._parse_type(e, f"{path}.elements") for e in data.get("elements", [])))

        if kind == "rest":
            return RestType(type=self._parse_type(self._require(data, "type", path), f"{path}.type"))

        if kind == "namedMember":
            return NamedTupleMember(
                name=self._require(data, "name", path),
                type=self._parse_type(self._require(data, "type", path), f"{path}.type"),
                optional=bool(data.get("optional", False)),
            )

        if kind in ("union", "intersection"):
            types = tuple(self._parse_type(t, f"{path}.types") for t in data.get("types", []))
            return UnionType(types=types) if kind == "union" else IntersectionType(types=types)

        if kind == "function":
            params = tuple(
                Parameter(
                    name=p.get("name", ""),
                    type=self._parse_optional_type(p.get("type"), f"{path}.parameters"),
                    optional=bool(p.get("optional", False)),
                )
                for p in data.get("parameters", [])
            )
            return FunctionType(parameters=params, return_type=self._parse_type(self._require(data, "returnType", path), path))

        if kind == "templateLiteral":
            spans = tuple(
                TemplateSpan(type=self._parse_type(self._require(s, "type", path), f"{path}.spans"), literal=s.get("literal", ""))
                for s in data.get("spans", [])
            )
            return TemplateLiteralType(head=data.get("head", ""), spans=spans)

        if kind == "indexedAccess":
            return IndexedAccessType(
                object_type=self._parse_type(self._require(data, "objectType", path), f"{path}.objectType"),
                index_type=self._parse_type(self._require(data, "indexType", path), f"{path}.indexType"),
            )

        if kind == "parenthesized":
            return ParenthesizedType(type=self._parse_type(self._require(data, "type", path), f"{path}.type"))

        # Conditional, mapped, typeof... are kept so the compiler can degrade them
        return UnsupportedType(kind=kind, text=data.get("text", ""))

    def _require(self, data: dict[str, Any], key: str, path: str) -> Any:
        if key not in data:
            raise TypeAstLoadError(f"{path}: missing required key '{key}'")
        return data[key]
