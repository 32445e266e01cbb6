"""
Type AST module.

Contains the Type AST node definitions and the loader for the JSON documents
produced by the external TypeScript parser.
"""

from __future__ import annotations

from .loader import TypeAstLoader
from .nodes import (
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
    type_text,
)

__all__ = [
    "TypeNode",
    "KeywordType",
    "TypeReference",
    "LiteralType",
    "EnumMemberType",
    "Member",
    "IndexSignature",
    "ObjectType",
    "ArrayType",
    "RestType",
    "NamedTupleMember",
    "TupleType",
    "UnionType",
    "IntersectionType",
    "Parameter",
    "FunctionType",
    "TemplateSpan",
    "TemplateLiteralType",
    "IndexedAccessType",
    "ParenthesizedType",
    "UnsupportedType",
    "GenericParameter",
    "HeritageClause",
    "Declaration",
    "InterfaceDeclaration",
    "TypeAliasDeclaration",
    "EnumMember",
    "EnumDeclaration",
    "SourceUnit",
    "TypeAstLoader",
    "type_text",
]
