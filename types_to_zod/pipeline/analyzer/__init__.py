"""
Analyzer module.

Contains the schema compiler, the reference resolver, the template-literal
expander and the schema expression nodes they produce.
"""

from __future__ import annotations

from .annotations import AnnotationTags, tags_to_modifiers
from .compiler import CompiledDeclaration, CompileResult, SchemaCompiler
from .dependencies import CompilationScope, DependencyCollector
from .generic_env import Binding, GenericEnvironment
from .reference_resolver import ReferenceResolver
from .schema_nodes import (
    ArrayLiteral,
    Call,
    FieldAccess,
    HelperCall,
    Modifier,
    NamespaceAccess,
    ObjectLiteral,
    Reference,
    Regex,
    SchemaExpr,
    Symbol,
    Value,
)
from .template_literal import TemplateLiteralExpander

__all__ = [
    "SchemaCompiler",
    "CompileResult",
    "CompiledDeclaration",
    "AnnotationTags",
    "tags_to_modifiers",
    "CompilationScope",
    "DependencyCollector",
    "Binding",
    "GenericEnvironment",
    "ReferenceResolver",
    "TemplateLiteralExpander",
    "SchemaExpr",
    "Call",
    "Reference",
    "ObjectLiteral",
    "ArrayLiteral",
    "Value",
    "Regex",
    "Symbol",
    "HelperCall",
    "FieldAccess",
    "NamespaceAccess",
    "Modifier",
]
