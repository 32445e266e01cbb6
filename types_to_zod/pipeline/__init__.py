"""
Pipeline - Type AST to Zod schema compiler.

1. Phase 1 (Loader): Load the JSON-encoded Type AST of a source file
2. Phase 2 (Compiler): Compile each declaration into a schema expression
3. Phase 3 (Generator): Order the schemas by dependency and render the module
"""

from __future__ import annotations

from .analyzer import CompiledDeclaration, CompileResult, SchemaCompiler
from .config import CompilerConfig, MaybeConfig
from .errors import CompileError, CompileWarning, TypeAstLoadError
from .generator import GenerationResult, ModuleGenerator
from .renderer import render_expression
from .type_ast import SourceUnit, TypeAstLoader

__all__ = [
    "SchemaCompiler",
    "CompileResult",
    "CompiledDeclaration",
    "CompilerConfig",
    "MaybeConfig",
    "CompileError",
    "CompileWarning",
    "TypeAstLoadError",
    "ModuleGenerator",
    "GenerationResult",
    "render_expression",
    "SourceUnit",
    "TypeAstLoader",
]
