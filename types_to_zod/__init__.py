"""TypeScript types to Zod schemas

A Python package for compiling TypeScript type declarations (interfaces, type
aliases, enums) into Zod validator schemas.
"""

__version__ = "0.1.0"

from .pipeline import (
    CompiledDeclaration,
    CompileError,
    CompilerConfig,
    CompileResult,
    CompileWarning,
    GenerationResult,
    MaybeConfig,
    ModuleGenerator,
    SchemaCompiler,
    SourceUnit,
    TypeAstLoader,
    TypeAstLoadError,
    render_expression,
)

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
