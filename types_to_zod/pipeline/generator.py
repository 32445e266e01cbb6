"""
Module generator: compiles every declaration of a source unit and renders
the resulting schemas as one TypeScript module.

Declarations are compiled independently. A declaration that fails with a
CompileError is skipped and reported; the others are still emitted.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import jinja2

from ..utils import get_import_path
from .analyzer.compiler import CompiledDeclaration, SchemaCompiler
from .config import CompilerConfig
from .errors import CompileError, CompileWarning
from .renderer import render_expression
from .type_ast.nodes import SourceUnit

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent.parent / "templates" / "zod"


@dataclass
class GenerationResult:
    """Output of one module generation."""

    code: str = ""
    compiled: list[CompiledDeclaration] = field(default_factory=list)
    errors: list[CompileError] = field(default_factory=list)
    warnings: list[CompileWarning] = field(default_factory=list)
    # Each cycle lists schema names with the first one repeated at the end
    cycles: list[list[str]] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)


def _find_cycles(pending: list[CompiledDeclaration]) -> list[list[str]]:
    """
    Report the cycles that keep declarations from being ordered.

    Every pending declaration waits on at least one other pending one, so
    following the first such dependency from any start always ends in a
    cycle, or in a chain that was already walked.
    """
    names = {c.schema_name for c in pending}
    waits_on = {c.schema_name: [d for d in c.dependencies if d in names and d != c.schema_name] for c in pending}

    cycles = []
    walked: set[str] = set()
    for start in waits_on:
        chain: list[str] = []
        name = start
        while name not in walked and name not in chain:
            chain.append(name)
            name = waits_on[name][0]
        if name in chain:
            cycles.append(chain[chain.index(name) :] + [name])
        walked.update(chain)
    return cycles


def order_declarations(compiled: list[CompiledDeclaration]) -> tuple[list[CompiledDeclaration], list[list[str]]]:
    """
    Order compiled declarations so that every schema comes after the schemas it references.

    Declarations caught in a cycle cannot be ordered; they are appended in
    source order after the others.

    Args:
        compiled: Compiled declarations in source order

    Returns:
        Tuple of (ordered declarations, detected cycles)
    """
    local = {c.schema_name for c in compiled}
    ordered: list[CompiledDeclaration] = []
    emitted: set[str] = set()
    pending = list(compiled)

    while pending:
        ready = [c for c in pending if all(d in emitted or d not in local or d == c.schema_name for d in c.dependencies)]
        if not ready:
            break
        for declaration in ready:
            ordered.append(declaration)
            emitted.add(declaration.schema_name)
        pending = [c for c in pending if c.schema_name not in emitted]

    cycles = _find_cycles(pending)
    ordered.extend(pending)

    return ordered, cycles


class ModuleGenerator:
    """Compiles a source unit and renders it as a module of schemas."""

    def __init__(self, config: CompilerConfig | None = None):
        """
        Initialize the generator.

        Args:
            config: Compiler configuration
        """
        self.config = config or CompilerConfig()
        self._setup_templates()

    def _setup_templates(self) -> None:
        """Set up Jinja2 templates."""
        self.jinja_env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(TEMPLATE_DIR)),
            lstrip_blocks=True,
            trim_blocks=True,
            keep_trailing_newline=True,
        )
        self.module_template = self.jinja_env.get_template("module.ts.jinja2")

    def compile(self, source: SourceUnit, compiler: SchemaCompiler | None = None) -> GenerationResult:
        """
        Compile every selected declaration of a source unit.

        Args:
            source: The source unit
            compiler: Compiler built over `source`; a new one is created when omitted

        Returns:
            GenerationResult without rendered code
        """
        if compiler is None:
            compiler = SchemaCompiler(source, self.config)
        result = GenerationResult()

        selected = set(self.config.name_filter)
        for declaration in source.declarations:
            if selected and declaration.name not in selected:
                continue
            try:
                compiled = compiler.compile_declaration(declaration)
            except CompileError as e:
                logger.error("Skipping %s", e)
                result.errors.append(e)
                continue
            result.compiled.append(compiled)
            result.warnings.extend(compiled.warnings)
        return result

    def generate(self, source: SourceUnit, output_path: str | None = None) -> GenerationResult:
        """
        Compile and render a source unit.

        Args:
            source: The source unit
            output_path: Where the module will be written; used to compute the
                enum import path when `types_import_path` is not configured

        Returns:
            GenerationResult with the rendered module
        """
        compiler = SchemaCompiler(source, self.config)
        result = self.compile(source, compiler)
        ordered, result.cycles = order_declarations(result.compiled)
        for cycle in result.cycles:
            logger.warning("Circular dependency between schemas: %s", " -> ".join(cycle))

        z = self.config.zod_import_value
        referenced = {d for c in result.compiled for d in c.dependencies}
        placeholders = [
            compiler.compile_import_placeholder(name)
            for name in source.imports
            if self.config.get_dependency_name(name) in referenced
        ]

        enum_imports = [c.name for c in ordered if c.is_enum]
        types_import_path = self.config.types_import_path
        if enum_imports and not types_import_path:
            types_import_path = get_import_path(output_path or "schemas.ts", source.path or "types.ts")

        exported = {d.name: d.exported for d in source.declarations}
        context = {
            "z": z,
            "enum_imports": enum_imports,
            "types_import_path": types_import_path,
            "maybe_helper": any(c.uses_maybe_helper for c in ordered),
            "maybe_chain": self._maybe_helper_chain(),
            "placeholders": [
                {"name": p.schema_name, "expression": render_expression(p.schema, z)} for p in placeholders
            ],
            "schemas": [
                {
                    "name": c.schema_name,
                    "exported": exported.get(c.name, True),
                    "expression": render_expression(c.schema, z),
                }
                for c in ordered
            ],
        }
        logger.debug("Rendering %d schemas", len(ordered))
        result.code = self.module_template.render(context)
        return result

    def _maybe_helper_chain(self) -> str:
        chain = ""
        if self.config.maybe.optional:
            chain += ".optional()"
        if self.config.maybe.nullable:
            chain += ".nullable()"
        return chain
