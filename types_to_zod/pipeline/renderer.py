"""
Schema expression renderer.

Turns a schema expression tree into TypeScript source text on a single line.
Layout is left to an external formatter.
"""

from __future__ import annotations

import json

from ..utils import is_identifier
from .analyzer.schema_nodes import (
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


class RenderError(Exception):
    """Raised when an expression node has no source form."""


def render_value(value) -> str:
    """JSON-compatible values are valid TypeScript expressions."""
    return json.dumps(value, ensure_ascii=False)


def render_key(key: str) -> str:
    if is_identifier(key):
        return key
    return json.dumps(key, ensure_ascii=False)


def render_expression(expr: SchemaExpr, z: str = "z") -> str:
    """
    Render a schema expression.

    Args:
        expr: Expression to render
        z: Name of the combinator namespace

    Returns:
        TypeScript source text
    """
    return _render_base(expr, z) + "".join(_render_modifier(m, z) for m in expr.modifiers)


def _render_args(args: tuple[SchemaExpr, ...], z: str) -> str:
    return ", ".join(render_expression(arg, z) for arg in args)


def _render_modifier(mod: Modifier, z: str) -> str:
    if mod.raw:
        return f".{mod.name}"
    return f".{mod.name}({_render_args(mod.args, z)})"


def _render_base(expr: SchemaExpr, z: str) -> str:
    if isinstance(expr, Call):
        return f"{z}.{expr.name}({_render_args(expr.args, z)})"
    if isinstance(expr, Reference):
        return expr.name
    if isinstance(expr, ObjectLiteral):
        if not expr.entries:
            return "{}"
        entries = ", ".join(f"{render_key(k)}: {render_expression(v, z)}" for k, v in expr.entries)
        return "{ " + entries + " }"
    if isinstance(expr, ArrayLiteral):
        return f"[{_render_args(expr.items, z)}]"
    if isinstance(expr, Value):
        return render_value(expr.value)
    if isinstance(expr, Regex):
        return f"/{expr.pattern}/"
    if isinstance(expr, Symbol):
        return expr.name
    if isinstance(expr, HelperCall):
        return f"{expr.name}({_render_args(expr.args, z)})"
    if isinstance(expr, FieldAccess):
        return f"{render_expression(expr.target, z)}.{expr.path}"
    if isinstance(expr, NamespaceAccess):
        return f"{z}.{expr.text}"
    raise RenderError(f"Cannot render {type(expr).__name__}")
