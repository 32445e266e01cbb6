#!/usr/bin/env python3

import pytest

from types_to_zod.pipeline.analyzer.schema_nodes import (
    ArrayLiteral,
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
    combinator,
    modifier,
)
from types_to_zod.pipeline.renderer import RenderError, render_expression, render_key, render_value


class TestRenderer:
    """Source text of schema expressions"""

    def test_call_with_modifiers(self):
        expr = combinator("string", modifiers=[modifier("min", Value(1)), modifier("optional")])
        assert render_expression(expr) == "z.string().min(1).optional()"

    def test_custom_namespace(self):
        expr = combinator("array", combinator("number"))
        assert render_expression(expr, "zod") == "zod.array(zod.number())"

    def test_object_keys(self):
        expr = combinator(
            "object",
            ObjectLiteral((("name", combinator("string")), ("first-name", combinator("string")))),
        )
        assert render_expression(expr) == 'z.object({ name: z.string(), "first-name": z.string() })'

    def test_empty_object(self):
        assert render_expression(combinator("object", ObjectLiteral())) == "z.object({})"

    def test_values(self):
        assert render_value("a\"b") == '"a\\"b"'
        assert render_value(True) == "true"
        assert render_value(None) == "null"
        assert render_value(-2.5) == "-2.5"
        assert render_value("héllo") == '"héllo"'

    def test_render_key(self):
        assert render_key("_id") == "_id"
        assert render_key("x y") == '"x y"'

    def test_literal_union(self):
        expr = combinator("union", ArrayLiteral((combinator("literal", Value("a")), combinator("literal", Value(1)))))
        assert render_expression(expr) == 'z.union([z.literal("a"), z.literal(1)])'

    def test_regex(self):
        expr = combinator("string", modifiers=[modifier("regex", Regex("^a+$"), Value("Only a"))])
        assert render_expression(expr) == 'z.string().regex(/^a+$/, "Only a")'

    def test_reference_field_access(self):
        expr = FieldAccess(Reference("personSchema"), "shape.address.shape.city")
        assert render_expression(expr) == "personSchema.shape.address.shape.city"

    def test_symbol_and_helper(self):
        assert render_expression(combinator("nativeEnum", Symbol("Color"))) == "z.nativeEnum(Color)"
        helper = HelperCall("maybe", (combinator("string"),), modifiers=(modifier("optional"),))
        assert render_expression(helper) == "maybe(z.string()).optional()"

    def test_raw_modifier_and_namespace_access(self):
        expr = combinator("string").with_modifiers(Modifier(name="email()", raw=True))
        assert render_expression(expr) == "z.string().email()"
        assert render_expression(NamespaceAccess("string().uuid()")) == "z.string().uuid()"

    def test_unknown_node(self):
        with pytest.raises(RenderError):
            render_expression(SchemaExpr())


if __name__ == "__main__":
    pytest.main([__file__])
