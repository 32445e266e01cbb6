#!/usr/bin/env python3

import logging

import pytest

from types_to_zod.pipeline.analyzer import AnnotationTags, tags_to_modifiers
from types_to_zod.pipeline.analyzer.schema_nodes import ObjectLiteral, Regex, Value, combinator
from types_to_zod.pipeline.renderer import render_expression


def _render(tags, custom_formats=None, **flags):
    """Render the modifiers produced for `tags` on a plain string schema."""
    modifiers = tags_to_modifiers(AnnotationTags.of(tags), custom_formats or {}, **flags)
    return render_expression(combinator("string", modifiers=modifiers))


class TestAnnotationTags:
    """Typed accessors over raw tag maps"""

    def test_empty_tags_are_falsy(self):
        assert not AnnotationTags.empty()
        assert AnnotationTags.of({"strict": ""})

    def test_tags_are_read_only(self):
        tags = AnnotationTags.of({"minimum": "1"})
        with pytest.raises(TypeError):
            tags.raw["minimum"] = "2"

    def test_discriminator_is_stripped(self):
        assert AnnotationTags.of({"discriminator": " kind "}).discriminator == "kind"
        assert AnnotationTags.empty().discriminator is None

    def test_without(self):
        tags = AnnotationTags.of({"schema": ".email()", "description": "Mail"})
        assert tags.without("schema").schema_override is None
        assert tags.without("schema").get("description") == "Mail"
        assert tags.schema_override == ".email()"

    def test_element_tags(self):
        tags = AnnotationTags.of({"elementMinimum": "1", "elementFormat": "email", "minimum": "5"})
        assert dict(tags.element_tags().raw) == {"minimum": "1", "format": "email"}


class TestTagsToModifiers:
    """Translation of tags and contextual flags into the modifier chain"""

    def test_no_tags(self):
        assert tags_to_modifiers(AnnotationTags.empty(), {}) == []

    def test_length_bounds(self):
        assert _render({"minLength": "2", "maxLength": "10 Too long"}) == 'z.string().min(2).max(10, "Too long")'

    def test_float_bound(self):
        assert _render({"minimum": "0.5"}) == "z.string().min(0.5)"

    def test_non_numeric_bound_is_ignored(self, caplog):
        with caplog.at_level(logging.WARNING):
            assert _render({"minimum": "lots"}) == "z.string()"
        assert "not a number" in caplog.text

    def test_builtin_format(self):
        assert _render({"format": "email"}) == "z.string().email()"
        assert _render({"format": "date-time"}) == "z.string().datetime()"
        assert _render({"format": "uuid Not a uuid"}) == 'z.string().uuid("Not a uuid")'

    def test_ip_version_format(self):
        assert _render({"format": "ipv6"}) == 'z.string().ip({ version: "v6" })'

    def test_custom_format_with_error_message(self):
        formats = {"zip": {"regex": "^[0-9]{5}$", "errorMessage": "Bad zip"}}
        assert _render({"format": "zip"}, formats) == 'z.string().regex(/^[0-9]{5}$/, "Bad zip")'
        assert _render({"format": "zip Wrong"}, formats) == 'z.string().regex(/^[0-9]{5}$/, "Wrong")'

    def test_unknown_format_is_ignored(self, caplog):
        with caplog.at_level(logging.WARNING):
            assert _render({"format": "banana"}) == "z.string()"
        assert "banana" in caplog.text

    def test_pattern(self):
        assert _render({"pattern": "^[a-z]+$"}) == "z.string().regex(/^[a-z]+$/)"

    def test_default_values(self):
        assert _render({"default": '"guest"'}) == 'z.string().default("guest")'
        assert _render({"default": "guest"}) == 'z.string().default("guest")'
        assert _render({"default": "[1, 2]"}) == "z.string().default([1, 2])"

    def test_modifier_order(self):
        tags = {"default": "\"x\"", "description": "Name", "pattern": "^x$", "minLength": "1"}
        rendered = _render(tags, optional=True, nullable=True, partial=True)
        assert rendered == 'z.string().min(1).regex(/^x$/).partial().optional().describe("Name").nullable().default("x")'

    def test_modifier_arguments(self):
        modifiers = tags_to_modifiers(AnnotationTags.of({"format": "ipv4 Bad", "pattern": "a+"}), {})
        ip, regex = modifiers

        assert ip.name == "ip"
        assert ip.args == (ObjectLiteral((("version", Value("v4")), ("message", Value("Bad")))),)
        assert regex.args == (Regex("a+"),)


if __name__ == "__main__":
    pytest.main([__file__])
