"""
Tests for the reference resolver and the generic environment it reads.
"""

from __future__ import annotations

from unittest import TestCase

import pytest

from types_to_zod.pipeline import CompilerConfig, TypeAstLoader
from types_to_zod.pipeline.analyzer import CompilationScope, GenericEnvironment, ReferenceResolver
from types_to_zod.pipeline.errors import UnsupportedProjectionError
from types_to_zod.pipeline.type_ast.nodes import (
    ArrayType,
    KeywordType,
    LiteralType,
    ObjectType,
    TypeReference,
    UnionType,
)


class TestGenericEnvironment(TestCase):
    """Immutable generic substitution scopes"""

    def test_bind_forks(self):
        empty = GenericEnvironment.empty()
        bound = empty.bind("T", KeywordType("string"))

        self.assertNotIn("T", empty)
        self.assertIn("T", bound)
        self.assertEqual(bound.lookup("T").type, KeywordType("string"))
        self.assertIs(bound.lookup("T").env, empty)

    def test_bind_with_reading_environment(self):
        caller = GenericEnvironment.empty().bind("U", KeywordType("number"))
        callee = caller.enter_instantiation().bind("T", TypeReference("U"), caller)

        self.assertIs(callee.lookup("T").env, caller)
        self.assertNotIn("U", callee)

    def test_enter_instantiation(self):
        env = GenericEnvironment.empty().bind("T", KeywordType("string"))
        inner = env.enter_instantiation()

        self.assertEqual(inner.depth, 1)
        self.assertEqual(len(inner), 0)
        self.assertEqual(inner.enter_instantiation().depth, 2)

    def test_without(self):
        env = GenericEnvironment.empty().bind("T", KeywordType("string")).bind("U", KeywordType("number"))
        self.assertEqual(env.without("T").names(), ["U"])
        self.assertEqual(env.names(), ["T", "U"])


class TestReferenceResolver(TestCase):
    """Projection keys, bindings and member lookup"""

    def setUp(self):
        source = TypeAstLoader().load(
            {
                "declarations": [
                    {
                        "kind": "interface",
                        "name": "Base",
                        "members": [
                            {"name": "id", "type": {"kind": "keyword", "keyword": "string"}},
                            {"name": "tags", "type": {"kind": "array", "elementType": {"kind": "keyword", "keyword": "string"}}},
                        ],
                    },
                    {
                        "kind": "interface",
                        "name": "Child",
                        "extends": [{"name": "Base", "projection": "Omit", "keys": {"kind": "literal", "value": "id"}}],
                        "members": [{"name": "name", "type": {"kind": "keyword", "keyword": "string"}}],
                    },
                    {
                        "kind": "alias",
                        "name": "Named",
                        "type": {"kind": "object", "members": [{"name": "label", "type": {"kind": "keyword", "keyword": "string"}}]},
                    },
                ]
            }
        )
        self.resolver = ReferenceResolver(source, CompilerConfig())

    def test_reference_registers_dependency(self):
        scope = CompilationScope(declaration="X")
        reference = self.resolver.reference("Base", scope)

        self.assertEqual(reference.name, "baseSchema")
        self.assertEqual(scope.dependencies.finalize(), ["baseSchema"])

    def test_projection_keys(self):
        keys = UnionType((LiteralType("a"), LiteralType("b")))
        self.assertEqual(self.resolver.projection_keys("Pick", keys), ["a", "b"])

    def test_projection_keys_through_binding(self):
        env = GenericEnvironment.empty().bind("K", LiteralType("id"))
        self.assertEqual(self.resolver.projection_keys("Omit", TypeReference("K"), env), ["id"])

    def test_projection_keys_rejects_non_strings(self):
        with self.assertRaises(UnsupportedProjectionError) as ctx:
            self.resolver.projection_keys("Pick", LiteralType(1))
        self.assertEqual(ctx.exception.message, "Pick<T, K> unknown syntax: (LiteralType as K not supported)")

    def test_resolve_binding_follows_chain(self):
        root = GenericEnvironment.empty()
        outer = root.bind("A", KeywordType("boolean"))
        inner = outer.enter_instantiation().bind("B", TypeReference("A"), outer)

        node, env = self.resolver.resolve_binding(TypeReference("B"), inner)

        self.assertEqual(node, KeywordType("boolean"))
        self.assertIs(env, root)

    def test_unbound_reference_is_unchanged(self):
        node = TypeReference("Base")
        self.assertIs(self.resolver.substitute(node, GenericEnvironment.empty()), node)

    def test_member_type(self):
        self.assertEqual(self.resolver.member_type(TypeReference("Base"), "tags"), ArrayType(KeywordType("string")))
        self.assertEqual(self.resolver.member_type(TypeReference("Named"), "label"), KeywordType("string"))
        self.assertIsNone(self.resolver.member_type(ObjectType(), "missing"))

    def test_member_type_follows_heritage(self):
        self.assertEqual(self.resolver.member_type(TypeReference("Child"), "tags"), ArrayType(KeywordType("string")))
        self.assertIsNone(self.resolver.member_type(TypeReference("Child"), "id"))


if __name__ == "__main__":
    pytest.main([__file__])
