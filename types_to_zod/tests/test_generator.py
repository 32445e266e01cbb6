"""
Tests for module generation: declaration ordering, cycles, placeholders for
imported names and the rendered module layout.
"""

from __future__ import annotations

from unittest import TestCase
from unittest.mock import patch

import pytest

from types_to_zod.pipeline import CompilerConfig, ModuleGenerator, TypeAstLoader
from types_to_zod.pipeline.analyzer import CompiledDeclaration, SchemaCompiler
from types_to_zod.pipeline.analyzer.schema_nodes import combinator
from types_to_zod.pipeline.errors import GenericDeclarationError
from types_to_zod.pipeline.generator import order_declarations

STRING = {"kind": "keyword", "keyword": "string"}


def _interface(name, members, **extra):
    return {"kind": "interface", "name": name, "members": members, **extra}


def _member(name, type_node, optional=False):
    return {"name": name, "type": type_node, "optional": optional}


def _ref(name):
    return {"kind": "reference", "name": name}


def _generate(declarations, config=None, output_path=None, **document):
    source = TypeAstLoader().load({"declarations": declarations, **document})
    return ModuleGenerator(config or CompilerConfig()).generate(source, output_path=output_path)


def _declaration(name, dependencies):
    return CompiledDeclaration(name=name, schema_name=name, dependencies=dependencies, schema=combinator("any"))


class TestOrderDeclarations(TestCase):
    """Dependency ordering of compiled declarations"""

    def test_dependencies_come_first(self):
        ordered, cycles = order_declarations([_declaration("a", ["b"]), _declaration("b", ["c"]), _declaration("c", [])])

        self.assertEqual([d.name for d in ordered], ["c", "b", "a"])
        self.assertEqual(cycles, [])

    def test_source_order_is_kept_when_independent(self):
        ordered, _ = order_declarations([_declaration("x", []), _declaration("y", []), _declaration("z", [])])
        self.assertEqual([d.name for d in ordered], ["x", "y", "z"])

    def test_external_and_self_dependencies_do_not_block(self):
        ordered, cycles = order_declarations([_declaration("node", ["node", "externalSchema"])])

        self.assertEqual([d.name for d in ordered], ["node"])
        self.assertEqual(cycles, [])

    def test_cycle_is_reported_and_appended(self):
        ordered, cycles = order_declarations(
            [_declaration("a", ["b"]), _declaration("b", ["a"]), _declaration("c", [])]
        )

        self.assertEqual([d.name for d in ordered], ["c", "a", "b"])
        self.assertEqual(cycles, [["a", "b", "a"]])

    def test_separate_cycles_are_each_reported(self):
        ordered, cycles = order_declarations(
            [
                _declaration("a", ["b"]),
                _declaration("b", ["a"]),
                _declaration("c", ["a"]),
                _declaration("d", ["e"]),
                _declaration("e", ["f"]),
                _declaration("f", ["d"]),
                _declaration("g", []),
            ]
        )

        self.assertEqual([d.name for d in ordered], ["g", "a", "b", "c", "d", "e", "f"])
        self.assertEqual(cycles, [["a", "b", "a"], ["d", "e", "f", "d"]])

    def test_cycle_reached_through_a_chain(self):
        _, cycles = order_declarations(
            [_declaration("entry", ["loop"]), _declaration("loop", ["back"]), _declaration("back", ["loop"])]
        )

        self.assertEqual(cycles, [["loop", "back", "loop"]])


class TestModuleGenerator(TestCase):
    """Rendered module output"""

    def test_header_and_export(self):
        result = _generate([_interface("Person", [_member("name", STRING)])])

        self.assertTrue(result.code.startswith('// Generated by types-to-zod\nimport { z } from "zod";\n'))
        self.assertIn("export const personSchema = z.object({ name: z.string() });", result.code)
        self.assertFalse(result.has_errors)

    def test_schemas_are_ordered_by_dependency(self):
        result = _generate(
            [
                _interface("Team", [_member("lead", _ref("Person"))]),
                _interface("Person", [_member("name", STRING)]),
            ]
        )

        self.assertLess(result.code.index("const personSchema"), result.code.index("const teamSchema"))

    def test_circular_dependency(self):
        result = _generate(
            [
                _interface("A", [_member("b", _ref("B"))]),
                _interface("B", [_member("a", _ref("A"))]),
            ]
        )

        self.assertEqual(result.cycles, [["aSchema", "bSchema", "aSchema"]])
        self.assertIn("const aSchema = z.object({ b: bSchema });", result.code)
        self.assertIn("const bSchema = z.object({ a: aSchema });", result.code)

    def test_failed_declaration_is_skipped(self):
        result = _generate(
            [
                _interface("Box", [_member("value", _ref("T"))], typeParameters=[{"name": "T"}]),
                _interface("Person", [_member("name", STRING)]),
            ]
        )

        self.assertTrue(result.has_errors)
        self.assertEqual(len(result.errors), 1)
        self.assertIsInstance(result.errors[0], GenericDeclarationError)
        self.assertEqual(str(result.errors[0]), "Box: Interface with generics are not supported!")
        self.assertIn("const personSchema", result.code)
        self.assertNotIn("boxSchema", result.code)

    def test_non_exported_declaration(self):
        result = _generate([_interface("Person", [_member("name", STRING)], exported=False)])

        self.assertIn("\nconst personSchema = z.object", result.code)
        self.assertNotIn("export const personSchema", result.code)

    def test_name_filter(self):
        config = CompilerConfig.from_dict({"nameFilter": ["Person"]})
        result = _generate(
            [
                _interface("Person", [_member("name", STRING)]),
                _interface("Pet", [_member("name", STRING)]),
            ],
            config,
        )

        self.assertEqual([c.name for c in result.compiled], ["Person"])
        self.assertNotIn("petSchema", result.code)

    def test_imported_names_get_placeholders(self):
        result = _generate(
            [_interface("Holder", [_member("item", _ref("External"))])],
            imports=["External", "Unused"],
        )

        self.assertIn("const externalSchema = z.any();", result.code)
        self.assertNotIn("unusedSchema", result.code)
        self.assertLess(result.code.index("externalSchema = z.any()"), result.code.index("const holderSchema"))

    def test_one_compiler_per_generation(self):
        with patch("types_to_zod.pipeline.generator.SchemaCompiler", wraps=SchemaCompiler) as compiler_class:
            result = _generate(
                [_interface("Holder", [_member("item", _ref("External"))])],
                imports=["External"],
            )

        self.assertEqual(compiler_class.call_count, 1)
        self.assertIn("const externalSchema = z.any();", result.code)

    def test_enum_import_from_relative_path(self):
        result = _generate(
            [{"kind": "enum", "name": "Color", "members": [{"name": "Red", "initializer": "red"}]}],
            output_path="src/schemas.ts",
            path="src/types.ts",
        )

        self.assertIn('import { Color } from "./types";', result.code)
        self.assertIn("export const colorSchema = z.nativeEnum(Color);", result.code)

    def test_enum_import_from_configured_path(self):
        config = CompilerConfig.from_dict({"typesImportPath": "@app/types"})
        result = _generate(
            [{"kind": "enum", "name": "Color", "members": [{"name": "Red", "initializer": "red"}]}],
            config,
        )

        self.assertIn('import { Color } from "@app/types";', result.code)

    def test_no_enum_import_without_enums(self):
        result = _generate([_interface("Person", [_member("name", STRING)])])
        self.assertNotIn("import { Person", result.code)
        self.assertEqual(result.code.count("import"), 1)

    def test_maybe_helper_is_emitted(self):
        config = CompilerConfig.from_dict({"maybeTypeNames": ["Maybe"], "maybeNullable": False})
        maybe = {"kind": "reference", "name": "Maybe", "typeArguments": [STRING]}
        result = _generate([_interface("User", [_member("nick", maybe)])], config)

        self.assertIn("const maybe = <T extends z.ZodTypeAny>(schema: T) => {", result.code)
        self.assertIn("  return schema.optional();", result.code)
        self.assertIn("export const userSchema = z.object({ nick: maybe(z.string()) });", result.code)

    def test_maybe_helper_is_omitted_when_unused(self):
        config = CompilerConfig.from_dict({"maybeTypeNames": ["Maybe"]})
        result = _generate([_interface("Person", [_member("name", STRING)])], config)
        self.assertNotIn("const maybe", result.code)

    def test_custom_namespace(self):
        config = CompilerConfig.from_dict({"zodImportValue": "zod"})
        result = _generate([_interface("Person", [_member("name", STRING)])], config)

        self.assertIn('import { zod } from "zod";', result.code)
        self.assertIn("zod.object({ name: zod.string() })", result.code)

    def test_warnings_are_collected(self):
        result = _generate([{"kind": "alias", "name": "Odd", "type": {"kind": "conditional", "text": "A extends B ? C : D"}}])

        self.assertEqual(len(result.warnings), 1)
        self.assertIn("export const oddSchema = z.any();", result.code)


if __name__ == "__main__":
    pytest.main([__file__])
