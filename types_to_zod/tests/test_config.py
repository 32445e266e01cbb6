#!/usr/bin/env python3

import pytest

from types_to_zod.pipeline import CompilerConfig
from types_to_zod.utils import default_dependency_name, get_import_path, is_identifier, to_camel_case


class TestCompilerConfig:
    """Loading configuration from dictionaries"""

    def test_defaults(self):
        config = CompilerConfig()

        assert config.zod_import_value == "z"
        assert config.maybe.type_names == set()
        assert config.maybe.optional and config.maybe.nullable
        assert config.get_dependency_name("Person") == "personSchema"

    def test_camel_case_keys(self):
        config = CompilerConfig.from_dict(
            {
                "customJSDocFormatTypes": {"phone": "^\\d+$"},
                "skipParseJSDoc": True,
                "zodImportValue": "zod",
                "maxGenericDepth": 8,
                "typesImportPath": "./types",
                "nameFilter": ["Person"],
                "maybeTypeNames": ["Maybe"],
                "maybeNullable": False,
            }
        )

        assert config.custom_format_types == {"phone": "^\\d+$"}
        assert config.skip_parse_annotations is True
        assert config.zod_import_value == "zod"
        assert config.max_generic_depth == 8
        assert config.types_import_path == "./types"
        assert config.name_filter == ["Person"]
        assert config.maybe.type_names == {"Maybe"}
        assert config.maybe.optional is True
        assert config.maybe.nullable is False

    def test_snake_case_keys(self):
        config = CompilerConfig.from_dict(
            {"maybe": {"type_names": ["Maybe"], "optional": False}, "zod_import_value": "v"}
        )

        assert config.maybe.type_names == {"Maybe"}
        assert config.maybe.optional is False
        assert config.zod_import_value == "v"

    def test_unknown_keys_are_ignored(self):
        config = CompilerConfig.from_dict({"keepComments": True, "get_dependency_name": "nope"})
        assert config.get_dependency_name("Team") == "teamSchema"

    def test_round_trip(self):
        config = CompilerConfig.from_dict({"maybeTypeNames": ["B", "A"], "maxGenericDepth": 3})
        assert CompilerConfig.from_dict(config.to_dict()).to_dict() == config.to_dict()
        assert config.to_dict()["maybe"]["type_names"] == ["A", "B"]


class TestUtils:
    """Naming helpers"""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("PersonSchema", "personSchema"),
            ("HTTPStatusSchema", "httpStatusSchema"),
            ("user_id", "userId"),
            ("kebab-case-name", "kebabCaseName"),
            ("", ""),
        ],
    )
    def test_to_camel_case(self, text, expected):
        assert to_camel_case(text) == expected

    def test_default_dependency_name(self):
        assert default_dependency_name("Person") == "personSchema"
        assert default_dependency_name("APIKey") == "apiKeySchema"

    def test_is_identifier(self):
        assert is_identifier("name")
        assert is_identifier("$ref")
        assert not is_identifier("first-name")
        assert not is_identifier("1st")

    @pytest.mark.parametrize(
        "from_file,to_file,expected",
        [
            ("src/schemas.zod.ts", "src/types.ts", "./types"),
            ("out/schemas.ts", "src/models/user.ts", "../src/models/user"),
            ("schemas.ts", "types.ts", "./types"),
            ("src/generated/schemas.ts", "src/types.d.ts", "../types.d"),
        ],
    )
    def test_get_import_path(self, from_file, to_file, expected):
        assert get_import_path(from_file, to_file) == expected


if __name__ == "__main__":
    pytest.main([__file__])
