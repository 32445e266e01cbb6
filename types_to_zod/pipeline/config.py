"""
Configuration for the schema compiler pipeline.

Accepts both the snake_case keys used in Python and the camelCase keys used
by JavaScript configuration files.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from ..utils import default_dependency_name

# camelCase config keys -> CompilerConfig attribute
_CAMEL_CASE_KEYS = {
    "customJSDocFormatTypes": "custom_format_types",
    "skipParseJSDoc": "skip_parse_annotations",
    "zodImportValue": "zod_import_value",
    "maxGenericDepth": "max_generic_depth",
    "typesImportPath": "types_import_path",
    "nameFilter": "name_filter",
}


@dataclass
class MaybeConfig:
    """Configuration of the `Maybe<T>` special case.

    Attributes:
        type_names: Names treated as maybe wrappers or reserved boolean-generic interfaces
        optional: Whether a disabled/maybe value may be undefined
        nullable: Whether a disabled/maybe value may be null
    """

    type_names: set[str] = field(default_factory=set)
    optional: bool = True
    nullable: bool = True


@dataclass
class CompilerConfig:
    """Configuration options for schema compilation."""

    maybe: MaybeConfig = field(default_factory=MaybeConfig)

    # Custom `@format` types: name -> regex, or {"regex": ..., "errorMessage": ...}
    custom_format_types: dict[str, str | dict[str, str]] = field(default_factory=dict)

    # Ignore annotation tags entirely
    skip_parse_annotations: bool = False

    # Name of the combinator namespace in generated code
    zod_import_value: str = "z"

    # Referenced declaration name -> schema identifier
    get_dependency_name: Callable[[str], str] = default_dependency_name

    # Bound on nested generic instantiations
    max_generic_depth: int = 32

    # Module that enums are imported from in the rendered output
    types_import_path: str = ""

    # Only compile these declarations (empty = all)
    name_filter: list[str] = field(default_factory=list)

    @staticmethod
    def from_dict(d: dict[str, Any]) -> CompilerConfig:
        """Create a config from a dictionary."""
        config = CompilerConfig()
        for k, v in d.items():
            if k in ("maybe", "maybeConfig") and isinstance(v, dict):
                config.maybe = MaybeConfig(
                    type_names=set(v.get("type_names", v.get("typeNames", []))),
                    optional=v.get("optional", True),
                    nullable=v.get("nullable", True),
                )
            elif k == "maybeTypeNames":
                config.maybe.type_names = set(v)
            elif k == "maybeOptional":
                config.maybe.optional = bool(v)
            elif k == "maybeNullable":
                config.maybe.nullable = bool(v)
            elif k in _CAMEL_CASE_KEYS:
                setattr(config, _CAMEL_CASE_KEYS[k], v)
            elif hasattr(config, k) and k != "get_dependency_name":
                setattr(config, k, v)
        return config

    def to_dict(self) -> dict[str, Any]:
        """Convert config to a dictionary (the dependency-name function is not serialized)."""
        return {
            "maybe": {
                "type_names": sorted(self.maybe.type_names),
                "optional": self.maybe.optional,
                "nullable": self.maybe.nullable,
            },
            "custom_format_types": self.custom_format_types,
            "skip_parse_annotations": self.skip_parse_annotations,
            "zod_import_value": self.zod_import_value,
            "max_generic_depth": self.max_generic_depth,
            "types_import_path": self.types_import_path,
            "name_filter": self.name_filter,
        }
