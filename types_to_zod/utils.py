"""
Utility functions for the TypeScript types to Zod schema generator.
"""

import posixpath
import re

# Regex pattern to split text into words, handling camelCase and acronym boundaries
_WORD_PATTERN = re.compile(r"[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z]+|[A-Z]+|[0-9]+")

# Valid JavaScript identifier (ASCII subset)
_IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


def _normalize_separators(text: str) -> str:
    """Normalize separators (underscores, hyphens) to spaces."""
    return text.replace("_", " ").replace("-", " ")


def _split_into_words(text: str) -> list[str]:
    """Split text into words, handling camelCase boundaries."""
    return _WORD_PATTERN.findall(text)


def to_camel_case(text: str) -> str:
    """Convert PascalCase, snake_case or space-separated text to camelCase.

    Examples:
        "PersonSchema" -> "personSchema"
        "HTTPStatusSchema" -> "httpStatusSchema"
        "user_id" -> "userId"
        "v2 Item" -> "v2Item"

    Args:
        text: The text to convert

    Returns:
        camelCase string
    """
    if not text:
        return ""
    words = _split_into_words(_normalize_separators(text))
    if not words:
        return ""
    return words[0].lower() + "".join(word.capitalize() for word in words[1:])


def default_dependency_name(identifier: str) -> str:
    """Name of the schema generated for a declaration: `Person` -> `personSchema`."""
    return to_camel_case(f"{identifier}Schema")


def is_identifier(text: str) -> bool:
    """Whether text can be used as a bare JavaScript property name."""
    return bool(_IDENTIFIER_PATTERN.match(text))


def get_import_path(from_file: str, to_file: str) -> str:
    """Relative module specifier of `to_file` as seen from `from_file`, without extension.

    Examples:
        ("src/schemas.zod.ts", "src/types.ts") -> "./types"
        ("out/schemas.ts", "src/models/user.ts") -> "../src/models/user"
    """
    relative = posixpath.relpath(
        posixpath.normpath(to_file.replace("\\", "/")),
        posixpath.dirname(posixpath.normpath(from_file.replace("\\", "/"))) or ".",
    )
    directory, name = posixpath.split(relative)
    stem = name.rsplit(".", 1)[0] if "." in name else name
    specifier = posixpath.join(directory, stem) if directory else stem
    if not specifier.startswith("."):
        specifier = "./" + specifier
    return specifier
