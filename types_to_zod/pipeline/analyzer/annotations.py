"""
Annotation tags and their translation into schema modifiers.

Tags are extracted from documentation comments by an external component and
arrive as an immutable `name -> text` map per node. This module gives them
typed accessors and turns them, together with the contextual
optional/nullable/partial/required flags, into the modifier chain of the
compiled schema.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from .schema_nodes import Modifier, ObjectLiteral, Regex, SchemaExpr, Value, modifier

logger = logging.getLogger(__name__)

# Tags that only make sense on the node that carries them
SCHEMA_TAG = "schema"
DISCRIMINATOR_TAG = "discriminator"
STRICT_TAG = "strict"

# Tags mirrored for array elements as `element<Tag>`
ELEMENT_TAGS = ("description", "minimum", "maximum", "minLength", "maxLength", "format", "pattern")

# `@format` value -> (modifier, extra object-literal entries)
BUILTIN_FORMATS: dict[str, tuple[str, dict[str, str]]] = {
    "email": ("email", {}),
    "uuid": ("uuid", {}),
    "url": ("url", {}),
    "cuid": ("cuid", {}),
    "cuid2": ("cuid2", {}),
    "ulid": ("ulid", {}),
    "emoji": ("emoji", {}),
    "date-time": ("datetime", {}),
    "date": ("date", {}),
    "time": ("time", {}),
    "duration": ("duration", {}),
    "ip": ("ip", {}),
    "ipv4": ("ip", {"version": "v4"}),
    "ipv6": ("ip", {"version": "v6"}),
}


@dataclass(frozen=True)
class AnnotationTags:
    """Typed read-only view over a node's tag map."""

    raw: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def empty(cls) -> AnnotationTags:
        return cls()

    @classmethod
    def of(cls, tags: Mapping[str, str] | None) -> AnnotationTags:
        return cls(MappingProxyType(dict(tags or {})))

    def __bool__(self) -> bool:
        return bool(self.raw)

    def get(self, name: str) -> str | None:
        return self.raw.get(name)

    @property
    def schema_override(self) -> str | None:
        return self.raw.get(SCHEMA_TAG)

    @property
    def discriminator(self) -> str | None:
        value = self.raw.get(DISCRIMINATOR_TAG)
        return value.strip() if value else None

    @property
    def strict(self) -> bool:
        return STRICT_TAG in self.raw

    def without(self, name: str) -> AnnotationTags:
        return AnnotationTags(MappingProxyType({k: v for k, v in self.raw.items() if k != name}))

    def element_tags(self) -> AnnotationTags:
        """Tags of array elements: `elementMinimum` becomes `minimum`, and so on."""
        mapped = {}
        for tag in ELEMENT_TAGS:
            value = self.raw.get("element" + tag[0].upper() + tag[1:])
            if value is not None:
                mapped[tag] = value
        return AnnotationTags(MappingProxyType(mapped))


def _split_value(text: str) -> tuple[str, str | None]:
    """Split `"<value> <error message>"` into its parts."""
    parts = text.strip().split(None, 1)
    if not parts:
        return "", None
    message = parts[1].strip() if len(parts) > 1 else None
    return parts[0], message or None


def _parse_number(text: str) -> int | float | None:
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError:
        return None


def _parse_default(text: str) -> object:
    """Default values are JSON when they parse as JSON, raw strings otherwise."""
    try:
        return json.loads(text)
    except ValueError:
        return text


def _numeric_modifier(name: str, tag: str, text: str) -> Modifier | None:
    raw_value, message = _split_value(text)
    number = _parse_number(raw_value)
    if number is None:
        logger.warning("Ignoring @%s: '%s' is not a number", tag, raw_value)
        return None
    args: list[SchemaExpr] = [Value(number)]
    if message:
        args.append(Value(message))
    return modifier(name, *args)


def _format_modifier(text: str, custom_formats: Mapping[str, str | Mapping[str, str]]) -> Modifier | None:
    format_name, message = _split_value(text)

    if format_name in custom_formats:
        custom = custom_formats[format_name]
        if isinstance(custom, str):
            pattern, default_message = custom, None
        else:
            pattern, default_message = custom.get("regex", ""), custom.get("errorMessage")
        error = message or default_message
        args: list[SchemaExpr] = [Regex(pattern)]
        if error:
            args.append(Value(error))
        return modifier("regex", *args)

    if format_name in BUILTIN_FORMATS:
        name, options = BUILTIN_FORMATS[format_name]
        if options:
            entries = [(k, Value(v)) for k, v in options.items()]
            if message:
                entries.append(("message", Value(message)))
            return modifier(name, ObjectLiteral(tuple(entries)))
        return modifier(name, Value(message)) if message else modifier(name)

    logger.warning("Ignoring unknown @format '%s'", format_name)
    return None


def tags_to_modifiers(
    tags: AnnotationTags,
    custom_formats: Mapping[str, str | Mapping[str, str]],
    *,
    optional: bool = False,
    nullable: bool = False,
    partial: bool = False,
    required: bool = False,
) -> list[Modifier]:
    """
    Build the modifier chain for a node.

    Args:
        tags: Annotation tags of the node
        custom_formats: Configured custom `@format` types
        optional: The node is an optional member
        nullable: A `null` arm was stripped from the node's union
        partial: The node is wrapped in `Partial<>`
        required: The node is wrapped in `Required<>`

    Returns:
        Modifiers in application order
    """
    modifiers: list[Modifier | None] = []

    if (value := tags.get("minimum")) is not None:
        modifiers.append(_numeric_modifier("min", "minimum", value))
    if (value := tags.get("maximum")) is not None:
        modifiers.append(_numeric_modifier("max", "maximum", value))
    if (value := tags.get("minLength")) is not None:
        modifiers.append(_numeric_modifier("min", "minLength", value))
    if (value := tags.get("maxLength")) is not None:
        modifiers.append(_numeric_modifier("max", "maxLength", value))
    if (value := tags.get("format")) is not None:
        modifiers.append(_format_modifier(value, custom_formats))
    if (value := tags.get("pattern")) is not None:
        modifiers.append(modifier("regex", Regex(value.strip())))

    # Object-only calls come before the wrappers
    if partial:
        modifiers.append(modifier("partial"))
    if required:
        modifiers.append(modifier("required"))
    if optional:
        modifiers.append(modifier("optional"))
    if (value := tags.get("description")) is not None:
        modifiers.append(modifier("describe", Value(value.strip())))
    if nullable:
        modifiers.append(modifier("nullable"))
    if (value := tags.get("default")) is not None:
        modifiers.append(modifier("default", Value(_parse_default(value.strip()))))

    return [m for m in modifiers if m is not None]
