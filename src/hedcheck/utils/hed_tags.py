"""HED tag helpers combining tag paths with schema attribute lookups.

All functions take formatted (lowercase) tags unless noted otherwise.
"""

from __future__ import annotations

from hedcheck.schema.attributes import SchemaAttributes
from hedcheck.utils.strings import PLACEHOLDER

TAG_SEPARATOR = "/"


def replace_tag_name_with_pound(tag: str) -> str:
    """Replace the last path segment with a placeholder.

    'event/duration/4 ms' -> 'event/duration/#', 'something' -> '#'
    """
    last_slash_index = tag.rfind(TAG_SEPARATOR)
    if last_slash_index == -1:
        return PLACEHOLDER
    return tag[: last_slash_index + 1] + PLACEHOLDER


def get_tag_slash_indices(tag: str) -> list[int]:
    return [index for index, character in enumerate(tag) if character == TAG_SEPARATOR]


def get_tag_name(tag: str) -> str:
    """Get the last path segment of a tag (works on original tags too)."""
    return tag.rsplit(TAG_SEPARATOR, 1)[-1]


def tag_exists_in_schema(tag: str, attributes: SchemaAttributes) -> bool:
    return attributes.tag_exists(tag)


def tag_takes_value(tag: str, attributes: SchemaAttributes) -> bool:
    """Whether the tag is a value under a value-taking schema node."""
    return attributes.takes_value(replace_tag_name_with_pound(tag))


def is_unit_class_tag(tag: str, attributes: SchemaAttributes) -> bool:
    return bool(attributes.unit_classes_for(replace_tag_name_with_pound(tag)))


def get_tag_unit_classes(tag: str, attributes: SchemaAttributes) -> list[str]:
    return list(attributes.unit_classes_for(replace_tag_name_with_pound(tag)))


def get_tag_unit_class_units(tag: str, attributes: SchemaAttributes) -> list[str]:
    """Legal units of every unit class the tag belongs to, in declaration order."""
    units: list[str] = []
    for unit_class in get_tag_unit_classes(tag, attributes):
        units.extend(attributes.units_for(unit_class))
    return units


def get_unit_class_default_unit(tag: str, attributes: SchemaAttributes) -> str:
    """Default unit for a unit-class tag.

    A default declared on the tag itself wins over the default of its
    first unit class. Returns '' for tags without a unit class.
    """
    pound_tag = replace_tag_name_with_pound(tag)
    unit_classes = attributes.unit_classes_for(pound_tag)
    if not unit_classes:
        return ""
    tag_default = attributes.default_unit_for_tag(pound_tag)
    if tag_default:
        return tag_default
    return attributes.default_unit_for_class(unit_classes[0]) or ""


def is_extension_allowed_tag(tag: str, attributes: SchemaAttributes) -> bool:
    """Whether any ancestor of the tag allows extension."""
    for slash_index in get_tag_slash_indices(tag):
        if attributes.allows_extension(tag[:slash_index]):
            return True
    return False
