"""Semantic rules applied to a parsed HED string.

Each check is a pure function over parsed tags (and the schema
attribute lookups) returning the issues it found.
"""

from __future__ import annotations

from collections.abc import Sequence

from hedcheck.schema.attributes import SchemaAttributes
from hedcheck.utils.hed_tags import (
    TAG_SEPARATOR,
    get_tag_name,
    get_tag_unit_class_units,
    get_tag_unit_classes,
    get_unit_class_default_unit,
    is_extension_allowed_tag,
    is_unit_class_tag,
    replace_tag_name_with_pound,
    tag_exists_in_schema,
    tag_takes_value,
)
from hedcheck.utils.strings import (
    PLACEHOLDER,
    capitalize_string,
    is_camel_case,
    is_clock_face_time,
    is_date_time,
    validate_value,
)
from hedcheck.validation.issues import generate_issue
from hedcheck.validation.string_parser import (
    TILDE,
    HedToken,
    ParsedHedGroup,
    ParsedHedString,
    ParsedHedTag,
)
from hedcheck.validation.units import validate_units
from hedcheck.validation.validation_types import Issue

# Tildes split a group into at most three parts
MAX_GROUP_TILDES = 2

DATE_TIME_UNIT_CLASS = "dateTime"
CLOCK_TIME_UNIT_CLASS = "clockTime"
TIME_UNIT_CLASS = "time"


def check_if_tag_is_valid(
    tag: ParsedHedTag,
    previous_tag: ParsedHedTag,
    attributes: SchemaAttributes,
    allow_placeholders: bool = False,
    check_for_warnings: bool = False,
) -> list[Issue]:
    """Check that a tag is in the schema or is an allowed extension.

    Args:
        tag: The tag to check
        previous_tag: The tag validated just before this one
        attributes: Schema attribute lookups
        allow_placeholders: Accept '#' in place of a value
        check_for_warnings: Report allowed extensions as warnings

    Returns:
        List of issues (at most one)
    """
    formatted_tag = tag.formatted_tag
    if (
        tag_exists_in_schema(formatted_tag, attributes)
        or tag_takes_value(formatted_tag, attributes)
        or formatted_tag == TILDE
    ):
        return []

    if allow_placeholders and PLACEHOLDER in formatted_tag:
        if tag_takes_value(replace_tag_name_with_pound(formatted_tag), attributes):
            return []
        return [generate_issue("invalidPlaceholder", tag=tag.original_tag)]

    is_extension_allowed = is_extension_allowed_tag(formatted_tag, attributes)
    if not is_extension_allowed and tag_takes_value(previous_tag.formatted_tag, attributes):
        # The previous tag's value probably contained a comma
        return [
            generate_issue(
                "extraCommaOrInvalid", tag=tag.original_tag, previousTag=previous_tag.original_tag
            )
        ]
    if not is_extension_allowed:
        return [generate_issue("invalidTag", tag=tag.original_tag)]
    if check_for_warnings:
        return [generate_issue("extension", tag=tag.original_tag)]
    return []


def check_if_tag_unit_class_units_exist(
    tag: ParsedHedTag, attributes: SchemaAttributes, allow_placeholders: bool = False
) -> list[Issue]:
    """Warn when a unit-class tag's value has no unit, so the default applies."""
    formatted_tag = tag.formatted_tag
    if not is_unit_class_tag(formatted_tag, attributes):
        return []
    tag_unit_value = get_tag_name(formatted_tag)
    if validate_value(tag_unit_value, allow_placeholders):
        default_unit = get_unit_class_default_unit(formatted_tag, attributes)
        return [
            generate_issue("unitClassDefaultUsed", tag=tag.original_tag, defaultUnit=default_unit)
        ]
    return []


def check_if_tag_unit_class_units_are_valid(
    tag: ParsedHedTag, attributes: SchemaAttributes, allow_placeholders: bool = False
) -> list[Issue]:
    """Check that a unit-class tag's value is a number with a legal unit.

    Date-time values in a dateTime class and HH:MM[:SS] values in a
    clockTime class (or the legacy time class, for schemas without
    clockTime) are accepted as they are.
    """
    formatted_tag = tag.formatted_tag
    if tag_exists_in_schema(formatted_tag, attributes) or not is_unit_class_tag(
        formatted_tag, attributes
    ):
        return []

    tag_unit_classes = get_tag_unit_classes(formatted_tag, attributes)
    original_tag_unit_value = get_tag_name(tag.canonical_tag)
    formatted_tag_unit_value = get_tag_name(formatted_tag)
    tag_unit_class_units = get_tag_unit_class_units(formatted_tag, attributes)

    if (
        attributes.has_unit_class(DATE_TIME_UNIT_CLASS)
        and DATE_TIME_UNIT_CLASS in tag_unit_classes
        and is_date_time(formatted_tag_unit_value)
    ):
        return []
    clock_time_unit_class = (
        CLOCK_TIME_UNIT_CLASS
        if attributes.has_unit_class(CLOCK_TIME_UNIT_CLASS)
        else TIME_UNIT_CLASS
    )
    if (
        attributes.has_unit_class(clock_time_unit_class)
        and clock_time_unit_class in tag_unit_classes
        and is_clock_face_time(formatted_tag_unit_value)
    ):
        return []

    value = validate_units(
        original_tag_unit_value, formatted_tag_unit_value, tag_unit_class_units, attributes
    )
    if validate_value(value, allow_placeholders):
        return []
    return [
        generate_issue(
            "unitClassInvalidUnit",
            tag=tag.original_tag,
            unitClassUnits=",".join(sorted(tag_unit_class_units)),
        )
    ]


def check_capitalization(
    tag: ParsedHedTag, attributes: SchemaAttributes | None = None
) -> list[Issue]:
    """Warn when a tag level is neither capitalized nor camel case.

    The value of a value-taking tag is free text and is not checked.
    Only one warning is reported per tag.
    """
    tag_names = tag.original_tag.split(TAG_SEPARATOR)
    if attributes is not None and tag_takes_value(tag.formatted_tag, attributes):
        tag_names.pop()
    for tag_name in tag_names:
        if tag_name != capitalize_string(tag_name) and not is_camel_case(tag_name):
            return [generate_issue("capitalization", tag=tag.original_tag)]
    return []


def check_if_tag_requires_child(tag: ParsedHedTag, attributes: SchemaAttributes) -> list[Issue]:
    if attributes.requires_child(tag.formatted_tag):
        return [generate_issue("childRequired", tag=tag.original_tag)]
    return []


def check_for_duplicate_tags(tag_list: Sequence[HedToken]) -> list[Issue]:
    """Report tags repeated within one level.

    A nested group counts as a single member of the level it sits in.
    Each pair of duplicates is reported once, whatever their order.
    """
    issues: list[Issue] = []
    duplicate_indices: set[int] = set()
    for i, first in enumerate(tag_list):
        if first.formatted_tag == TILDE or i in duplicate_indices:
            continue
        for j, second in enumerate(tag_list):
            if i == j or j in duplicate_indices:
                continue
            if first.formatted_tag != second.formatted_tag:
                continue
            duplicate_indices.update((i, j))
            if first.original_tag.lower() == second.original_tag.lower():
                issues.append(generate_issue("duplicateTag", tag=first.original_tag))
            else:
                issues.append(generate_issue("duplicateTag", tag=first.canonical_tag))
            break
    return issues


def check_for_multiple_unique_tags(
    parsed_string: ParsedHedString, attributes: SchemaAttributes
) -> list[Issue]:
    """Report unique tag prefixes used more than once anywhere in the string."""
    tag_list: list[ParsedHedTag] = list(parsed_string.top_level_tags)
    for group in parsed_string.tag_groups:
        tag_list.extend(group.tags)

    issues: list[Issue] = []
    for unique_tag_prefix in attributes.unique_prefixes:
        matches = [tag for tag in tag_list if tag.formatted_tag.startswith(unique_tag_prefix)]
        if len(matches) > 1:
            issues.append(generate_issue("multipleUniqueTags", tag=unique_tag_prefix))
    return issues


def check_for_required_tags(
    parsed_string: ParsedHedString, attributes: SchemaAttributes
) -> list[Issue]:
    """Report required tag prefixes missing from the top level."""
    issues: list[Issue] = []
    for required_tag_prefix in attributes.required_prefixes:
        if not any(
            tag.formatted_tag.startswith(required_tag_prefix)
            for tag in parsed_string.top_level_tags
        ):
            issues.append(generate_issue("requiredPrefixMissing", tagPrefix=required_tag_prefix))
    return issues


def check_number_of_group_tildes(group: ParsedHedGroup) -> list[Issue]:
    if group.tilde_count > MAX_GROUP_TILDES:
        return [generate_issue("tooManyTildes", tagGroup=group.original_tag)]
    return []
