"""HED string and event validation.

Validation runs in stages:

1. Character substitution (NUL -> space), always reported
2. Structural checks on the whole string (fatal)
3. Parsing into tags and groups (fatal)
4. Semantic checks over the parsed string (accumulated)

Without schema attributes only syntax and capitalization are checked.
"""

from __future__ import annotations

import logging

from hedcheck.config import ValidatorSettings, get_effective_settings
from hedcheck.schema.attributes import SchemaAttributes
from hedcheck.schema.loader import get_schema_attributes
from hedcheck.validation.rules import (
    check_capitalization,
    check_for_duplicate_tags,
    check_for_multiple_unique_tags,
    check_for_required_tags,
    check_if_tag_is_valid,
    check_if_tag_requires_child,
    check_if_tag_unit_class_units_are_valid,
    check_if_tag_unit_class_units_exist,
    check_number_of_group_tildes,
)
from hedcheck.validation.string_parser import ParsedHedString, ParsedHedTag, parse_hed_string
from hedcheck.validation.syntax import validate_full_hed_string
from hedcheck.validation.validation_types import Issue, ValidationResult

logger = logging.getLogger(__name__)


def validate_individual_hed_tag(
    tag: ParsedHedTag,
    previous_tag: ParsedHedTag,
    attributes: SchemaAttributes | None,
    check_for_warnings: bool,
    allow_placeholders: bool,
) -> list[Issue]:
    issues: list[Issue] = []
    if attributes is not None:
        issues += check_if_tag_is_valid(
            tag, previous_tag, attributes, allow_placeholders, check_for_warnings
        )
        issues += check_if_tag_unit_class_units_are_valid(tag, attributes, allow_placeholders)
        issues += check_if_tag_requires_child(tag, attributes)
        if check_for_warnings:
            issues += check_if_tag_unit_class_units_exist(tag, attributes, allow_placeholders)
    if check_for_warnings:
        issues += check_capitalization(tag, attributes)
    return issues


def validate_individual_hed_tags(
    parsed_string: ParsedHedString,
    attributes: SchemaAttributes | None,
    check_for_warnings: bool = False,
    allow_placeholders: bool = False,
) -> list[Issue]:
    """Validate every tag of a parsed string on its own.

    Tags are visited top-level first, then group members depth-first;
    each tag is checked with the tag visited before it.
    """
    issues: list[Issue] = []
    previous_tag = ParsedHedTag("", (0, 0))
    for tag in parsed_string.tags:
        issues += validate_individual_hed_tag(
            tag, previous_tag, attributes, check_for_warnings, allow_placeholders
        )
        previous_tag = tag
    return issues


def validate_hed_tag_levels(
    parsed_string: ParsedHedString, attributes: SchemaAttributes | None
) -> list[Issue]:
    """Check for duplicates at each level and for repeated unique tags."""
    issues: list[Issue] = []
    for group in parsed_string.tag_groups:
        issues += check_for_duplicate_tags(group.children)
    issues += check_for_duplicate_tags(parsed_string.top_level_tags)
    if attributes is not None:
        issues += check_for_multiple_unique_tags(parsed_string, attributes)
    return issues


def validate_attribute_groups(parsed_string: ParsedHedString) -> list[Issue]:
    """Check each attribute group for repeated attributes."""
    issues: list[Issue] = []
    for group in parsed_string.tag_groups:
        if group.is_attribute_group:
            issues += check_for_duplicate_tags(group.children)
    return issues


def validate_hed_tag_groups(parsed_string: ParsedHedString) -> list[Issue]:
    issues: list[Issue] = []
    for group in parsed_string.tag_groups:
        issues += check_number_of_group_tildes(group)
    return issues


def validate_top_level_tags(
    parsed_string: ParsedHedString,
    attributes: SchemaAttributes | None,
    check_for_warnings: bool = False,
) -> list[Issue]:
    if attributes is not None and check_for_warnings:
        return check_for_required_tags(parsed_string, attributes)
    return []


def initially_validate_hed_string(
    hed_string: str,
) -> tuple[ParsedHedString | None, list[Issue]]:
    """Run the fatal checks and parse the string.

    Returns:
        Tuple of (parsed string or None if a fatal issue was found, issues).
        Substitution issues are always included, after any fatal issues.
    """
    fixed_hed_string, substitution_issues, full_string_issues = validate_full_hed_string(
        hed_string
    )
    if full_string_issues:
        logger.debug("HED string failed structural checks: %d issues", len(full_string_issues))
        return None, full_string_issues + substitution_issues

    parsed_string, parse_issues = parse_hed_string(fixed_hed_string)
    if parse_issues:
        logger.debug("HED string failed to parse: %d issues", len(parse_issues))
        return None, parse_issues + substitution_issues

    return parsed_string, substitution_issues


def validate_hed_string(
    hed_string: str,
    attributes: SchemaAttributes | None = None,
    check_for_warnings: bool = False,
    allow_placeholders: bool = False,
) -> ValidationResult:
    """Validate a HED string.

    Group-level duplicate and unique tag checks are skipped (except for
    repeated attributes inside an attribute group), as are required tags.

    Args:
        hed_string: The HED string to validate
        attributes: Schema attribute lookups (None for syntax-only checks)
        check_for_warnings: Include warnings in the result
        allow_placeholders: Accept '#' in place of a tag value

    Returns:
        ValidationResult; valid only when no issue was found
    """
    parsed_string, issues = initially_validate_hed_string(hed_string)
    if parsed_string is None:
        return ValidationResult.from_issues(issues)

    issues += validate_individual_hed_tags(
        parsed_string, attributes, check_for_warnings, allow_placeholders
    )
    issues += validate_attribute_groups(parsed_string)
    issues += validate_hed_tag_groups(parsed_string)
    logger.debug("Validated HED string: %d issues", len(issues))
    return ValidationResult.from_issues(issues)


def validate_hed_event(
    hed_string: str,
    attributes: SchemaAttributes | None = None,
    check_for_warnings: bool = False,
) -> ValidationResult:
    """Validate a full HED event string.

    Adds required tag checks (with warnings), duplicate checks at every
    level and unique tag checks to those of validate_hed_string.

    Args:
        hed_string: The HED event string to validate
        attributes: Schema attribute lookups (None for syntax-only checks)
        check_for_warnings: Include warnings in the result

    Returns:
        ValidationResult; valid only when no issue was found
    """
    parsed_string, issues = initially_validate_hed_string(hed_string)
    if parsed_string is None:
        return ValidationResult.from_issues(issues)

    issues += validate_top_level_tags(parsed_string, attributes, check_for_warnings)
    issues += validate_individual_hed_tags(parsed_string, attributes, check_for_warnings)
    issues += validate_hed_tag_levels(parsed_string, attributes)
    issues += validate_hed_tag_groups(parsed_string)
    logger.debug("Validated HED event: %d issues", len(issues))
    return ValidationResult.from_issues(issues)


class HedValidator:
    """Validates HED strings against one schema with fixed settings.

    Example:
        >>> validator = HedValidator.from_settings()
        >>> validator.validate_string("Event/Label/Test").is_valid
    """

    def __init__(
        self,
        attributes: SchemaAttributes | None = None,
        settings: ValidatorSettings | None = None,
    ) -> None:
        """Initialize the validator.

        Args:
            attributes: Schema attribute lookups (None for syntax-only checks)
            settings: Validation settings (default: ValidatorSettings())
        """
        self.attributes = attributes
        self.settings = settings or ValidatorSettings()

    @classmethod
    def from_settings(cls, settings: ValidatorSettings | None = None) -> HedValidator:
        """Build a validator, loading schema attributes from the settings' path.

        Args:
            settings: Validation settings (default: effective settings from the
                settings file and environment)

        Raises:
            FileNotFoundError: If the schema attributes file does not exist
            SchemaAttributesError: If the schema attributes file is invalid
            SettingsError: If the settings file is invalid
        """
        settings = settings or get_effective_settings()
        attributes = None
        if settings.schema_attributes_path is not None:
            attributes = get_schema_attributes(str(settings.schema_attributes_path))
        return cls(attributes, settings)

    def validate_string(self, hed_string: str) -> ValidationResult:
        return validate_hed_string(
            hed_string,
            self.attributes,
            check_for_warnings=self.settings.check_for_warnings,
            allow_placeholders=self.settings.allow_placeholders,
        )

    def validate_event(self, hed_string: str) -> ValidationResult:
        return validate_hed_event(
            hed_string,
            self.attributes,
            check_for_warnings=self.settings.check_for_warnings,
        )
