"""Whole-string structural checks run before a HED string is parsed.

Any issue found here means the group structure cannot be trusted, so
the validator stops after these checks fail.
"""

from __future__ import annotations

from hedcheck.utils.strings import get_character_count, string_is_empty
from hedcheck.validation.issues import generate_issue
from hedcheck.validation.string_parser import (
    CLOSING_ATTRIBUTE_GROUP_CHARACTER,
    CLOSING_GROUP_CHARACTER,
    DELIMITERS,
    OPENING_ATTRIBUTE_GROUP_CHARACTER,
    OPENING_GROUP_CHARACTER,
)
from hedcheck.validation.validation_types import Issue

# Character -> (name used in issues, replacement)
ILLEGAL_CHARACTER_SUBSTITUTIONS: dict[str, tuple[str, str]] = {
    "\0": ("ASCII NUL", " "),
}


def substitute_characters(hed_string: str) -> tuple[str, list[Issue]]:
    """Replace illegal control characters, reporting each one.

    Returns:
        Tuple of (fixed string, substitution issues)
    """
    issues: list[Issue] = []
    fixed_characters = []
    for index, character in enumerate(hed_string):
        if character in ILLEGAL_CHARACTER_SUBSTITUTIONS:
            name, replacement = ILLEGAL_CHARACTER_SUBSTITUTIONS[character]
            issues.append(
                generate_issue("invalidCharacter", character=name, index=index, string=hed_string)
            )
            fixed_characters.append(replacement)
        else:
            fixed_characters.append(character)
    return "".join(fixed_characters), issues


def count_tag_group_parentheses(hed_string: str) -> list[Issue]:
    opening = get_character_count(hed_string, OPENING_GROUP_CHARACTER)
    closing = get_character_count(hed_string, CLOSING_GROUP_CHARACTER)
    if opening != closing:
        return [generate_issue("parentheses", opening=opening, closing=closing)]
    return []


def count_attribute_group_braces(hed_string: str) -> list[Issue]:
    opening = get_character_count(hed_string, OPENING_ATTRIBUTE_GROUP_CHARACTER)
    closing = get_character_count(hed_string, CLOSING_ATTRIBUTE_GROUP_CHARACTER)
    if opening != closing:
        return [generate_issue("attributeGroupBraces", opening=opening, closing=closing)]
    return []


def _is_comma_missing_after_closing_parenthesis(
    last_non_empty_character: str, current_character: str
) -> bool:
    return last_non_empty_character == CLOSING_GROUP_CHARACTER and not (
        current_character in DELIMITERS or current_character == CLOSING_GROUP_CHARACTER
    )


def find_delimiter_issues_in_hed_string(hed_string: str) -> list[Issue]:
    """Find extra delimiters and missing commas around groups.

    - a comma or tilde with nothing before it -> extraDelimiter
    - a '(' directly following a tag -> invalidTag naming that tag
    - anything but a delimiter or ')' after ')' -> commaMissing (stops the scan)
    - a string ending in a delimiter -> extraDelimiter
    """
    issues: list[Issue] = []
    last_non_empty_valid_character = ""
    last_non_empty_valid_index = 0
    current_tag = ""
    for index, current_character in enumerate(hed_string):
        current_tag += current_character
        if string_is_empty(current_character):
            continue
        if current_character in DELIMITERS:
            if current_tag.strip() == current_character:
                issues.append(
                    generate_issue(
                        "extraDelimiter",
                        character=current_character,
                        index=index,
                        string=hed_string,
                    )
                )
                current_tag = ""
                continue
            current_tag = ""
        elif current_character == OPENING_GROUP_CHARACTER:
            if current_tag.strip() == OPENING_GROUP_CHARACTER:
                current_tag = ""
            else:
                issues.append(generate_issue("invalidTag", tag=current_tag))
        elif _is_comma_missing_after_closing_parenthesis(
            last_non_empty_valid_character, current_character
        ):
            issues.append(generate_issue("commaMissing", tag=current_tag[:-1]))
            break
        last_non_empty_valid_character = current_character
        last_non_empty_valid_index = index

    if last_non_empty_valid_character in DELIMITERS:
        issues.append(
            generate_issue(
                "extraDelimiter",
                character=last_non_empty_valid_character,
                index=last_non_empty_valid_index,
                string=hed_string,
            )
        )
    return issues


def validate_full_hed_string(hed_string: str) -> tuple[str, list[Issue], list[Issue]]:
    """Run character substitution and every structural check.

    Args:
        hed_string: The raw HED string

    Returns:
        Tuple of (fixed string, substitution issues, structural issues)
    """
    fixed_hed_string, substitution_issues = substitute_characters(hed_string)
    issues = (
        count_tag_group_parentheses(fixed_hed_string)
        + count_attribute_group_braces(fixed_hed_string)
        + find_delimiter_issues_in_hed_string(fixed_hed_string)
    )
    return fixed_hed_string, substitution_issues, issues
