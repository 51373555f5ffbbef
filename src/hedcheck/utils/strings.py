"""String predicates used by the HED validator."""

from __future__ import annotations

import re
from datetime import datetime

PLACEHOLDER = "#"

# Integer, decimal or scientific notation, optionally signed
_NUMBER_PATTERN = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:e[+-]?\d+)?$", re.IGNORECASE)
_CLOCK_FACE_TIME_PATTERN = re.compile(r"^(?:[01]?\d|2[0-3]):[0-5]\d(?::[0-5]\d)?$")
_DATE_TIME_PATTERN = re.compile(
    r"^\d{4}-\d{2}-\d{2}(?:t\d{2}:\d{2}(?::\d{2}(?:\.\d+)?)?)?$", re.IGNORECASE
)

# An upper-case run followed by lower-case letters, e.g. "DoubleEvent"
_CAMEL_CASE_PATTERN = re.compile(r"([A-Z-]+\s*[a-z-]*)+")


def string_is_empty(string: str) -> bool:
    """Whether the string is empty or only whitespace."""
    return not string.strip()


def get_character_count(string: str, character: str) -> int:
    return string.count(character)


def capitalize_string(string: str) -> str:
    """Upper-case the first character, leaving the rest untouched."""
    return string[:1].upper() + string[1:]


def is_camel_case(string: str) -> bool:
    return _CAMEL_CASE_PATTERN.search(string) is not None


def validate_value(value: str, allow_placeholders: bool = False) -> bool:
    """Whether a value is a plain number, or a placeholder when allowed.

    Args:
        value: The value with any unit already removed
        allow_placeholders: Accept a lone '#' as a value

    Returns:
        True for integers, decimals and scientific notation (and '#')
    """
    if allow_placeholders and value == PLACEHOLDER:
        return True
    return _NUMBER_PATTERN.match(value) is not None


def is_clock_face_time(value: str) -> bool:
    """Whether the value is a 24-hour HH:MM or HH:MM:SS time."""
    return _CLOCK_FACE_TIME_PATTERN.match(value) is not None


def is_date_time(value: str) -> bool:
    """Whether the value is an ISO 8601 date or date-time naming a real instant."""
    if _DATE_TIME_PATTERN.match(value) is None:
        return False
    try:
        datetime.fromisoformat(value.upper())
    except ValueError:
        return False
    return True
