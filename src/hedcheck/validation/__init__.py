"""HED string parsing and validation.

This package provides:

- parse_hed_string: Split a HED string into tags, groups and top-level tags
- validate_hed_string / validate_hed_event: Validate against schema attributes
- HedValidator: Validator bound to one schema and a set of settings
- Issue / ValidationResult: What validation reports
"""

from hedcheck.validation.issues import ISSUE_DEFINITIONS, WARNING_CODES, generate_issue
from hedcheck.validation.string_parser import (
    ParsedHedGroup,
    ParsedHedString,
    ParsedHedTag,
    format_hed_tag,
    parse_hed_string,
    split_hed_string,
)
from hedcheck.validation.validation_types import Issue, ValidationResult
from hedcheck.validation.validator import HedValidator, validate_hed_event, validate_hed_string

__all__ = [
    # Parsing
    "ParsedHedGroup",
    "ParsedHedString",
    "ParsedHedTag",
    "format_hed_tag",
    "parse_hed_string",
    "split_hed_string",
    # Validation
    "HedValidator",
    "validate_hed_event",
    "validate_hed_string",
    # Issues
    "ISSUE_DEFINITIONS",
    "WARNING_CODES",
    "Issue",
    "ValidationResult",
    "generate_issue",
]
