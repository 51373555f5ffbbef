"""hedcheck: parse and validate HED annotation strings."""

from hedcheck.config import ValidatorSettings, load_settings
from hedcheck.schema import SchemaAttributes, load_schema_attributes
from hedcheck.validation import (
    HedValidator,
    Issue,
    ValidationResult,
    parse_hed_string,
    validate_hed_event,
    validate_hed_string,
)
from hedcheck.version import __version__

__all__ = [
    "HedValidator",
    "Issue",
    "SchemaAttributes",
    "ValidationResult",
    "ValidatorSettings",
    "__version__",
    "load_schema_attributes",
    "load_settings",
    "parse_hed_string",
    "validate_hed_event",
    "validate_hed_string",
]
