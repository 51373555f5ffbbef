"""HED schema attribute dictionaries consumed by the validator."""

from hedcheck.schema.attributes import (
    SchemaAttributes,
    SchemaAttributesData,
    SchemaAttributesError,
)
from hedcheck.schema.loader import get_schema_attributes, load_schema_attributes

__all__ = [
    "SchemaAttributes",
    "SchemaAttributesData",
    "SchemaAttributesError",
    "get_schema_attributes",
    "load_schema_attributes",
]
