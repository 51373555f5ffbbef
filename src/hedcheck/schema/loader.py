"""Loading pre-built schema attribute dictionaries from disk.

The files hold the dictionaries already extracted from a HED schema, as
YAML or JSON (JSON is read through the YAML parser).
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

import yaml

from hedcheck.schema.attributes import SchemaAttributes, SchemaAttributesError

logger = logging.getLogger(__name__)


def load_schema_attributes(path: Path | str) -> SchemaAttributes:
    """Load schema attribute dictionaries from a YAML or JSON file.

    Args:
        path: Path to the dictionaries file

    Returns:
        SchemaAttributes built from the file

    Raises:
        FileNotFoundError: If the file does not exist
        SchemaAttributesError: If the file is not valid YAML/JSON or the
            dictionaries do not validate
    """
    path = Path(path)
    with open(path, encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise SchemaAttributesError(f"Could not parse {path}: {e}") from e

    if not isinstance(data, dict):
        raise SchemaAttributesError(
            f"Expected a mapping of attribute dictionaries in {path}, got {type(data).__name__}"
        )

    attributes = SchemaAttributes.from_dict(data)
    logger.debug("Loaded schema attributes %r from %s", attributes, path)
    return attributes


@lru_cache(maxsize=8)
def get_schema_attributes(path: str) -> SchemaAttributes:
    """Load schema attributes once per path and reuse them.

    SchemaAttributes is immutable, so one instance can serve every
    validation in the process.
    """
    return load_schema_attributes(path)
