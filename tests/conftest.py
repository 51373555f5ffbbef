"""Shared fixtures for hedcheck tests."""

from pathlib import Path

import pytest

from hedcheck.schema import SchemaAttributes, load_schema_attributes

DATA_DIR = Path(__file__).parent / "data"
SCHEMA_ATTRIBUTES_FILE = DATA_DIR / "hed_attributes.yaml"


@pytest.fixture(scope="session")
def schema_attributes_path() -> Path:
    """Path to the HED 7.1.1 subset dictionaries."""
    return SCHEMA_ATTRIBUTES_FILE


@pytest.fixture(scope="session")
def attributes(schema_attributes_path) -> SchemaAttributes:
    """Schema attributes shared by every test (they are immutable)."""
    return load_schema_attributes(schema_attributes_path)
