"""Settings management for hedcheck.

Settings are read from a YAML file in the user config directory.
Environment variables override the file, and explicit arguments
override both.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from platformdirs import user_config_dir
from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

# Linux: ~/.config/hedcheck, macOS: ~/Library/Application Support/hedcheck
CONFIG_DIR = Path(user_config_dir("hedcheck", appauthor=False))
CONFIG_FILE = CONFIG_DIR / "config.yaml"

ENV_CHECK_FOR_WARNINGS = "HEDCHECK_CHECK_FOR_WARNINGS"
ENV_ALLOW_PLACEHOLDERS = "HEDCHECK_ALLOW_PLACEHOLDERS"
ENV_SCHEMA_ATTRIBUTES = "HEDCHECK_SCHEMA_ATTRIBUTES"

_TRUE_VALUES = ("true", "1", "yes", "on")
_FALSE_VALUES = ("false", "0", "no", "off")


class SettingsError(ValueError):
    """Raised when a settings file cannot be read or does not validate."""


class ValidatorSettings(BaseModel):
    """Validation settings."""

    check_for_warnings: bool = Field(default=False, description="Report warnings too")
    allow_placeholders: bool = Field(
        default=False, description="Accept '#' in place of a tag value"
    )
    schema_attributes_path: Path | None = Field(
        default=None, description="YAML/JSON file with schema attribute dictionaries"
    )


def _parse_bool(name: str, value: str) -> bool | None:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    logger.warning("Ignoring %s=%r: expected a boolean", name, value)
    return None


def apply_environment_overrides(settings: ValidatorSettings) -> ValidatorSettings:
    """Return a copy of the settings with environment variables applied."""
    updates: dict[str, object] = {}
    for env_name, field_name in (
        (ENV_CHECK_FOR_WARNINGS, "check_for_warnings"),
        (ENV_ALLOW_PLACEHOLDERS, "allow_placeholders"),
    ):
        env_value = os.environ.get(env_name)
        if env_value:
            parsed = _parse_bool(env_name, env_value)
            if parsed is not None:
                updates[field_name] = parsed

    schema_path = os.environ.get(ENV_SCHEMA_ATTRIBUTES)
    if schema_path:
        updates["schema_attributes_path"] = Path(schema_path)

    return settings.model_copy(update=updates)


def load_settings(path: Path | str | None = None) -> ValidatorSettings:
    """Load settings from file, then apply environment overrides.

    Args:
        path: Settings file (default: CONFIG_FILE). A missing file means defaults.

    Returns:
        ValidatorSettings

    Raises:
        SettingsError: If the file is not valid YAML or has invalid values
    """
    path = Path(path) if path is not None else CONFIG_FILE
    settings = ValidatorSettings()

    if path.exists():
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise SettingsError(f"Could not parse settings file {path}: {e}") from e
        if not isinstance(data, dict):
            raise SettingsError(f"Settings file {path} must contain a mapping")
        try:
            settings = ValidatorSettings(**data)
        except ValidationError as e:
            raise SettingsError(f"Invalid settings in {path}: {e}") from e
        logger.debug("Loaded settings from %s", path)

    return apply_environment_overrides(settings)


def save_settings(settings: ValidatorSettings, path: Path | str | None = None) -> None:
    """Save settings to a YAML file, creating its directory if needed."""
    path = Path(path) if path is not None else CONFIG_FILE
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(settings.model_dump(mode="json"), f, default_flow_style=False)


def get_effective_settings(
    path: Path | str | None = None,
    check_for_warnings: bool | None = None,
    allow_placeholders: bool | None = None,
    schema_attributes_path: Path | str | None = None,
) -> ValidatorSettings:
    """Get effective settings with explicit overrides applied.

    Args:
        path: Settings file to start from
        check_for_warnings: Override warning reporting
        allow_placeholders: Override placeholder acceptance
        schema_attributes_path: Override the schema attributes file

    Returns:
        ValidatorSettings with priority: arguments > environment > file > defaults
    """
    settings = load_settings(path)

    updates: dict[str, object] = {}
    if check_for_warnings is not None:
        updates["check_for_warnings"] = check_for_warnings
    if allow_placeholders is not None:
        updates["allow_placeholders"] = allow_placeholders
    if schema_attributes_path is not None:
        updates["schema_attributes_path"] = Path(schema_attributes_path)

    return settings.model_copy(update=updates)
