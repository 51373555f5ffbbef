"""Read-only HED schema attribute dictionaries.

The validator never reads a schema document itself. It consumes the
attribute dictionaries built from one (tag existence, value-taking tags,
unit classes, SI modifiers, ...) through the typed lookups of
SchemaAttributes.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator


class SchemaAttributesError(ValueError):
    """Raised when schema attribute dictionaries are malformed."""


def _lowercase_keys(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {str(key).lower(): item for key, item in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [str(item).lower() for item in value]
    return value


class SchemaAttributesData(BaseModel):
    """Raw attribute dictionaries of one schema version.

    Tag keys are lowercased on load. Unit names keep their case because
    unit symbols are matched case-sensitively.
    """

    version: str | None = Field(default=None, description="Schema version")
    tags: list[str] = Field(default_factory=list, description="Every tag in long form")
    takes_value: list[str] = Field(
        default_factory=list, description="Value-taking tags, ending in '#'"
    )
    unit_classes: dict[str, list[str]] = Field(
        default_factory=dict, description="Value-taking tag -> unit classes"
    )
    default_units: dict[str, str] = Field(
        default_factory=dict, description="Value-taking tag -> default unit"
    )
    unit_class_units: dict[str, list[str]] = Field(
        default_factory=dict, description="Unit class -> legal units"
    )
    unit_class_default_units: dict[str, str] = Field(
        default_factory=dict, description="Unit class -> default unit"
    )
    unique: list[str] = Field(default_factory=list, description="Unique tag prefixes")
    required: list[str] = Field(default_factory=list, description="Required tag prefixes")
    require_child: list[str] = Field(default_factory=list, description="Tags requiring a child")
    extension_allowed: list[str] = Field(
        default_factory=list, description="Tags allowing arbitrary children"
    )
    unit_symbols: list[str] = Field(default_factory=list, description="Symbol-type units")
    si_units: list[str] = Field(default_factory=list, description="Units accepting SI modifiers")
    si_unit_modifiers: list[str] = Field(
        default_factory=list, description="Word SI modifiers (e.g., kilo)"
    )
    si_unit_symbol_modifiers: list[str] = Field(
        default_factory=list, description="Symbol SI modifiers (e.g., k)"
    )

    @field_validator(
        "tags",
        "takes_value",
        "unit_classes",
        "default_units",
        "unique",
        "required",
        "require_child",
        "extension_allowed",
        mode="before",
    )
    @classmethod
    def _normalize_tag_keys(cls, value: Any) -> Any:
        return _lowercase_keys(value)


class SchemaAttributes:
    """Typed read-only lookups over one schema's attribute dictionaries.

    Built once per schema version and shared between validations. All
    tag arguments are expected in formatted (lowercase) form.

    Example:
        >>> attributes = SchemaAttributes.from_dict({"tags": ["Event", "Event/Label"]})
        >>> attributes.tag_exists("event/label")
        True
    """

    def __init__(self, data: SchemaAttributesData) -> None:
        self.version = data.version
        self._tags = frozenset(data.tags)
        self._takes_value = frozenset(data.takes_value)
        self._unit_classes = MappingProxyType(
            {tag: tuple(classes) for tag, classes in data.unit_classes.items()}
        )
        self._default_units = MappingProxyType(dict(data.default_units))
        self._unit_class_units = MappingProxyType(
            {unit_class: tuple(units) for unit_class, units in data.unit_class_units.items()}
        )
        self._unit_class_default_units = MappingProxyType(dict(data.unit_class_default_units))
        self._unique = tuple(dict.fromkeys(data.unique))
        self._required = tuple(dict.fromkeys(data.required))
        self._require_child = frozenset(data.require_child)
        self._extension_allowed = frozenset(data.extension_allowed)
        self._unit_symbols = frozenset(data.unit_symbols)
        self._si_units = frozenset(data.si_units)
        self._si_unit_modifiers = tuple(data.si_unit_modifiers)
        self._si_unit_symbol_modifiers = tuple(data.si_unit_symbol_modifiers)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SchemaAttributes:
        """Build the lookups from plain dictionaries.

        Args:
            data: Mapping of attribute kind to its table

        Returns:
            SchemaAttributes instance

        Raises:
            SchemaAttributesError: If the dictionaries do not validate
        """
        try:
            return cls(SchemaAttributesData.model_validate(dict(data)))
        except ValidationError as e:
            raise SchemaAttributesError(f"Invalid schema attribute dictionaries: {e}") from e

    def __repr__(self) -> str:
        return f"SchemaAttributes(version={self.version!r}, tags={len(self._tags)})"

    # Tags

    def tag_exists(self, formatted_tag: str) -> bool:
        """Whether the tag is a literal schema entry."""
        return formatted_tag in self._tags

    def takes_value(self, pound_tag: str) -> bool:
        """Whether the '#'-terminated tag is a value-taking schema node."""
        return pound_tag in self._takes_value

    def requires_child(self, formatted_tag: str) -> bool:
        return formatted_tag in self._require_child

    def allows_extension(self, formatted_tag: str) -> bool:
        return formatted_tag in self._extension_allowed

    @property
    def unique_prefixes(self) -> tuple[str, ...]:
        return self._unique

    @property
    def required_prefixes(self) -> tuple[str, ...]:
        return self._required

    # Units

    def unit_classes_for(self, pound_tag: str) -> tuple[str, ...]:
        """Unit classes declared by a value-taking tag (empty if none)."""
        return self._unit_classes.get(pound_tag, ())

    def has_unit_class(self, unit_class: str) -> bool:
        """Whether the schema defines the unit class at all."""
        return unit_class in self._unit_class_units

    def units_for(self, unit_class: str) -> tuple[str, ...]:
        return self._unit_class_units.get(unit_class, ())

    def default_unit_for_tag(self, pound_tag: str) -> str | None:
        return self._default_units.get(pound_tag)

    def default_unit_for_class(self, unit_class: str) -> str | None:
        return self._unit_class_default_units.get(unit_class)

    def is_unit_symbol(self, unit: str) -> bool:
        return unit in self._unit_symbols

    def is_si_unit(self, unit: str) -> bool:
        return unit in self._si_units

    def si_modifiers_for(self, unit: str) -> tuple[str, ...]:
        """SI magnitude modifiers applicable to a unit.

        Symbol units take symbol modifiers ("k"), word units take word
        modifiers ("kilo"). Non-SI units take none.
        """
        if not self.is_si_unit(unit):
            return ()
        if self.is_unit_symbol(unit):
            return self._si_unit_symbol_modifiers
        return self._si_unit_modifiers

