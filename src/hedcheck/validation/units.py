"""Unit resolution for unit-class tag values.

Strips a legal unit (singular, plural or SI-modified) from the value of
a unit-class tag so the remainder can be checked as a number.
"""

from __future__ import annotations

from functools import lru_cache
from typing import NamedTuple

import inflect

from hedcheck.schema.attributes import SchemaAttributes

# Units whose plural is the singular
UNCOUNTABLE_UNITS = frozenset({"hertz"})

_inflect_engine = inflect.engine()


class UnitCandidate(NamedTuple):
    """One accepted spelling of a unit."""

    spelling: str
    is_symbol: bool


@lru_cache(maxsize=256)
def pluralize_unit(unit: str) -> str:
    """Plural of a word unit ('second' -> 'seconds', 'hertz' -> 'hertz')."""
    if unit.lower() in UNCOUNTABLE_UNITS:
        return unit
    return _inflect_engine.plural_noun(unit) or unit


def get_unit_candidates(units: list[str], attributes: SchemaAttributes) -> list[UnitCandidate]:
    """Every accepted spelling of the given units, longest first.

    Symbol units ('Hz', 'ms') keep their case and take symbol SI
    modifiers. Word units ('hertz', 'milliseconds') are lowercased and
    also accepted in plural form.

    Args:
        units: Legal units of the tag's unit classes
        attributes: Schema attribute lookups

    Returns:
        Candidates sorted by descending spelling length
    """
    candidates: dict[UnitCandidate, None] = {}
    for unit in units:
        is_symbol = attributes.is_unit_symbol(unit)
        if is_symbol:
            spellings = [unit]
        else:
            spellings = [unit.lower(), pluralize_unit(unit).lower()]
        modified_spellings = [
            (modifier if is_symbol else modifier.lower()) + spelling
            for modifier in attributes.si_modifiers_for(unit)
            for spelling in spellings
        ]
        for spelling in spellings + modified_spellings:
            candidates[UnitCandidate(spelling, is_symbol)] = None
    return sorted(candidates, key=lambda candidate: len(candidate.spelling), reverse=True)


def validate_units(
    original_value: str,
    formatted_value: str,
    units: list[str],
    attributes: SchemaAttributes,
) -> str:
    """Strip a legal unit from a tag value.

    The longest matching spelling wins, so '3 second' with units
    ['s', 'second'] yields '3'. A unit may precede ('$10') or follow
    ('10 ms') the number.

    Args:
        original_value: Value as written (symbols are matched against it)
        formatted_value: Lowercased value (word units are matched against it)
        units: Legal units of the tag's unit classes
        attributes: Schema attribute lookups

    Returns:
        The value without its unit, or original_value if no unit matched
    """
    for candidate in get_unit_candidates(units, attributes):
        value = original_value if candidate.is_symbol else formatted_value
        if value.startswith(candidate.spelling):
            return value[len(candidate.spelling) :].strip()
        if value.endswith(candidate.spelling):
            return value[: -len(candidate.spelling)].strip()
    return original_value
