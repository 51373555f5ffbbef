"""Issue catalogue for HED string validation.

Every issue kind has a fixed severity, a standard HED error code and an
English message template. Parameters are stored as strings.
"""

from __future__ import annotations

from typing import Any, NamedTuple

from hedcheck.validation.validation_types import Issue, IssueLevel


class IssueDefinition(NamedTuple):
    """Static description of one issue kind."""

    level: IssueLevel
    hed_code: str
    template: str


ISSUE_DEFINITIONS: dict[str, IssueDefinition] = {
    # Structural
    "parentheses": IssueDefinition(
        "error",
        "PARENTHESES_MISMATCH",
        "Number of opening and closing parentheses are unequal. "
        "{opening} opening parentheses. {closing} closing parentheses.",
    ),
    "attributeGroupBraces": IssueDefinition(
        "error",
        "PARENTHESES_MISMATCH",
        "Number of opening and closing curly braces are unequal. "
        "{opening} opening braces. {closing} closing braces.",
    ),
    "invalidCharacter": IssueDefinition(
        "error",
        "CHARACTER_INVALID",
        'Invalid character "{character}" at index {index} of string "{string}".',
    ),
    "extraDelimiter": IssueDefinition(
        "error",
        "TAG_EMPTY",
        'Extra delimiter "{character}" at index {index} of string "{string}".',
    ),
    "commaMissing": IssueDefinition(
        "error",
        "COMMA_MISSING",
        'Comma missing after - "{tag}".',
    ),
    # Tag validity
    "invalidTag": IssueDefinition(
        "error",
        "TAG_INVALID",
        'Invalid tag - "{tag}".',
    ),
    "extraCommaOrInvalid": IssueDefinition(
        "error",
        "TAG_INVALID",
        'Either "{previousTag}" contains a comma when it should not '
        'or "{tag}" is not a valid tag.',
    ),
    "invalidPlaceholder": IssueDefinition(
        "error",
        "PLACEHOLDER_INVALID",
        'Invalid placeholder - "{tag}".',
    ),
    "extension": IssueDefinition(
        "warning",
        "TAG_EXTENDED",
        'Tag extension found - "{tag}".',
    ),
    "capitalization": IssueDefinition(
        "warning",
        "STYLE_WARNING",
        'First word not capitalized or camel case - "{tag}".',
    ),
    "childRequired": IssueDefinition(
        "error",
        "TAG_REQUIRES_CHILD",
        'Descendant tag required - "{tag}".',
    ),
    # Units
    "unitClassDefaultUsed": IssueDefinition(
        "warning",
        "UNITS_MISSING",
        'No unit specified. Using "{defaultUnit}" as the default - "{tag}".',
    ),
    "unitClassInvalidUnit": IssueDefinition(
        "error",
        "UNITS_INVALID",
        'Invalid unit - "{tag}". Valid units are: "{unitClassUnits}".',
    ),
    # Levels and groups
    "duplicateTag": IssueDefinition(
        "error",
        "TAG_EXPRESSION_REPEATED",
        'Duplicate tag - "{tag}".',
    ),
    "multipleUniqueTags": IssueDefinition(
        "error",
        "TAG_NOT_UNIQUE",
        'Multiple unique tags with prefix - "{tag}".',
    ),
    "requiredPrefixMissing": IssueDefinition(
        "warning",
        "REQUIRED_TAG_MISSING",
        'Tag with prefix "{tagPrefix}" is required.',
    ),
    "tooManyTildes": IssueDefinition(
        "error",
        "TILDES_UNSUPPORTED",
        'Too many tildes - group "{tagGroup}".',
    ),
}

WARNING_CODES = frozenset(
    code for code, definition in ISSUE_DEFINITIONS.items() if definition.level == "warning"
)


def generate_issue(code: str, **parameters: Any) -> Issue:
    """Build an issue of the given kind.

    Args:
        code: Issue kind, a key of ISSUE_DEFINITIONS
        **parameters: Message parameters; values are converted to strings

    Returns:
        The Issue

    Raises:
        ValueError: If the issue kind is unknown or a message parameter is missing
    """
    definition = ISSUE_DEFINITIONS.get(code)
    if definition is None:
        raise ValueError(f"Unknown issue code: {code}")

    string_parameters = {name: str(value) for name, value in parameters.items()}
    try:
        message = definition.template.format(**string_parameters)
    except KeyError as e:
        raise ValueError(f"Missing parameter {e} for issue code {code}") from e

    return Issue(
        code=code,
        parameters=string_parameters,
        level=definition.level,
        hed_code=definition.hed_code,
        message=message,
    )
