"""Shared types for HED string validation.

Contains dataclasses used across the parser, the rule engine and the
orchestrator to avoid circular imports between validation modules.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Literal

IssueLevel = Literal["error", "warning"]


@dataclass(frozen=True)
class Issue:
    """Represents a single validation issue (error or warning).

    Attributes:
        code: Issue kind (e.g., 'invalidTag')
        parameters: Values substituted into the message, keyed by name (read-only)
        level: Severity level ('error' or 'warning')
        hed_code: Standard HED error code (e.g., 'TAG_INVALID')
        message: Human-readable message
    """

    code: str
    parameters: Mapping[str, str]
    level: IssueLevel
    hed_code: str
    message: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "parameters", MappingProxyType(dict(self.parameters)))

    def __hash__(self) -> int:
        return hash((self.code, tuple(sorted(self.parameters.items()))))

    @property
    def tag(self) -> str | None:
        """The problematic tag, if the issue names one."""
        return self.parameters.get("tag")


@dataclass
class ValidationResult:
    """Result of HED string validation.

    Attributes:
        is_valid: Whether the HED string produced no issues
        issues: Every issue found, in the order it was found
    """

    is_valid: bool
    issues: list[Issue] = field(default_factory=list)

    @classmethod
    def from_issues(cls, issues: list[Issue]) -> ValidationResult:
        """Build a result whose validity follows from the issue list."""
        return cls(is_valid=not issues, issues=list(issues))

    @property
    def errors(self) -> list[Issue]:
        """Issues at error level."""
        return [issue for issue in self.issues if issue.level == "error"]

    @property
    def warnings(self) -> list[Issue]:
        """Issues at warning level."""
        return [issue for issue in self.issues if issue.level == "warning"]
