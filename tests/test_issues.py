"""Tests for the issue catalogue and validation results."""

import pytest

from hedcheck.validation.issues import ISSUE_DEFINITIONS, WARNING_CODES, generate_issue
from hedcheck.validation.validation_types import Issue, ValidationResult


class TestGenerateIssue:
    """Tests for issue construction."""

    def test_message_and_codes(self):
        issue = generate_issue("invalidTag", tag="Event/Nonsense")

        assert issue.code == "invalidTag"
        assert issue.level == "error"
        assert issue.hed_code == "TAG_INVALID"
        assert issue.message == 'Invalid tag - "Event/Nonsense".'
        assert issue.tag == "Event/Nonsense"

    def test_parameters_are_strings(self):
        """Numeric parameters are stored as strings."""
        issue = generate_issue("parentheses", opening=2, closing=1)
        assert issue.parameters == {"opening": "2", "closing": "1"}
        assert "2 opening parentheses. 1 closing parentheses." in issue.message
        assert issue.tag is None

    def test_equality(self):
        """Issues with the same kind and parameters are equal and hash alike."""
        first = generate_issue("duplicateTag", tag="Item/Object/Vehicle/Train")
        second = generate_issue("duplicateTag", tag="Item/Object/Vehicle/Train")
        assert first == second
        assert len({first, second}) == 1

    def test_parameters_are_read_only(self):
        """Parameters cannot change once the issue exists."""
        issue = generate_issue("duplicateTag", tag="Item/Object/Vehicle/Train")
        original_hash = hash(issue)

        with pytest.raises(TypeError):
            issue.parameters["tag"] = "Item/Object/Vehicle/Bus"
        assert hash(issue) == original_hash

    def test_parameters_are_copied(self):
        parameters = {"tag": "Event/Nonsense"}
        issue = Issue(
            code="invalidTag",
            parameters=parameters,
            level="error",
            hed_code="TAG_INVALID",
            message='Invalid tag - "Event/Nonsense".',
        )

        parameters["tag"] = "Event/Other"
        assert issue.tag == "Event/Nonsense"
        assert issue == generate_issue("invalidTag", tag="Event/Nonsense")

    def test_unknown_code(self):
        with pytest.raises(ValueError, match="Unknown issue code"):
            generate_issue("notAnIssue", tag="Event")

    def test_missing_parameter(self):
        with pytest.raises(ValueError, match="Missing parameter"):
            generate_issue("unitClassInvalidUnit", tag="Event/Duration/3 cm")

    def test_warning_codes(self):
        """Warnings are exactly the style, extension, default unit and required tag kinds."""
        assert WARNING_CODES == {
            "extension",
            "capitalization",
            "unitClassDefaultUsed",
            "requiredPrefixMissing",
        }
        assert all(ISSUE_DEFINITIONS[code].level == "warning" for code in WARNING_CODES)


class TestValidationResult:
    """Tests for validation result views."""

    def test_from_issues(self):
        warning = generate_issue("capitalization", tag="Event/something")
        error = generate_issue("invalidTag", tag="Event/Nonsense")

        result = ValidationResult.from_issues([warning, error])

        assert result.is_valid is False
        assert result.errors == [error]
        assert result.warnings == [warning]

    def test_no_issues(self):
        result = ValidationResult.from_issues([])
        assert result.is_valid is True
        assert result.issues == []
