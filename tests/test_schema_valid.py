"""
Schema validation tests - type checks for full records and patch maps,
with every error reported at once.
"""

import pytest

from tasktracker.core.validation import (
    UNKNOWN_FIELD_MESSAGE,
    RecordValidationError,
    SchemaValidator,
)
from tasktracker.tasks.models import Task, TaskPriority, TaskStatus


@pytest.fixture
def validator():
    return SchemaValidator(Task)


class TestPatchSchemaValidation:
    """Test sparse patch map validation."""

    def test_valid_patch_passes(self, validator):
        """Test that a correctly typed patch raises nothing."""
        validator.validate_patch({"title": "Write docs", "status": "in_progress", "priority": "LOW"})

    def test_empty_patch_passes(self, validator):
        """Test that an empty patch is valid."""
        validator.validate_patch({})

    def test_unknown_field_is_reported_by_key(self, validator):
        """Test that an undeclared key fails with that exact key."""
        with pytest.raises(RecordValidationError) as exc_info:
            validator.validate_patch({"status": "done", "unknown": "x"})

        assert exc_info.value.errors == {"unknown": UNKNOWN_FIELD_MESSAGE}

    @pytest.mark.parametrize("status", ["todo", "TODO", "In_Progress", "done"])
    def test_enum_symbols_match_ignoring_case(self, validator, status):
        """Test case-insensitive enum symbol matching."""
        validator.validate_patch({"status": status})

    def test_enum_member_passes(self, validator):
        """Test that an actual enum member is a direct type match."""
        validator.validate_patch({"priority": TaskPriority.HIGH})

    def test_invalid_enum_symbol_fails(self, validator):
        """Test that a string naming no enum symbol is a type mismatch."""
        with pytest.raises(RecordValidationError) as exc_info:
            validator.validate_patch({"status": "blocked"})

        message = exc_info.value.errors["status"]
        assert message.startswith("Type mismatch.")
        assert "TODO, IN_PROGRESS, DONE" in message

    def test_wrong_scalar_type_fails(self, validator):
        """Test that a number for a string field is rejected."""
        with pytest.raises(RecordValidationError) as exc_info:
            validator.validate_patch({"title": 42})

        assert exc_info.value.errors == {"title": "Type mismatch. Expected str but got int"}

    def test_boolean_is_not_an_integer(self, validator):
        """Test that JSON booleans do not pass as timestamps."""
        with pytest.raises(RecordValidationError) as exc_info:
            validator.validate_patch({"createdAt": True})

        assert "createdAt" in exc_info.value.errors

    def test_null_values_always_accepted(self, validator):
        """Test that None is compatible with every declared type."""
        validator.validate_patch({"title": None, "status": None, "priority": None, "description": None})

    def test_all_errors_reported_together(self, validator):
        """Test that validation does not stop at the first error."""
        with pytest.raises(RecordValidationError) as exc_info:
            validator.validate_patch({
                "title": 1,
                "status": "nope",
                "owner": "sam",
                "description": "fine",
            })

        assert set(exc_info.value.errors) == {"title", "status", "owner"}

    def test_non_mapping_patch_is_rejected(self, validator):
        """Test that a JSON array is not a patch map."""
        with pytest.raises(RecordValidationError) as exc_info:
            validator.validate_patch(["title"])

        assert "body" in exc_info.value.errors


class TestRecordSchemaValidation:
    """Test full record validation."""

    def test_valid_record_passes(self, validator):
        """Test that a correctly typed record raises nothing."""
        validator.validate_record(Task(title="Plan", status=TaskStatus.TODO, priority=TaskPriority.LOW))

    def test_missing_fields_are_not_a_schema_concern(self, validator):
        """Test that required-ness is left to business validation."""
        validator.validate_record(Task())

    def test_record_with_raw_values_fails(self, validator):
        """Test that values from_dict could not convert are reported."""
        task = Task.from_dict({"title": ["a"], "status": "someday", "priority": "high"})

        with pytest.raises(RecordValidationError) as exc_info:
            validator.validate_record(task)

        assert set(exc_info.value.errors) == {"title", "status"}

    def test_wrong_record_type_is_rejected(self, validator):
        """Test that a record of another type is refused."""
        with pytest.raises(RecordValidationError):
            validator.validate_record(object())

    def test_validate_dispatches_on_argument(self, validator):
        """Test that validate() handles both records and maps."""
        validator.validate(Task(title="x"))
        with pytest.raises(RecordValidationError):
            validator.validate({"nope": 1})


class TestValidationError:
    """Test the validation error carrier."""

    def test_error_map_is_kept(self):
        error = RecordValidationError({"title": "Title is required"})
        assert error.errors == {"title": "Title is required"}
        assert "Title is required" in str(error)

    def test_message_only_becomes_error_entry(self):
        error = RecordValidationError(message="Bad input")
        assert error.errors == {"error": "Bad input"}
