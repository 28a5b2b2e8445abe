"""
Partial update tests - protected fields, silent skips, coercion and timestamps.
"""

import pytest

from tasktracker.core.patch import PatchCoercionError, apply_patch
from tasktracker.tasks.models import Task, TaskPriority, TaskStatus


@pytest.fixture
def stored_task():
    return Task(
        id="task-1",
        created_at=1_000,
        updated_at=1_000,
        title="Plan launch",
        description="Kickoff",
        status=TaskStatus.TODO,
        priority=TaskPriority.HIGH,
    )


class TestApplyPatch:
    """Test merging sparse maps into records."""

    def test_empty_patch_only_touches_updated_at(self, stored_task):
        """Test that an empty patch refreshes updatedAt and nothing else."""
        patched = apply_patch(stored_task, {}, now=2_000)

        assert patched.updated_at == 2_000
        expected = stored_task.to_dict()
        expected["updatedAt"] = 2_000
        assert patched.to_dict() == expected

    def test_updated_at_defaults_to_now(self, stored_task):
        """Test that updatedAt never moves backwards."""
        patched = apply_patch(stored_task, {})
        assert patched.updated_at >= stored_task.updated_at

    @pytest.mark.parametrize("patch_map", [
        {"id": "other"},
        {"createdAt": 99},
        {"id": None, "createdAt": None},
    ])
    def test_protected_fields_are_ignored(self, stored_task, patch_map):
        """Test that id and createdAt cannot be patched."""
        patched = apply_patch(stored_task, patch_map, now=2_000)

        assert patched.id == "task-1"
        assert patched.created_at == 1_000

    def test_unknown_fields_are_skipped(self, stored_task):
        """Test that undeclared names are a silent no-op."""
        patched = apply_patch(stored_task, {"owner": "sam", "title": "Ship it"}, now=2_000)

        assert patched.title == "Ship it"
        assert not hasattr(patched, "owner")

    def test_enum_string_is_coerced(self, stored_task):
        """Test case-insensitive enum coercion."""
        patched = apply_patch(stored_task, {"status": "In_Progress", "priority": "low"}, now=2_000)

        assert patched.status is TaskStatus.IN_PROGRESS
        assert patched.priority is TaskPriority.LOW

    def test_null_clears_a_field(self, stored_task):
        """Test that None is applied as given."""
        patched = apply_patch(stored_task, {"description": None}, now=2_000)
        assert patched.description is None

    def test_input_record_is_not_mutated(self, stored_task):
        """Test that the applier works on a copy."""
        apply_patch(stored_task, {"title": "Changed"}, now=2_000)

        assert stored_task.title == "Plan launch"
        assert stored_task.updated_at == 1_000

    def test_unmatched_enum_symbol_raises(self, stored_task):
        """Test that an unknown enum symbol is a contract violation."""
        with pytest.raises(PatchCoercionError) as exc_info:
            apply_patch(stored_task, {"status": "blocked"})

        assert exc_info.value.field_name == "status"
        assert isinstance(exc_info.value, TypeError)

    def test_wrong_type_raises(self, stored_task):
        """Test that a mistyped value is not applied."""
        with pytest.raises(PatchCoercionError):
            apply_patch(stored_task, {"title": 12})
