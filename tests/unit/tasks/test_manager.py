"""Tests for taskboard/tasks/manager.py

The task manager provides CRUD operations for board tasks.
Key functionality:
- Create tasks at the end of the user's ordering
- Edit fields without ever touching position
- Filtered listing in board order
- Delete tasks along with their interactions

These tests ensure reliable task management.
"""

from datetime import datetime

import pytest

from taskboard.tasks.errors import AuthorizationError, ErrorKind, ValidationError


@pytest.fixture
def manager(board_db):
    """Task manager bound to the temporary database."""
    from taskboard.tasks import manager

    return manager


# ─────────────────────────────────────────────────────────────────────────────
# Task Creation Tests
# ─────────────────────────────────────────────────────────────────────────────


class TestCreateTask:
    """Tests for task creation."""

    def test_creates_basic_task(self, manager, mock_user_id):
        """Should create a TODO task with minimal fields."""
        task = manager.create_task(mock_user_id, "do taxes")

        assert task["title"] == "do taxes"
        assert task["status"] == "TODO"
        assert task["description"] is None
        assert task["user_id"] == mock_user_id

    def test_creates_task_with_all_fields(self, manager, mock_user_id, sample_task):
        task = manager.create_task(mock_user_id, **sample_task)

        assert task["title"] == sample_task["title"]
        assert task["description"] == sample_task["description"]
        assert task["due_date"] == sample_task["due_date"]

    def test_generates_unique_id(self, manager, mock_user_id):
        first = manager.create_task(mock_user_id, "task 1")
        second = manager.create_task(mock_user_id, "task 2")

        assert first["id"] != second["id"]

    def test_appends_at_end_of_board(self, manager, mock_user_id):
        """New tasks land one GAP after the current last task."""
        positions = [manager.create_task(mock_user_id, f"task {i}")["position"] for i in range(3)]

        assert positions == [1000.0, 2000.0, 3000.0]

    def test_positions_are_per_user(self, manager, mock_user_id, other_user_id):
        manager.create_task(mock_user_id, "mine")
        theirs = manager.create_task(other_user_id, "theirs")

        assert theirs["position"] == 1000.0

    def test_files_under_default_category(self, manager, mock_user_id):
        from taskboard.tasks.categories import get_default_category_id

        task = manager.create_task(mock_user_id, "uncategorized")

        assert task["category_id"] == get_default_category_id(mock_user_id)

    def test_accepts_datetime_due_date(self, manager, mock_user_id):
        task = manager.create_task(mock_user_id, "dated", due_date=datetime(2026, 3, 1, 9, 30))

        assert task["due_date"] == "2026-03-01T09:30:00"

    def test_rejects_empty_title(self, manager, mock_user_id):
        with pytest.raises(ValidationError) as exc_info:
            manager.create_task(mock_user_id, "")

        assert exc_info.value.kind is ErrorKind.VALIDATION

    def test_rejects_long_title(self, manager, mock_user_id):
        with pytest.raises(ValidationError):
            manager.create_task(mock_user_id, "x" * 256)

    def test_stores_trimmed_title(self, manager, mock_user_id):
        """Padding does not count toward the 255-character limit."""
        task = manager.create_task(mock_user_id, "  " + "a" * 254)

        assert task["title"] == "a" * 254

    def test_rejects_long_description(self, manager, mock_user_id):
        with pytest.raises(ValidationError):
            manager.create_task(mock_user_id, "ok", description="x" * 1001)

    def test_rejects_invalid_status(self, manager, mock_user_id):
        with pytest.raises(ValidationError):
            manager.create_task(mock_user_id, "ok", status="BLOCKED")

    def test_rejects_invalid_due_date(self, manager, mock_user_id):
        with pytest.raises(ValidationError) as exc_info:
            manager.create_task(mock_user_id, "ok", due_date="next tuesday")

        assert exc_info.value.message == "Invalid due date format"

    def test_requires_user(self, manager):
        with pytest.raises(ValidationError):
            manager.create_task("", "orphan")

    def test_rejects_foreign_category(self, manager, mock_user_id, other_user_id, db_snapshot):
        from taskboard.tasks.categories import create_category

        theirs = create_category(other_user_id, "Theirs")
        before = db_snapshot()

        with pytest.raises(AuthorizationError):
            manager.create_task(mock_user_id, "sneaky", category_id=theirs["id"])

        assert db_snapshot() == before


# ─────────────────────────────────────────────────────────────────────────────
# Task Retrieval Tests
# ─────────────────────────────────────────────────────────────────────────────


class TestGetTasks:
    """Tests for listing and fetching tasks."""

    def test_lists_in_position_order(self, manager, mock_user_id, set_positions):
        a = manager.create_task(mock_user_id, "A")
        b = manager.create_task(mock_user_id, "B")
        set_positions("tasks", {a["id"]: 5000.0})

        tasks = manager.get_tasks(mock_user_id)

        assert [t["id"] for t in tasks] == [b["id"], a["id"]]

    def test_includes_category_name(self, manager, mock_user_id):
        manager.create_task(mock_user_id, "A")

        tasks = manager.get_tasks(mock_user_id)

        assert tasks[0]["category_name"] == "Default"

    def test_filters_by_category(self, manager, mock_user_id):
        from taskboard.tasks.categories import create_category

        work = create_category(mock_user_id, "Work")
        in_work = manager.create_task(mock_user_id, "report", category_id=work["id"])
        manager.create_task(mock_user_id, "laundry")

        tasks = manager.get_tasks(mock_user_id, category_id=work["id"])

        assert [t["id"] for t in tasks] == [in_work["id"]]

    def test_filters_by_status(self, manager, mock_user_id):
        manager.create_task(mock_user_id, "todo")
        done = manager.create_task(mock_user_id, "done", status="COMPLETED")

        tasks = manager.get_tasks(mock_user_id, status="COMPLETED")

        assert [t["id"] for t in tasks] == [done["id"]]

    def test_only_own_tasks(self, manager, mock_user_id, other_user_id):
        manager.create_task(other_user_id, "theirs")

        assert manager.get_tasks(mock_user_id) == []

    def test_get_task(self, manager, mock_user_id):
        created = manager.create_task(mock_user_id, "A")

        fetched = manager.get_task(mock_user_id, created["id"])

        assert fetched["id"] == created["id"]

    def test_get_task_with_interactions(self, manager, mock_user_id):
        created = manager.create_task(mock_user_id, "A")
        manager.record_interaction(mock_user_id, created["id"], "USER_FEEDBACK", "looks good")

        fetched = manager.get_task(mock_user_id, created["id"], include_interactions=True)

        assert [i["content"] for i in fetched["interactions"]] == ["looks good"]

    def test_get_other_users_task(self, manager, mock_user_id, other_user_id):
        theirs = manager.create_task(other_user_id, "theirs")

        with pytest.raises(AuthorizationError) as exc_info:
            manager.get_task(mock_user_id, theirs["id"])

        assert exc_info.value.message == "Task not found or unauthorized"


# ─────────────────────────────────────────────────────────────────────────────
# Task Update Tests
# ─────────────────────────────────────────────────────────────────────────────


class TestUpdateTask:
    """Tests for task edits."""

    def test_updates_title(self, manager, mock_user_id):
        task = manager.create_task(mock_user_id, "old")

        updated = manager.update_task_title(mock_user_id, task["id"], "new")

        assert updated["title"] == "new"

    def test_updates_description(self, manager, mock_user_id):
        task = manager.create_task(mock_user_id, "A")

        updated = manager.update_task_description(mock_user_id, task["id"], "details")

        assert updated["description"] == "details"

    def test_updates_status(self, manager, mock_user_id):
        task = manager.create_task(mock_user_id, "A")

        updated = manager.update_task_status(mock_user_id, task["id"], "IN_PROGRESS")

        assert updated["status"] == "IN_PROGRESS"

    def test_updates_category(self, manager, mock_user_id):
        from taskboard.tasks.categories import create_category

        work = create_category(mock_user_id, "Work")
        task = manager.create_task(mock_user_id, "A")

        updated = manager.update_task_category(mock_user_id, task["id"], work["id"])

        assert updated["category_id"] == work["id"]

    def test_partial_update_keeps_other_fields(self, manager, mock_user_id, sample_task):
        task = manager.create_task(mock_user_id, **sample_task)

        updated = manager.update_task(mock_user_id, task["id"], status="COMPLETED")

        assert updated["title"] == sample_task["title"]
        assert updated["description"] == sample_task["description"]
        assert updated["due_date"] == sample_task["due_date"]

    def test_never_changes_position(self, manager, mock_user_id):
        from taskboard.tasks.categories import create_category

        work = create_category(mock_user_id, "Work")
        task = manager.create_task(mock_user_id, "A")
        manager.create_task(mock_user_id, "B")

        updated = manager.update_task(
            mock_user_id, task["id"], title="A2", status="COMPLETED", category_id=work["id"]
        )

        assert updated["position"] == task["position"]

    def test_clears_description_and_due_date(self, manager, mock_user_id, sample_task):
        task = manager.create_task(mock_user_id, **sample_task)

        updated = manager.update_task(mock_user_id, task["id"], description=None, due_date=None)

        assert updated["description"] is None
        assert updated["due_date"] is None
        assert updated["title"] == sample_task["title"]

    @pytest.mark.parametrize("field", ["title", "status", "category_id"])
    def test_required_fields_cannot_be_cleared(self, manager, mock_user_id, field, db_snapshot):
        task = manager.create_task(mock_user_id, "A")
        before = db_snapshot()

        with pytest.raises(ValidationError):
            manager.update_task(mock_user_id, task["id"], **{field: None})

        assert db_snapshot() == before

    def test_requires_some_field(self, manager, mock_user_id):
        task = manager.create_task(mock_user_id, "A")

        with pytest.raises(ValidationError) as exc_info:
            manager.update_task(mock_user_id, task["id"])

        assert exc_info.value.message == "No fields to update"

    def test_validates_before_writing(self, manager, mock_user_id, db_snapshot):
        task = manager.create_task(mock_user_id, "A")
        before = db_snapshot()

        with pytest.raises(ValidationError):
            manager.update_task(mock_user_id, task["id"], title="ok", status="NOPE")

        assert db_snapshot() == before

    def test_other_users_task(self, manager, mock_user_id, other_user_id, db_snapshot):
        theirs = manager.create_task(other_user_id, "theirs")
        before = db_snapshot()

        with pytest.raises(AuthorizationError):
            manager.update_task_title(mock_user_id, theirs["id"], "hijacked")

        assert db_snapshot() == before

    def test_foreign_category(self, manager, mock_user_id, other_user_id):
        from taskboard.tasks.categories import create_category

        theirs = create_category(other_user_id, "Theirs")
        task = manager.create_task(mock_user_id, "A")

        with pytest.raises(AuthorizationError):
            manager.update_task_category(mock_user_id, task["id"], theirs["id"])


# ─────────────────────────────────────────────────────────────────────────────
# Task Deletion Tests
# ─────────────────────────────────────────────────────────────────────────────


class TestDeleteTask:
    """Tests for task deletion."""

    def test_deletes_task(self, manager, mock_user_id):
        task = manager.create_task(mock_user_id, "A")

        deleted = manager.delete_task(mock_user_id, task["id"])

        assert deleted["id"] == task["id"]
        assert manager.get_tasks(mock_user_id) == []

    def test_deletes_interactions(self, manager, mock_user_id, db_snapshot):
        task = manager.create_task(mock_user_id, "A")
        manager.record_interaction(mock_user_id, task["id"], "LLM_SUGGESTION", "{}")

        manager.delete_task(mock_user_id, task["id"])

        assert db_snapshot()["task_interactions"] == []

    def test_leaves_other_positions_alone(self, manager, mock_user_id):
        a = manager.create_task(mock_user_id, "A")
        b = manager.create_task(mock_user_id, "B")
        c = manager.create_task(mock_user_id, "C")

        manager.delete_task(mock_user_id, b["id"])

        positions = {t["id"]: t["position"] for t in manager.get_tasks(mock_user_id)}
        assert positions == {a["id"]: a["position"], c["id"]: c["position"]}

    def test_other_users_task(self, manager, mock_user_id, other_user_id):
        theirs = manager.create_task(other_user_id, "theirs")

        with pytest.raises(AuthorizationError):
            manager.delete_task(mock_user_id, theirs["id"])

        assert len(manager.get_tasks(other_user_id)) == 1


# ─────────────────────────────────────────────────────────────────────────────
# Interaction Tests
# ─────────────────────────────────────────────────────────────────────────────


class TestRecordInteraction:
    """Tests for interaction history."""

    def test_records_interaction(self, manager, mock_user_id):
        task = manager.create_task(mock_user_id, "A")

        interaction = manager.record_interaction(mock_user_id, task["id"], "LLM_ANALYSIS", "analysis")

        assert interaction["task_id"] == task["id"]
        assert interaction["type"] == "LLM_ANALYSIS"

    def test_rejects_unknown_type(self, manager, mock_user_id):
        task = manager.create_task(mock_user_id, "A")

        with pytest.raises(ValidationError):
            manager.record_interaction(mock_user_id, task["id"], "GOSSIP", "...")

    def test_other_users_task(self, manager, mock_user_id, other_user_id):
        theirs = manager.create_task(other_user_id, "theirs")

        with pytest.raises(AuthorizationError):
            manager.record_interaction(mock_user_id, theirs["id"], "USER_FEEDBACK", "...")
