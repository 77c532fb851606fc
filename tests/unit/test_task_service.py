"""Unit tests for TaskService."""

from datetime import UTC, datetime, timedelta
from unittest.mock import Mock
from uuid import uuid4

import pytest

from tasktracker.core.auth.session_manager import AuthUser
from tasktracker.core.exceptions import APIException
from tasktracker.models import Task, TaskPriority, TaskStatus
from tasktracker.schemas.task import AdminTaskListQuery, TaskListQuery
from tasktracker.services.task_service import TaskPage, TaskService


@pytest.fixture
def owner(test_user) -> AuthUser:
    return AuthUser.from_model(test_user)


@pytest.fixture
def stranger(other_user) -> AuthUser:
    return AuthUser.from_model(other_user)


@pytest.fixture
def admin(admin_user) -> AuthUser:
    return AuthUser.from_model(admin_user)


def titles(page: TaskPage) -> list[str]:
    return [item.title for item in page.items]


class TestTaskServiceMutations:
    """Create, update and delete with the ownership-or-admin rule."""

    def test_create_task_forces_pending(self, db_session, owner):
        """Test that new tasks start pending and belong to the caller."""
        task = TaskService(db_session).create_task(owner, "Buy milk", priority=TaskPriority.LOW)

        assert task.status == "pending"
        assert task.priority == "low"
        assert task.user_id == owner.id

    def test_create_task_default_priority(self, db_session, owner):
        """Test the default priority."""
        task = TaskService(db_session).create_task(owner, "Write report")

        assert task.priority == "medium"
        assert task.description is None

    def test_update_by_owner(self, db_session, owner, test_user, make_task):
        """Test a partial update by the owner."""
        task = make_task(test_user, title="Old", description="keep me")

        updated = TaskService(db_session).update_task(owner, task.id, {"title": "New"})

        assert updated.title == "New"
        assert updated.description == "keep me"
        assert updated.status == "pending"

    def test_update_by_admin(self, db_session, admin, test_user, make_task):
        """Test that an admin may update any task."""
        task = make_task(test_user)

        updated = TaskService(db_session).update_task(admin, task.id, {"status": "completed"})

        assert updated.status == "completed"
        assert updated.user_id == test_user.id

    def test_update_by_stranger_is_forbidden(self, db_session, stranger, test_user, make_task):
        """Test that a non-owner cannot update and the row is unchanged."""
        task = make_task(test_user, title="Buy milk")

        with pytest.raises(APIException) as exc_info:
            TaskService(db_session).update_task(stranger, task.id, {"status": "completed"})

        assert exc_info.value.status_code == 403
        db_session.expire_all()
        assert db_session.get(Task, task.id).status == "pending"

    def test_update_missing_task(self, db_session, owner):
        """Test updating a task that does not exist."""
        with pytest.raises(APIException) as exc_info:
            TaskService(db_session).update_task(owner, uuid4(), {"title": "x"})

        assert exc_info.value.status_code == 404
        assert exc_info.value.code == "TASK_NOT_FOUND"

    def test_update_empty_payload(self, db_session, owner, test_user, make_task):
        """Test that an empty update is a validation error."""
        task = make_task(test_user)

        with pytest.raises(APIException) as exc_info:
            TaskService(db_session).update_task(owner, task.id, {})

        assert exc_info.value.status_code == 400
        assert exc_info.value.code == "VALIDATION_ERROR"

    def test_update_row_vanishes_after_check(self, db_session, owner, test_user, make_task):
        """Test that a delete racing the update surfaces as not found."""
        task = make_task(test_user)
        service = TaskService(db_session)
        service.repository.update_task = Mock(return_value=None)

        with pytest.raises(APIException) as exc_info:
            service.update_task(owner, task.id, {"title": "late"})

        assert exc_info.value.code == "TASK_NOT_FOUND"

    def test_delete_by_owner_returns_snapshot(self, db_session, owner, test_user, make_task):
        """Test deleting returns the row as it was."""
        task = make_task(test_user, title="Gone soon", priority=TaskPriority.HIGH)
        task_id = task.id

        snapshot = TaskService(db_session).delete_task(owner, task_id)

        assert snapshot.id == task_id
        assert snapshot.title == "Gone soon"
        assert snapshot.priority is TaskPriority.HIGH
        assert db_session.query(Task).filter(Task.id == task_id).first() is None

    def test_delete_by_admin(self, db_session, admin, test_user, make_task):
        """Test that an admin may delete any task."""
        task = make_task(test_user)
        task_id = task.id

        TaskService(db_session).delete_task(admin, task_id)

        assert db_session.query(Task).count() == 0

    def test_delete_by_stranger_is_forbidden(self, db_session, stranger, test_user, make_task):
        """Test that a non-owner cannot delete."""
        task = make_task(test_user)

        with pytest.raises(APIException) as exc_info:
            TaskService(db_session).delete_task(stranger, task.id)

        assert exc_info.value.status_code == 403
        assert db_session.query(Task).count() == 1

    def test_second_delete_is_not_found(self, db_session, owner, test_user, make_task):
        """Test that deleting twice reports not found the second time."""
        task = make_task(test_user)
        task_id = task.id
        service = TaskService(db_session)
        service.delete_task(owner, task_id)

        with pytest.raises(APIException) as exc_info:
            service.delete_task(owner, task_id)

        assert exc_info.value.status_code == 404


class TestTaskServiceListing:
    """Filtering, sorting and pagination."""

    def test_list_is_scoped_to_caller(self, db_session, owner, admin, test_user, admin_user, make_task):
        """Test that the personal listing never shows other users' tasks, even to admins."""
        make_task(test_user, title="mine")
        make_task(admin_user, title="admin's")

        assert titles(TaskService(db_session).list_tasks(owner, TaskListQuery())) == ["mine"]
        assert titles(TaskService(db_session).list_tasks(admin, TaskListQuery())) == ["admin's"]

    def test_pagination(self, db_session, owner, test_user, make_task):
        """Test page sizes, totals and has_more."""
        base = datetime.now(UTC)
        for i in range(25):
            make_task(test_user, title=f"t{i:02d}", created_at=base + timedelta(seconds=i))
        service = TaskService(db_session)

        first = service.list_tasks(owner, TaskListQuery(page=1, limit=10))
        last = service.list_tasks(owner, TaskListQuery(page=3, limit=10))
        beyond = service.list_tasks(owner, TaskListQuery(page=4, limit=10))

        assert first.total == 25
        assert first.total_pages == 3
        assert len(first.items) == 10
        assert first.has_more is True
        assert titles(first)[0] == "t24"
        assert len(last.items) == 5
        assert last.has_more is False
        assert beyond.items == []
        for page in (first, last, beyond):
            assert len(page.items) <= page.limit
            assert page.has_more == (page.page * page.limit < page.total)

    def test_filters_combine_with_and(self, db_session, owner, test_user, make_task):
        """Test status, priority and search together."""
        make_task(test_user, title="Buy milk", status=TaskStatus.COMPLETED, priority=TaskPriority.LOW)
        make_task(test_user, title="Buy bread", status=TaskStatus.PENDING, priority=TaskPriority.LOW)
        make_task(test_user, title="Sell car", status=TaskStatus.COMPLETED, priority=TaskPriority.HIGH)
        service = TaskService(db_session)

        page = service.list_tasks(
            owner, TaskListQuery(status=TaskStatus.COMPLETED, priorities=[TaskPriority.LOW], search="buy")
        )

        assert titles(page) == ["Buy milk"]

    def test_priority_and_priorities_both_apply(self, db_session, owner, test_user, make_task):
        """Test that a single priority narrows a priority set."""
        make_task(test_user, title="low", priority=TaskPriority.LOW)
        make_task(test_user, title="high", priority=TaskPriority.HIGH)

        page = TaskService(db_session).list_tasks(
            owner,
            TaskListQuery(priority=TaskPriority.HIGH, priorities=[TaskPriority.LOW, TaskPriority.HIGH]),
        )

        assert titles(page) == ["high"]

    def test_search_matches_description_case_insensitively(self, db_session, owner, test_user, make_task):
        """Test free-text search over title or description."""
        make_task(test_user, title="Groceries", description="Remember the MILK")
        make_task(test_user, title="Laundry")

        page = TaskService(db_session).list_tasks(owner, TaskListQuery(search="milk"))

        assert titles(page) == ["Groceries"]

    def test_search_wildcards_are_literal(self, db_session, owner, test_user, make_task):
        """Test that % and _ in a search term match themselves."""
        make_task(test_user, title="100% done")
        make_task(test_user, title="1000 done")

        page = TaskService(db_session).list_tasks(owner, TaskListQuery(search="100%"))

        assert titles(page) == ["100% done"]

    def test_created_date_range(self, db_session, owner, test_user, make_task):
        """Test the inclusive creation-date range."""
        base = datetime(2024, 1, 10, tzinfo=UTC)
        make_task(test_user, title="before", created_at=base - timedelta(days=5))
        make_task(test_user, title="inside", created_at=base)
        make_task(test_user, title="after", created_at=base + timedelta(days=5))

        page = TaskService(db_session).list_tasks(
            owner,
            TaskListQuery(created_from=base - timedelta(days=1), created_to=base + timedelta(days=1)),
        )

        assert titles(page) == ["inside"]

    def test_sort_by_status_follows_workflow(self, db_session, owner, test_user, make_task):
        """Test that status sorts pending, in-progress, completed."""
        make_task(test_user, title="c", status=TaskStatus.COMPLETED)
        make_task(test_user, title="p", status=TaskStatus.PENDING)
        make_task(test_user, title="i", status=TaskStatus.IN_PROGRESS)

        page = TaskService(db_session).list_tasks(
            owner, TaskListQuery(sort_by="status", sort_order="asc")
        )

        assert titles(page) == ["p", "i", "c"]

    def test_sort_by_priority_rank(self, db_session, owner, test_user, make_task):
        """Test that priority sorts by rank, not alphabetically."""
        make_task(test_user, title="m", priority=TaskPriority.MEDIUM)
        make_task(test_user, title="h", priority=TaskPriority.HIGH)
        make_task(test_user, title="l", priority=TaskPriority.LOW)

        page = TaskService(db_session).list_tasks(
            owner, TaskListQuery(sort_by="priority", sort_order="desc")
        )

        assert titles(page) == ["h", "m", "l"]

    def test_sort_by_title(self, db_session, owner, test_user, make_task):
        """Test sorting by title ascending."""
        for title in ("banana", "apple", "cherry"):
            make_task(test_user, title=title)

        page = TaskService(db_session).list_tasks(owner, TaskListQuery(sort_by="title", sort_order="asc"))

        assert titles(page) == ["apple", "banana", "cherry"]

    def test_admin_listing_completed_across_users(
        self, db_session, test_user, other_user, make_task
    ):
        """Test the admin listing filtered by status across two users."""
        for user in (test_user, other_user):
            make_task(user, title=f"{user.name} done", status=TaskStatus.COMPLETED)
            make_task(user, title=f"{user.name} todo", status=TaskStatus.PENDING)

        page = TaskService(db_session).list_all_tasks(AdminTaskListQuery(status=TaskStatus.COMPLETED))

        assert page.total == 2
        assert sorted(titles(page)) == ["Other done", "Owner done"]
        owners = {item.owner.email for item in page.items}
        assert owners == {test_user.email, other_user.email}
        for item in page.items:
            assert item.owner.id == item.user_id

    def test_admin_listing_user_filter(self, db_session, test_user, other_user, make_task):
        """Test narrowing the admin listing to one owner."""
        make_task(test_user, title="a")
        make_task(other_user, title="b")

        page = TaskService(db_session).list_all_tasks(AdminTaskListQuery(user_id=other_user.id))

        assert titles(page) == ["b"]
        assert page.items[0].owner.name == "Other"
