"""
Lifecycle engine tests - create/update/complete/uncomplete/skip/unskip/delete
through the public task operations.
"""
from datetime import datetime, timedelta

from sqlalchemy import select

from yarukoto.models.task import Task, TaskStatus, Priority
from yarukoto.services import task_service
from yarukoto.services.results import ErrorCode
from yarukoto.tests.conftest import NOW


def assert_lifecycle_consistent(task: dict):
    assert (task["status"] == "COMPLETED") == (task["completedAt"] is not None)
    assert (task["status"] == "SKIPPED") == (task["skippedAt"] is not None)
    if task["status"] == "PENDING":
        assert task["skipReason"] is None


# ===================== CREATE =====================


async def test_create_task_trims_and_defaults(db_session, user):
    r = await task_service.create_task(db_session, user, {
        "title": "  Buy milk  ",
        "memo": "   ",
        "scheduledAt": "2024-01-10",
        "priority": "HIGH",
    })
    assert r.success
    task = r.data["task"]
    assert task["title"] == "Buy milk"
    assert task["memo"] is None
    assert task["status"] == "PENDING"
    assert task["scheduledAt"] == "2024-01-10"
    assert task["priority"] == "HIGH"
    assert task["categoryId"] is None
    assert task["category"] is None
    assert_lifecycle_consistent(task)


async def test_create_task_with_own_category(db_session, user, add_category):
    category_id = await add_category(user.id, "Work", "#ff0000")

    r = await task_service.create_task(db_session, user, {"title": "Report", "categoryId": category_id})
    assert r.success
    assert r.data["task"]["categoryId"] == category_id
    assert r.data["task"]["category"] == {"id": category_id, "name": "Work", "color": "#ff0000"}


async def test_create_task_with_foreign_category_is_not_found(db_session, user, other_user, add_category):
    category_id = await add_category(other_user.id, "Bob's")

    r = await task_service.create_task(db_session, user, {"title": "Sneaky", "categoryId": category_id})
    assert not r.success
    assert r.code == ErrorCode.NOT_FOUND

    tasks = (await db_session.execute(select(Task))).scalars().all()
    assert tasks == []


async def test_create_task_rejects_blank_title(db_session, user):
    r = await task_service.create_task(db_session, user, {"title": "   "})
    assert not r.success
    assert r.code == ErrorCode.VALIDATION_ERROR
    assert r.error == "Title is required"


# ===================== TRANSITIONS =====================


async def test_complete_sets_timestamp_and_clears_skip(db_session, user, add_task):
    task_id = await add_task(
        user.id, status=TaskStatus.SKIPPED, skipped_at=NOW, skip_reason="rain"
    )

    r = await task_service.complete_task(db_session, user, {"id": task_id}, now=NOW)
    task = r.data["task"]
    assert task["status"] == "COMPLETED"
    assert task["completedAt"].startswith("2024-01-10T09:30:00")
    assert task["skippedAt"] is None
    assert task["skipReason"] is None
    assert_lifecycle_consistent(task)


async def test_complete_twice_refreshes_completed_at(db_session, user, add_task):
    task_id = await add_task(user.id)
    later = NOW + timedelta(hours=2)

    first = await task_service.complete_task(db_session, user, {"id": task_id}, now=NOW)
    second = await task_service.complete_task(db_session, user, {"id": task_id}, now=later)

    assert first.data["task"]["status"] == "COMPLETED"
    assert second.data["task"]["status"] == "COMPLETED"
    assert second.data["task"]["completedAt"].startswith("2024-01-10T11:30:00")


async def test_uncomplete_returns_to_pending(db_session, user, add_task):
    task_id = await add_task(user.id, status=TaskStatus.COMPLETED, completed_at=NOW)

    r = await task_service.uncomplete_task(db_session, user, {"id": task_id})
    task = r.data["task"]
    assert task["status"] == "PENDING"
    assert task["completedAt"] is None
    assert_lifecycle_consistent(task)


async def test_uncomplete_from_skipped_is_permitted_and_consistent(db_session, user, add_task):
    task_id = await add_task(
        user.id, status=TaskStatus.SKIPPED, skipped_at=NOW, skip_reason="later"
    )

    r = await task_service.uncomplete_task(db_session, user, {"id": task_id})
    assert r.success
    task = r.data["task"]
    assert task["status"] == "PENDING"
    assert task["skippedAt"] is None
    assert task["skipReason"] is None


async def test_skip_records_trimmed_reason(db_session, user, add_task):
    task_id = await add_task(user.id, status=TaskStatus.COMPLETED, completed_at=NOW)

    r = await task_service.skip_task(db_session, user, {"id": task_id, "reason": "  too tired "}, now=NOW)
    task = r.data["task"]
    assert task["status"] == "SKIPPED"
    assert task["skipReason"] == "too tired"
    assert task["completedAt"] is None
    assert task["skippedAt"] is not None
    assert_lifecycle_consistent(task)


async def test_skip_without_reason_stores_null(db_session, user, add_task):
    task_id = await add_task(user.id)

    r = await task_service.skip_task(db_session, user, {"id": task_id, "reason": ""}, now=NOW)
    assert r.data["task"]["skipReason"] is None


async def test_skip_then_unskip_matches_never_skipped(db_session, user, add_task):
    untouched_id = await add_task(user.id, "Same", scheduled_at=NOW.date(), priority=Priority.LOW)
    skipped_id = await add_task(user.id, "Same", scheduled_at=NOW.date(), priority=Priority.LOW)

    await task_service.skip_task(db_session, user, {"id": skipped_id, "reason": "busy"}, now=NOW)
    r = await task_service.unskip_task(db_session, user, {"id": skipped_id})

    untouched = (await task_service.search_tasks(db_session, user, {"keyword": "Same"})).data
    by_id = {t["id"]: t for t in untouched["groups"][0]["tasks"]}

    ignored = {"id", "updatedAt"}
    restored = {k: v for k, v in r.data["task"].items() if k not in ignored}
    original = {k: v for k, v in by_id[untouched_id].items() if k not in ignored}
    assert restored == original


async def test_unskip_clears_skip_fields(db_session, user, add_task):
    task_id = await add_task(user.id, status=TaskStatus.SKIPPED, skipped_at=NOW, skip_reason="x")

    r = await task_service.unskip_task(db_session, user, {"id": task_id})
    task = r.data["task"]
    assert task["status"] == "PENDING"
    assert task["skippedAt"] is None
    assert task["skipReason"] is None


async def test_invariant_holds_across_transition_sequence(db_session, user, add_task):
    task_id = await add_task(user.id)
    steps = [
        (task_service.complete_task, {"now": NOW}),
        (task_service.skip_task, {"now": NOW}),
        (task_service.uncomplete_task, {}),
        (task_service.skip_task, {"now": NOW}),
        (task_service.complete_task, {"now": NOW}),
        (task_service.unskip_task, {}),
    ]
    for operation, kwargs in steps:
        r = await operation(db_session, user, {"id": task_id}, **kwargs)
        assert r.success
        assert_lifecycle_consistent(r.data["task"])

    row = (await db_session.execute(select(Task).where(Task.id == task_id))).scalar_one()
    assert row.status == TaskStatus.PENDING
    assert row.completed_at is None and row.skipped_at is None


# ===================== UPDATE =====================


async def test_update_only_touches_supplied_fields(db_session, user, add_task):
    task_id = await add_task(
        user.id, "Original", memo="keep me", priority=Priority.HIGH, scheduled_at=NOW.date()
    )

    r = await task_service.update_task(db_session, user, {"id": task_id, "title": "  Renamed "})
    task = r.data["task"]
    assert task["title"] == "Renamed"
    assert task["memo"] == "keep me"
    assert task["priority"] == "HIGH"
    assert task["scheduledAt"] == "2024-01-10"


async def test_update_explicit_null_clears_fields(db_session, user, add_task, add_category):
    category_id = await add_category(user.id, "Home")
    task_id = await add_task(
        user.id, memo="note", priority=Priority.MEDIUM, scheduled_at=NOW.date(), category_id=category_id
    )

    r = await task_service.update_task(db_session, user, {
        "id": task_id,
        "memo": None,
        "priority": None,
        "scheduledAt": None,
        "categoryId": None,
    })
    task = r.data["task"]
    assert task["memo"] is None
    assert task["priority"] is None
    assert task["scheduledAt"] is None
    assert task["categoryId"] is None
    assert task["category"] is None


async def test_update_does_not_change_status(db_session, user, add_task):
    task_id = await add_task(user.id, status=TaskStatus.COMPLETED, completed_at=NOW)

    r = await task_service.update_task(db_session, user, {"id": task_id, "memo": "done quickly"})
    assert r.data["task"]["status"] == "COMPLETED"
    assert r.data["task"]["completedAt"] is not None


async def test_update_rejects_null_title(db_session, user, add_task):
    task_id = await add_task(user.id)

    r = await task_service.update_task(db_session, user, {"id": task_id, "title": None})
    assert r.code == ErrorCode.VALIDATION_ERROR
    assert r.error == "Title is required"


async def test_update_with_foreign_category_is_not_found(db_session, user, other_user, add_task, add_category):
    task_id = await add_task(user.id)
    category_id = await add_category(other_user.id, "Bob's")

    r = await task_service.update_task(db_session, user, {"id": task_id, "categoryId": category_id})
    assert r.code == ErrorCode.NOT_FOUND


async def test_update_without_changes_returns_task(db_session, user, add_task):
    task_id = await add_task(user.id, "Stay")

    r = await task_service.update_task(db_session, user, {"id": task_id})
    assert r.success
    assert r.data["task"]["title"] == "Stay"


# ===================== OWNERSHIP & DELETE =====================


async def test_other_users_task_is_indistinguishable_from_missing(db_session, user, other_user, add_task):
    foreign_id = await add_task(other_user.id, "Bob's task")

    operations = [
        (task_service.complete_task, {"id": foreign_id}),
        (task_service.uncomplete_task, {"id": foreign_id}),
        (task_service.skip_task, {"id": foreign_id}),
        (task_service.unskip_task, {"id": foreign_id}),
        (task_service.update_task, {"id": foreign_id, "title": "mine now"}),
        (task_service.delete_task, {"id": foreign_id}),
    ]
    for operation, payload in operations:
        foreign = await operation(db_session, user, payload)
        missing = await operation(db_session, user, {**payload, "id": "does-not-exist"})
        assert foreign.code == missing.code == ErrorCode.NOT_FOUND
        assert foreign.error == missing.error

    row = (await db_session.execute(select(Task).where(Task.id == foreign_id))).scalar_one()
    assert row.title == "Bob's task"
    assert row.status == TaskStatus.PENDING


async def test_delete_task(db_session, user, add_task):
    task_id = await add_task(user.id)

    r = await task_service.delete_task(db_session, user, {"id": task_id})
    assert r.success
    assert r.data == {"id": task_id}

    again = await task_service.delete_task(db_session, user, {"id": task_id})
    assert again.code == ErrorCode.NOT_FOUND


async def test_empty_id_is_validation_error(db_session, user):
    r = await task_service.complete_task(db_session, user, {"id": ""})
    assert r.code == ErrorCode.VALIDATION_ERROR
    assert r.error == "ID is required"


async def test_unexpected_failure_becomes_internal_error(db_session, user, add_task, monkeypatch):
    task_id = await add_task(user.id)

    async def explode(*args, **kwargs):
        raise RuntimeError("database is on fire")

    monkeypatch.setattr("yarukoto.services.task_store.update_task", explode)

    r = await task_service.complete_task(db_session, user, {"id": task_id}, now=datetime(2024, 1, 10))
    assert not r.success
    assert r.code == ErrorCode.INTERNAL_ERROR
    assert r.error == "Failed to complete task"
    assert "fire" not in r.error
