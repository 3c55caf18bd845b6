"""
Public task operations.

Each operation validates its input, runs the engine against the caller's
tasks only and returns an ActionResult whose payload is plain JSON-ready data.
"""
from datetime import datetime
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from yarukoto.services.context import UserContext
from yarukoto.schemas.task import (
    CreateTaskInput,
    DayTaskStats,
    MonthlyStatsInput,
    SearchTasksInput,
    SkipTaskInput,
    TaskIdInput,
    TasksByDateInput,
    UpdateTaskInput,
    serialize_task,
)
from yarukoto.services import bucketing, lifecycle, search
from yarukoto.services.results import action, parse_input


def _tasks(tasks) -> list:
    return [serialize_task(t) for t in tasks]


# --- Queries ---

@action("Failed to fetch tasks")
async def get_today_tasks(db: AsyncSession, user: UserContext, now: Optional[datetime] = None) -> dict:
    view = await bucketing.get_today_view(db, user.id, now=now)
    return {bucket: _tasks(view[bucket]) for bucket in bucketing.TODAY_BUCKETS}


@action("Failed to fetch tasks")
async def get_tasks_by_date(db: AsyncSession, user: UserContext, data: Any, now: Optional[datetime] = None) -> dict:
    parsed = parse_input(TasksByDateInput, data)
    view = await bucketing.get_date_view(db, user.id, parsed.date, now=now)
    return {
        "isPast": view["is_past"],
        "isFuture": view["is_future"],
        "completed": _tasks(view["completed"]),
        "skipped": _tasks(view["skipped"]),
        "scheduled": _tasks(view["scheduled"]),
    }


@action("Search failed")
async def search_tasks(db: AsyncSession, user: UserContext, data: Any = None) -> dict:
    filters = parse_input(SearchTasksInput, data)
    groups, total = await search.search_tasks(db, user.id, filters)
    return {
        "groups": [
            {"date": day.isoformat() if day else None, "tasks": _tasks(tasks)}
            for day, tasks in groups
        ],
        "total": total,
    }


@action("Failed to fetch task statistics")
async def get_monthly_task_stats(db: AsyncSession, user: UserContext, data: Any, now: Optional[datetime] = None) -> dict:
    parsed = parse_input(MonthlyStatsInput, data)
    year, month = parsed.year_month()
    stats = await search.monthly_stats(db, user.id, year, month, now=now)
    return {day.isoformat(): DayTaskStats(**counts).model_dump() for day, counts in stats.items()}


# --- Mutations ---

@action("Failed to create task")
async def create_task(db: AsyncSession, user: UserContext, data: Any) -> dict:
    parsed = parse_input(CreateTaskInput, data)
    task = await lifecycle.create_task(
        db,
        user.id,
        title=parsed.title,
        scheduled_at=parsed.scheduled_at,
        category_id=parsed.category_id,
        priority=parsed.priority,
        memo=parsed.memo,
    )
    payload = {"task": serialize_task(task)}
    await db.commit()
    return payload


@action("Failed to update task")
async def update_task(db: AsyncSession, user: UserContext, data: Any) -> dict:
    parsed = parse_input(UpdateTaskInput, data)
    task = await lifecycle.update_task(db, user.id, parsed.id, parsed.changes())
    payload = {"task": serialize_task(task)}
    await db.commit()
    return payload


@action("Failed to complete task")
async def complete_task(db: AsyncSession, user: UserContext, data: Any, now: Optional[datetime] = None) -> dict:
    parsed = parse_input(TaskIdInput, data)
    task = await lifecycle.complete_task(db, user.id, parsed.id, now=now)
    payload = {"task": serialize_task(task)}
    await db.commit()
    return payload


@action("Failed to update task")
async def uncomplete_task(db: AsyncSession, user: UserContext, data: Any) -> dict:
    parsed = parse_input(TaskIdInput, data)
    task = await lifecycle.uncomplete_task(db, user.id, parsed.id)
    payload = {"task": serialize_task(task)}
    await db.commit()
    return payload


@action("Failed to update task")
async def skip_task(db: AsyncSession, user: UserContext, data: Any, now: Optional[datetime] = None) -> dict:
    parsed = parse_input(SkipTaskInput, data)
    task = await lifecycle.skip_task(db, user.id, parsed.id, reason=parsed.reason, now=now)
    payload = {"task": serialize_task(task)}
    await db.commit()
    return payload


@action("Failed to update task")
async def unskip_task(db: AsyncSession, user: UserContext, data: Any) -> dict:
    parsed = parse_input(TaskIdInput, data)
    task = await lifecycle.unskip_task(db, user.id, parsed.id)
    payload = {"task": serialize_task(task)}
    await db.commit()
    return payload


@action("Failed to delete task")
async def delete_task(db: AsyncSession, user: UserContext, data: Any) -> dict:
    parsed = parse_input(TaskIdInput, data)
    task_id = await lifecycle.delete_task(db, user.id, parsed.id)
    await db.commit()
    return {"id": task_id}
