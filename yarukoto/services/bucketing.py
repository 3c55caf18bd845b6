"""
Temporal bucketing of tasks into the "today" view and the per-date view.

Scheduled dates are compared as calendar dates. Completion and skip events
are timestamps and are matched against the UTC window of the calendar day
(see utils.helpers.get_day_range).
"""
from datetime import date, datetime
from typing import Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from yarukoto.models.task import Task, TaskStatus
from yarukoto.services import task_store
from yarukoto.utils.helpers import get_day_range, today

TODAY_BUCKETS = ("overdue", "today", "undated", "completed", "skipped")


async def _completed_on(db: AsyncSession, user_id: str, day: date) -> List[Task]:
    start, end = get_day_range(day)
    return await task_store.list_tasks(
        db, user_id,
        Task.status == TaskStatus.COMPLETED,
        Task.completed_at >= start,
        Task.completed_at < end,
        order_by=(Task.completed_at.desc(),),
    )


async def _skipped_on(db: AsyncSession, user_id: str, day: date) -> List[Task]:
    start, end = get_day_range(day)
    return await task_store.list_tasks(
        db, user_id,
        Task.status == TaskStatus.SKIPPED,
        Task.skipped_at >= start,
        Task.skipped_at < end,
        order_by=(Task.skipped_at.desc(),),
    )


async def get_today_view(db: AsyncSession, user_id: str, now: Optional[datetime] = None) -> Dict[str, List[Task]]:
    """
    Partition the user's tasks into the five buckets of the today view.

    Pending tasks scheduled after today belong to no bucket.
    """
    current = today(now)
    pending = Task.status == TaskStatus.PENDING

    overdue = await task_store.list_tasks(
        db, user_id, pending, Task.scheduled_at < current,
        order_by=(Task.scheduled_at.asc(), Task.created_at.desc()),
    )
    due_today = await task_store.list_tasks(
        db, user_id, pending, Task.scheduled_at == current,
        order_by=(Task.created_at.desc(),),
    )
    undated = await task_store.list_tasks(
        db, user_id, pending, Task.scheduled_at.is_(None),
        order_by=(Task.created_at.desc(),),
    )

    return {
        "overdue": overdue,
        "today": due_today,
        "undated": undated,
        "completed": await _completed_on(db, user_id, current),
        "skipped": await _skipped_on(db, user_id, current),
    }


async def get_date_view(db: AsyncSession, user_id: str, day: date, now: Optional[datetime] = None) -> dict:
    """
    Tasks for an arbitrary calendar day.

    Past days also list what was completed or skipped that day; for today and
    future days those lists are empty. `scheduled` holds every task scheduled
    on the day regardless of status.
    """
    current = today(now)
    is_past = day < current
    is_future = day > current

    completed: List[Task] = []
    skipped: List[Task] = []
    if is_past:
        completed = await _completed_on(db, user_id, day)
        skipped = await _skipped_on(db, user_id, day)

    scheduled = await task_store.list_tasks(
        db, user_id, Task.scheduled_at == day,
        order_by=(Task.created_at.desc(),),
    )

    return {
        "is_past": is_past,
        "is_future": is_future,
        "completed": completed,
        "skipped": skipped,
        "scheduled": scheduled,
    }
