"""
Task search with grouping by scheduled date, and monthly calendar statistics
"""
from collections import OrderedDict
from datetime import date, datetime
from typing import Dict, List, Optional, Tuple

from sqlalchemy import and_, case, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from yarukoto.models.task import Task, TaskStatus
from yarukoto.schemas.task import SearchTasksInput
from yarukoto.schemas.updates import Clear, Set
from yarukoto.services import task_store
from yarukoto.utils.helpers import get_month_bounds, today

TaskGroups = List[Tuple[Optional[date], List[Task]]]


def build_search_conditions(filters: SearchTasksInput) -> list:
    """Translate search filters into SQL conditions (combined with AND)"""
    conditions = []

    keyword = (filters.keyword or "").strip()
    if keyword:
        conditions.append(or_(
            Task.title.icontains(keyword, autoescape=True),
            Task.memo.icontains(keyword, autoescape=True),
        ))

    if filters.status and filters.status != "all":
        conditions.append(Task.status == TaskStatus(filters.status.upper()))

    category = filters.category_filter()
    if isinstance(category, Set):
        conditions.append(Task.category_id == category.value)
    elif isinstance(category, Clear):
        conditions.append(Task.category_id.is_(None))

    priority = filters.priority_filter()
    if isinstance(priority, Set):
        conditions.append(Task.priority == priority.value)
    elif isinstance(priority, Clear):
        conditions.append(Task.priority.is_(None))

    # scheduled_at is a calendar date, so "<= date_to" covers the whole day
    if filters.date_from:
        conditions.append(Task.scheduled_at >= filters.date_from)
    if filters.date_to:
        conditions.append(Task.scheduled_at <= filters.date_to)

    return conditions


def group_by_scheduled_date(tasks: List[Task]) -> TaskGroups:
    """
    Bucket tasks by scheduled date, keeping each bucket's incoming order.
    Dated groups come newest first; the undated group is always last.
    """
    buckets: "OrderedDict[Optional[date], List[Task]]" = OrderedDict()
    for task in tasks:
        buckets.setdefault(task.scheduled_at, []).append(task)

    dated = sorted((key for key in buckets if key is not None), reverse=True)
    groups: TaskGroups = [(key, buckets[key]) for key in dated]
    if None in buckets:
        groups.append((None, buckets[None]))
    return groups


async def search_tasks(db: AsyncSession, user_id: str, filters: SearchTasksInput) -> Tuple[TaskGroups, int]:
    tasks = await task_store.list_tasks(
        db, user_id,
        *build_search_conditions(filters),
        order_by=(Task.scheduled_at.desc(), Task.created_at.desc()),
    )
    return group_by_scheduled_date(tasks), len(tasks)


async def monthly_stats(
    db: AsyncSession, user_id: str, year: int, month: int, now: Optional[datetime] = None
) -> Dict[date, dict]:
    """
    Per-day counts for the days of a month that have scheduled tasks.

    Days without tasks are absent from the result. `overdue` counts pending
    tasks scheduled strictly before today.
    """
    first_day, last_day = get_month_bounds(year, month)
    current = today(now)

    query = (
        select(
            Task.scheduled_at,
            func.count(Task.id).label("total"),
            func.sum(case((Task.status == TaskStatus.COMPLETED, 1), else_=0)).label("completed"),
            func.sum(case(
                (and_(Task.status == TaskStatus.PENDING, Task.scheduled_at < current), 1),
                else_=0,
            )).label("overdue"),
            func.sum(case((Task.status == TaskStatus.SKIPPED, 1), else_=0)).label("skipped"),
        )
        .where(
            Task.user_id == user_id,
            Task.scheduled_at >= first_day,
            Task.scheduled_at <= last_day,
        )
        .group_by(Task.scheduled_at)
        .order_by(Task.scheduled_at)
    )
    result = await db.execute(query)

    return {
        row.scheduled_at: {
            "total": row.total,
            "completed": int(row.completed or 0),
            "overdue": int(row.overdue or 0),
            "skipped": int(row.skipped or 0),
        }
        for row in result.all()
    }
