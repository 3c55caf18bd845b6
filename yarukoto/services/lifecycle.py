"""
Task lifecycle engine.

Status transitions are PENDING <-> COMPLETED and PENDING <-> SKIPPED. Each
transition writes the full set of lifecycle fields (status, completed_at,
skipped_at, skip_reason) so that completed_at is set iff the task is
COMPLETED and skipped_at is set iff it is SKIPPED, whatever state the task
was in before.
"""
from datetime import date, datetime
from typing import Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from yarukoto.models.task import Task, TaskStatus, Priority
from yarukoto.schemas.updates import FieldUpdate, Set, Unchanged
from yarukoto.services import category_store, task_store
from yarukoto.services.results import InvalidInputError, NotFoundError
from yarukoto.utils.helpers import utcnow
from yarukoto.utils.logger import get_logger
from yarukoto.utils.validators import clean_optional_text

logger = get_logger(__name__)

TASK_NOT_FOUND = "Task not found"
CATEGORY_NOT_FOUND = "Category not found"


def pending_fields() -> dict:
    return {
        "status": TaskStatus.PENDING,
        "completed_at": None,
        "skipped_at": None,
        "skip_reason": None,
    }


def completed_fields(now: datetime) -> dict:
    return {
        "status": TaskStatus.COMPLETED,
        "completed_at": now,
        "skipped_at": None,
        "skip_reason": None,
    }


def skipped_fields(now: datetime, reason: Optional[str]) -> dict:
    return {
        "status": TaskStatus.SKIPPED,
        "completed_at": None,
        "skipped_at": now,
        "skip_reason": clean_optional_text(reason),
    }


async def _ensure_category(db: AsyncSession, user_id: str, category_id: str) -> None:
    if await category_store.get_category(db, user_id, category_id) is None:
        raise NotFoundError(CATEGORY_NOT_FOUND)


async def _transition(db: AsyncSession, user_id: str, task_id: str, values: dict) -> Task:
    task = await task_store.update_task(db, user_id, task_id, values)
    if task is None:
        raise NotFoundError(TASK_NOT_FOUND)
    logger.debug(f"Task {task_id} -> {task.status.value}")
    return task


async def create_task(
    db: AsyncSession,
    user_id: str,
    title: str,
    scheduled_at: Optional[date] = None,
    category_id: Optional[str] = None,
    priority: Optional[Priority] = None,
    memo: Optional[str] = None,
) -> Task:
    """Create a PENDING task for the user"""
    title = title.strip()
    if not title:
        raise InvalidInputError("Title is required")
    if category_id:
        await _ensure_category(db, user_id, category_id)

    task = Task(
        user_id=user_id,
        title=title,
        memo=clean_optional_text(memo),
        scheduled_at=scheduled_at,
        category_id=category_id or None,
        priority=priority,
        status=TaskStatus.PENDING,
    )
    return await task_store.insert_task(db, task)


async def update_task(
    db: AsyncSession, user_id: str, task_id: str, changes: Dict[str, FieldUpdate]
) -> Task:
    """
    Apply tagged field changes. Unchanged fields are left alone, Clear sets a
    nullable field to null, Set writes the value. Status is never touched.
    """
    values = {}
    for name, change in changes.items():
        if isinstance(change, Unchanged):
            continue
        value = change.value if isinstance(change, Set) else None

        if name == "title":
            value = (value or "").strip()
            if not value:
                raise InvalidInputError("Title is required")
        elif name == "memo":
            value = clean_optional_text(value)
        elif name == "category_id":
            value = value or None
            if value is not None:
                await _ensure_category(db, user_id, value)
        values[name] = value

    if not values:
        task = await task_store.get_task(db, user_id, task_id)
        if task is None:
            raise NotFoundError(TASK_NOT_FOUND)
        return task

    task = await task_store.update_task(db, user_id, task_id, values)
    if task is None:
        raise NotFoundError(TASK_NOT_FOUND)
    return task


async def complete_task(db: AsyncSession, user_id: str, task_id: str, now: Optional[datetime] = None) -> Task:
    """Mark COMPLETED; completing again refreshes completed_at"""
    return await _transition(db, user_id, task_id, completed_fields(now or utcnow()))


async def uncomplete_task(db: AsyncSession, user_id: str, task_id: str) -> Task:
    """Back to PENDING; accepted from any status"""
    return await _transition(db, user_id, task_id, pending_fields())


async def skip_task(
    db: AsyncSession, user_id: str, task_id: str, reason: Optional[str] = None, now: Optional[datetime] = None
) -> Task:
    return await _transition(db, user_id, task_id, skipped_fields(now or utcnow(), reason))


async def unskip_task(db: AsyncSession, user_id: str, task_id: str) -> Task:
    """Back to PENDING; accepted from any status"""
    return await _transition(db, user_id, task_id, pending_fields())


async def delete_task(db: AsyncSession, user_id: str, task_id: str) -> str:
    if not await task_store.delete_task(db, user_id, task_id):
        raise NotFoundError(TASK_NOT_FOUND)
    return task_id
