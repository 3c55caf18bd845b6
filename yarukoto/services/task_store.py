"""
Task persistence - every query is scoped to the owning user.

Mutations are single conditional statements (`WHERE id = ? AND user_id = ?`);
a statement that touches no row means the task does not exist for this user.
"""
from typing import List, Optional

from sqlalchemy import select, update, delete
from sqlalchemy.ext.asyncio import AsyncSession

from yarukoto.models.task import Task
from yarukoto.utils.helpers import utcnow


async def get_task(db: AsyncSession, user_id: str, task_id: str) -> Optional[Task]:
    result = await db.execute(
        select(Task)
        .where(Task.id == task_id, Task.user_id == user_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def list_tasks(db: AsyncSession, user_id: str, *conditions, order_by=()) -> List[Task]:
    query = (
        select(Task)
        .where(Task.user_id == user_id, *conditions)
        .execution_options(populate_existing=True)
    )
    if order_by:
        query = query.order_by(*order_by)
    result = await db.execute(query)
    return list(result.scalars().all())


async def insert_task(db: AsyncSession, task: Task) -> Task:
    db.add(task)
    await db.flush()
    return await get_task(db, task.user_id, task.id)


async def update_task(db: AsyncSession, user_id: str, task_id: str, values: dict) -> Optional[Task]:
    """Apply `values` to the user's task in one statement; None if no such task"""
    values = {**values, "updated_at": utcnow()}
    result = await db.execute(
        update(Task)
        .where(Task.id == task_id, Task.user_id == user_id)
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        return None
    return await get_task(db, user_id, task_id)


async def delete_task(db: AsyncSession, user_id: str, task_id: str) -> bool:
    result = await db.execute(
        delete(Task)
        .where(Task.id == task_id, Task.user_id == user_id)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount > 0


async def detach_category(db: AsyncSession, user_id: str, category_id: str) -> int:
    """Null out the category reference of every task pointing at it"""
    result = await db.execute(
        update(Task)
        .where(Task.user_id == user_id, Task.category_id == category_id)
        .values(category_id=None, updated_at=utcnow())
        .execution_options(synchronize_session=False)
    )
    return result.rowcount


async def delete_user_tasks(db: AsyncSession, user_id: str) -> int:
    result = await db.execute(
        delete(Task).where(Task.user_id == user_id).execution_options(synchronize_session=False)
    )
    return result.rowcount
