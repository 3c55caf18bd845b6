"""
Category persistence - user-scoped, with case-insensitive name lookup
"""
from typing import List, Optional

from sqlalchemy import select, update, delete, func
from sqlalchemy.ext.asyncio import AsyncSession

from yarukoto.models.category import Category
from yarukoto.utils.helpers import utcnow


async def get_category(db: AsyncSession, user_id: str, category_id: str) -> Optional[Category]:
    result = await db.execute(
        select(Category)
        .where(Category.id == category_id, Category.user_id == user_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def find_by_name(
    db: AsyncSession, user_id: str, name: str, exclude_id: Optional[str] = None
) -> Optional[Category]:
    """Look up a category by name ignoring case"""
    query = select(Category).where(
        Category.user_id == user_id,
        func.lower(Category.name) == name.lower(),
    )
    if exclude_id is not None:
        query = query.where(Category.id != exclude_id)
    result = await db.execute(query.limit(1))
    return result.scalars().first()


async def list_categories(db: AsyncSession, user_id: str) -> List[Category]:
    result = await db.execute(
        select(Category).where(Category.user_id == user_id).order_by(Category.name.asc())
    )
    return list(result.scalars().all())


async def insert_category(db: AsyncSession, user_id: str, name: str, color: Optional[str]) -> Category:
    category = Category(user_id=user_id, name=name, color=color)
    db.add(category)
    await db.flush()
    await db.refresh(category)
    return category


async def update_category(db: AsyncSession, user_id: str, category_id: str, values: dict) -> Optional[Category]:
    values = {**values, "updated_at": utcnow()}
    result = await db.execute(
        update(Category)
        .where(Category.id == category_id, Category.user_id == user_id)
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        return None
    return await get_category(db, user_id, category_id)


async def delete_category(db: AsyncSession, user_id: str, category_id: str) -> bool:
    result = await db.execute(
        delete(Category)
        .where(Category.id == category_id, Category.user_id == user_id)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount > 0


async def delete_user_categories(db: AsyncSession, user_id: str) -> int:
    result = await db.execute(
        delete(Category).where(Category.user_id == user_id).execution_options(synchronize_session=False)
    )
    return result.rowcount
