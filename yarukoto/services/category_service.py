"""
Public category operations - names are unique per user, ignoring case
"""
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from yarukoto.services.context import UserContext
from yarukoto.schemas.category import (
    CategoryIdInput,
    CreateCategoryInput,
    UpdateCategoryInput,
    serialize_category,
)
from yarukoto.schemas.updates import Set, Unchanged, field_update
from yarukoto.services import category_store, task_store
from yarukoto.services.results import ConflictError, NotFoundError, action, parse_input
from yarukoto.utils.logger import get_logger

logger = get_logger(__name__)

CATEGORY_NOT_FOUND = "Category not found"
DUPLICATE_NAME = "A category with the same name already exists"


@action("Failed to fetch categories")
async def get_categories(db: AsyncSession, user: UserContext) -> dict:
    categories = await category_store.list_categories(db, user.id)
    return {"categories": [serialize_category(c) for c in categories]}


@action("Failed to create category")
async def create_category(db: AsyncSession, user: UserContext, data: Any) -> dict:
    parsed = parse_input(CreateCategoryInput, data)
    name = parsed.name.strip()

    if await category_store.find_by_name(db, user.id, name):
        raise ConflictError(DUPLICATE_NAME)

    category = await category_store.insert_category(db, user.id, name, parsed.color)
    payload = {"category": serialize_category(category)}
    await db.commit()
    return payload


@action("Failed to update category")
async def update_category(db: AsyncSession, user: UserContext, data: Any) -> dict:
    parsed = parse_input(UpdateCategoryInput, data)

    existing = await category_store.get_category(db, user.id, parsed.id)
    if existing is None:
        raise NotFoundError(CATEGORY_NOT_FOUND)

    values = {}
    if parsed.name is not None:
        name = parsed.name.strip()
        # Renaming to the same name in a different case is not a conflict
        if name.lower() != existing.name.lower():
            if await category_store.find_by_name(db, user.id, name, exclude_id=parsed.id):
                raise ConflictError(DUPLICATE_NAME)
        values["name"] = name

    color = field_update(parsed, "color")
    if not isinstance(color, Unchanged):
        values["color"] = color.value if isinstance(color, Set) else None

    category = existing
    if values:
        category = await category_store.update_category(db, user.id, parsed.id, values)
        if category is None:
            raise NotFoundError(CATEGORY_NOT_FOUND)

    payload = {"category": serialize_category(category)}
    await db.commit()
    return payload


@action("Failed to delete category")
async def delete_category(db: AsyncSession, user: UserContext, data: Any) -> dict:
    """Delete a category; its tasks are kept and lose the reference"""
    parsed = parse_input(CategoryIdInput, data)

    detached = await task_store.detach_category(db, user.id, parsed.id)
    if not await category_store.delete_category(db, user.id, parsed.id):
        raise NotFoundError(CATEGORY_NOT_FOUND)

    await db.commit()
    logger.info(f"Deleted category {parsed.id}, detached {detached} task(s)")
    return {"id": parsed.id}
