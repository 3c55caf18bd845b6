"""
Category API endpoints
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from yarukoto.api.auth import get_user_context
from yarukoto.api.errors import unwrap
from yarukoto.database import get_db
from yarukoto.schemas.category import CreateCategoryInput, UpdateCategoryFields
from yarukoto.services import category_service
from yarukoto.services.context import UserContext

router = APIRouter()


@router.get("/")
async def list_categories(
    db: AsyncSession = Depends(get_db),
    user: UserContext = Depends(get_user_context)
):
    """List the user's categories ordered by name"""
    return unwrap(await category_service.get_categories(db, user))


@router.post("/")
async def create_category(
    data: CreateCategoryInput,
    db: AsyncSession = Depends(get_db),
    user: UserContext = Depends(get_user_context)
):
    return unwrap(await category_service.create_category(db, user, data))


@router.patch("/{category_id}")
async def update_category(
    category_id: str,
    data: UpdateCategoryFields,
    db: AsyncSession = Depends(get_db),
    user: UserContext = Depends(get_user_context)
):
    payload = {**data.model_dump(exclude_unset=True), "id": category_id}
    return unwrap(await category_service.update_category(db, user, payload))


@router.delete("/{category_id}")
async def delete_category(
    category_id: str,
    db: AsyncSession = Depends(get_db),
    user: UserContext = Depends(get_user_context)
):
    """Delete a category; tasks using it are kept without a category"""
    return unwrap(await category_service.delete_category(db, user, {"id": category_id}))
