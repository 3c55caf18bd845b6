"""
Account endpoints
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from yarukoto.api.auth import get_user_context
from yarukoto.api.errors import unwrap
from yarukoto.database import get_db
from yarukoto.services import account_service
from yarukoto.services.context import UserContext

router = APIRouter()


@router.delete("")
async def delete_account(
    db: AsyncSession = Depends(get_db),
    user: UserContext = Depends(get_user_context)
):
    """Delete the signed-in user with all tasks and categories"""
    return unwrap(await account_service.delete_account(db, user))
