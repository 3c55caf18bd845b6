"""
Account removal - deletes the user together with all of their tasks and categories
"""
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from yarukoto.models.user import User
from yarukoto.services.context import UserContext
from yarukoto.services import category_store, task_store
from yarukoto.services.results import action
from yarukoto.utils.logger import get_logger

logger = get_logger(__name__)


@action("Failed to delete account")
async def delete_account(db: AsyncSession, user: UserContext) -> dict:
    tasks = await task_store.delete_user_tasks(db, user.id)
    categories = await category_store.delete_user_categories(db, user.id)
    await db.execute(
        delete(User).where(User.id == user.id).execution_options(synchronize_session=False)
    )
    await db.commit()
    logger.info(f"Deleted account {user.id} ({tasks} tasks, {categories} categories)")
    return {"id": user.id}
