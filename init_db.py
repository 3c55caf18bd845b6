"""Initialize database tables"""
import asyncio
from yarukoto.database import engine, Base
from yarukoto.models import *  # noqa: F401,F403 - Import all models to register them
from yarukoto.utils.logger import get_logger

logger = get_logger("init_db")


async def init():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    await engine.dispose()
    logger.info(f"Created tables: {', '.join(sorted(Base.metadata.tables))}")


if __name__ == "__main__":
    asyncio.run(init())
