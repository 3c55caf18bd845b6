"""
Database configuration and session management
"""
from typing import AsyncIterator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from yarukoto.config import get_settings

settings = get_settings()

# Sync URL scheme -> async driver scheme
ASYNC_DRIVERS = {
    "postgresql://": "postgresql+asyncpg://",
    "sqlite:///": "sqlite+aiosqlite:///",
}


def to_async_url(url: str) -> str:
    """Rewrite a plain database URL to use the matching async driver"""
    for scheme, async_scheme in ASYNC_DRIVERS.items():
        if url.startswith(scheme):
            return async_scheme + url[len(scheme):]
    return url


def engine_options(sqlite: bool) -> dict:
    options = {"echo": settings.DEBUG}
    # Pool sizing only applies to server databases
    if not sqlite:
        options.update(pool_size=20, max_overflow=10, pool_pre_ping=True)
    return options


def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value


def configure_sqlite_connection(sync_engine) -> None:
    """
    Per-connection SQLite setup: enforce ON DELETE rules and replace the
    built-in ASCII-only lower() with a Unicode-aware one, so case-insensitive
    name checks and keyword search behave like they do on PostgreSQL.
    """

    @event.listens_for(sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.create_function("lower", 1, _unicode_lower)
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


database_url = to_async_url(settings.DATABASE_URL)
is_sqlite = database_url.startswith("sqlite")

engine = create_async_engine(database_url, **engine_options(is_sqlite))

if is_sqlite:
    configure_sqlite_connection(engine.sync_engine)

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False
)

Base = declarative_base()


async def get_db() -> AsyncIterator[AsyncSession]:
    """Request-scoped session; committed when the handler returns normally"""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        await session.commit()
