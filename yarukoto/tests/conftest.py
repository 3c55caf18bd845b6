"""
Test fixtures - in-memory SQLite database, seeded users + authenticated HTTP client
"""
from datetime import datetime

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from yarukoto.database import Base, get_db, configure_sqlite_connection
from yarukoto.main import app
from yarukoto.api.auth import get_password_hash, create_access_token
from yarukoto.models.category import Category
from yarukoto.models.task import Task, TaskStatus
from yarukoto.models.user import User
from yarukoto.services.context import UserContext

# Fixed "current instant" used by engine-level tests (naive UTC)
NOW = datetime(2024, 1, 10, 9, 30, 0)


@pytest_asyncio.fixture()
async def db_session():
    """Create a fresh in-memory SQLite database for each test"""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    configure_sqlite_connection(engine.sync_engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with session_factory() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture()
async def seed_data(db_session):
    """Two users: the signed-in one and somebody else"""
    alice = User(
        email="alice@example.com",
        full_name="Alice",
        hashed_password=get_password_hash("testpass123"),
    )
    bob = User(
        email="bob@example.com",
        full_name="Bob",
        hashed_password=get_password_hash("testpass123"),
    )
    db_session.add_all([alice, bob])
    await db_session.commit()

    return {
        "user": UserContext(id=alice.id, email=alice.email),
        "other": UserContext(id=bob.id, email=bob.email),
    }


@pytest.fixture()
def user(seed_data):
    return seed_data["user"]


@pytest.fixture()
def other_user(seed_data):
    return seed_data["other"]


@pytest.fixture()
def add_task(db_session):
    """Insert a task row directly and return its id"""

    async def _add(user_id: str, title: str = "Task", **fields) -> str:
        fields.setdefault("status", TaskStatus.PENDING)
        fields.setdefault("created_at", NOW)
        fields.setdefault("updated_at", fields["created_at"])
        task = Task(user_id=user_id, title=title, **fields)
        db_session.add(task)
        await db_session.commit()
        return task.id

    return _add


@pytest.fixture()
def add_category(db_session):
    """Insert a category row directly and return its id"""

    async def _add(user_id: str, name: str, color: str = None) -> str:
        category = Category(user_id=user_id, name=name, color=color)
        db_session.add(category)
        await db_session.commit()
        return category.id

    return _add


@pytest_asyncio.fixture()
async def client(db_session, seed_data):
    """Authenticated httpx AsyncClient bound to the FastAPI app"""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    token = create_access_token(data={"sub": seed_data["user"].email})

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test", follow_redirects=True) as ac:
        ac.headers["Authorization"] = f"Bearer {token}"
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture()
async def unauth_client(db_session):
    """Unauthenticated httpx AsyncClient"""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test", follow_redirects=True) as ac:
        yield ac

    app.dependency_overrides.clear()
