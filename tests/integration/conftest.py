from datetime import datetime
from typing import Any, Dict
from uuid import UUID

import bcrypt
import pytest_asyncio
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
from tests.fixtures.dispatchers import RecordingDispatcher
from tests.fixtures.json_loader import TestDataLoader
from src.depends import (
    get_clock,
    get_credential_store,
    get_dispatcher,
    get_token_manager,
    get_unit_of_work,
)
from src.adapter.services.clock import ManualClock
from src.adapter.services.ephemeral_store import InMemoryEphemeralStore
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.credential_store import CredentialStore
from src.app.services.token_manager import BearerTokenManager
from src.domain.entities import Task, TaskStatus, User, UserStatus

TEST_SECRET = "integration-test-secret"


@pytest_asyncio.fixture
def test_data():
    return TestDataLoader()


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite:///./test.db")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with Session() as session:
        yield session


@pytest_asyncio.fixture
def clock():
    return ManualClock(datetime(2024, 1, 1, 9, 0, 0))


@pytest_asyncio.fixture
def ephemeral_store(clock):
    return InMemoryEphemeralStore(clock)


@pytest_asyncio.fixture
def credential_store(ephemeral_store, clock):
    return CredentialStore(ephemeral_store, clock)


@pytest_asyncio.fixture
def token_manager(ephemeral_store, clock):
    return BearerTokenManager(TEST_SECRET, clock, deny_list=ephemeral_store)


@pytest_asyncio.fixture
def dispatcher():
    return RecordingDispatcher()


@pytest_asyncio.fixture
async def seeded(db_session, test_data) -> Dict[str, Any]:
    """
    Insert the JSON seed users and tasks.

    Returns plain values (ids as strings) keyed by username / task key, since
    ORM rows in the shared session expire whenever a request rolls back.
    """
    users: Dict[str, Dict[str, Any]] = {}
    for row in test_data.users():
        password = row.pop("password")
        user = User(
            username=row["username"],
            email=row["email"],
            password_hash=bcrypt.hashpw(password.encode(), bcrypt.gensalt(4)).decode(),
            roles=row["roles"],
            status=UserStatus(row["status"]),
            email_verified=row["email_verified"],
        )
        db_session.add(user)
        await db_session.flush()
        users[user.username] = {
            "id": str(user.id),
            "username": user.username,
            "email": user.email,
            "password": password,
        }

    tasks: Dict[str, Dict[str, Any]] = {}
    for row in test_data.tasks():
        owner = users[row["owner"]]
        task = Task(
            user_id=UUID(owner["id"]),
            title=row["title"],
            description=row["description"],
            status=TaskStatus(row["status"]),
        )
        db_session.add(task)
        await db_session.flush()
        tasks[row["key"]] = {"id": str(task.id), "owner": row["owner"], "title": task.title}

    await db_session.commit()
    return {"users": users, "tasks": tasks}


@pytest_asyncio.fixture
async def client(db_session, clock, credential_store, token_manager, dispatcher):
    from httpx import ASGITransport
    from src.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)

    async def override_get_unit_of_work():
        yield SqlAlchemyUnitOfWork(db_session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_credential_store] = lambda: credential_store
    app.dependency_overrides[get_token_manager] = lambda: token_manager
    app.dependency_overrides[get_dispatcher] = lambda: dispatcher

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
