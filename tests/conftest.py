"""
Pytest configuration for the application
"""
import datetime as dt
from decimal import Decimal
from typing import AsyncGenerator, Dict

import httpx
import pytest
import pytest_asyncio
from asgi_lifespan import LifespanManager
from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from src.auth.jwt import create_access_token
from src.core.config import settings
from src.db.base import Base
from src.db.models import BillingCycle, Subscription, SubscriptionStatus, User, UserRole
from src.db.session import Database, get_db
from src.main import create_application
from src.services.limits import RequestLimiter


# Override runtime settings to avoid external deps
settings.ENV = "test"
settings.LOG_LEVEL = "WARNING"
settings.DATABASE_URI = "sqlite+aiosqlite://"
API_PREFIX = f"{settings.API_PREFIX}/v1"


class FakeRedis:
    """Minimal async Redis stub for rate limiting and idempotency tests."""

    def __init__(self) -> None:
        self.store: Dict[str, int | str] = {}
        self.closed = False

    async def incr(self, key: str) -> int:
        current = int(self.store.get(key, 0)) + 1
        self.store[key] = current
        return current

    async def expire(self, key: str, seconds: int) -> None:
        self.store.setdefault(f"{key}:ttl", seconds)

    async def set(self, key: str, value: str, ex: int | None = None, nx: bool = False) -> bool:
        if nx and key in self.store:
            return False
        self.store[key] = value
        if ex is not None:
            self.store[f"{key}:ttl"] = ex
        return True

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def fake_redis() -> FakeRedis:
    """In-memory Redis stub handed to the application limiter."""

    return FakeRedis()


@pytest_asyncio.fixture
async def test_db_engine():
    """
    Create an in-memory database with all tables for one test.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def test_db(test_db_engine) -> AsyncGenerator[AsyncSession, None]:
    """
    Create a new database session for a test.
    """
    session_factory = async_sessionmaker(test_db_engine, expire_on_commit=False)
    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.rollback()


@pytest_asyncio.fixture
async def test_app(test_db_engine, test_db, fake_redis) -> AsyncGenerator[FastAPI, None]:
    """
    Create a FastAPI test application sharing the test session.
    """
    app = create_application(
        Database.from_engine(test_db_engine),
        RequestLimiter(fake_redis, settings.limits),
    )

    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield test_db

    app.dependency_overrides[get_db] = _override_get_db
    async with LifespanManager(app):
        yield app


@pytest_asyncio.fixture
async def client(test_app: FastAPI) -> AsyncGenerator[httpx.AsyncClient, None]:
    """
    Create an async HTTP client for testing.
    """
    transport = httpx.ASGITransport(app=test_app)
    async with httpx.AsyncClient(
        transport=transport,
        base_url="http://test",
    ) as client:
        yield client


async def seed_user(
    session: AsyncSession, email: str, role: UserRole = UserRole.USER
) -> User:
    user = User(email=email, name=email.split("@")[0], role=role)
    session.add(user)
    await session.flush()
    await session.refresh(user)
    return user


async def seed_subscription(session: AsyncSession, user: User, **overrides) -> Subscription:
    values = {
        "name": "Netflix",
        "category": "Streaming",
        "amount": Decimal("15.99"),
        "billing_cycle": BillingCycle.MONTHLY,
        "next_billing_date": dt.date.today() + dt.timedelta(days=5),
        "status": SubscriptionStatus.ACTIVE,
    }
    values.update(overrides)
    subscription = Subscription(user_id=user.id, **values)
    session.add(subscription)
    await session.flush()
    await session.refresh(subscription)
    return subscription


def build_auth_header(user: User) -> Dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest_asyncio.fixture
async def user(test_db) -> User:
    return await seed_user(test_db, "alice@example.com")


@pytest_asyncio.fixture
async def other_user(test_db) -> User:
    return await seed_user(test_db, "bob@example.com")


@pytest_asyncio.fixture
async def admin(test_db) -> User:
    return await seed_user(test_db, "root@example.com", role=UserRole.ADMIN)


@pytest.fixture
def make_subscription(test_db):
    """Factory inserting subscriptions directly through the session."""

    async def _make(owner: User, **overrides) -> Subscription:
        return await seed_subscription(test_db, owner, **overrides)

    return _make


@pytest.fixture
def auth_headers():
    return build_auth_header
