"""
Test configuration and fixtures for the loan service tests.
"""
import os

# Use SQLite for testing (in-memory)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
os.environ["DATABASE_URL"] = TEST_DATABASE_URL

import pytest
from typing import AsyncGenerator
from decimal import Decimal

import httpx
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool
from httpx import AsyncClient, ASGITransport

from app.core.database import Base, get_db
from app.core.dependencies import get_user_client, get_notifier
from app.modules.loans.services import LoanService
from app.modules.notifications.services import LoanNotifier
from app.modules.users.client import UserClient
from main import app


# ============================================================
# Fake User Service
# ============================================================

USERS = {
    1: {
        "id": 1,
        "name": "Ada",
        "surname": "Lovelace",
        "email": "ada@example.com",
        "phone": "+441234567",
        "createdAt": "2026-01-05T09:30:00",
        "updatedAt": "2026-02-01T12:00:00",
    },
    2: {
        "id": 2,
        "name": "Alan",
        "surname": "Turing",
        "email": "alan@example.com",
        "phone": "+447654321",
    },
}
BLOCKED_USER_ID = 403
BROKEN_USER_ID = 500
UNKNOWN_USER_ID = 404


def user_service_handler(request: httpx.Request) -> httpx.Response:
    """Stand-in for GET /v1/users/{id} on the user service"""
    user_id = int(request.url.path.rsplit("/", 1)[-1])
    if user_id in USERS:
        return httpx.Response(200, json=USERS[user_id])
    if user_id == BLOCKED_USER_ID:
        return httpx.Response(403, json={"code": "USER_BLOCKED"})
    if user_id == BROKEN_USER_ID:
        return httpx.Response(500, json={"code": "USER_SERVICE_DOWN"})
    return httpx.Response(404, json={"code": "USER_NOT_FOUND"})


class RecordingNotifier(LoanNotifier):
    """Notifier that remembers which loans it was told about"""

    def __init__(self):
        self.created = []

    async def notify_loan_created(self, loan) -> None:
        self.created.append(loan.id)


# ============================================================
# Database Fixtures
# ============================================================

@pytest.fixture
async def test_engine():
    """Create a fresh in-memory database per test"""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create database session for each test"""
    async_session = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False
    )

    async with async_session() as session:
        yield session
        await session.rollback()


# ============================================================
# Collaborator Fixtures
# ============================================================

@pytest.fixture
async def user_client() -> AsyncGenerator[UserClient, None]:
    """User client wired to the fake user service"""
    http_client = httpx.AsyncClient(
        base_url="http://user-service",
        transport=httpx.MockTransport(user_service_handler)
    )
    client = UserClient(http_client)
    yield client
    await client.aclose()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def loan_service(db_session, user_client, notifier) -> LoanService:
    return LoanService(
        db_session,
        user_client,
        notifier=notifier,
        annual_interest_rate=Decimal("12.00")
    )


# ============================================================
# HTTP Client Fixtures
# ============================================================

@pytest.fixture
async def client(db_session, user_client, notifier) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with database and user service overrides"""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_user_client] = lambda: user_client
    app.dependency_overrides[get_notifier] = lambda: notifier

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
