"""
Portfolio API - Test Fixtures
=============================

Shared pytest fixtures for all tests.
"""

from collections.abc import AsyncGenerator
from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from passlib.hash import bcrypt
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from portfolio_api.api.contact import get_notifier
from portfolio_api.api.deps import create_access_token
from portfolio_api.api.main import app
from portfolio_api.core.database import Base, get_db
from portfolio_api.core.models import Admin, LearningPlan, LearningTask, Phase

# Use in-memory SQLite for tests (fast)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

ADMIN_PASSWORD = "AdminPass123!"


# ==========================================================================
# Database Fixtures
# ==========================================================================

@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Provide a clean database session for each test.

    Each test gets its own in-memory database.
    """
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    async with session_factory() as session:
        yield session

    await engine.dispose()


class RecordingNotifier:
    """Stands in for the SMTP notifier and records what would be sent."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent: list[tuple[str, str, str]] = []

    async def notify_new_contact(self, name: str, email: str, message: str) -> bool:
        self.sent.append((name, email, message))
        return not self.fail


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest_asyncio.fixture
async def client(
    db_session: AsyncSession, notifier: RecordingNotifier
) -> AsyncGenerator[AsyncClient, None]:
    """Provide test HTTP client with database override."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notifier] = lambda: notifier

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


# ==========================================================================
# Admin Fixtures
# ==========================================================================

@pytest_asyncio.fixture
async def test_admin(db_session: AsyncSession) -> Admin:
    """
    Create a test admin.

    Password: AdminPass123!
    """
    admin = Admin(
        id=uuid4(),
        username="admin",
        email="admin@example.com",
        password_hash=bcrypt.hash(ADMIN_PASSWORD),
    )
    db_session.add(admin)
    await db_session.commit()
    await db_session.refresh(admin)
    return admin


@pytest.fixture
def admin_headers(test_admin: Admin) -> dict[str, str]:
    """Authorization headers for the test admin."""
    token = create_access_token(test_admin.id, test_admin.username)
    return {"Authorization": f"Bearer {token}"}


# ==========================================================================
# Learning Fixtures
# ==========================================================================

@pytest_asyncio.fixture
async def sample_plan(db_session: AsyncSession) -> LearningPlan:
    plan = LearningPlan(
        id=uuid4(),
        title="Distributed Systems",
        description="Work through the classic papers",
        goals=["Read Raft", "Implement a KV store"],
    )
    db_session.add(plan)
    await db_session.commit()
    await db_session.refresh(plan)
    return plan


@pytest_asyncio.fixture
async def sample_phase(db_session: AsyncSession, sample_plan: LearningPlan) -> Phase:
    phase = Phase(id=uuid4(), plan_id=sample_plan.id, title="Consensus", order=1)
    db_session.add(phase)
    await db_session.commit()
    await db_session.refresh(phase)
    return phase


@pytest_asyncio.fixture
async def sample_task(db_session: AsyncSession, sample_plan: LearningPlan) -> LearningTask:
    task = LearningTask(
        id=uuid4(),
        plan_id=sample_plan.id,
        title="Read the Raft paper",
        aim="Understand leader election",
        total_time_spent=0,
    )
    db_session.add(task)
    await db_session.commit()
    await db_session.refresh(task)
    return task


# ==========================================================================
# Helpers
# ==========================================================================

class FakeClock:
    """Manually advanced UTC clock for timer tests."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2024, 3, 4, 9, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
