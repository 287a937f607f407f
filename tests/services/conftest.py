"""Service test fixtures - async DB, fake collaborators, FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - Time is a FakeClock shared by the service and the assertions
    - Notifier and event bus are recording fakes; each can be told to fail
    - get_db / get_notifier / get_event_bus overridden for route tests

Design Decisions:
    - SQLite in-memory: fast, no external dependency; PostgreSQL row locking is
      not exercised, the conditional UPDATE guard is
"""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)

import verification_service.models  # noqa: F401
from verification_service.api.dependencies import get_event_bus, get_notifier
from verification_service.core.errors import (
    EventPublishError, NotificationDeliveryError,
)
from verification_service.db.base import Base
from verification_service.infrastructure.database import get_db
from verification_service.infrastructure.verification_store import (
    SqlPurposeStore, SqlVerificationStore,
)
from verification_service.main import app
from verification_service.models.verification_purpose import VerificationPurpose
from verification_service.services.completion_events import CompletionEventEmitter
from verification_service.services.notification_dispatch import NotificationDispatcher
from verification_service.services.purpose_service import VerificationPurposeService
from verification_service.services.verification_service import VerificationService


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


class RecordingNotifier:
    def __init__(self):
        self.messages = []
        self.fail = False

    async def send(self, message):
        if self.fail:
            raise NotificationDeliveryError("relay refused connection")
        self.messages.append(message)


class RecordingEventBus:
    def __init__(self):
        self.events = []
        self.fail = False

    async def publish(self, event):
        if self.fail:
            raise EventPublishError("broker unavailable")
        self.events.append(event)


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def event_bus():
    return RecordingEventBus()


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def seed_purpose(test_db):
    """REGISTRATION purpose every verification in these tests points at."""
    purpose = VerificationPurpose(
        id=uuid4(), code="REGISTRATION", name="Registration",
    )
    test_db.add(purpose)
    await test_db.commit()
    return purpose


@pytest.fixture
def verification_store(test_db):
    return SqlVerificationStore(test_db)


@pytest.fixture
def verification_service(verification_store, notifier, event_bus, clock):
    return VerificationService(
        verification_store,
        NotificationDispatcher(notifier, clock=clock),
        CompletionEventEmitter(event_bus),
        clock=clock,
    )


@pytest.fixture
def purpose_service(test_db, clock):
    return VerificationPurposeService(SqlPurposeStore(test_db), clock=clock)


@pytest.fixture
async def client(test_session_factory, notifier, event_bus):
    """FastAPI test client with DB and collaborators overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notifier] = lambda: notifier
    app.dependency_overrides[get_event_bus] = lambda: event_bus

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
