"""Shared test fixtures"""
from typing import Dict, List, Tuple

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from app.db.database import create_session_factory, get_session
from app.dependencies.customer import get_event_publisher
from app.events.publishers.publisher import CustomerEventPublisher, RetryPolicy
from app.events.transports.base import EventTransport, TransportError
from app.models.customer import Base
from app.models.customer_event import CustomerEvent
from app.repositories.customer import CustomerRepository
from app.services.customer import CustomerService


class FakeTransport(EventTransport):
    """In-memory transport that can fail a given number of times first"""

    name = "fake"

    def __init__(self, failures: int = 0, transient: bool = True):
        self.failures = failures
        self.transient = transient
        self.calls: List[Tuple[str, str, Dict[str, str]]] = []

    async def send(self, topic: str, payload: str, metadata: Dict[str, str]) -> None:
        self.calls.append((topic, payload, metadata))
        if len(self.calls) <= self.failures:
            raise TransportError("broker unavailable", transient=self.transient)

    async def is_healthy(self) -> bool:
        return True

    @property
    def events(self) -> List[CustomerEvent]:
        return [CustomerEvent.from_json(payload) for _, payload, _ in self.calls]


@pytest.fixture
async def engine():
    """In-memory SQLite engine shared across connections"""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def repository(session):
    return CustomerRepository(session)


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def sleeps():
    """Delays requested by the publisher between attempts"""
    return []


@pytest.fixture
def publisher(transport, sleeps):
    async def fake_sleep(delay: float) -> None:
        sleeps.append(delay)

    return CustomerEventPublisher(
        transport=transport,
        topic="customer-events",
        source="customer-service",
        retry_policy=RetryPolicy(),
        sleep=fake_sleep,
    )


@pytest.fixture
def service(repository, publisher):
    return CustomerService(repository, publisher)


@pytest.fixture
async def client(session_factory, publisher):
    """HTTP client for the Customer API backed by the test database"""
    from main import app

    async def override_get_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_event_publisher] = lambda: publisher

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
