"""Shared test fixtures for hub-intake tests.

Use cases run against in-memory stores driven by a controllable clock;
the SQL stores run against an in-memory SQLite database.
"""

import asyncio
import dataclasses
from collections.abc import Sequence
from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlmodel import SQLModel

from hubintake.app.api.v1.dependencies import get_hub_locks, get_observer
from hubintake.app.config import DatabaseConfig, get_settings
from hubintake.app.main import app
from hubintake.core.domain import Hub, Item, Session, SessionStatus
from hubintake.core.interfaces import (
    ActiveSessionExistsError,
    HubStore,
    IntakeObserver,
    ItemStore,
    NullIntakeObserver,
    RecordNotFoundError,
    SessionNotActiveError,
    SessionStore,
)
from hubintake.core.locks import HubLocks
from hubintake.infra.database import create_engine, get_session
from hubintake.services import (
    AggregationReporter,
    HubRegistry,
    ItemRegistrar,
    SessionLifecycle,
)

T0 = datetime(2026, 1, 1, tzinfo=UTC)


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, start: datetime = T0) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def at(self, seconds: float) -> datetime:
        """T0 + seconds."""
        return T0 + timedelta(seconds=seconds)

    def set(self, seconds: float) -> None:
        """Jump to T0 + seconds."""
        self.now = self.at(seconds)

    def advance(self, seconds: float = 1) -> None:
        self.now += timedelta(seconds=seconds)


class InMemoryHubStore(HubStore):
    def __init__(self, clock: FakeClock) -> None:
        self.rows: dict[str, Hub] = {}
        self._clock = clock

    async def create(self, location: str) -> Hub:
        hub = Hub(
            id=f"hub-{len(self.rows) + 1:03d}",
            registered_at=self._clock(),
            location=location,
        )
        self.rows[hub.id] = hub
        return hub

    async def list_all(self) -> list[Hub]:
        return list(self.rows.values())

    async def get_by_id(self, hub_id: str) -> Hub:
        if hub_id not in self.rows:
            raise RecordNotFoundError(hub_id)
        return self.rows[hub_id]

    async def get_by_ids(self, hub_ids: Sequence[str]) -> list[Hub]:
        return [self.rows[i] for i in hub_ids if i in self.rows]


class InMemorySessionStore(SessionStore):
    """Session store enforcing one ACTIVE session per hub.

    get_current_for_hub yields to the event loop so concurrent callers
    interleave between the check and the write.
    """

    def __init__(self, clock: FakeClock) -> None:
        self.rows: dict[str, Session] = {}
        self._clock = clock

    async def create(self, hub_id: str) -> Session:
        if any(s.hub_id == hub_id and s.is_active for s in self.rows.values()):
            raise ActiveSessionExistsError(hub_id)
        session = Session(
            id=f"session-{len(self.rows) + 1:03d}",
            hub_id=hub_id,
            started_at=self._clock(),
            status=SessionStatus.ACTIVE,
        )
        self.rows[session.id] = session
        return session

    async def set_closed(self, session_id: str) -> Session:
        if session_id not in self.rows:
            raise RecordNotFoundError(session_id)
        session = self.rows[session_id]
        if not session.is_active:
            raise SessionNotActiveError(session_id)
        closed = dataclasses.replace(session, status=SessionStatus.CLOSED)
        self.rows[session_id] = closed
        return closed

    async def get_current_for_hub(self, hub_id: str) -> Session:
        await asyncio.sleep(0)
        owned = [s for s in self.rows.values() if s.hub_id == hub_id]
        if not owned:
            raise RecordNotFoundError(hub_id)
        return max(owned, key=lambda s: (s.started_at, s.id))

    async def get_by_ids(self, session_ids: Sequence[str]) -> list[Session]:
        found = [self.rows[i] for i in session_ids if i in self.rows]
        if session_ids and not found:
            raise RecordNotFoundError(",".join(session_ids))
        return found


class InMemoryItemStore(ItemStore):
    def __init__(self, clock: FakeClock) -> None:
        self.rows: dict[str, Item] = {}
        self._clock = clock
        self._seq = 0

    async def create(self, session_id: str, item_type: str) -> Item:
        self._seq += 1
        item = Item(
            id=f"item-{self._seq:03d}",
            session_id=session_id,
            item_type=item_type,
            created_at=self._clock(),
            seq=self._seq,
        )
        self.rows[item.id] = item
        return item

    async def delete_by_id(self, item_id: str) -> None:
        if self.rows.pop(item_id, None) is None:
            raise RecordNotFoundError(item_id)

    async def get_most_recent_for_session(self, session_id: str) -> Item:
        owned = [i for i in self.rows.values() if i.session_id == session_id]
        if not owned:
            raise RecordNotFoundError(session_id)
        return max(owned, key=lambda i: (i.created_at, i.seq))

    async def delete_most_recent_for_session(self, session_id: str) -> Item:
        await asyncio.sleep(0)
        # No await between picking and deleting
        owned = [i for i in self.rows.values() if i.session_id == session_id]
        if not owned:
            raise RecordNotFoundError(session_id)
        newest = max(owned, key=lambda i: (i.created_at, i.seq))
        del self.rows[newest.id]
        return newest

    async def get_in_time_range(self, start: datetime, end: datetime) -> list[Item]:
        # Reverse insertion order so callers cannot rely on store ordering
        return [i for i in reversed(self.rows.values()) if start <= i.created_at <= end]


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Clear settings cache around each test so env overrides apply."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def hub_store(clock: FakeClock) -> InMemoryHubStore:
    return InMemoryHubStore(clock)


@pytest.fixture
def session_store(clock: FakeClock) -> InMemorySessionStore:
    return InMemorySessionStore(clock)


@pytest.fixture
def item_store(clock: FakeClock) -> InMemoryItemStore:
    return InMemoryItemStore(clock)


@pytest.fixture
def locks() -> HubLocks:
    return HubLocks()


@pytest.fixture
def observer() -> MagicMock:
    """IntakeObserver mock."""
    return MagicMock(spec=IntakeObserver)


@pytest.fixture
def hub_registry(hub_store: InMemoryHubStore, observer: MagicMock) -> HubRegistry:
    return HubRegistry(hub_store, observer=observer)


@pytest.fixture
def lifecycle(
    hub_store: InMemoryHubStore,
    session_store: InMemorySessionStore,
    locks: HubLocks,
    observer: MagicMock,
) -> SessionLifecycle:
    return SessionLifecycle(hub_store, session_store, locks, observer=observer)


@pytest.fixture
def registrar(
    hub_store: InMemoryHubStore,
    session_store: InMemorySessionStore,
    item_store: InMemoryItemStore,
    locks: HubLocks,
    observer: MagicMock,
) -> ItemRegistrar:
    return ItemRegistrar(hub_store, session_store, item_store, locks, observer=observer)


@pytest.fixture
def reporter(
    hub_store: InMemoryHubStore,
    session_store: InMemorySessionStore,
    item_store: InMemoryItemStore,
) -> AggregationReporter:
    return AggregationReporter(hub_store, session_store, item_store)


@pytest.fixture
async def hub(hub_store: InMemoryHubStore) -> Hub:
    """A registered hub with no sessions."""
    return await hub_store.create("Moscow")


@pytest_asyncio.fixture
async def db_engine():
    """In-memory SQLite engine with all tables created."""
    engine = create_engine(DatabaseConfig(url="sqlite+aiosqlite://"))
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine):
    """Create a database session for testing."""
    session_factory = async_sessionmaker(
        db_engine, class_=AsyncSession, expire_on_commit=False
    )
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def async_client(db_engine):
    """HTTP client against the app, backed by the in-memory SQLite engine."""
    session_factory = async_sessionmaker(
        db_engine, class_=AsyncSession, expire_on_commit=False
    )

    async def override_get_session():
        async with session_factory() as session:
            yield session

    locks = HubLocks()
    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_hub_locks] = lambda: locks
    app.dependency_overrides[get_observer] = lambda: NullIntakeObserver()

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
