"""SQL implementations of the hub, session and item stores.

All three stores share the request's AsyncSession. Every SQLAlchemy failure
is rolled back and re-raised as StoreError (or one of its sentinels).
"""

import logging
from collections.abc import AsyncIterator, Callable, Sequence
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased
from sqlmodel import col

from hubintake.core.domain import Hub, Item, Session, SessionStatus
from hubintake.core.interfaces import (
    ActiveSessionExistsError,
    HubStore,
    ItemStore,
    RecordNotFoundError,
    SessionNotActiveError,
    SessionStore,
    StoreError,
)
from hubintake.infra.models import (
    HubRow,
    ItemRow,
    SessionRow,
    generate_ulid,
    utc_now,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

_DELETE_ATTEMPTS = 5


def _as_utc(value: datetime) -> datetime:
    """SQLite returns naive datetimes; treat them as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def _to_hub(row: HubRow) -> Hub:
    return Hub(id=row.id, registered_at=_as_utc(row.registered_at), location=row.location)


def _to_session(row: SessionRow) -> Session:
    return Session(
        id=row.id,
        hub_id=row.hub_id,
        started_at=_as_utc(row.started_at),
        status=SessionStatus(row.status),
    )


def _to_item(row: ItemRow) -> Item:
    if row.seq is None:
        raise StoreError(f"Item {row.id} has no sequence number")
    return Item(
        id=row.id,
        session_id=row.session_id,
        item_type=row.item_type,
        created_at=_as_utc(row.created_at),
        seq=row.seq,
    )


@asynccontextmanager
async def _translate_errors(db: AsyncSession, operation: str) -> AsyncIterator[None]:
    """Roll back and raise StoreError on any SQLAlchemy failure."""
    try:
        yield
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.debug("SQL %s failed: %s", operation, exc)
        raise StoreError(f"{operation} failed: {type(exc).__name__}") from exc


class SQLHubStore(HubStore):
    """HubStore on SQLModel tables."""

    def __init__(self, db: AsyncSession, clock: Clock = utc_now) -> None:
        self._db = db
        self._clock = clock

    async def create(self, location: str) -> Hub:
        row = HubRow(id=generate_ulid(), location=location, registered_at=self._clock())
        async with _translate_errors(self._db, "create_hub"):
            self._db.add(row)
            await self._db.commit()
        return _to_hub(row)

    async def list_all(self) -> list[Hub]:
        async with _translate_errors(self._db, "list_hubs"):
            result = await self._db.execute(
                select(HubRow).order_by(col(HubRow.registered_at), col(HubRow.id))
            )
            return [_to_hub(row) for row in result.scalars().all()]

    async def get_by_id(self, hub_id: str) -> Hub:
        async with _translate_errors(self._db, "get_hub"):
            result = await self._db.execute(
                select(HubRow).where(col(HubRow.id) == hub_id)
            )
            row = result.scalar_one_or_none()
        if row is None:
            raise RecordNotFoundError(f"Hub {hub_id} not found")
        return _to_hub(row)

    async def get_by_ids(self, hub_ids: Sequence[str]) -> list[Hub]:
        if not hub_ids:
            return []
        async with _translate_errors(self._db, "get_hubs"):
            result = await self._db.execute(
                select(HubRow).where(col(HubRow.id).in_(list(hub_ids)))
            )
            return [_to_hub(row) for row in result.scalars().all()]


class SQLSessionStore(SessionStore):
    """SessionStore on SQLModel tables.

    Single ACTIVE session per hub is guaranteed by the partial unique index
    uq_intake_sessions_active_hub; closing is a conditional UPDATE.
    """

    def __init__(self, db: AsyncSession, clock: Clock = utc_now) -> None:
        self._db = db
        self._clock = clock

    async def create(self, hub_id: str) -> Session:
        row = SessionRow(
            id=generate_ulid(),
            hub_id=hub_id,
            status=SessionStatus.ACTIVE,
            started_at=self._clock(),
        )
        try:
            async with _translate_errors(self._db, "create_session"):
                self._db.add(row)
                await self._db.commit()
        except StoreError as exc:
            if isinstance(exc.__cause__, IntegrityError):
                raise ActiveSessionExistsError(
                    f"Hub {hub_id} already has an active session"
                ) from exc.__cause__
            raise
        return _to_session(row)

    async def set_closed(self, session_id: str) -> Session:
        async with _translate_errors(self._db, "close_session"):
            result = await self._db.execute(
                update(SessionRow)
                .where(
                    col(SessionRow.id) == session_id,
                    col(SessionRow.status) == SessionStatus.ACTIVE.value,
                )
                .values(status=SessionStatus.CLOSED.value)
            )
            if result.rowcount == 0:  # type: ignore[attr-defined]
                await self._db.rollback()
                exists = await self._db.get(SessionRow, session_id)
                if exists is None:
                    raise RecordNotFoundError(f"Session {session_id} not found")
                raise SessionNotActiveError(f"Session {session_id} is not active")

            await self._db.commit()
            refreshed = await self._db.execute(
                select(SessionRow)
                .where(col(SessionRow.id) == session_id)
                .execution_options(populate_existing=True)
            )
            return _to_session(refreshed.scalar_one())

    async def get_current_for_hub(self, hub_id: str) -> Session:
        async with _translate_errors(self._db, "get_current_session"):
            result = await self._db.execute(
                select(SessionRow)
                .where(col(SessionRow.hub_id) == hub_id)
                .order_by(col(SessionRow.started_at).desc(), col(SessionRow.id).desc())
                .limit(1)
            )
            row = result.scalar_one_or_none()
        if row is None:
            raise RecordNotFoundError(f"Hub {hub_id} has no sessions")
        return _to_session(row)

    async def get_by_ids(self, session_ids: Sequence[str]) -> list[Session]:
        if not session_ids:
            return []
        async with _translate_errors(self._db, "get_sessions"):
            result = await self._db.execute(
                select(SessionRow).where(col(SessionRow.id).in_(list(session_ids)))
            )
            rows = result.scalars().all()
        if not rows:
            raise RecordNotFoundError(f"None of {len(session_ids)} sessions found")
        return [_to_session(row) for row in rows]


class SQLItemStore(ItemStore):
    """ItemStore on SQLModel tables.

    delete_most_recent_for_session picks and deletes the newest row in one
    DELETE ... RETURNING statement.
    """

    def __init__(self, db: AsyncSession, clock: Clock = utc_now) -> None:
        self._db = db
        self._clock = clock

    async def create(self, session_id: str, item_type: str) -> Item:
        row = ItemRow(
            id=generate_ulid(),
            session_id=session_id,
            item_type=item_type,
            created_at=self._clock(),
        )
        async with _translate_errors(self._db, "create_item"):
            self._db.add(row)
            await self._db.commit()
        return _to_item(row)

    async def delete_by_id(self, item_id: str) -> None:
        async with _translate_errors(self._db, "delete_item"):
            result = await self._db.execute(
                delete(ItemRow).where(col(ItemRow.id) == item_id)
            )
            if result.rowcount == 0:  # type: ignore[attr-defined]
                await self._db.rollback()
                raise RecordNotFoundError(f"Item {item_id} not found")
            await self._db.commit()

    async def get_most_recent_for_session(self, session_id: str) -> Item:
        async with _translate_errors(self._db, "get_last_item"):
            result = await self._db.execute(
                select(ItemRow)
                .where(col(ItemRow.session_id) == session_id)
                .order_by(col(ItemRow.created_at).desc(), col(ItemRow.seq).desc())
                .limit(1)
            )
            row = result.scalar_one_or_none()
        if row is None:
            raise RecordNotFoundError(f"Session {session_id} has no items")
        return _to_item(row)

    async def delete_most_recent_for_session(self, session_id: str) -> Item:
        candidate = aliased(ItemRow)
        newest = (
            select(candidate.seq)
            .where(candidate.session_id == session_id)
            .order_by(candidate.created_at.desc(), candidate.seq.desc())
            .limit(1)
            .scalar_subquery()
        )
        statement = (
            delete(ItemRow)
            .where(col(ItemRow.seq) == newest)
            .returning(
                col(ItemRow.seq),
                col(ItemRow.id),
                col(ItemRow.session_id),
                col(ItemRow.item_type),
                col(ItemRow.created_at),
            )
            .execution_options(synchronize_session=False)
        )
        remaining = (
            select(func.count())
            .select_from(ItemRow)
            .where(col(ItemRow.session_id) == session_id)
        )

        async with _translate_errors(self._db, "delete_last_item"):
            for _ in range(_DELETE_ATTEMPTS):
                result = await self._db.execute(statement)
                deleted = result.one_or_none()
                if deleted is not None:
                    await self._db.commit()
                    return Item(
                        id=deleted.id,
                        session_id=deleted.session_id,
                        item_type=deleted.item_type,
                        created_at=_as_utc(deleted.created_at),
                        seq=deleted.seq,
                    )
                # The newest row went away under us; retry only if items remain
                await self._db.rollback()
                count = (await self._db.execute(remaining)).scalar_one()
                if count == 0:
                    raise RecordNotFoundError(f"Session {session_id} has no items")
        raise StoreError(
            f"delete_last_item lost {_DELETE_ATTEMPTS} races for session {session_id}"
        )

    async def get_in_time_range(self, start: datetime, end: datetime) -> list[Item]:
        async with _translate_errors(self._db, "get_items_in_range"):
            result = await self._db.execute(
                select(ItemRow)
                .where(
                    col(ItemRow.created_at) >= start,
                    col(ItemRow.created_at) <= end,
                )
                .order_by(col(ItemRow.created_at), col(ItemRow.seq))
            )
            return [_to_item(row) for row in result.scalars().all()]
