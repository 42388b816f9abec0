"""Database models for hub-intake.

Models are defined using SQLModel (SQLAlchemy + Pydantic).

Tables:
- hubs: Pickup hubs
- intake_sessions: Intake sessions (at most one ACTIVE per hub)
- items: Items registered during a session

Note: status is stored as a string; convert to SessionStatus when mapping
      rows to domain records.
"""

from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, Index, String, text
from sqlmodel import Field, SQLModel
from ulid import ULID

from hubintake.core.domain import SessionStatus


def generate_ulid() -> str:
    """Generate a new ULID string."""
    return str(ULID())


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(UTC)


class HubRow(SQLModel, table=True):
    """Pickup hub model."""

    __tablename__ = "hubs"

    id: str = Field(default_factory=generate_ulid, primary_key=True)
    location: str = Field(max_length=255)
    registered_at: datetime = Field(
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )


class SessionRow(SQLModel, table=True):
    """Intake session model."""

    __tablename__ = "intake_sessions"

    id: str = Field(default_factory=generate_ulid, primary_key=True)
    hub_id: str = Field(foreign_key="hubs.id", index=True)
    status: SessionStatus = Field(default=SessionStatus.ACTIVE, sa_type=String)
    started_at: datetime = Field(
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )

    __table_args__ = (
        # One ACTIVE session per hub
        Index(
            "uq_intake_sessions_active_hub",
            "hub_id",
            unique=True,
            postgresql_where=text("status = 'ACTIVE'"),
            sqlite_where=text("status = 'ACTIVE'"),
        ),
        # Current session lookup
        Index("idx_intake_sessions_hub_started", "hub_id", "started_at"),
    )


class ItemRow(SQLModel, table=True):
    """Registered item model.

    seq is the autoincrement primary key and doubles as the insertion order
    used to break created_at ties.
    """

    __tablename__ = "items"

    seq: int | None = Field(default=None, primary_key=True)
    id: str = Field(default_factory=generate_ulid, unique=True, index=True)
    session_id: str = Field(foreign_key="intake_sessions.id", index=True)
    item_type: str = Field(max_length=64)
    created_at: datetime = Field(
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True)
    )
