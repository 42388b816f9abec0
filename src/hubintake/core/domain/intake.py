"""Intake domain records.

Plain records passed across the store boundary. The SQL tables in
hubintake.infra.models are converted to these before reaching a use case.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum


class SessionStatus(StrEnum):
    """Intake session status.

    State transitions:
    - ACTIVE -> CLOSED (close)
    - CLOSED is terminal; opening always creates a new session
    """

    ACTIVE = "ACTIVE"
    CLOSED = "CLOSED"


@dataclass(frozen=True)
class Hub:
    """Pickup hub."""

    id: str
    registered_at: datetime
    location: str


@dataclass(frozen=True)
class Session:
    """Intake session of a hub."""

    id: str
    hub_id: str
    started_at: datetime
    status: SessionStatus

    @property
    def is_active(self) -> bool:
        return self.status == SessionStatus.ACTIVE


@dataclass(frozen=True)
class Item:
    """Item registered during a session.

    seq is assigned by the store and strictly increases with insertion order.
    It breaks ties between items sharing a created_at.
    """

    id: str
    session_id: str
    item_type: str
    created_at: datetime
    seq: int


@dataclass(frozen=True)
class SessionWithItems:
    """Session together with its in-window items."""

    session: Session
    items: list[Item] = field(default_factory=list)


@dataclass(frozen=True)
class ReportEntry:
    """One hub with its in-window sessions."""

    hub: Hub
    sessions: list[SessionWithItems] = field(default_factory=list)
