"""Store interfaces for hubs, intake sessions and items.

Implementations: SQLHubStore, SQLSessionStore, SQLItemStore (hubintake.infra.stores)

Every failure an implementation reports must be a StoreError. The subclasses
below are sentinels that use cases translate into domain errors; any other
StoreError is treated as an opaque upstream failure.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from datetime import datetime

from hubintake.core.domain import Hub, Item, Session


class StoreError(Exception):
    """Store call failed."""


class RecordNotFoundError(StoreError):
    """Requested record does not exist."""


class ActiveSessionExistsError(StoreError):
    """Hub already has an ACTIVE session (storage-level uniqueness)."""


class SessionNotActiveError(StoreError):
    """Session was not ACTIVE when the close was applied."""


class HubStore(ABC):
    """Interface for hub persistence."""

    @abstractmethod
    async def create(self, location: str) -> Hub:
        """Persist a new hub. Id and registered_at are assigned by the store."""
        ...

    @abstractmethod
    async def list_all(self) -> list[Hub]:
        """Return all hubs."""
        ...

    @abstractmethod
    async def get_by_id(self, hub_id: str) -> Hub:
        """Get hub by ID.

        Raises:
            RecordNotFoundError: If the hub does not exist
        """
        ...

    @abstractmethod
    async def get_by_ids(self, hub_ids: Sequence[str]) -> list[Hub]:
        """Get hubs by IDs. Empty input returns an empty list."""
        ...


class SessionStore(ABC):
    """Interface for intake session persistence."""

    @abstractmethod
    async def create(self, hub_id: str) -> Session:
        """Persist a new ACTIVE session for a hub.

        Id and started_at are assigned by the store.

        Raises:
            ActiveSessionExistsError: If the hub already has an ACTIVE session
        """
        ...

    @abstractmethod
    async def set_closed(self, session_id: str) -> Session:
        """Transition an ACTIVE session to CLOSED.

        Raises:
            SessionNotActiveError: If the session was not ACTIVE
            RecordNotFoundError: If the session does not exist
        """
        ...

    @abstractmethod
    async def get_current_for_hub(self, hub_id: str) -> Session:
        """Get the most recently started session of a hub.

        Raises:
            RecordNotFoundError: If the hub never had a session
        """
        ...

    @abstractmethod
    async def get_by_ids(self, session_ids: Sequence[str]) -> list[Session]:
        """Get sessions by IDs.

        Empty input returns an empty list.

        Raises:
            RecordNotFoundError: If non-empty input matched no sessions
        """
        ...


class ItemStore(ABC):
    """Interface for item persistence."""

    @abstractmethod
    async def create(self, session_id: str, item_type: str) -> Item:
        """Persist a new item. Id, created_at and seq are assigned by the store."""
        ...

    @abstractmethod
    async def delete_by_id(self, item_id: str) -> None:
        """Delete an item.

        Raises:
            RecordNotFoundError: If the item does not exist
        """
        ...

    @abstractmethod
    async def get_most_recent_for_session(self, session_id: str) -> Item:
        """Get the item with the greatest (created_at, seq) in a session.

        Raises:
            RecordNotFoundError: If the session holds no items
        """
        ...

    @abstractmethod
    async def delete_most_recent_for_session(self, session_id: str) -> Item:
        """Delete and return the item with the greatest (created_at, seq).

        Finding and deleting the newest item is one atomic step: a concurrent
        delete of the same item never makes a session that still owns items
        look empty.

        Raises:
            RecordNotFoundError: If the session holds no items
        """
        ...

    @abstractmethod
    async def get_in_time_range(self, start: datetime, end: datetime) -> list[Item]:
        """Get items with start <= created_at <= end."""
        ...
