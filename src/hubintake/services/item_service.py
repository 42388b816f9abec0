"""Item registration service.

Items can only be added to, or removed from, the hub's current session while
it is ACTIVE. Removal always targets the most recently added item.
"""

import logging

from hubintake.core.domain import Item
from hubintake.core.errors import IntakeError, NoItemError
from hubintake.core.interfaces import (
    HubStore,
    IntakeObserver,
    ItemStore,
    NullIntakeObserver,
    RecordNotFoundError,
    SessionStore,
    StoreError,
)
from hubintake.core.locks import HubLocks
from hubintake.core.logging_schema import LogEvent
from hubintake.services.guards import (
    Log,
    require_active_session,
    require_hub,
    upstream_error,
)

logger = logging.getLogger(__name__)


class ItemRegistrar:
    """Adds items to a hub's active session and removes the latest one."""

    def __init__(
        self,
        hubs: HubStore,
        sessions: SessionStore,
        items: ItemStore,
        locks: HubLocks,
        observer: IntakeObserver | None = None,
        log: Log | None = None,
    ) -> None:
        self._hubs = hubs
        self._sessions = sessions
        self._items = items
        self._locks = locks
        self._observer = observer or NullIntakeObserver()
        self._log = log or logger

    async def add(self, hub_id: str, item_type: str) -> Item:
        """Register an item in the hub's active session.

        item_type is expected to be validated against the configured
        vocabulary by the caller.

        Args:
            hub_id: Hub ID
            item_type: Item type label

        Returns:
            Created item

        Raises:
            HubNotFoundError: If hub does not exist
            NoSessionEverError: If hub never had a session
            NoActiveSessionError: If hub's latest session is CLOSED
            UpstreamError: If a store call failed
        """
        try:
            async with self._locks.get(hub_id):
                await require_hub(self._hubs, hub_id, self._log)
                session = await require_active_session(
                    self._sessions, hub_id, self._log
                )

                try:
                    item = await self._items.create(session.id, item_type)
                except StoreError as exc:
                    raise upstream_error(
                        self._log,
                        "create_item",
                        exc,
                        hub_id=hub_id,
                        session_id=session.id,
                    ) from exc
        except IntakeError as exc:
            self._log_rejected("add_item", exc, hub_id)
            raise

        self._observer.item_added(hub_id, item)
        self._log.info(
            "Item added",
            extra={
                "event": LogEvent.ITEM_ADDED,
                "hub_id": hub_id,
                "session_id": item.session_id,
                "item_id": item.id,
                "item_type": item.item_type,
            },
        )
        return item

    async def remove_last(self, hub_id: str) -> Item:
        """Remove the most recently added item of the hub's active session.

        The most recent item has the greatest created_at; among items with
        the same created_at the one inserted last (greatest seq) wins.

        Args:
            hub_id: Hub ID

        Returns:
            Deleted item

        Raises:
            HubNotFoundError: If hub does not exist
            NoSessionEverError: If hub never had a session
            NoActiveSessionError: If hub's latest session is CLOSED
            NoItemError: If the active session holds no items
            UpstreamError: If a store call failed
        """
        try:
            async with self._locks.get(hub_id):
                await require_hub(self._hubs, hub_id, self._log)
                session = await require_active_session(
                    self._sessions, hub_id, self._log
                )

                try:
                    item = await self._items.delete_most_recent_for_session(
                        session.id
                    )
                except RecordNotFoundError as exc:
                    raise NoItemError(
                        f"Session {session.id} of hub {hub_id} has no items"
                    ) from exc
                except StoreError as exc:
                    raise upstream_error(
                        self._log,
                        "delete_last_item",
                        exc,
                        hub_id=hub_id,
                        session_id=session.id,
                    ) from exc
        except IntakeError as exc:
            self._log_rejected("remove_last_item", exc, hub_id)
            raise

        self._observer.item_removed(hub_id, item)
        self._log.info(
            "Item removed",
            extra={
                "event": LogEvent.ITEM_REMOVED,
                "hub_id": hub_id,
                "session_id": item.session_id,
                "item_id": item.id,
            },
        )
        return item

    def _log_rejected(self, action: str, exc: IntakeError, hub_id: str) -> None:
        self._log.debug(
            "Item %s rejected: %s",
            action,
            exc.message,
            extra={
                "event": LogEvent.OPERATION_REJECTED,
                "error_code": exc.code.value,
                "hub_id": hub_id,
            },
        )
