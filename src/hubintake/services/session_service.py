"""Intake session lifecycle service.

Provides session lifecycle management:
- Open: Start a new ACTIVE session (at most one per hub)
- Close: Move the hub's current session from ACTIVE to CLOSED
"""

import logging

from hubintake.core.domain import Session
from hubintake.core.errors import (
    IntakeError,
    NoActiveSessionError,
    SessionAlreadyOpenError,
)
from hubintake.core.interfaces import (
    ActiveSessionExistsError,
    HubStore,
    IntakeObserver,
    NullIntakeObserver,
    RecordNotFoundError,
    SessionNotActiveError,
    SessionStore,
    StoreError,
)
from hubintake.core.locks import HubLocks
from hubintake.core.logging_schema import LogEvent
from hubintake.services.guards import (
    Log,
    find_current_session,
    require_active_session,
    require_hub,
    upstream_error,
)

logger = logging.getLogger(__name__)


class SessionLifecycle:
    """Opens and closes intake sessions for a hub."""

    def __init__(
        self,
        hubs: HubStore,
        sessions: SessionStore,
        locks: HubLocks,
        observer: IntakeObserver | None = None,
        log: Log | None = None,
    ) -> None:
        self._hubs = hubs
        self._sessions = sessions
        self._locks = locks
        self._observer = observer or NullIntakeObserver()
        self._log = log or logger

    async def open(self, hub_id: str) -> Session:
        """Open a new intake session for a hub.

        A hub with no session history or whose latest session is CLOSED can
        be opened; only an ACTIVE session blocks it.

        Args:
            hub_id: Hub ID

        Returns:
            Created ACTIVE session

        Raises:
            HubNotFoundError: If hub does not exist
            SessionAlreadyOpenError: If hub's current session is ACTIVE
            UpstreamError: If a store call failed
        """
        try:
            async with self._locks.get(hub_id):
                await require_hub(self._hubs, hub_id, self._log)

                current = await find_current_session(self._sessions, hub_id, self._log)
                if current is not None and current.is_active:
                    raise SessionAlreadyOpenError(
                        f"Hub {hub_id} already has active session {current.id}"
                    )

                try:
                    session = await self._sessions.create(hub_id)
                except ActiveSessionExistsError as exc:
                    raise SessionAlreadyOpenError(
                        f"Hub {hub_id} already has an active session"
                    ) from exc
                except StoreError as exc:
                    raise upstream_error(
                        self._log, "create_session", exc, hub_id=hub_id
                    ) from exc
        except IntakeError as exc:
            self._log_rejected("open_session", exc, hub_id)
            raise

        self._observer.session_opened(session)
        self._log.info(
            "Session opened",
            extra={
                "event": LogEvent.SESSION_OPENED,
                "hub_id": hub_id,
                "session_id": session.id,
            },
        )
        return session

    async def close(self, hub_id: str) -> Session:
        """Close the hub's current intake session.

        Closing an already CLOSED session fails: there is no ACTIVE
        session left to target.

        Args:
            hub_id: Hub ID

        Returns:
            Updated session with CLOSED status

        Raises:
            HubNotFoundError: If hub does not exist
            NoSessionEverError: If hub never had a session
            NoActiveSessionError: If hub's latest session is already CLOSED
            UpstreamError: If a store call failed
        """
        try:
            async with self._locks.get(hub_id):
                await require_hub(self._hubs, hub_id, self._log)
                current = await require_active_session(
                    self._sessions, hub_id, self._log
                )

                try:
                    session = await self._sessions.set_closed(current.id)
                except (SessionNotActiveError, RecordNotFoundError) as exc:
                    raise NoActiveSessionError(
                        f"Session {current.id} is no longer active"
                    ) from exc
                except StoreError as exc:
                    raise upstream_error(
                        self._log,
                        "close_session",
                        exc,
                        hub_id=hub_id,
                        session_id=current.id,
                    ) from exc
        except IntakeError as exc:
            self._log_rejected("close_session", exc, hub_id)
            raise

        self._observer.session_closed(session)
        self._log.info(
            "Session closed",
            extra={
                "event": LogEvent.SESSION_CLOSED,
                "hub_id": hub_id,
                "session_id": session.id,
            },
        )
        return session

    def _log_rejected(self, action: str, exc: IntakeError, hub_id: str) -> None:
        self._log.debug(
            "Session %s rejected: %s",
            action,
            exc.message,
            extra={
                "event": LogEvent.OPERATION_REJECTED,
                "error_code": exc.code.value,
                "hub_id": hub_id,
            },
        )
