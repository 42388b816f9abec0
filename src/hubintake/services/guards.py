"""Precondition checks shared by the intake use cases.

Each helper translates store sentinels into exactly one domain error and
wraps any other StoreError as UpstreamError.
"""

import logging
from typing import Any

from hubintake.core.domain import Hub, Session
from hubintake.core.errors import (
    HubNotFoundError,
    NoActiveSessionError,
    NoSessionEverError,
    UpstreamError,
)
from hubintake.core.interfaces import (
    HubStore,
    RecordNotFoundError,
    SessionStore,
    StoreError,
)
from hubintake.core.logging_schema import LogEvent

Log = logging.Logger | logging.LoggerAdapter


def upstream_error(
    log: Log, operation: str, exc: StoreError, **context: Any
) -> UpstreamError:
    """Log a store failure and build the UpstreamError to raise from it."""
    log.error(
        "Store operation failed",
        extra={
            "event": LogEvent.STORE_FAILED,
            "operation": operation,
            "error_type": type(exc).__name__,
            "error": str(exc),
            **context,
        },
    )
    return UpstreamError(operation, **context)


async def require_hub(hubs: HubStore, hub_id: str, log: Log) -> Hub:
    """Get hub or raise HubNotFoundError."""
    try:
        return await hubs.get_by_id(hub_id)
    except RecordNotFoundError as exc:
        raise HubNotFoundError(f"Hub {hub_id} not found") from exc
    except StoreError as exc:
        raise upstream_error(log, "get_hub", exc, hub_id=hub_id) from exc


async def find_current_session(
    sessions: SessionStore, hub_id: str, log: Log
) -> Session | None:
    """Get the hub's most recent session, or None if it never had one."""
    try:
        return await sessions.get_current_for_hub(hub_id)
    except RecordNotFoundError:
        return None
    except StoreError as exc:
        raise upstream_error(log, "get_current_session", exc, hub_id=hub_id) from exc


async def require_active_session(
    sessions: SessionStore, hub_id: str, log: Log
) -> Session:
    """Get the hub's current session, which must be ACTIVE.

    Raises:
        NoSessionEverError: If the hub never had a session
        NoActiveSessionError: If the latest session is CLOSED
    """
    current = await find_current_session(sessions, hub_id, log)
    if current is None:
        raise NoSessionEverError(f"Hub {hub_id} has no intake sessions")
    if not current.is_active:
        raise NoActiveSessionError(f"Hub {hub_id} has no active session")
    return current
