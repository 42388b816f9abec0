"""Core interfaces consumed by the intake use cases."""

from hubintake.core.interfaces.observer import IntakeObserver, NullIntakeObserver
from hubintake.core.interfaces.stores import (
    ActiveSessionExistsError,
    HubStore,
    ItemStore,
    RecordNotFoundError,
    SessionNotActiveError,
    SessionStore,
    StoreError,
)

__all__ = [
    # Stores
    "HubStore",
    "SessionStore",
    "ItemStore",
    # Store errors
    "StoreError",
    "RecordNotFoundError",
    "ActiveSessionExistsError",
    "SessionNotActiveError",
    # Observer
    "IntakeObserver",
    "NullIntakeObserver",
]
