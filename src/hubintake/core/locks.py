"""Per-hub locks for intake mutations."""

import asyncio
import weakref


class HubLocks:
    """Registry of per-hub asyncio locks.

    Serializes the read-check-write sequence of every mutation on a hub
    so that two concurrent calls cannot both pass the same precondition.
    Only covers the current process; cross-process safety comes from the
    store (unique ACTIVE session index, conditional UPDATE/DELETE).

    Locks are held weakly: an entry lives only while some caller holds or
    waits on the lock, so the registry never grows with unknown hub ids.
    """

    def __init__(self) -> None:
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    def get(self, hub_id: str) -> asyncio.Lock:
        """Get or create the lock for a hub.

        The caller must keep the returned lock referenced for as long as it
        relies on mutual exclusion (e.g. for the whole ``async with`` block).
        """
        lock = self._locks.get(hub_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[hub_id] = lock
        return lock

    def __len__(self) -> int:
        return len(self._locks)
