"""Hub report: hubs with their sessions and items in a time window.

Pagination runs over hubs. A hub qualifies when at least one item was
registered in the window; only sessions owning such items are attached.

Ordering (stable across calls over unchanged data):
- hubs: registered_at, then id
- sessions: started_at, then id
- items: created_at, then seq
"""

import logging
from collections import defaultdict
from datetime import datetime

from hubintake.core.domain import Hub, Item, ReportEntry, Session, SessionWithItems
from hubintake.core.errors import (
    InvalidRequestError,
    NoItemsInRangeError,
    PageOutOfRangeError,
)
from hubintake.core.interfaces import HubStore, ItemStore, SessionStore, StoreError
from hubintake.core.logging_schema import LogEvent
from hubintake.services.guards import Log, upstream_error

logger = logging.getLogger(__name__)


def calc_offset(page: int, limit: int) -> int:
    """Offset of the first hub on a 1-indexed page."""
    return (page - 1) * limit


def _hub_key(hub: Hub) -> tuple[datetime, str]:
    return hub.registered_at, hub.id


def _session_key(session: Session) -> tuple[datetime, str]:
    return session.started_at, session.id


def _item_key(item: Item) -> tuple[datetime, int]:
    return item.created_at, item.seq


class AggregationReporter:
    """Builds the paginated hub report."""

    def __init__(
        self,
        hubs: HubStore,
        sessions: SessionStore,
        items: ItemStore,
        log: Log | None = None,
    ) -> None:
        self._hubs = hubs
        self._sessions = sessions
        self._items = items
        self._log = log or logger

    async def generate(
        self,
        start: datetime,
        end: datetime,
        page: int,
        limit: int,
    ) -> list[ReportEntry]:
        """Generate one page of the hub report.

        Args:
            start: Window start (inclusive)
            end: Window end (inclusive)
            page: Page number (1-indexed)
            limit: Hubs per page

        Returns:
            Report entries, one per hub on the page

        Raises:
            InvalidRequestError: If page or limit is below 1
            NoItemsInRangeError: If no item was registered in the window
            PageOutOfRangeError: If the page offset exceeds the qualifying hubs
            UpstreamError: If a store call failed
        """
        if page < 1:
            raise InvalidRequestError(f"page must be >= 1, got {page}")
        if limit < 1:
            raise InvalidRequestError(f"limit must be >= 1, got {limit}")

        try:
            items = await self._items.get_in_time_range(start, end)
        except StoreError as exc:
            raise upstream_error(
                self._log,
                "get_items_in_range",
                exc,
                start=start.isoformat(),
                end=end.isoformat(),
            ) from exc

        if not items:
            raise NoItemsInRangeError(
                f"No items between {start.isoformat()} and {end.isoformat()}"
            )

        items_by_session: dict[str, list[Item]] = defaultdict(list)
        for item in items:
            items_by_session[item.session_id].append(item)

        session_ids = sorted(items_by_session)
        try:
            sessions = await self._sessions.get_by_ids(session_ids)
        except StoreError as exc:
            raise upstream_error(
                self._log, "get_sessions", exc, session_count=len(session_ids)
            ) from exc

        sessions_by_hub: dict[str, list[Session]] = defaultdict(list)
        for session in sessions:
            sessions_by_hub[session.hub_id].append(session)

        hub_ids = sorted(sessions_by_hub)
        try:
            hubs = await self._hubs.get_by_ids(hub_ids)
        except StoreError as exc:
            raise upstream_error(
                self._log, "get_hubs", exc, hub_count=len(hub_ids)
            ) from exc

        hubs = sorted(hubs, key=_hub_key)

        offset = calc_offset(page, limit)
        if offset > len(hubs):
            raise PageOutOfRangeError(
                f"Page {page} (offset {offset}) exceeds {len(hubs)} hubs"
            )
        page_end = min(offset + limit, len(hubs))

        entries = []
        for hub in hubs[offset:page_end]:
            attached = [
                SessionWithItems(
                    session=session,
                    items=sorted(items_by_session[session.id], key=_item_key),
                )
                for session in sorted(sessions_by_hub[hub.id], key=_session_key)
            ]
            entries.append(ReportEntry(hub=hub, sessions=attached))

        self._log.info(
            "Report generated",
            extra={
                "event": LogEvent.REPORT_GENERATED,
                "page": page,
                "limit": limit,
                "hub_total": len(hubs),
                "entry_count": len(entries),
                "item_count": len(items),
            },
        )
        return entries
