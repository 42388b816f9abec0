"""Hub registration service."""

import logging

from hubintake.core.domain import Hub
from hubintake.core.interfaces import (
    HubStore,
    IntakeObserver,
    NullIntakeObserver,
    StoreError,
)
from hubintake.core.logging_schema import LogEvent
from hubintake.services.guards import Log, upstream_error

logger = logging.getLogger(__name__)


class HubRegistry:
    """Registers hubs and lists them."""

    def __init__(
        self,
        hubs: HubStore,
        observer: IntakeObserver | None = None,
        log: Log | None = None,
    ) -> None:
        self._hubs = hubs
        self._observer = observer or NullIntakeObserver()
        self._log = log or logger

    async def create_hub(self, location: str) -> Hub:
        """Register a new hub at a location.

        location is expected to be validated against the configured
        vocabulary by the caller.
        """
        try:
            hub = await self._hubs.create(location)
        except StoreError as exc:
            raise upstream_error(self._log, "create_hub", exc, location=location) from exc

        self._observer.hub_created(hub)
        self._log.info(
            "Hub created",
            extra={
                "event": LogEvent.HUB_CREATED,
                "hub_id": hub.id,
                "location": hub.location,
            },
        )
        return hub

    async def list_hubs(self) -> list[Hub]:
        """List all hubs, oldest registration first."""
        try:
            hubs = await self._hubs.list_all()
        except StoreError as exc:
            raise upstream_error(self._log, "list_hubs", exc) from exc
        return sorted(hubs, key=lambda hub: (hub.registered_at, hub.id))
