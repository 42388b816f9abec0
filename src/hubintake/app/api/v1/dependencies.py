"""API v1 dependencies for hub-intake.

Services are built per request on the request's database session and a
logger bound to the request id. Locks and the metrics observer are
process-wide singletons.
"""

import logging
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from hubintake.app.config import Settings, get_settings
from hubintake.app.logging import BoundLogger, bind_logger
from hubintake.app.metrics import PrometheusIntakeObserver
from hubintake.core.interfaces import IntakeObserver, NullIntakeObserver
from hubintake.core.locks import HubLocks
from hubintake.infra import SQLHubStore, SQLItemStore, SQLSessionStore, get_session
from hubintake.services import (
    AggregationReporter,
    HubRegistry,
    ItemRegistrar,
    SessionLifecycle,
)

_service_logger = logging.getLogger("hubintake.services")


@lru_cache
def get_hub_locks() -> HubLocks:
    """Get the process-wide per-hub lock registry."""
    return HubLocks()


@lru_cache
def get_observer() -> IntakeObserver:
    """Get the metrics observer singleton based on config."""
    if get_settings().metrics.enabled:
        return PrometheusIntakeObserver()
    return NullIntakeObserver()


def get_request_logger(request: Request) -> BoundLogger:
    """Logger bound to the id assigned by LoggingMiddleware."""
    return bind_logger(
        _service_logger,
        request_id=getattr(request.state, "request_id", None),
    )


DbSession = Annotated[AsyncSession, Depends(get_session)]
AppSettings = Annotated[Settings, Depends(get_settings)]
Locks = Annotated[HubLocks, Depends(get_hub_locks)]
Observer = Annotated[IntakeObserver, Depends(get_observer)]
RequestLog = Annotated[BoundLogger, Depends(get_request_logger)]


def get_hub_registry(db: DbSession, observer: Observer, log: RequestLog) -> HubRegistry:
    return HubRegistry(SQLHubStore(db), observer=observer, log=log)


def get_session_lifecycle(
    db: DbSession, locks: Locks, observer: Observer, log: RequestLog
) -> SessionLifecycle:
    return SessionLifecycle(
        SQLHubStore(db),
        SQLSessionStore(db),
        locks,
        observer=observer,
        log=log,
    )


def get_item_registrar(
    db: DbSession, locks: Locks, observer: Observer, log: RequestLog
) -> ItemRegistrar:
    return ItemRegistrar(
        SQLHubStore(db),
        SQLSessionStore(db),
        SQLItemStore(db),
        locks,
        observer=observer,
        log=log,
    )


def get_reporter(db: DbSession, log: RequestLog) -> AggregationReporter:
    return AggregationReporter(
        SQLHubStore(db),
        SQLSessionStore(db),
        SQLItemStore(db),
        log=log,
    )


Hubs = Annotated[HubRegistry, Depends(get_hub_registry)]
Lifecycle = Annotated[SessionLifecycle, Depends(get_session_lifecycle)]
Registrar = Annotated[ItemRegistrar, Depends(get_item_registrar)]
Reporter = Annotated[AggregationReporter, Depends(get_reporter)]
