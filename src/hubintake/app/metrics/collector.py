"""Prometheus metrics definitions.

Business counters are incremented only through PrometheusIntakeObserver,
which the services receive at construction time.

Labels stay low-cardinality: hub/session/item ids go to logs, not labels.
"""

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Histogram

from hubintake.core.domain import Hub, Item, Session
from hubintake.core.interfaces import IntakeObserver

# FAST: DB-bound API calls (1ms ~ 5s)
_BUCKETS_FAST = (
    0.001, 0.002, 0.005, 0.01, 0.02,
    0.05, 0.1, 0.2, 0.5, 1,
    2, 5,
)  # 12 buckets

# =============================================================================
# HTTP Metrics (recorded by LoggingMiddleware)
# =============================================================================

HTTP_REQUESTS_TOTAL = Counter(
    "hubintake_http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
)

HTTP_REQUEST_DURATION = Histogram(
    "hubintake_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=_BUCKETS_FAST,
)


class PrometheusIntakeObserver(IntakeObserver):
    """IntakeObserver that counts successful mutations.

    Counters are registered on the given registry so tests can use an
    isolated CollectorRegistry.
    """

    def __init__(self, registry: CollectorRegistry = REGISTRY) -> None:
        self.hubs_created = Counter(
            "hubintake_hubs_created_total",
            "Total number of registered hubs",
            ["location"],
            registry=registry,
        )
        self.sessions_opened = Counter(
            "hubintake_sessions_opened_total",
            "Total number of opened intake sessions",
            registry=registry,
        )
        self.sessions_closed = Counter(
            "hubintake_sessions_closed_total",
            "Total number of closed intake sessions",
            registry=registry,
        )
        self.items_added = Counter(
            "hubintake_items_added_total",
            "Total number of registered items",
            ["item_type"],
            registry=registry,
        )
        self.items_removed = Counter(
            "hubintake_items_removed_total",
            "Total number of removed items",
            ["item_type"],
            registry=registry,
        )

    def hub_created(self, hub: Hub) -> None:
        self.hubs_created.labels(location=hub.location).inc()

    def session_opened(self, session: Session) -> None:
        self.sessions_opened.inc()

    def session_closed(self, session: Session) -> None:
        self.sessions_closed.inc()

    def item_added(self, hub_id: str, item: Item) -> None:
        self.items_added.labels(item_type=item.item_type).inc()

    def item_removed(self, hub_id: str, item: Item) -> None:
        self.items_removed.labels(item_type=item.item_type).inc()
