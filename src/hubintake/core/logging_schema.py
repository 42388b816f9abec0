"""Logging field schema.

Standard fields (added to all logs):
- service: Service name (hub-intake)
- event: Event type (session_opened, item_added, etc.)
- request_id: Request ID (bound per request by the API layer)
- duration_ms: Duration in milliseconds

High cardinality fields (OK in logs, NOT in metric labels):
- hub_id
- session_id
- item_id
"""

from enum import StrEnum


class LogEvent(StrEnum):
    """Standard log event types.

    Use these event types in the 'event' extra field for consistent
    log filtering and analysis.
    """

    # Intake events
    HUB_CREATED = "hub_created"
    SESSION_OPENED = "session_opened"
    SESSION_CLOSED = "session_closed"
    ITEM_ADDED = "item_added"
    ITEM_REMOVED = "item_removed"
    REPORT_GENERATED = "report_generated"
    OPERATION_REJECTED = "operation_rejected"
    STORE_FAILED = "store_failed"

    # Lifecycle events
    APP_STARTED = "app_started"
    APP_STOPPED = "app_stopped"
    DB_CONNECTED = "db_connected"
    DB_ERROR = "db_error"

    # API events
    REQUEST_COMPLETE = "request_complete"
    REQUEST_FAILED = "request_failed"
    REQUEST_SLOW = "request_slow"
