"""Domain models and enums."""

from hubintake.core.domain.intake import (
    Hub,
    Item,
    ReportEntry,
    Session,
    SessionStatus,
    SessionWithItems,
)

__all__ = [
    "Hub",
    "Item",
    "ReportEntry",
    "Session",
    "SessionStatus",
    "SessionWithItems",
]
