"""Request/response schemas for the HTTP API."""

from hubintake.app.schemas.intake import (
    HubCreate,
    HubListResponse,
    HubResponse,
    ItemCreate,
    ItemResponse,
    ReportEntryResponse,
    ReportResponse,
    SessionResponse,
    SessionWithItemsResponse,
)

__all__ = [
    "HubCreate",
    "HubListResponse",
    "HubResponse",
    "ItemCreate",
    "ItemResponse",
    "ReportEntryResponse",
    "ReportResponse",
    "SessionResponse",
    "SessionWithItemsResponse",
]
