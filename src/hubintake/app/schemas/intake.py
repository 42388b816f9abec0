"""Hub, session, item and report schemas."""

from datetime import datetime

from pydantic import BaseModel, Field

from hubintake.core.domain import SessionStatus


# Request schemas
class HubCreate(BaseModel):
    """Request schema for registering a hub."""

    location: str = Field(..., min_length=1, max_length=255)


class ItemCreate(BaseModel):
    """Request schema for registering an item."""

    item_type: str = Field(..., min_length=1, max_length=64)


# Response schemas
class HubResponse(BaseModel):
    """Response schema for hub."""

    id: str
    registered_at: datetime
    location: str

    model_config = {"from_attributes": True}


class HubListResponse(BaseModel):
    """Response schema for hub list."""

    items: list[HubResponse]
    total: int


class SessionResponse(BaseModel):
    """Response schema for intake session."""

    id: str
    hub_id: str
    started_at: datetime
    status: SessionStatus

    model_config = {"from_attributes": True}


class ItemResponse(BaseModel):
    """Response schema for item."""

    id: str
    session_id: str
    item_type: str
    created_at: datetime

    model_config = {"from_attributes": True}


class SessionWithItemsResponse(BaseModel):
    """Session with the items it received inside the report window."""

    session: SessionResponse
    items: list[ItemResponse]

    model_config = {"from_attributes": True}


class ReportEntryResponse(BaseModel):
    """One hub of the report."""

    hub: HubResponse
    sessions: list[SessionWithItemsResponse]

    model_config = {"from_attributes": True}


class ReportResponse(BaseModel):
    """Paginated hub report."""

    items: list[ReportEntryResponse]
    page: int
    limit: int
