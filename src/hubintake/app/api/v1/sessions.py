"""Intake session API endpoints."""

from fastapi import APIRouter

from hubintake.app.api.v1.dependencies import Lifecycle
from hubintake.app.schemas import SessionResponse

router = APIRouter(prefix="/hubs/{hub_id}/sessions", tags=["sessions"])


@router.post("", response_model=SessionResponse, status_code=201)
async def open_session(hub_id: str, lifecycle: Lifecycle) -> SessionResponse:
    """Open an intake session on a hub.

    Fails with SESSION_ALREADY_OPEN while the hub's current session is active.
    """
    session = await lifecycle.open(hub_id)
    return SessionResponse.model_validate(session)


@router.post("/close", response_model=SessionResponse)
async def close_session(hub_id: str, lifecycle: Lifecycle) -> SessionResponse:
    """Close the hub's active intake session."""
    session = await lifecycle.close(hub_id)
    return SessionResponse.model_validate(session)
