"""Hub API endpoints."""

from fastapi import APIRouter

from hubintake.app.api.v1.dependencies import AppSettings, Hubs
from hubintake.app.schemas import HubCreate, HubListResponse, HubResponse
from hubintake.core.errors import InvalidRequestError

router = APIRouter(prefix="/hubs", tags=["hubs"])


@router.post("", response_model=HubResponse, status_code=201)
async def create_hub(
    request: HubCreate,
    hubs: Hubs,
    settings: AppSettings,
) -> HubResponse:
    """Register a new hub.

    The location must be one of the configured locations.
    """
    if request.location not in settings.intake.locations:
        raise InvalidRequestError(f"Unsupported location: {request.location}")

    hub = await hubs.create_hub(request.location)
    return HubResponse.model_validate(hub)


@router.get("", response_model=HubListResponse)
async def list_hubs(hubs: Hubs) -> HubListResponse:
    """List all hubs, oldest registration first."""
    items = await hubs.list_hubs()
    return HubListResponse(
        items=[HubResponse.model_validate(hub) for hub in items],
        total=len(items),
    )
