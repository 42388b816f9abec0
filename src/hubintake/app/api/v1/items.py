"""Item API endpoints."""

from fastapi import APIRouter

from hubintake.app.api.v1.dependencies import AppSettings, Registrar
from hubintake.app.schemas import ItemCreate, ItemResponse
from hubintake.core.errors import InvalidRequestError

router = APIRouter(prefix="/hubs/{hub_id}/items", tags=["items"])


@router.post("", response_model=ItemResponse, status_code=201)
async def add_item(
    hub_id: str,
    request: ItemCreate,
    registrar: Registrar,
    settings: AppSettings,
) -> ItemResponse:
    """Register an item in the hub's active session."""
    if request.item_type not in settings.intake.item_types:
        raise InvalidRequestError(f"Unsupported item type: {request.item_type}")

    item = await registrar.add(hub_id, request.item_type)
    return ItemResponse.model_validate(item)


@router.delete("/last", response_model=ItemResponse)
async def remove_last_item(hub_id: str, registrar: Registrar) -> ItemResponse:
    """Remove the most recently registered item of the active session.

    Returns the removed item.
    """
    item = await registrar.remove_last(hub_id)
    return ItemResponse.model_validate(item)
