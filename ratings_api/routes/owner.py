"""Store owner endpoints (STORE_OWNER only)."""

from fastapi import APIRouter, Depends, Path

from ratings_api.routes.deps import get_current_identity
from ratings_api.schemas import OwnerRatingItem, OwnerStoresResponse, StoreOut, StoreRatingsResponse
from ratings_api.services import stores as store_service
from ratings_api.services.credentials import Identity
from ratings_api.stores.postgres import get_session

router = APIRouter()


@router.get("/stores", response_model=OwnerStoresResponse)
async def my_stores(identity: Identity = Depends(get_current_identity)) -> OwnerStoresResponse:
    """Stores owned by the caller, with their rating aggregate."""
    async with get_session() as session:
        stores = await store_service.list_owner_stores(session, identity.id)
        return OwnerStoresResponse(stores=[StoreOut.model_validate(s) for s in stores])


@router.get("/stores/{store_id}/ratings", response_model=StoreRatingsResponse)
async def store_ratings(
    store_id: int = Path(ge=1),
    identity: Identity = Depends(get_current_identity),
) -> StoreRatingsResponse:
    """Ratings of one of the caller's stores, newest first.

    Responds 404 both when the store does not exist and when it belongs to
    another owner.
    """
    async with get_session() as session:
        store, ratings = await store_service.get_owner_store_ratings(session, identity.id, store_id)
        return StoreRatingsResponse(
            store=StoreOut.model_validate(store),
            ratings=[OwnerRatingItem.model_validate(r) for r in ratings],
        )
