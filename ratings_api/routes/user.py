"""Normal user endpoints (NORMAL_USER only).

GET  /api/user/stores                         - stores with the caller's own rating
PUT  /api/user/me                             - update own profile
POST /api/user/stores/{storeId}/rating        - rate a store once
PUT  /api/user/stores/{storeId}/rating        - change that rating
GET  /api/user/stores/{storeId}/rating/me     - the caller's rating or null
"""

from fastapi import APIRouter, Depends, Path, Query, status

from ratings_api.routes.common import list_params
from ratings_api.routes.deps import get_credentials, get_current_identity
from ratings_api.schemas import (
    CreateRatingRequest,
    MyRatingResponse,
    MyRatingSummary,
    Page,
    ProfileUpdateRequest,
    RatingEnvelope,
    RatingOut,
    UpdateRatingRequest,
    UserEnvelope,
    UserOut,
    UserStoreListItem,
)
from ratings_api.services import ratings as rating_service
from ratings_api.services import stores as store_service
from ratings_api.services import users as user_service
from ratings_api.services.credentials import CredentialService, Identity
from ratings_api.services.pagination import ListParams
from ratings_api.stores.postgres import get_session

router = APIRouter()


@router.get("/stores", response_model=Page[UserStoreListItem])
async def list_stores(
    name: str | None = Query(default=None),
    email: str | None = Query(default=None),
    address: str | None = Query(default=None),
    params: ListParams = Depends(list_params),
    identity: Identity = Depends(get_current_identity),
) -> Page[UserStoreListItem]:
    """Search stores; each row carries myRating (null if not rated yet).

    sortBy: name | address | average_rating | ratings_count
    """
    async with get_session() as session:
        rows, pagination = await store_service.list_stores_for_user(
            session, identity.id, params, name=name, email=email, address=address
        )
        data = [
            UserStoreListItem(
                id=store.id,
                name=store.name,
                email=store.email,
                address=store.address,
                average_rating=store.average_rating,
                ratings_count=store.ratings_count,
                my_rating=MyRatingSummary.model_validate(rating) if rating else None,
            )
            for store, rating in rows
        ]
        return Page[UserStoreListItem](data=data, pagination=pagination)


@router.put("/me", response_model=UserEnvelope)
async def update_me(
    payload: ProfileUpdateRequest,
    identity: Identity = Depends(get_current_identity),
    credentials: CredentialService = Depends(get_credentials),
) -> UserEnvelope:
    async with get_session() as session:
        user = await user_service.update_profile(session, credentials, identity.id, payload)
        return UserEnvelope(message="Profile updated", user=UserOut.model_validate(user))


@router.post(
    "/stores/{store_id}/rating",
    response_model=RatingEnvelope,
    status_code=status.HTTP_201_CREATED,
)
async def create_rating(
    payload: CreateRatingRequest,
    store_id: int = Path(ge=1),
    identity: Identity = Depends(get_current_identity),
) -> RatingEnvelope:
    async with get_session() as session:
        rating = await rating_service.create_rating(session, identity.id, store_id, payload)
        return RatingEnvelope(message="Rating created successfully", rating=RatingOut.model_validate(rating))


@router.put("/stores/{store_id}/rating", response_model=RatingEnvelope)
async def update_rating(
    payload: UpdateRatingRequest,
    store_id: int = Path(ge=1),
    identity: Identity = Depends(get_current_identity),
) -> RatingEnvelope:
    async with get_session() as session:
        rating = await rating_service.update_rating(session, identity.id, store_id, payload)
        return RatingEnvelope(message="Rating updated successfully", rating=RatingOut.model_validate(rating))


@router.get("/stores/{store_id}/rating/me", response_model=MyRatingResponse)
async def my_rating(
    store_id: int = Path(ge=1),
    identity: Identity = Depends(get_current_identity),
) -> MyRatingResponse:
    async with get_session() as session:
        rating = await rating_service.get_my_rating(session, identity.id, store_id)
        return MyRatingResponse(rating=RatingOut.model_validate(rating) if rating else None)
