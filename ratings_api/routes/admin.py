"""Admin endpoints for user and store management.

All routes require a SYSTEM_ADMIN token; the gate is attached where the
router is included (see ratings_api.routes).
"""

from fastapi import APIRouter, Depends, Path, Query, status

from ratings_api.models import Role
from ratings_api.routes.common import list_params
from ratings_api.routes.deps import get_credentials, get_current_identity
from ratings_api.schemas import (
    AdminStoreDetail,
    AdminStoreListItem,
    AdminUpdateUserRequest,
    CreateStoreRequest,
    CreateUserRequest,
    DashboardStats,
    MessageResponse,
    Page,
    StoreDetailEnvelope,
    StoreEnvelope,
    StoreOut,
    UpdateStoreRequest,
    UserDetail,
    UserEnvelope,
    UserListItem,
    UserOut,
)
from ratings_api.services import stores as store_service
from ratings_api.services import users as user_service
from ratings_api.services.credentials import CredentialService, Identity
from ratings_api.services.dashboard import get_dashboard_stats
from ratings_api.services.pagination import ListParams
from ratings_api.stores.postgres import get_session

router = APIRouter()


@router.get("/dashboard", response_model=DashboardStats)
async def dashboard() -> DashboardStats:
    """Totals of users, stores and ratings."""
    async with get_session() as session:
        return await get_dashboard_stats(session)


# ============================================================
# Users
# ============================================================


@router.post("/users", response_model=UserEnvelope, status_code=status.HTTP_201_CREATED)
async def create_user(
    payload: CreateUserRequest,
    credentials: CredentialService = Depends(get_credentials),
) -> UserEnvelope:
    async with get_session() as session:
        user = await user_service.create_user(session, credentials, payload)
        return UserEnvelope(message="User created successfully", user=UserOut.model_validate(user))


@router.get("/users", response_model=Page[UserListItem])
async def list_users(
    name: str | None = Query(default=None),
    email: str | None = Query(default=None),
    address: str | None = Query(default=None),
    role: Role | None = Query(default=None),
    params: ListParams = Depends(list_params),
) -> Page[UserListItem]:
    """List users with substring filters, sorting and paging.

    sortBy: name | email | address | role | created_at
    """
    async with get_session() as session:
        users, pagination = await user_service.list_users(
            session, params, name=name, email=email, address=address, role=role
        )
        return Page[UserListItem](
            data=[UserListItem.model_validate(u) for u in users],
            pagination=pagination,
        )


@router.get("/users/{user_id}", response_model=UserDetail)
async def get_user(user_id: int = Path(ge=1)) -> UserDetail:
    """User detail; store owners also get the average across all their stores."""
    async with get_session() as session:
        user, owner_average = await user_service.get_user_detail(session, user_id)
        detail = UserDetail.model_validate(user)
        detail.store_owner_average_rating = owner_average
        return detail


@router.put("/users/{user_id}", response_model=UserEnvelope)
async def update_user(
    payload: AdminUpdateUserRequest,
    user_id: int = Path(ge=1),
    credentials: CredentialService = Depends(get_credentials),
) -> UserEnvelope:
    async with get_session() as session:
        user = await user_service.update_user(session, credentials, user_id, payload)
        return UserEnvelope(message="User updated", user=UserOut.model_validate(user))


@router.delete("/users/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: int = Path(ge=1),
    identity: Identity = Depends(get_current_identity),
) -> MessageResponse:
    async with get_session() as session:
        await user_service.delete_user(session, identity.id, user_id)
    return MessageResponse(message="User deleted")


# ============================================================
# Stores
# ============================================================


@router.post("/stores", response_model=StoreEnvelope, status_code=status.HTTP_201_CREATED)
async def create_store(payload: CreateStoreRequest) -> StoreEnvelope:
    async with get_session() as session:
        store = await store_service.create_store(session, payload)
        return StoreEnvelope(message="Store created successfully", store=StoreOut.model_validate(store))


@router.get("/stores", response_model=Page[AdminStoreListItem])
async def list_stores(
    name: str | None = Query(default=None),
    email: str | None = Query(default=None),
    address: str | None = Query(default=None),
    params: ListParams = Depends(list_params),
) -> Page[AdminStoreListItem]:
    """List stores with their owners.

    sortBy: name | email | address | average_rating | ratings_count | created_at
    """
    async with get_session() as session:
        stores, pagination = await store_service.list_stores(
            session, params, name=name, email=email, address=address
        )
        return Page[AdminStoreListItem](
            data=[AdminStoreListItem.model_validate(s) for s in stores],
            pagination=pagination,
        )


@router.get("/stores/{store_id}", response_model=StoreDetailEnvelope)
async def get_store(store_id: int = Path(ge=1)) -> StoreDetailEnvelope:
    async with get_session() as session:
        store = await store_service.get_store(session, store_id, with_owner=True)
        return StoreDetailEnvelope(
            message="Store fetched successfully",
            store=AdminStoreDetail.model_validate(store),
        )


@router.put("/stores/{store_id}", response_model=StoreEnvelope)
async def update_store(
    payload: UpdateStoreRequest,
    store_id: int = Path(ge=1),
) -> StoreEnvelope:
    async with get_session() as session:
        store = await store_service.update_store(session, store_id, payload)
        return StoreEnvelope(message="Store updated successfully", store=StoreOut.model_validate(store))


@router.delete("/stores/{store_id}", response_model=MessageResponse)
async def delete_store(store_id: int = Path(ge=1)) -> MessageResponse:
    async with get_session() as session:
        await store_service.delete_store(session, store_id)
    return MessageResponse(message="Store deleted")
