"""Store resource service.

Admin CRUD, owner views and the normal-user store listing. A store's owner
must always be a STORE_OWNER, and its rating aggregate is never written here:
only the aggregator touches average_rating / ratings_count.
"""

import logging

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from ratings_api.errors import HasRatings, InvalidOwner, NotFound, NotFoundOrNotOwner
from ratings_api.models import Rating, Role, Store, User
from ratings_api.schemas import CreateStoreRequest, Pagination, UpdateStoreRequest
from ratings_api.services.aggregator import lock_store
from ratings_api.services.pagination import (
    ListParams,
    apply_page,
    build_pagination,
    count_rows,
    order_clause,
    substring_filters,
)

logger = logging.getLogger("uvicorn.error")

ADMIN_STORE_SORT_FIELDS = {
    "name": Store.name,
    "email": Store.email,
    "address": Store.address,
    "average_rating": Store.average_rating,
    "ratings_count": Store.ratings_count,
    "created_at": Store.created_at,
}

USER_STORE_SORT_FIELDS = {
    "name": Store.name,
    "address": Store.address,
    "average_rating": Store.average_rating,
    "ratings_count": Store.ratings_count,
}


async def _resolve_owner(session: AsyncSession, owner_id: int) -> User:
    owner = await session.get(User, owner_id)
    if owner is None:
        raise NotFound("Owner user not found")
    if owner.role is not Role.STORE_OWNER:
        raise InvalidOwner()
    return owner


async def get_store(session: AsyncSession, store_id: int, *, with_owner: bool = False) -> Store:
    query = select(Store).where(Store.id == store_id)
    if with_owner:
        query = query.options(joinedload(Store.owner))
    result = await session.execute(query)
    store = result.scalar_one_or_none()
    if store is None:
        raise NotFound("Store not found")
    return store


async def create_store(session: AsyncSession, payload: CreateStoreRequest) -> Store:
    """Create a store for an existing STORE_OWNER.

    Raises:
        NotFound: ownerId does not match a user.
        InvalidOwner: The user is not a STORE_OWNER.
    """
    await _resolve_owner(session, payload.owner_id)
    store = Store(
        name=payload.name,
        email=payload.email,
        address=payload.address,
        owner_id=payload.owner_id,
        average_rating=0,
        ratings_count=0,
    )
    session.add(store)
    await session.flush()
    await session.refresh(store)
    logger.info(f"[admin] created store_id={store.id} owner_id={store.owner_id}")
    return store


async def list_stores(
    session: AsyncSession,
    params: ListParams,
    *,
    name: str | None = None,
    email: str | None = None,
    address: str | None = None,
) -> tuple[list[Store], Pagination]:
    """Admin listing; each store comes with its owner loaded."""
    filters = substring_filters(
        (Store.name, name),
        (Store.email, email),
        (Store.address, address),
    )
    total = await count_rows(session, Store, filters)
    query = apply_page(
        select(Store)
        .options(joinedload(Store.owner))
        .where(*filters)
        .order_by(*order_clause(ADMIN_STORE_SORT_FIELDS, params)),
        params,
    )
    result = await session.execute(query)
    return list(result.scalars().all()), build_pagination(total, params)


async def list_stores_for_user(
    session: AsyncSession,
    user_id: int,
    params: ListParams,
    *,
    name: str | None = None,
    email: str | None = None,
    address: str | None = None,
) -> tuple[list[tuple[Store, Rating | None]], Pagination]:
    """Normal-user listing: every store paired with the caller's rating, if any."""
    filters = substring_filters(
        (Store.name, name),
        (Store.email, email),
        (Store.address, address),
    )
    total = await count_rows(session, Store, filters)
    query = apply_page(
        select(Store, Rating)
        .outerjoin(Rating, and_(Rating.store_id == Store.id, Rating.user_id == user_id))
        .where(*filters)
        .order_by(*order_clause(USER_STORE_SORT_FIELDS, params)),
        params,
    )
    result = await session.execute(query)
    rows = [(store, rating) for store, rating in result.all()]
    return rows, build_pagination(total, params)


async def update_store(session: AsyncSession, store_id: int, payload: UpdateStoreRequest) -> Store:
    store = await get_store(session, store_id)
    changes = payload.model_dump(exclude_unset=True)

    owner_id = changes.pop("owner_id", None)
    if owner_id is not None and owner_id != store.owner_id:
        await _resolve_owner(session, owner_id)
        store.owner_id = owner_id

    for field in ("name", "address"):
        if changes.get(field) is not None:
            setattr(store, field, changes[field])
    if "email" in changes:
        store.email = changes["email"]

    await session.flush()
    await session.refresh(store)
    logger.info(f"[admin] updated store_id={store.id}")
    return store


async def delete_store(session: AsyncSession, store_id: int) -> None:
    """Delete a store that has no ratings.

    Raises:
        NotFound: No such store.
        HasRatings: The store still has ratings.
    """
    store = await lock_store(session, store_id)
    if store.ratings_count > 0:
        raise HasRatings()
    await session.delete(store)
    await session.flush()
    logger.info(f"[admin] deleted store_id={store_id}")


# ============================================================
# Owner views
# ============================================================


async def list_owner_stores(session: AsyncSession, owner_id: int) -> list[Store]:
    result = await session.execute(
        select(Store).where(Store.owner_id == owner_id).order_by(Store.name.asc(), Store.id.asc())
    )
    return list(result.scalars().all())


async def get_owner_store_ratings(
    session: AsyncSession,
    owner_id: int,
    store_id: int,
) -> tuple[Store, list[Rating]]:
    """A store owned by the caller plus all its ratings, newest first.

    Raises:
        NotFoundOrNotOwner: Store is absent or owned by someone else. The two
            cases are deliberately reported the same way.
    """
    result = await session.execute(
        select(Store).where(Store.id == store_id, Store.owner_id == owner_id)
    )
    store = result.scalar_one_or_none()
    if store is None:
        raise NotFoundOrNotOwner()

    ratings = await session.execute(
        select(Rating)
        .options(joinedload(Rating.user))
        .where(Rating.store_id == store.id)
        .order_by(Rating.created_at.desc(), Rating.id.desc())
    )
    return store, list(ratings.scalars().all())
