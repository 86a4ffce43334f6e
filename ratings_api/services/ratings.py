"""Rating resource service.

Every write follows the same sequence inside the caller's transaction:
1. Lock the store row (serializes writers on one store)
2. Insert or update the caller's rating
3. Recompute the store's aggregate
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ratings_api.errors import DuplicateRating, NotFound
from ratings_api.models import Rating
from ratings_api.schemas import CreateRatingRequest, UpdateRatingRequest
from ratings_api.services.aggregator import lock_store, recompute_store_rating

logger = logging.getLogger("uvicorn.error")


async def find_rating(session: AsyncSession, user_id: int, store_id: int) -> Rating | None:
    result = await session.execute(
        select(Rating).where(Rating.user_id == user_id, Rating.store_id == store_id)
    )
    return result.scalar_one_or_none()


async def create_rating(
    session: AsyncSession,
    user_id: int,
    store_id: int,
    payload: CreateRatingRequest,
) -> Rating:
    """Rate a store for the first time.

    Raises:
        NotFound: No such store.
        DuplicateRating: The caller already rated this store.
    """
    await lock_store(session, store_id)

    if await find_rating(session, user_id, store_id) is not None:
        raise DuplicateRating()

    rating = Rating(
        store_id=store_id,
        user_id=user_id,
        rating_value=payload.rating_value,
        comment=payload.comment,
    )
    session.add(rating)
    try:
        await session.flush()
    except IntegrityError as e:
        raise DuplicateRating() from e

    await recompute_store_rating(session, store_id)
    await session.refresh(rating)
    logger.info(
        f"[rating] created rating_id={rating.id} store_id={store_id} user_id={user_id} "
        f"value={rating.rating_value}"
    )
    return rating


async def update_rating(
    session: AsyncSession,
    user_id: int,
    store_id: int,
    payload: UpdateRatingRequest,
) -> Rating:
    """Change the caller's existing rating of a store.

    Raises:
        NotFound: No such store, or the caller has not rated it.
    """
    await lock_store(session, store_id)

    rating = await find_rating(session, user_id, store_id)
    if rating is None:
        raise NotFound("Rating not found")

    changes = payload.model_dump(exclude_unset=True)
    if changes.get("rating_value") is not None:
        rating.rating_value = changes["rating_value"]
    if "comment" in changes:
        rating.comment = changes["comment"]
    await session.flush()

    await recompute_store_rating(session, store_id)
    await session.refresh(rating)
    logger.info(
        f"[rating] updated rating_id={rating.id} store_id={store_id} user_id={user_id} "
        f"value={rating.rating_value}"
    )
    return rating


async def get_my_rating(session: AsyncSession, user_id: int, store_id: int) -> Rating | None:
    """The caller's rating of a store, or None if they have not rated it."""
    return await find_rating(session, user_id, store_id)
