"""Rating aggregator.

Keeps Store.average_rating and Store.ratings_count equal to the mean and
count of the store's rating rows:
- average = arithmetic mean of rating_value, rounded to 2 decimals
- average = 0 when the store has no ratings
- count = number of rating rows

recompute_store_rating() must run in the same session (and therefore the
same transaction) as the rating write it follows. Callers lock the store row
with lock_store() before touching its ratings, so concurrent writers to one
store serialize instead of overwriting each other's aggregate.
"""

from decimal import ROUND_HALF_UP, Decimal
import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ratings_api.errors import NotFound
from ratings_api.models import Rating, Store

logger = logging.getLogger("uvicorn.error")

_TWO_PLACES = Decimal("0.01")


def mean_rating(total: float | None, count: int) -> float:
    """Mean rounded half-up to 2 decimals; 0 for an empty rating set.

    Matches what NUMERIC(3,2) stores: 33 / 8 = 4.125 becomes 4.13.
    """
    if not count or total is None:
        return 0.0
    mean = Decimal(str(total)) / Decimal(count)
    return float(mean.quantize(_TWO_PLACES, rounding=ROUND_HALF_UP))


async def lock_store(session: AsyncSession, store_id: int) -> Store:
    """Load a store with a row lock held until the transaction ends.

    Raises:
        NotFound: If the store does not exist.
    """
    result = await session.execute(
        select(Store).where(Store.id == store_id).with_for_update()
    )
    store = result.scalar_one_or_none()
    if store is None:
        raise NotFound("Store not found")
    return store


async def recompute_store_rating(session: AsyncSession, store_id: int) -> Store:
    """Recompute and write a store's rating aggregate.

    Args:
        session: Session holding the rating write that triggered this.
        store_id: Store whose ratings changed.

    Returns:
        The updated store (flushed, not committed).
    """
    # autoflush pushes the pending rating write before this query runs
    result = await session.execute(
        select(func.sum(Rating.rating_value), func.count(Rating.id)).where(
            Rating.store_id == store_id
        )
    )
    total, count = result.one()

    store = await session.get(Store, store_id)
    if store is None:
        raise NotFound("Store not found")

    store.average_rating = mean_rating(total, count)
    store.ratings_count = count
    await session.flush()
    await session.refresh(store)

    logger.info(
        "[aggregate] store_id=%s average_rating=%.2f ratings_count=%s",
        store_id,
        store.average_rating,
        store.ratings_count,
    )
    return store
