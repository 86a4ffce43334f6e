"""Admin dashboard counters."""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ratings_api.models import Rating, Store, User
from ratings_api.schemas import DashboardStats


async def get_dashboard_stats(session: AsyncSession) -> DashboardStats:
    """Count users, stores and ratings."""
    total_users = (await session.execute(select(func.count(User.id)))).scalar() or 0
    total_stores = (await session.execute(select(func.count(Store.id)))).scalar() or 0
    total_ratings = (await session.execute(select(func.count(Rating.id)))).scalar() or 0
    return DashboardStats(
        total_users=total_users,
        total_stores=total_stores,
        total_ratings=total_ratings,
    )
