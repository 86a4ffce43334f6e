"""SQLAlchemy ORM models.

Models represent database tables:
- users: Accounts with a role (admin, store owner, normal user)
- stores: Rated stores with their derived rating aggregate
- ratings: One rating per user per store
"""

from ratings_api.models.user import Role, User
from ratings_api.models.store import Store
from ratings_api.models.rating import Rating

__all__ = ["Rating", "Role", "Store", "User"]
