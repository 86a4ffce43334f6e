"""Rating model.

One rating per (user, store) pair, value 1-5 with an optional comment.
"""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Text, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ratings_api.models.store import Store
from ratings_api.models.user import User
from ratings_api.stores.postgres import Base


class Rating(Base):
    """A user's rating of a store."""

    __tablename__ = "ratings"
    __table_args__ = (
        UniqueConstraint("user_id", "store_id", name="uq_ratings_user_store"),
        CheckConstraint("rating_value >= 1 AND rating_value <= 5", name="ck_ratings_value_range"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)

    # Relations
    store_id: Mapped[int] = mapped_column(ForeignKey("stores.id"), index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    store: Mapped[Store] = relationship(lazy="raise")
    user: Mapped[User] = relationship(lazy="raise")

    rating_value: Mapped[int] = mapped_column()
    comment: Mapped[str | None] = mapped_column(Text)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )

    def __repr__(self) -> str:
        return f"<Rating store={self.store_id} user={self.user_id} value={self.rating_value}>"
