"""Store model.

A store is owned by one STORE_OWNER user and carries the derived rating
aggregate (average_rating, ratings_count) maintained by the aggregator.
"""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Numeric, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ratings_api.models.user import User
from ratings_api.stores.postgres import Base


class Store(Base):
    """Rated store."""

    __tablename__ = "stores"
    __table_args__ = (
        CheckConstraint(
            "average_rating >= 0 AND average_rating <= 5",
            name="ck_stores_average_rating_range",
        ),
        CheckConstraint("ratings_count >= 0", name="ck_stores_ratings_count_positive"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)

    name: Mapped[str] = mapped_column(String(60), index=True)
    email: Mapped[str | None] = mapped_column(String(255))
    address: Mapped[str] = mapped_column(String(400))

    owner_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    owner: Mapped[User] = relationship(lazy="raise")

    # Derived from ratings; written only by the aggregator
    average_rating: Mapped[float] = mapped_column(
        Numeric(3, 2, asdecimal=False),
        default=0,
        server_default="0",
    )
    ratings_count: Mapped[int] = mapped_column(default=0, server_default="0")

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )

    def __repr__(self) -> str:
        return f"<Store {self.name} ({self.average_rating:.2f}/{self.ratings_count})>"
