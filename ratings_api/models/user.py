"""User model.

Represents an account of any role: administrators, store owners and the
normal users who rate stores.
"""

from datetime import datetime
from enum import Enum as PyEnum

from sqlalchemy import DateTime, Enum, String, func
from sqlalchemy.orm import Mapped, mapped_column

from ratings_api.stores.postgres import Base


class Role(str, PyEnum):
    """Closed set of account roles."""

    SYSTEM_ADMIN = "SYSTEM_ADMIN"
    NORMAL_USER = "NORMAL_USER"
    STORE_OWNER = "STORE_OWNER"


class User(Base):
    """Platform account."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)

    name: Mapped[str] = mapped_column(String(60))
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    address: Mapped[str | None] = mapped_column(String(400))

    # bcrypt hash, never serialized
    password_hash: Mapped[str] = mapped_column(String(255))

    role: Mapped[Role] = mapped_column(
        Enum(Role, name="user_role"),
        default=Role.NORMAL_USER,
        index=True,
    )

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
        return f"<User {self.email} ({self.role.value})>"
