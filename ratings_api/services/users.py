"""User resource service: signup, login, profile and admin user management.

One password policy applies wherever a password is set (signup, admin
create, admin reset, self-update, change-password); it is enforced by the
request schemas before these functions run.
"""

import logging
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ratings_api.errors import (
    Conflict,
    EmailInUse,
    InvalidCredentials,
    NotFound,
    ValidationError,
)
from ratings_api.models import Rating, Role, Store, User
from ratings_api.schemas import (
    AdminUpdateUserRequest,
    ChangePasswordRequest,
    CreateUserRequest,
    Pagination,
    ProfileUpdateRequest,
    SignupRequest,
)
from ratings_api.services.credentials import CredentialService, Identity
from ratings_api.services.aggregator import mean_rating
from ratings_api.services.pagination import (
    ListParams,
    apply_page,
    build_pagination,
    count_rows,
    order_clause,
    substring_filters,
)

logger = logging.getLogger("uvicorn.error")

USER_SORT_FIELDS = {
    "name": User.name,
    "email": User.email,
    "address": User.address,
    "role": User.role,
    "created_at": User.created_at,
}

# Columns a profile or admin update may leave unset but never null out
_REQUIRED_FIELDS = ("name", "email", "role")


def identity_of(user: User) -> Identity:
    return Identity(id=user.id, email=user.email, role=user.role)


async def get_user(session: AsyncSession, user_id: int) -> User:
    user = await session.get(User, user_id)
    if user is None:
        raise NotFound("User not found")
    return user


async def _ensure_email_free(session: AsyncSession, email: str, *, exclude_id: int | None = None) -> None:
    query = select(User.id).where(func.lower(User.email) == email.lower())
    if exclude_id is not None:
        query = query.where(User.id != exclude_id)
    result = await session.execute(query.limit(1))
    if result.scalar_one_or_none() is not None:
        raise EmailInUse()


async def _insert_user(
    session: AsyncSession,
    credentials: CredentialService,
    *,
    name: str,
    email: str,
    address: str | None,
    password: str,
    role: Role,
) -> User:
    await _ensure_email_free(session, email)
    user = User(
        name=name,
        email=email,
        address=address,
        password_hash=credentials.hash_password(password),
        role=role,
    )
    session.add(user)
    try:
        await session.flush()
    except IntegrityError as e:
        # Concurrent signup won the unique index
        raise EmailInUse() from e
    await session.refresh(user)
    return user


async def signup(
    session: AsyncSession,
    credentials: CredentialService,
    payload: SignupRequest,
) -> tuple[User, str]:
    """Register a NORMAL_USER and return it with a fresh token."""
    user = await _insert_user(
        session,
        credentials,
        name=payload.name,
        email=payload.email,
        address=payload.address,
        password=payload.password,
        role=Role.NORMAL_USER,
    )
    logger.info(f"[auth] signup user_id={user.id}")
    return user, credentials.issue_token(identity_of(user))


async def authenticate(
    session: AsyncSession,
    credentials: CredentialService,
    email: str,
    password: str,
) -> tuple[User, str]:
    """Verify email/password and return the user with a fresh token.

    Raises:
        InvalidCredentials: Unknown email or wrong password, indistinguishably.
    """
    result = await session.execute(select(User).where(func.lower(User.email) == email.lower()))
    user = result.scalar_one_or_none()
    if user is None or not credentials.verify_password(password, user.password_hash):
        logger.info("[auth] login rejected")
        raise InvalidCredentials()

    logger.info(f"[auth] login user_id={user.id} role={user.role.value}")
    return user, credentials.issue_token(identity_of(user))


async def change_password(
    session: AsyncSession,
    credentials: CredentialService,
    user_id: int,
    payload: ChangePasswordRequest,
) -> None:
    user = await get_user(session, user_id)
    if not credentials.verify_password(payload.old_password, user.password_hash):
        raise InvalidCredentials("Old password is incorrect")
    user.password_hash = credentials.hash_password(payload.new_password)
    await session.flush()
    logger.info(f"[auth] password changed user_id={user.id}")


async def _apply_user_updates(
    session: AsyncSession,
    credentials: CredentialService,
    user: User,
    changes: dict[str, Any],
) -> User:
    password = changes.pop("password", None)
    for field in _REQUIRED_FIELDS:
        if field in changes and changes[field] is None:
            del changes[field]

    email = changes.get("email")
    if email is not None and email.lower() != user.email.lower():
        await _ensure_email_free(session, email, exclude_id=user.id)

    role = changes.get("role")
    if role is not None and role is not user.role and user.role is Role.STORE_OWNER:
        # Stores must always point at a STORE_OWNER
        owned = await session.execute(
            select(func.count(Store.id)).where(Store.owner_id == user.id)
        )
        if owned.scalar():
            raise Conflict("Reassign this user's stores before changing their role")

    for field, value in changes.items():
        setattr(user, field, value)
    if password:
        user.password_hash = credentials.hash_password(password)

    try:
        await session.flush()
    except IntegrityError as e:
        raise EmailInUse() from e
    await session.refresh(user)
    return user


async def update_profile(
    session: AsyncSession,
    credentials: CredentialService,
    user_id: int,
    payload: ProfileUpdateRequest,
) -> User:
    """Self-service update of name/email/address/password."""
    user = await get_user(session, user_id)
    user = await _apply_user_updates(
        session, credentials, user, payload.model_dump(exclude_unset=True)
    )
    logger.info(f"[user] profile updated user_id={user.id}")
    return user


# ============================================================
# Admin operations
# ============================================================


async def create_user(
    session: AsyncSession,
    credentials: CredentialService,
    payload: CreateUserRequest,
) -> User:
    user = await _insert_user(
        session,
        credentials,
        name=payload.name,
        email=payload.email,
        address=payload.address,
        password=payload.password,
        role=payload.role,
    )
    logger.info(f"[admin] created user_id={user.id} role={user.role.value}")
    return user


async def list_users(
    session: AsyncSession,
    params: ListParams,
    *,
    name: str | None = None,
    email: str | None = None,
    address: str | None = None,
    role: Role | None = None,
) -> tuple[list[User], Pagination]:
    filters = substring_filters(
        (User.name, name),
        (User.email, email),
        (User.address, address),
    )
    if role is not None:
        filters.append(User.role == role)

    total = await count_rows(session, User, filters)
    query = apply_page(
        select(User).where(*filters).order_by(*order_clause(USER_SORT_FIELDS, params)),
        params,
    )
    result = await session.execute(query)
    return list(result.scalars().all()), build_pagination(total, params)


async def owner_average_rating(session: AsyncSession, owner_id: int) -> float:
    """Mean of all ratings across every store the owner has.

    This averages rating rows, not per-store averages, so a store with more
    ratings weighs more.
    """
    result = await session.execute(
        select(func.sum(Rating.rating_value), func.count(Rating.id))
        .join(Store, Rating.store_id == Store.id)
        .where(Store.owner_id == owner_id)
    )
    total, count = result.one()
    return mean_rating(total, count)


async def get_user_detail(session: AsyncSession, user_id: int) -> tuple[User, float | None]:
    """User plus the owner-wide rating average (None unless STORE_OWNER)."""
    user = await get_user(session, user_id)
    if user.role is Role.STORE_OWNER:
        return user, await owner_average_rating(session, user.id)
    return user, None


async def update_user(
    session: AsyncSession,
    credentials: CredentialService,
    user_id: int,
    payload: AdminUpdateUserRequest,
) -> User:
    user = await get_user(session, user_id)
    user = await _apply_user_updates(
        session, credentials, user, payload.model_dump(exclude_unset=True)
    )
    logger.info(f"[admin] updated user_id={user.id}")
    return user


async def delete_user(session: AsyncSession, admin_id: int, user_id: int) -> None:
    """Delete an account other than the caller's own.

    Raises:
        ValidationError: The admin targeted their own account.
        NotFound: No such user.
        Conflict: Stores or ratings still reference the user.
    """
    if admin_id == user_id:
        raise ValidationError("You cannot delete your own account")

    user = await get_user(session, user_id)
    await session.delete(user)
    try:
        await session.flush()
    except IntegrityError as e:
        raise Conflict("User still owns stores or has ratings") from e
    logger.info(f"[admin] deleted user_id={user_id}")
