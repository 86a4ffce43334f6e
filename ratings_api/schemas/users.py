"""Schemas for accounts: signup, login, profile and admin user management."""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, field_validator

from ratings_api.models import Role
from ratings_api.services.credentials import check_password_policy

NAME_MIN_LENGTH = 20
NAME_MAX_LENGTH = 60
ADDRESS_MAX_LENGTH = 400


class UserOut(BaseModel):
    """Public view of a user. Never includes the password hash."""

    id: int
    name: str
    email: str
    address: str | None = None
    role: Role

    model_config = {"from_attributes": True}


class UserListItem(UserOut):
    created_at: datetime | None = None


class UserDetail(UserOut):
    """Admin view of one user.

    storeOwnerAverageRating is the mean of every rating on every store the
    user owns; null unless the user is a STORE_OWNER.
    """

    store_owner_average_rating: float | None = Field(
        alias="storeOwnerAverageRating",
        default=None,
    )

    model_config = {"from_attributes": True, "populate_by_name": True}


class SignupRequest(BaseModel):
    """Self-registration. Role is always NORMAL_USER."""

    name: str = Field(min_length=NAME_MIN_LENGTH, max_length=NAME_MAX_LENGTH)
    email: EmailStr
    address: str | None = Field(default=None, max_length=ADDRESS_MAX_LENGTH)
    password: str

    @field_validator("password")
    @classmethod
    def _password_policy(cls, v: str) -> str:
        return check_password_policy(v)


class CreateUserRequest(SignupRequest):
    """Admin-created account with an explicit role."""

    role: Role


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class AuthResponse(BaseModel):
    """Signup/login result with a bearer token."""

    message: str
    token: str
    user: UserOut


class ChangePasswordRequest(BaseModel):
    old_password: str = Field(alias="oldPassword", min_length=1)
    new_password: str = Field(alias="newPassword")

    model_config = {"populate_by_name": True}

    @field_validator("new_password")
    @classmethod
    def _password_policy(cls, v: str) -> str:
        return check_password_policy(v)


class ProfileUpdateRequest(BaseModel):
    """Self-service profile update; any subset of fields.

    An empty or null password leaves the password unchanged.
    """

    name: str | None = Field(default=None, min_length=NAME_MIN_LENGTH, max_length=NAME_MAX_LENGTH)
    email: EmailStr | None = None
    address: str | None = Field(default=None, max_length=ADDRESS_MAX_LENGTH)
    password: str | None = None

    @field_validator("password")
    @classmethod
    def _password_policy(cls, v: str | None) -> str | None:
        if not v:
            return None
        return check_password_policy(v)


class AdminUpdateUserRequest(ProfileUpdateRequest):
    role: Role | None = None


class UserEnvelope(BaseModel):
    message: str
    user: UserOut
