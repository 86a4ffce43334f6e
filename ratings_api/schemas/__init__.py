"""Pydantic schemas for API request/response validation."""

from ratings_api.schemas.common import ErrorResponse, MessageResponse, Page, Pagination
from ratings_api.schemas.dashboard import DashboardStats
from ratings_api.schemas.ratings import (
    CreateRatingRequest,
    MyRatingResponse,
    RatingEnvelope,
    RatingOut,
    UpdateRatingRequest,
)
from ratings_api.schemas.stores import (
    AdminStoreDetail,
    AdminStoreListItem,
    CreateStoreRequest,
    MyRatingSummary,
    OwnerRatingItem,
    OwnerStoresResponse,
    StoreDetailEnvelope,
    StoreEnvelope,
    StoreOut,
    StoreRatingsResponse,
    UpdateStoreRequest,
    UserStoreListItem,
)
from ratings_api.schemas.users import (
    AdminUpdateUserRequest,
    AuthResponse,
    ChangePasswordRequest,
    CreateUserRequest,
    LoginRequest,
    ProfileUpdateRequest,
    SignupRequest,
    UserDetail,
    UserEnvelope,
    UserListItem,
    UserOut,
)

__all__ = [
    "AdminStoreDetail",
    "AdminStoreListItem",
    "AdminUpdateUserRequest",
    "AuthResponse",
    "ChangePasswordRequest",
    "CreateRatingRequest",
    "CreateStoreRequest",
    "CreateUserRequest",
    "DashboardStats",
    "ErrorResponse",
    "LoginRequest",
    "MessageResponse",
    "MyRatingResponse",
    "MyRatingSummary",
    "OwnerRatingItem",
    "OwnerStoresResponse",
    "Page",
    "Pagination",
    "ProfileUpdateRequest",
    "RatingEnvelope",
    "RatingOut",
    "SignupRequest",
    "StoreDetailEnvelope",
    "StoreEnvelope",
    "StoreOut",
    "StoreRatingsResponse",
    "UpdateRatingRequest",
    "UpdateStoreRequest",
    "UserDetail",
    "UserEnvelope",
    "UserListItem",
    "UserOut",
    "UserStoreListItem",
]
