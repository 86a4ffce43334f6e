"""Schemas for stores as seen by admins, owners and normal users."""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

from ratings_api.models import Role

STORE_NAME_MAX_LENGTH = 60
STORE_ADDRESS_MAX_LENGTH = 400


class OwnerSummary(BaseModel):
    id: int
    name: str
    email: str

    model_config = {"from_attributes": True}


class OwnerDetail(OwnerSummary):
    role: Role


class StoreOut(BaseModel):
    """Store row including its rating aggregate."""

    id: int
    name: str
    email: str | None = None
    address: str
    owner_id: int
    average_rating: float = Field(ge=0, le=5)
    ratings_count: int = Field(ge=0)

    model_config = {"from_attributes": True}


class AdminStoreListItem(StoreOut):
    owner: OwnerSummary


class AdminStoreDetail(StoreOut):
    owner: OwnerDetail


class MyRatingSummary(BaseModel):
    """The caller's own rating shown inline in store listings."""

    id: int
    rating_value: int
    comment: str | None = None

    model_config = {"from_attributes": True}


class UserStoreListItem(BaseModel):
    """Store row for normal users, with their own rating if any."""

    id: int
    name: str
    email: str | None = None
    address: str
    average_rating: float
    ratings_count: int
    my_rating: MyRatingSummary | None = Field(alias="myRating", default=None)

    model_config = {"from_attributes": True, "populate_by_name": True}


class CreateStoreRequest(BaseModel):
    name: str = Field(min_length=1, max_length=STORE_NAME_MAX_LENGTH)
    email: EmailStr | None = None
    address: str = Field(min_length=1, max_length=STORE_ADDRESS_MAX_LENGTH)
    owner_id: int = Field(alias="ownerId")

    model_config = {"populate_by_name": True}


class UpdateStoreRequest(BaseModel):
    """Partial store update. Derived rating fields are not accepted."""

    name: str | None = Field(default=None, min_length=1, max_length=STORE_NAME_MAX_LENGTH)
    email: EmailStr | None = None
    address: str | None = Field(default=None, min_length=1, max_length=STORE_ADDRESS_MAX_LENGTH)
    owner_id: int | None = Field(alias="ownerId", default=None)

    model_config = {"populate_by_name": True}


class StoreEnvelope(BaseModel):
    message: str
    store: StoreOut


class StoreDetailEnvelope(BaseModel):
    message: str
    store: AdminStoreDetail


class OwnerStoresResponse(BaseModel):
    stores: list[StoreOut]


class Rater(BaseModel):
    """Author of a rating, as shown to the store's owner."""

    id: int
    name: str
    email: str
    address: str | None = None

    model_config = {"from_attributes": True}


class OwnerRatingItem(BaseModel):
    id: int
    rating_value: int
    comment: str | None = None
    created_at: datetime | None = None
    user: Rater

    model_config = {"from_attributes": True}


class StoreRatingsResponse(BaseModel):
    """GET /api/owner/stores/{storeId}/ratings: newest ratings first."""

    store: StoreOut
    ratings: list[OwnerRatingItem]
