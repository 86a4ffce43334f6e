"""Schemas for a normal user's ratings."""

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, Field, StrictInt

RatingValue = Annotated[StrictInt, Field(ge=1, le=5)]


class CreateRatingRequest(BaseModel):
    rating_value: RatingValue
    comment: str | None = None


class UpdateRatingRequest(BaseModel):
    """Omitted fields stay as they are; comment may be cleared with null."""

    rating_value: RatingValue | None = None
    comment: str | None = None


class RatingOut(BaseModel):
    id: int
    store_id: int
    user_id: int
    rating_value: int
    comment: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class RatingEnvelope(BaseModel):
    message: str
    rating: RatingOut


class MyRatingResponse(BaseModel):
    """Null rating means the caller has not rated the store yet."""

    rating: RatingOut | None
