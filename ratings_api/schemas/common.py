"""Common schemas used across the API."""

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ErrorResponse(BaseModel):
    """Standard error response format.

    Format: { "message": str }
    """

    message: str


class MessageResponse(BaseModel):
    """Acknowledgement with no payload."""

    message: str


class Pagination(BaseModel):
    """Paging metadata for list endpoints."""

    total: int = Field(ge=0)
    page: int = Field(ge=1)
    limit: int = Field(ge=1)
    total_pages: int = Field(alias="totalPages", ge=0)

    model_config = {"populate_by_name": True}


class Page(BaseModel, Generic[T]):
    """List response: { data: [...], pagination: {...} }."""

    data: list[T]
    pagination: Pagination
