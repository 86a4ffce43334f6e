"""Schemas for the admin dashboard."""

from pydantic import BaseModel, Field


class DashboardStats(BaseModel):
    total_users: int = Field(alias="totalUsers", ge=0)
    total_stores: int = Field(alias="totalStores", ge=0)
    total_ratings: int = Field(alias="totalRatings", ge=0)

    model_config = {"populate_by_name": True}
