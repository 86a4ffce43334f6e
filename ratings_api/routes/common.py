"""Query parameters shared by list endpoints."""

from fastapi import Query

from ratings_api.services.pagination import DEFAULT_LIMIT, DEFAULT_PAGE, MAX_LIMIT, ListParams


def list_params(
    sort_by: str = Query(default="name", alias="sortBy", description="Field to sort by"),
    sort_order: str = Query(default="ASC", alias="sortOrder", description="ASC or DESC"),
    page: int = Query(default=DEFAULT_PAGE, ge=1),
    limit: int = Query(default=DEFAULT_LIMIT, ge=1, le=MAX_LIMIT),
) -> ListParams:
    return ListParams(page=page, limit=limit, sort_by=sort_by, sort_order=sort_order)
