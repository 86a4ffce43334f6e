"""Filtering, sorting and paging shared by the list endpoints.

Sort fields come from a per-endpoint allow-list; unknown fields fall back to
the endpoint default instead of failing, and any sort order other than DESC
means ASC.
"""

from dataclasses import dataclass
import math
from typing import Any

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute

from ratings_api.schemas.common import Pagination

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100


@dataclass(frozen=True)
class ListParams:
    """Normalized list query parameters."""

    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT
    sort_by: str = "name"
    sort_order: str = "ASC"

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def descending(self) -> bool:
        return self.sort_order.upper() == "DESC"


def substring_filters(*pairs: tuple[InstrumentedAttribute[Any], str | None]) -> list[Any]:
    """Case-insensitive substring filters for every non-empty value.

    Usage:
        substring_filters((Store.name, "pizza"), (Store.email, None))
    """
    clauses = []
    for column, value in pairs:
        if value:
            clauses.append(column.ilike(f"%{value}%"))
    return clauses


def order_clause(
    sortable: dict[str, InstrumentedAttribute[Any]],
    params: ListParams,
    default: str = "name",
) -> list[Any]:
    """ORDER BY for an allow-listed field, with id as a stable tie-breaker."""
    column = sortable.get(params.sort_by, sortable[default])
    primary = column.desc() if params.descending else column.asc()
    id_column = column.class_.id
    return [primary, id_column.desc() if params.descending else id_column.asc()]


async def count_rows(session: AsyncSession, model: Any, filters: list[Any]) -> int:
    result = await session.execute(select(func.count(model.id)).where(*filters))
    return result.scalar() or 0


def build_pagination(total: int, params: ListParams) -> Pagination:
    return Pagination(
        total=total,
        page=params.page,
        limit=params.limit,
        total_pages=math.ceil(total / params.limit) if total else 0,
    )


def apply_page(stmt: Select, params: ListParams) -> Select:
    return stmt.offset(params.offset).limit(params.limit)
