"""Pagination helpers shared by list endpoints."""

import math
from dataclasses import dataclass
from typing import Any, Optional

from fastapi import Query

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100


def _positive_int(raw: Optional[str], default: int) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default


@dataclass(frozen=True)
class PageParams:
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def get_page_params(
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
) -> PageParams:
    """Read page/limit from the query string; junk values fall back to defaults."""
    return PageParams(
        page=_positive_int(page, DEFAULT_PAGE),
        limit=min(_positive_int(limit, DEFAULT_LIMIT), MAX_LIMIT),
    )


def paginate(items: list[Any], total_count: int, params: PageParams) -> dict:
    total_pages = math.ceil(total_count / params.limit) if total_count else 0
    return {
        "items": items,
        "pagination": {
            "page": params.page,
            "limit": params.limit,
            "totalCount": total_count,
            "totalPages": total_pages,
            "hasNextPage": params.page < total_pages,
            "hasPrevPage": params.page > 1,
        },
    }
