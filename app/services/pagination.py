"""Sort-expression parsing, paging and pagination headers for list queries."""

import math
from typing import Any

from sqlalchemy.orm import Query

from app.schemas.pagination import PaginationFilter


def parse_sort(sort_by: str | None) -> tuple[str, bool] | None:
    """
    Split a sort expression like "title desc" into ("title", True).

    The field is lower-cased; a missing direction means ascending.
    Returns None for an empty expression.
    """
    if not sort_by or not sort_by.strip():
        return None
    expr = sort_by.strip()
    lowered = expr.lower()
    descending = lowered.endswith(" desc")
    if descending:
        expr = expr[: -len(" desc")]
    elif lowered.endswith(" asc"):
        expr = expr[: -len(" asc")]
    return expr.strip().lower(), descending


def paginate(query: Query, page: PaginationFilter) -> tuple[list[Any], int]:
    """Return (rows of the requested page, total row count before paging)."""
    total = query.order_by(None).count()
    rows = query.offset(page.offset).limit(page.page_size).all()
    return rows, total


def pagination_headers(total: int, page: PaginationFilter) -> dict[str, str]:
    """Headers describing the page: total count, page size, current page, total pages."""
    total_pages = math.ceil(total / page.page_size) if page.page_size else 0
    return {
        "X-Pagination-Total-Count": str(total),
        "X-Pagination-Page-Size": str(page.page_size),
        "X-Pagination-Current-Page": str(page.page_number),
        "X-Pagination-Total-Pages": str(total_pages),
    }
