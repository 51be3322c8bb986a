"""Query-string dependencies for paged list endpoints."""

import uuid
from typing import Annotated

from fastapi import Query

from app.schemas.pagination import DEFAULT_PAGE_SIZE, PaginationFilter, WorkItemFilter


def pagination_params(
    page_number: Annotated[int, Query(alias="pageNumber", ge=1)] = 1,
    page_size: Annotated[int, Query(alias="pageSize", ge=1)] = DEFAULT_PAGE_SIZE,
    sort_by: Annotated[str | None, Query(alias="sortBy")] = None,
    search: Annotated[str | None, Query()] = None,
) -> PaginationFilter:
    return PaginationFilter(
        page_number=page_number,
        page_size=page_size,
        sort_by=sort_by,
        search=search,
    )


def work_item_filter_params(
    page_number: Annotated[int, Query(alias="pageNumber", ge=1)] = 1,
    page_size: Annotated[int, Query(alias="pageSize", ge=1)] = DEFAULT_PAGE_SIZE,
    sort_by: Annotated[str | None, Query(alias="sortBy")] = None,
    search: Annotated[str | None, Query()] = None,
    status: Annotated[str | None, Query()] = None,
    created_by_id: Annotated[uuid.UUID | None, Query(alias="createdById")] = None,
) -> WorkItemFilter:
    return WorkItemFilter(
        page_number=page_number,
        page_size=page_size,
        sort_by=sort_by,
        search=search,
        status=status,
        created_by_id=created_by_id,
    )
