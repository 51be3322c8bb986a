"""Paging, search and sort parameters shared by list endpoints."""

import uuid

from pydantic import BaseModel, Field, field_validator

MAX_PAGE_SIZE = 50
DEFAULT_PAGE_SIZE = 10


class PaginationFilter(BaseModel):
    """Page number (1-based), page size (clamped to MAX_PAGE_SIZE), sort expression and search text."""

    page_number: int = Field(default=1, ge=1)
    page_size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1)
    sort_by: str | None = None
    search: str | None = None

    @field_validator("page_size")
    @classmethod
    def clamp_page_size(cls, v: int) -> int:
        return min(v, MAX_PAGE_SIZE)

    @property
    def offset(self) -> int:
        return (self.page_number - 1) * self.page_size


class WorkItemFilter(PaginationFilter):
    """List filter for work items: optional status and (admin only) creator."""

    status: str | None = None
    created_by_id: uuid.UUID | None = None
