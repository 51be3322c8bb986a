"""Request/response schemas for work item endpoints."""

import uuid
from datetime import datetime

from pydantic import Field

from app.schemas.base import CamelModel

TITLE_MAX_LENGTH = 255


class WorkItemCreate(CamelModel):
    """New work item. assign_to_user_id is honored for admins only."""

    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)
    description: str = Field(default="")
    status: str = Field(..., description="New, InProgress, Completed or Cancelled")
    assign_to_user_id: uuid.UUID | None = None


class WorkItemUpdate(CamelModel):
    """Partial update; omitted (null) fields are left unchanged."""

    title: str | None = Field(default=None, min_length=1, max_length=TITLE_MAX_LENGTH)
    description: str | None = None
    status: str | None = None
    assign_to_user_id: uuid.UUID | None = None


class WorkItemResponse(CamelModel):
    id: uuid.UUID
    title: str
    description: str
    status: str
    created_at: datetime
    created_by_username: str
