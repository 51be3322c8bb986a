"""Pydantic request/response schemas."""

from app.schemas.auth import (
    CurrentUser,
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    TokenResponse,
    UserResponse,
)
from app.schemas.health import HealthResponse
from app.schemas.pagination import PaginationFilter, WorkItemFilter
from app.schemas.work_items import WorkItemCreate, WorkItemResponse, WorkItemUpdate

__all__ = [
    "CurrentUser",
    "HealthResponse",
    "LoginRequest",
    "PaginationFilter",
    "RefreshRequest",
    "RegisterRequest",
    "TokenResponse",
    "UserResponse",
    "WorkItemCreate",
    "WorkItemFilter",
    "WorkItemResponse",
    "WorkItemUpdate",
]
