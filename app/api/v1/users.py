"""Users endpoint (admin only): paged, searchable, sortable user list."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from app.api.v1.auth import require_admin
from app.api.v1.pagination import pagination_params
from app.core.database import get_db
from app.schemas.auth import CurrentUser, UserResponse
from app.schemas.pagination import PaginationFilter
from app.services.pagination import pagination_headers
from app.services.users import list_users

router = APIRouter()


@router.get("", response_model=list[UserResponse])
def get_users(
    response: Response,
    page: Annotated[PaginationFilter, Depends(pagination_params)],
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> list[UserResponse]:
    """
    List users (admin only).

    Query: pageNumber, pageSize (max 50), search (username or email),
    sortBy (username, email or role, optionally followed by asc/desc).
    Paging details are returned in X-Pagination-* headers.
    """
    users, total = list_users(db, page)
    response.headers.update(pagination_headers(total, page))
    return [UserResponse.model_validate(u) for u in users]
