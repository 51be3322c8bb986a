"""Work items endpoints: CRUD scoped by ownership, with admin overrides."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.orm import Session

from app.api.v1.auth import get_current_user, require_admin
from app.api.v1.pagination import work_item_filter_params
from app.core.database import get_db
from app.models.work_item import WorkItem
from app.schemas.auth import CurrentUser
from app.schemas.pagination import WorkItemFilter
from app.schemas.work_items import WorkItemCreate, WorkItemResponse, WorkItemUpdate
from app.services.pagination import pagination_headers
from app.services.work_items import (
    WorkItemForbiddenError,
    WorkItemNotFoundError,
    WorkItemValidationError,
    create_work_item,
    delete_work_item,
    get_work_item,
    list_work_items,
    update_work_item,
)

router = APIRouter()


def _to_response(item: WorkItem) -> WorkItemResponse:
    return WorkItemResponse(
        id=item.id,
        title=item.title,
        description=item.description,
        status=item.status,
        created_at=item.created_at,
        created_by_username=item.created_by.username if item.created_by else "Unknown",
    )


def _to_http_error(
    e: WorkItemNotFoundError | WorkItemForbiddenError | WorkItemValidationError,
) -> HTTPException:
    if isinstance(e, WorkItemNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    if isinstance(e, WorkItemForbiddenError):
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=e.message)
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)


@router.get("", response_model=list[WorkItemResponse])
def get_work_items(
    response: Response,
    flt: Annotated[WorkItemFilter, Depends(work_item_filter_params)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> list[WorkItemResponse]:
    """
    List work items visible to the caller (own items; all items for admins).

    Query: pageNumber, pageSize (max 50), search (title or description),
    status, createdById (admins only), sortBy (title, createdAt or status,
    optionally followed by asc/desc; default newest first).
    """
    try:
        items, total = list_work_items(db, flt, current_user)
    except (WorkItemForbiddenError, WorkItemValidationError) as e:
        raise _to_http_error(e) from e
    response.headers.update(pagination_headers(total, flt))
    return [_to_response(item) for item in items]


@router.get("/{work_item_id}", response_model=WorkItemResponse)
def get_work_item_by_id(
    work_item_id: uuid.UUID,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> WorkItemResponse:
    try:
        item = get_work_item(db, work_item_id, current_user)
    except (WorkItemNotFoundError, WorkItemForbiddenError) as e:
        raise _to_http_error(e) from e
    return _to_response(item)


@router.post("", response_model=WorkItemResponse, status_code=status.HTTP_201_CREATED)
def post_work_item(
    body: WorkItemCreate,
    request: Request,
    response: Response,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> WorkItemResponse:
    """Create a work item for the caller; admins may assign it to another user."""
    try:
        item = create_work_item(db, body, current_user)
    except (WorkItemForbiddenError, WorkItemValidationError) as e:
        raise _to_http_error(e) from e
    response.headers["Location"] = str(
        request.url_for("get_work_item_by_id", work_item_id=str(item.id))
    )
    return _to_response(item)


@router.put("/{work_item_id}", status_code=status.HTTP_204_NO_CONTENT)
def put_work_item(
    work_item_id: uuid.UUID,
    body: WorkItemUpdate,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> Response:
    """Partially update a work item (owner or admin); only admins may reassign."""
    try:
        update_work_item(db, work_item_id, body, current_user)
    except (
        WorkItemNotFoundError,
        WorkItemForbiddenError,
        WorkItemValidationError,
    ) as e:
        raise _to_http_error(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{work_item_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_work_item(
    work_item_id: uuid.UUID,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> Response:
    """Delete a work item (admin only)."""
    try:
        delete_work_item(db, work_item_id)
    except WorkItemNotFoundError as e:
        raise _to_http_error(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)
