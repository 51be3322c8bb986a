"""Work item CRUD with ownership and role checks."""

import logging
import uuid
from datetime import UTC, datetime

from sqlalchemy import func, or_
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from app.models.user import User
from app.models.work_item import WorkItem
from app.schemas.auth import CurrentUser
from app.schemas.pagination import WorkItemFilter
from app.schemas.work_items import WorkItemCreate, WorkItemUpdate
from app.services.pagination import paginate, parse_sort

logger = logging.getLogger(__name__)

ALLOWED_STATUSES = ("New", "InProgress", "Completed", "Cancelled")

_SORT_COLUMNS = {
    "title": WorkItem.title,
    "createdat": WorkItem.created_at,
    "status": WorkItem.status,
}


class WorkItemNotFoundError(Exception):
    """Raised when the referenced work item does not exist."""

    def __init__(self, work_item_id: uuid.UUID) -> None:
        self.work_item_id = work_item_id
        super().__init__(f"Work item {work_item_id} not found")


class WorkItemForbiddenError(Exception):
    """Raised when the current user may not perform the operation."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class WorkItemValidationError(Exception):
    """Raised for bad input: unknown status or unknown assignee."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


def is_valid_status(status: str) -> bool:
    return status.lower() in {s.lower() for s in ALLOWED_STATUSES}


def _require_valid_status(status: str, field: str = "Status") -> None:
    if not is_valid_status(status):
        raise WorkItemValidationError(
            f"Invalid {field} value '{status}'. Allowed values are: {', '.join(ALLOWED_STATUSES)}."
        )


def _require_user_exists(db: Session, user_id: uuid.UUID) -> None:
    if db.get(User, user_id) is None:
        raise WorkItemValidationError(f"User with ID {user_id} not found.")


def _can_access(item: WorkItem, current_user: CurrentUser) -> bool:
    return current_user.is_admin or item.created_by_id == current_user.id


def list_work_items(
    db: Session,
    flt: WorkItemFilter,
    current_user: CurrentUser,
) -> tuple[list[WorkItem], int]:
    """
    Return (work items on the requested page, total matching items).

    Non-admins only see their own items and may not filter by creator.
    Default order is newest first.
    """
    query = db.query(WorkItem)
    if not current_user.is_admin:
        query = query.filter(WorkItem.created_by_id == current_user.id)

    if flt.status:
        _require_valid_status(flt.status, field="status")
        query = query.filter(func.lower(WorkItem.status) == flt.status.lower())

    if flt.created_by_id is not None:
        if not current_user.is_admin:
            raise WorkItemForbiddenError(
                "You are not allowed to filter by other users' work items."
            )
        query = query.filter(WorkItem.created_by_id == flt.created_by_id)

    if flt.search:
        query = query.filter(
            or_(WorkItem.title.contains(flt.search), WorkItem.description.contains(flt.search))
        )

    sort = parse_sort(flt.sort_by)
    column = _SORT_COLUMNS.get(sort[0]) if sort else None
    if column is None:
        query = query.order_by(WorkItem.created_at.desc())
    else:
        query = query.order_by(column.desc() if sort[1] else column.asc())

    return paginate(query, flt)


def get_work_item(db: Session, work_item_id: uuid.UUID, current_user: CurrentUser) -> WorkItem:
    item = db.get(WorkItem, work_item_id)
    if item is None:
        raise WorkItemNotFoundError(work_item_id)
    if not _can_access(item, current_user):
        raise WorkItemForbiddenError("You are not authorized to view this work item.")
    return item


def create_work_item(
    db: Session,
    body: WorkItemCreate,
    current_user: CurrentUser,
) -> WorkItem:
    """Create a work item owned by the current user, or by assign_to_user_id (admins only)."""
    owner_id = current_user.id
    if body.assign_to_user_id is not None:
        if not current_user.is_admin:
            raise WorkItemForbiddenError(
                "Only administrators can assign work items to other users."
            )
        _require_user_exists(db, body.assign_to_user_id)
        owner_id = body.assign_to_user_id
    _require_valid_status(body.status)

    item = WorkItem(
        id=uuid.uuid4(),
        title=body.title,
        description=body.description,
        status=body.status,
        created_at=datetime.now(UTC),
        created_by_id=owner_id,
    )
    db.add(item)
    db.commit()
    db.refresh(item)
    logger.info("Created work_item_id=%s owner_id=%s", item.id, owner_id)
    return item


def update_work_item(
    db: Session,
    work_item_id: uuid.UUID,
    body: WorkItemUpdate,
    current_user: CurrentUser,
) -> WorkItem:
    """
    Apply a partial update. Only admins may reassign.

    If the row changed or vanished concurrently, raises WorkItemNotFoundError
    when it is gone and re-raises the conflict otherwise.
    """
    item = db.get(WorkItem, work_item_id)
    if item is None:
        raise WorkItemNotFoundError(work_item_id)
    if not _can_access(item, current_user):
        raise WorkItemForbiddenError("You are not authorized to update this work item.")

    if body.title is not None:
        item.title = body.title
    if body.description is not None:
        item.description = body.description
    if body.status is not None:
        _require_valid_status(body.status)
        item.status = body.status
    if body.assign_to_user_id is not None:
        if not current_user.is_admin:
            raise WorkItemForbiddenError("Only administrators can reassign work items.")
        _require_user_exists(db, body.assign_to_user_id)
        item.created_by_id = body.assign_to_user_id

    try:
        db.commit()
    except StaleDataError:
        db.rollback()
        if db.query(WorkItem.id).filter(WorkItem.id == work_item_id).first() is None:
            raise WorkItemNotFoundError(work_item_id)
        logger.warning("Concurrent update conflict on work_item_id=%s", work_item_id)
        raise
    return item


def delete_work_item(db: Session, work_item_id: uuid.UUID) -> None:
    """Delete a work item (callers enforce the admin role)."""
    item = db.get(WorkItem, work_item_id)
    if item is None:
        raise WorkItemNotFoundError(work_item_id)
    db.delete(item)
    db.commit()
    logger.info("Deleted work_item_id=%s", work_item_id)
