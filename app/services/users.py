"""Admin user listing: search, sort and paging over the users table."""

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.models.user import User
from app.schemas.pagination import PaginationFilter
from app.services.pagination import paginate, parse_sort

_SORT_COLUMNS = {
    "username": User.username,
    "email": User.email,
    "role": User.role,
}


def list_users(db: Session, page: PaginationFilter) -> tuple[list[User], int]:
    """
    Return (users on the requested page, total matching users).

    search matches username or email (substring). sort_by accepts username,
    email or role with an optional asc/desc suffix; anything else sorts by
    username ascending.
    """
    query = db.query(User)
    if page.search:
        query = query.filter(
            or_(User.username.contains(page.search), User.email.contains(page.search))
        )

    sort = parse_sort(page.sort_by)
    column = _SORT_COLUMNS.get(sort[0]) if sort else None
    if column is None:
        query = query.order_by(User.username.asc())
    else:
        query = query.order_by(column.desc() if sort[1] else column.asc())

    return paginate(query, page)
