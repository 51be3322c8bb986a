"""Persistence interfaces and their SQLAlchemy implementations."""

from app.repositories.users import (
    ConcurrentUpdateError,
    DuplicateUsernameError,
    SqlAlchemyUserStore,
    UserStore,
)

__all__ = [
    "ConcurrentUpdateError",
    "DuplicateUsernameError",
    "SqlAlchemyUserStore",
    "UserStore",
]
