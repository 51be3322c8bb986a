"""Credential store: the persistence interface the auth services depend on."""

import logging
import uuid
from typing import Protocol

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from app.models.user import User

logger = logging.getLogger(__name__)


class DuplicateUsernameError(Exception):
    """Raised when inserting a user whose username is already taken."""

    def __init__(self, username: str) -> None:
        self.username = username
        super().__init__(f"Username '{username}' already exists")


class ConcurrentUpdateError(Exception):
    """Raised when a user row changed between read and write (optimistic lock lost)."""

    def __init__(self, user_id: uuid.UUID | None) -> None:
        self.user_id = user_id
        super().__init__(f"User {user_id} was modified concurrently")


class UserStore(Protocol):
    def get_by_id(self, user_id: uuid.UUID) -> User | None: ...
    def get_by_username(self, username: str) -> User | None: ...
    def add(self, user: User) -> User: ...
    def save(self, user: User) -> None: ...


class SqlAlchemyUserStore:
    """UserStore backed by a SQLAlchemy session; every write commits."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_by_id(self, user_id: uuid.UUID) -> User | None:
        return self._session.get(User, user_id)

    def get_by_username(self, username: str) -> User | None:
        return self._session.query(User).filter(User.username == username).first()

    def add(self, user: User) -> User:
        self._session.add(user)
        try:
            self._session.commit()
        except IntegrityError as e:
            self._session.rollback()
            raise DuplicateUsernameError(user.username) from e
        self._session.refresh(user)
        return user

    def save(self, user: User) -> None:
        user_id = user.id
        try:
            self._session.commit()
        except StaleDataError as e:
            self._session.rollback()
            logger.warning("Concurrent update detected for user_id=%s", user_id)
            raise ConcurrentUpdateError(user_id) from e
