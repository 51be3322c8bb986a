"""ORM model for application users (credentials, role and refresh-token state)."""

import uuid

from sqlalchemy import Column, DateTime, Integer, String, Uuid

from app.core.security import USERNAME_MAX_LEN
from app.models.base import Base


class User(Base):
    """
    User account for JWT authentication and role-based access control.

    role: free-form; 'Admin' is the privileged role.
    refresh_token / refresh_token_expiry are set together on login and refresh.
    version_id guards concurrent refresh-token rotation (optimistic locking).
    """

    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    username = Column(String(USERNAME_MAX_LEN), nullable=False, unique=True, index=True)
    email = Column(String(320), nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(64), nullable=False)
    refresh_token = Column(String(255), nullable=True)
    refresh_token_expiry = Column(DateTime(timezone=True), nullable=True)
    version_id = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version_id}
