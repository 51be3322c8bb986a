"""SQLAlchemy ORM models."""

from app.models.base import Base
from app.models.user import User
from app.models.work_item import WorkItem

__all__ = ["Base", "User", "WorkItem"]
