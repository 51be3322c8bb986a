"""ORM model for work items owned by (or assigned to) a user."""

import uuid

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, Uuid, func
from sqlalchemy.orm import relationship

from app.models.base import Base


class WorkItem(Base):
    """
    A unit of work. created_by_id names the owning user; admins may reassign it.

    status: one of New, InProgress, Completed, Cancelled (validated by the service layer).
    """

    __tablename__ = "work_items"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    status = Column(String(32), nullable=False, index=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    created_by_id = Column(
        Uuid,
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    version_id = Column(Integer, nullable=False)

    created_by = relationship("User", lazy="joined")

    __mapper_args__ = {"version_id_col": version_id}
