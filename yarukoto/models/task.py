"""
Task model - a single actionable item with a PENDING/COMPLETED/SKIPPED lifecycle
"""
import enum
import uuid
from sqlalchemy import Column, String, Text, Date, DateTime, ForeignKey, Enum, Index
from sqlalchemy.orm import relationship
from yarukoto.database import Base
from yarukoto.utils.helpers import utcnow


class TaskStatus(str, enum.Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    SKIPPED = "SKIPPED"


class Priority(str, enum.Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class Task(Base):
    __tablename__ = "tasks"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    title = Column(String(500), nullable=False)
    memo = Column(Text, nullable=True)
    status = Column(Enum(TaskStatus, native_enum=False), nullable=False, default=TaskStatus.PENDING)
    priority = Column(Enum(Priority, native_enum=False), nullable=True)
    scheduled_at = Column(Date, nullable=True)  # calendar date, no time component

    # Set iff status is COMPLETED / SKIPPED respectively
    completed_at = Column(DateTime, nullable=True)
    skipped_at = Column(DateTime, nullable=True)
    skip_reason = Column(Text, nullable=True)

    category_id = Column(String(36), ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    user = relationship("User", back_populates="tasks")
    category = relationship("Category", lazy="joined")

    __table_args__ = (
        Index("ix_tasks_user_status_scheduled", "user_id", "status", "scheduled_at"),
        Index("ix_tasks_user_completed", "user_id", "completed_at"),
        Index("ix_tasks_user_skipped", "user_id", "skipped_at"),
    )
