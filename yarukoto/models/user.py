"""
User model - account owner of tasks and categories
"""
import uuid
from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship
from yarukoto.database import Base
from yarukoto.utils.helpers import utcnow


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String, unique=True, index=True, nullable=False)
    full_name = Column(String, nullable=True)
    hashed_password = Column(String, nullable=False)
    created_at = Column(DateTime, default=utcnow)

    # Relationships
    tasks = relationship("Task", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    categories = relationship("Category", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
