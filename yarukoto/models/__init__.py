from yarukoto.models.user import User
from yarukoto.models.category import Category
from yarukoto.models.task import Task, TaskStatus, Priority

__all__ = [
    "User",
    "Category",
    "Task",
    "TaskStatus",
    "Priority",
]
