from yarukoto.schemas.updates import UNCHANGED, CLEAR, Set, FieldUpdate, field_update
from yarukoto.schemas.task import (
    CreateTaskInput,
    UpdateTaskFields,
    UpdateTaskInput,
    TaskIdInput,
    SkipTaskFields,
    SkipTaskInput,
    TasksByDateInput,
    SearchTasksInput,
    MonthlyStatsInput,
    TaskResponse,
    serialize_task,
)
from yarukoto.schemas.category import (
    CreateCategoryInput,
    UpdateCategoryFields,
    UpdateCategoryInput,
    CategoryIdInput,
    CategoryResponse,
    serialize_category,
)

__all__ = [
    "UNCHANGED",
    "CLEAR",
    "Set",
    "FieldUpdate",
    "field_update",
    "CreateTaskInput",
    "UpdateTaskFields",
    "UpdateTaskInput",
    "TaskIdInput",
    "SkipTaskFields",
    "SkipTaskInput",
    "TasksByDateInput",
    "SearchTasksInput",
    "MonthlyStatsInput",
    "TaskResponse",
    "serialize_task",
    "CreateCategoryInput",
    "UpdateCategoryFields",
    "UpdateCategoryInput",
    "CategoryIdInput",
    "CategoryResponse",
    "serialize_category",
]
