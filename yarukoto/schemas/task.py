"""
Task input and output schemas
"""
from datetime import date, datetime
from typing import Annotated, Dict, Literal, Optional

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, Field, field_serializer
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from yarukoto.models.task import Priority, TaskStatus
from yarukoto.schemas.updates import UNCHANGED, FieldUpdate, Set, field_update
from yarukoto.utils.helpers import to_iso_timestamp
from yarukoto.utils.validators import parse_date_string, parse_month_string

TITLE_MAX_LENGTH = 500
MEMO_MAX_LENGTH = 10000
SKIP_REASON_MAX_LENGTH = 1000

CalendarDate = date


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _check_title(value: Optional[str]) -> str:
    if value is None or not value.strip():
        raise PydanticCustomError("title_required", "Title is required")
    if len(value) > TITLE_MAX_LENGTH:
        raise PydanticCustomError("title_too_long", f"Title must be {TITLE_MAX_LENGTH} characters or fewer")
    return value


def _check_memo(value: Optional[str]) -> Optional[str]:
    if value is not None and len(value) > MEMO_MAX_LENGTH:
        raise PydanticCustomError("memo_too_long", f"Memo must be {MEMO_MAX_LENGTH} characters or fewer")
    return value


def _check_reason(value: Optional[str]) -> Optional[str]:
    if value is not None and len(value) > SKIP_REASON_MAX_LENGTH:
        raise PydanticCustomError("reason_too_long", f"Reason must be {SKIP_REASON_MAX_LENGTH} characters or fewer")
    return value


def _check_date(value):
    if value is None or isinstance(value, date):
        return value
    try:
        return parse_date_string(value)
    except ValueError as e:
        raise PydanticCustomError("date_format", str(e))


def _require_date(value):
    if value is None:
        return _check_date("")
    return _check_date(value)


def _check_id(value: Optional[str]) -> str:
    if value is None or not value.strip():
        raise PydanticCustomError("id_required", "ID is required")
    return value


def _check_month(value: Optional[str]) -> str:
    try:
        parse_month_string(value)
    except ValueError as e:
        raise PydanticCustomError("month_format", str(e))
    return value


def _check_search_priority(value: Optional[str]) -> Optional[str]:
    if value is None or value == "all" or value in Priority.__members__:
        return value
    raise PydanticCustomError("priority_invalid", "Priority must be one of HIGH, MEDIUM, LOW or all")


Title = Annotated[Optional[str], AfterValidator(_check_title)]
Memo = Annotated[Optional[str], AfterValidator(_check_memo)]
OptionalDate = Annotated[Optional[CalendarDate], BeforeValidator(_check_date)]
EntityId = Annotated[Optional[str], AfterValidator(_check_id)]


# --- Inputs ---

class CreateTaskInput(CamelModel):
    title: Title = Field(default=None, validate_default=True)
    scheduled_at: OptionalDate = None
    category_id: Optional[str] = None
    priority: Optional[Priority] = None
    memo: Memo = None


UPDATABLE_TASK_FIELDS = ("title", "scheduled_at", "category_id", "priority", "memo")


class UpdateTaskFields(CamelModel):
    """Request body of a task edit; the id comes from the path"""
    title: Title = None
    scheduled_at: OptionalDate = None
    category_id: Optional[str] = None
    priority: Optional[Priority] = None
    memo: Memo = None


class UpdateTaskInput(CamelModel):
    """Fields left out of the payload stay unchanged; null clears nullable fields"""
    id: EntityId = Field(default=None, validate_default=True)
    title: Title = None
    scheduled_at: OptionalDate = None
    category_id: Optional[str] = None
    priority: Optional[Priority] = None
    memo: Memo = None

    def changes(self) -> Dict[str, FieldUpdate]:
        return {name: field_update(self, name) for name in UPDATABLE_TASK_FIELDS}


class TaskIdInput(CamelModel):
    id: EntityId = Field(default=None, validate_default=True)


SkipReason = Annotated[Optional[str], AfterValidator(_check_reason)]


class SkipTaskFields(CamelModel):
    reason: SkipReason = None


class SkipTaskInput(CamelModel):
    id: EntityId = Field(default=None, validate_default=True)
    reason: SkipReason = None


class TasksByDateInput(CamelModel):
    date: Annotated[Optional[CalendarDate], BeforeValidator(_require_date)] = Field(
        default=None, validate_default=True
    )


class SearchTasksInput(CamelModel):
    """
    category_id and priority are three-state: not sent means no restriction,
    null means "tasks without one", a value is an exact match.
    """
    keyword: Optional[str] = None
    status: Optional[Literal["all", "pending", "completed", "skipped"]] = None
    category_id: Optional[str] = None
    priority: Annotated[Optional[str], AfterValidator(_check_search_priority)] = None
    date_from: OptionalDate = None
    date_to: OptionalDate = None

    def category_filter(self) -> FieldUpdate:
        return field_update(self, "category_id")

    def priority_filter(self) -> FieldUpdate:
        if self.priority == "all":
            return UNCHANGED
        update = field_update(self, "priority")
        if isinstance(update, Set):
            return Set(Priority(update.value))
        return update


class MonthlyStatsInput(CamelModel):
    month: Annotated[Optional[str], AfterValidator(_check_month)] = Field(default=None, validate_default=True)

    def year_month(self) -> tuple[int, int]:
        return parse_month_string(self.month)


# --- Outputs ---

class CategorySummary(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    color: Optional[str]


class TaskResponse(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    memo: Optional[str]
    status: TaskStatus
    priority: Optional[Priority]
    scheduled_at: Optional[CalendarDate]
    completed_at: Optional[datetime]
    skipped_at: Optional[datetime]
    skip_reason: Optional[str]
    created_at: datetime
    updated_at: datetime
    category_id: Optional[str]
    category: Optional[CategorySummary]

    @field_serializer("completed_at", "skipped_at", "created_at", "updated_at")
    def _timestamp(self, value: Optional[datetime]) -> Optional[str]:
        return to_iso_timestamp(value)


class DayTaskStats(CamelModel):
    total: int = 0
    completed: int = 0
    overdue: int = 0
    skipped: int = 0


def serialize_task(task) -> dict:
    """ORM task -> JSON-ready dict with camelCase keys"""
    return TaskResponse.model_validate(task).model_dump(mode="json", by_alias=True)
