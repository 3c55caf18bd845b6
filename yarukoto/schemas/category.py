"""
Category input and output schemas
"""
from datetime import datetime
from typing import Annotated, Optional

from pydantic import AfterValidator, ConfigDict, Field, field_serializer
from pydantic_core import PydanticCustomError

from yarukoto.schemas.task import CamelModel, EntityId
from yarukoto.utils.helpers import to_iso_timestamp

NAME_MAX_LENGTH = 50
COLOR_MAX_LENGTH = 20


def _check_name(value: Optional[str]) -> str:
    if value is None or not value.strip():
        raise PydanticCustomError("name_required", "Category name is required")
    if len(value) > NAME_MAX_LENGTH:
        raise PydanticCustomError("name_too_long", f"Category name must be {NAME_MAX_LENGTH} characters or fewer")
    return value


def _check_color(value: Optional[str]) -> Optional[str]:
    if value is not None and len(value) > COLOR_MAX_LENGTH:
        raise PydanticCustomError("color_too_long", f"Color must be {COLOR_MAX_LENGTH} characters or fewer")
    return value


CategoryName = Annotated[Optional[str], AfterValidator(_check_name)]
Color = Annotated[Optional[str], AfterValidator(_check_color)]


class CreateCategoryInput(CamelModel):
    name: CategoryName = Field(default=None, validate_default=True)
    color: Color = None


class UpdateCategoryFields(CamelModel):
    name: CategoryName = None
    color: Color = None


class UpdateCategoryInput(CamelModel):
    id: EntityId = Field(default=None, validate_default=True)
    name: CategoryName = None
    color: Color = None


class CategoryIdInput(CamelModel):
    id: EntityId = Field(default=None, validate_default=True)


class CategoryResponse(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    color: Optional[str]
    created_at: datetime
    updated_at: datetime

    @field_serializer("created_at", "updated_at")
    def _timestamp(self, value: datetime) -> Optional[str]:
        return to_iso_timestamp(value)


def serialize_category(category) -> dict:
    return CategoryResponse.model_validate(category).model_dump(mode="json", by_alias=True)
