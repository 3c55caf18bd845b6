"""
Tagged partial-update values.

A PATCH-style input distinguishes a field that was not sent (UNCHANGED),
a field explicitly sent as null (CLEAR) and a field sent with a value (Set).
"""
from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

from pydantic import BaseModel

T = TypeVar("T")


class Unchanged:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNCHANGED"


class Clear:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "CLEAR"


UNCHANGED = Unchanged()
CLEAR = Clear()


@dataclass(frozen=True)
class Set(Generic[T]):
    value: T


FieldUpdate = Union[Unchanged, Clear, Set]


def field_update(model: BaseModel, name: str) -> FieldUpdate:
    """Read one field of a validated model as a tagged update"""
    if name not in model.model_fields_set:
        return UNCHANGED
    value: Any = getattr(model, name)
    if value is None:
        return CLEAR
    return Set(value)
