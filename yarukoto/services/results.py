"""
Tagged operation results and the error boundary shared by all public operations.

Every operation returns an ActionResult: either success with a payload or a
failure carrying a machine-readable code and a human-readable message.
Nothing raised inside an operation escapes it.
"""
import enum
import functools
from typing import Any, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from yarukoto.utils.logger import get_logger

logger = get_logger(__name__)

M = TypeVar("M", bound=BaseModel)


class ErrorCode(str, enum.Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ActionResult(BaseModel):
    success: bool
    data: Optional[Any] = None
    error: Optional[str] = None
    code: Optional[ErrorCode] = None


def success(data: Any) -> ActionResult:
    return ActionResult(success=True, data=data)


def failure(message: str, code: ErrorCode) -> ActionResult:
    return ActionResult(success=False, error=message, code=code)


class ActionError(Exception):
    """A classified failure; converted to a failure result at the boundary"""
    code = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInputError(ActionError):
    code = ErrorCode.VALIDATION_ERROR


class NotFoundError(ActionError):
    code = ErrorCode.NOT_FOUND


class ConflictError(ActionError):
    code = ErrorCode.CONFLICT


def first_error_message(error: ValidationError) -> str:
    errors = error.errors()
    return errors[0]["msg"] if errors else "Invalid input"


def parse_input(schema: Type[M], data: Any) -> M:
    """Validate raw input against a schema, reporting only the first violated rule"""
    if isinstance(data, schema):
        return data
    try:
        return schema.model_validate(data if data is not None else {})
    except ValidationError as e:
        raise InvalidInputError(first_error_message(e))


def action(failure_message: str):
    """
    Wrap an async operation `func(db, user, ...)` so it always returns an ActionResult.

    Classified errors keep their code and message; anything else is logged and
    reported as INTERNAL_ERROR with `failure_message`. The session is rolled
    back on every failure so no partial effect survives.
    """
    def decorator(func):
        @functools.wraps(func)
        async def wrapper(db: AsyncSession, user, *args, **kwargs) -> ActionResult:
            try:
                return success(await func(db, user, *args, **kwargs))
            except ActionError as e:
                await _rollback(db, func.__name__)
                return failure(e.message, e.code)
            except Exception as e:
                logger.error(f"{func.__name__} error: {e}", exc_info=True)
                await _rollback(db, func.__name__)
                return failure(failure_message, ErrorCode.INTERNAL_ERROR)
        return wrapper
    return decorator


async def _rollback(db: AsyncSession, name: str) -> None:
    try:
        await db.rollback()
    except Exception as e:
        logger.warning(f"{name}: rollback failed: {e}")
