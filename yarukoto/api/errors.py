"""
Mapping of operation results onto HTTP responses
"""
from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from yarukoto.services.results import ActionResult, ErrorCode

STATUS_BY_CODE = {
    ErrorCode.VALIDATION_ERROR: 400,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.CONFLICT: 409,
    ErrorCode.INTERNAL_ERROR: 500,
}


def unwrap(result: ActionResult):
    """Return the success payload or raise the matching HTTPException"""
    if result.success:
        return result.data
    raise HTTPException(
        status_code=STATUS_BY_CODE[result.code],
        detail={"code": result.code.value, "message": result.error},
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report only the first violated rule, like the operations themselves do"""
    errors = exc.errors()
    message = errors[0]["msg"] if errors else "Invalid input"
    return JSONResponse(
        status_code=STATUS_BY_CODE[ErrorCode.VALIDATION_ERROR],
        content={"detail": {"code": ErrorCode.VALIDATION_ERROR.value, "message": message}},
    )
