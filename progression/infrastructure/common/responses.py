"""Translation of message bus results into HTTP responses."""

from typing import Any, TypeVar

from fastapi import Request, Response, status
from fastapi.responses import JSONResponse

from progression.application.common.errors import EngineError, ErrorCode
from progression.application.common.result import Failure, Result, Success

T = TypeVar("T")

INVALIDATE_TAGS_HEADER = "X-Invalidate-Tags"

STATUS_BY_CODE: dict[ErrorCode, int] = {
    ErrorCode.VALIDATION_ERROR: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorCode.INSUFFICIENT_HEARTS: status.HTTP_409_CONFLICT,
    ErrorCode.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorCode.FETCH_ERROR: status.HTTP_503_SERVICE_UNAVAILABLE,
}


class EngineHTTPError(Exception):
    """Raised by routers for a Failure result; rendered by engine_error_handler."""

    def __init__(self, error: EngineError) -> None:
        self.error = error
        super().__init__(error.message)

    @property
    def status_code(self) -> int:
        return STATUS_BY_CODE[self.error.code]


def unwrap_or_raise(result: Result[T, EngineError]) -> T:
    match result:
        case Success(value=value):
            return value
        case Failure(error=error):
            raise EngineHTTPError(error)
    raise TypeError(f"Not a Result: {result!r}")


def set_invalidation_header(response: Response, invalidates: frozenset[str]) -> None:
    if invalidates:
        response.headers[INVALIDATE_TAGS_HEADER] = ",".join(sorted(invalidates))


def _json_safe(details: dict[str, Any]) -> dict[str, Any]:
    return {
        key: value if isinstance(value, str | int | float | bool | None) else str(value)
        for key, value in details.items()
    }


async def engine_error_handler(request: Request, exc: EngineHTTPError) -> JSONResponse:
    headers = {"Retry-After": "1"} if exc.error.code is ErrorCode.FETCH_ERROR else None
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "code": exc.error.code.value,
            "message": exc.error.message,
            "details": _json_safe(exc.error.details),
        },
        headers=headers,
    )
