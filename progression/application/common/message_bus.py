"""
Message bus: routes typed messages to the use case that owns them.

Each component declares a closed union of its messages (``HeartsRequest``,
``SchedulerRequest``, ...). The bus keeps an explicit table from message
type to handler and turns domain exceptions into ``Failure(EngineError)``
so callers never see them raised.
"""

from collections.abc import Mapping
from typing import Any, Protocol, get_args

import structlog

from progression.domain.common.exceptions import (
    AccessDeniedError,
    ConcurrencyConflictError,
    DomainError,
    EntityNotFoundError,
    InsufficientHeartsError,
    ValidationError,
)

from .command import Command
from .errors import EngineError, ErrorCode
from .query import Query
from .result import Failure, Result, Success

logger = structlog.get_logger(__name__)

Message = Command | Query

ERROR_CODES: tuple[tuple[type[DomainError], ErrorCode], ...] = (
    (ValidationError, ErrorCode.VALIDATION_ERROR),
    (EntityNotFoundError, ErrorCode.NOT_FOUND),
    (AccessDeniedError, ErrorCode.FORBIDDEN),
    (InsufficientHeartsError, ErrorCode.INSUFFICIENT_HEARTS),
    (ConcurrencyConflictError, ErrorCode.CONFLICT),
)


class MessageHandler(Protocol):
    def handle(self, message: Any) -> Any: ...


def to_engine_error(error: DomainError) -> EngineError | None:
    for error_type, code in ERROR_CODES:
        if isinstance(error, error_type):
            return EngineError(code=code, message=error.message, details=dict(error.details))
    return None


class MessageBus:
    """
    Explicit dispatch table from message type to handler.

    Args:
        transient_errors: Storage exception types reported as FETCH_ERROR.
            Anything else that isn't a mapped DomainError is a bug and
            propagates.
    """

    def __init__(self, transient_errors: tuple[type[Exception], ...] = ()) -> None:
        self._routes: dict[type, MessageHandler] = {}
        self._transient_errors = transient_errors

    def register(self, request_union: Any, handler: MessageHandler) -> None:
        """Route every member of a request union to ``handler``."""
        members = get_args(request_union) or (request_union,)
        for message_type in members:
            if message_type in self._routes:
                raise ValueError(f"{message_type.__name__} is already routed")
            self._routes[message_type] = handler

    @property
    def routes(self) -> Mapping[type, MessageHandler]:
        return dict(self._routes)

    def dispatch(self, message: Message) -> Result[Any, EngineError]:
        handler = self._routes.get(type(message))
        if handler is None:
            raise LookupError(f"No handler registered for {type(message).__name__}")

        try:
            return Success(handler.handle(message))
        except DomainError as e:
            engine_error = to_engine_error(e)
            if engine_error is None:
                raise
            logger.info(
                "message_rejected",
                message_type=type(message).__name__,
                code=engine_error.code.value,
                reason=engine_error.message,
            )
            return Failure(engine_error)
        except self._transient_errors as e:
            logger.error(
                "storage_failure",
                message_type=type(message).__name__,
                error=str(e),
                exc_info=True,
            )
            return Failure(
                EngineError(
                    code=ErrorCode.FETCH_ERROR,
                    message="Storage is temporarily unavailable",
                    details={"message_type": type(message).__name__},
                )
            )
