"""
Domain layer exceptions.

These exceptions represent business rule violations and broken invariants.
The message bus translates them into stable error codes at the
command/query boundary; nothing above the bus sees them raised.
"""


class DomainError(Exception):
    """
    Base exception for all domain errors.

    All domain exceptions inherit from this class so they can be
    caught and translated uniformly.
    """

    def __init__(self, message: str, details: dict[str, object] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message


class ValidationError(DomainError):
    """
    Raised when input is malformed or out of range.

    Example: a non-positive user id, a negative XP amount.
    """

    def __init__(self, message: str, field: str | None = None, value: object = None) -> None:
        details: dict[str, object] = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = value
        super().__init__(message, details)
        self.field = field
        self.value = value


class EntityNotFoundError(DomainError):
    """
    Raised when a referenced entity cannot be found.

    Example: submitting an answer for a flashcard id that doesn't exist.
    """

    def __init__(self, entity_type: str, entity_id: object) -> None:
        message = f"{entity_type} with id {entity_id} not found"
        super().__init__(message, {"entity_type": entity_type, "entity_id": entity_id})
        self.entity_type = entity_type
        self.entity_id = entity_id


class AccessDeniedError(DomainError):
    """
    Raised when an unlock rule or path-access rule forbids the operation.

    Example: answering a flashcard in a lesson whose predecessor isn't completed.
    """

    def __init__(self, message: str = "Not allowed to access this content", **details: object) -> None:
        super().__init__(message, dict(details))


class InsufficientHeartsError(DomainError):
    """Raised when a heart debit is attempted with no hearts left."""

    def __init__(self, user_id: int, path_id: int) -> None:
        super().__init__(
            "No hearts remaining for this path",
            {"user_id": user_id, "path_id": path_id},
        )
        self.user_id = user_id
        self.path_id = path_id


class ConcurrencyConflictError(DomainError):
    """
    Raised when an optimistic concurrency check fails.

    Another request changed the row between our read and our write.
    """

    def __init__(self, entity_type: str, entity_id: object) -> None:
        super().__init__(
            f"{entity_type} {entity_id} was modified concurrently",
            {"entity_type": entity_type, "entity_id": entity_id},
        )
        self.entity_type = entity_type
        self.entity_id = entity_id


class InvariantViolationError(DomainError):
    """
    Raised when an entity invariant is violated.

    Example: hearts_remaining outside 0..max_hearts.
    """

    def __init__(self, entity: str, invariant: str) -> None:
        message = f"Invariant violation in {entity}: {invariant}"
        super().__init__(message, {"entity": entity, "invariant": invariant})
        self.entity = entity
        self.invariant = invariant
