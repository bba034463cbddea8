"""
Domain common module.

Contains base classes for domain modeling:
- ValueObject: Immutable objects defined by their attributes
- Entity: Objects with identity and lifecycle
- Domain exceptions translated to error codes by the message bus
"""

from .entity import Entity, EntityId
from .exceptions import (
    AccessDeniedError,
    ConcurrencyConflictError,
    DomainError,
    EntityNotFoundError,
    InsufficientHeartsError,
    InvariantViolationError,
    ValidationError,
)
from .value_object import ValueObject

__all__ = [
    "AccessDeniedError",
    "ConcurrencyConflictError",
    "DomainError",
    "Entity",
    "EntityId",
    "EntityNotFoundError",
    "InsufficientHeartsError",
    "InvariantViolationError",
    "ValidationError",
    "ValueObject",
]
