from collections.abc import Callable
from typing import Annotated, TypeVar

from dependency_injector.providers import Provider
from fastapi import Depends

from progression.application.common.message_bus import MessageBus
from progression.core import container
from progression.database import DatabaseSession

T = TypeVar("T")


def inject_use_case(provider: Provider[T]) -> Callable[[DatabaseSession], T]:
    """
    Create a FastAPI dependency for a container provider.

    Automatically handles container.db override with request-scoped database session.
    """

    def dependency(db: DatabaseSession) -> T:
        try:
            container.db.override(db)
            return provider()
        finally:
            # Reset override after request completes
            container.db.reset_override()

    return dependency


inject_message_bus = inject_use_case(container.message_bus)

MessageBusDep = Annotated[MessageBus, Depends(inject_message_bus)]
