"""
Unit of Work interface.

Every mutating message runs inside exactly one unit of work, so all of its
effects (review record, XP credit, hearts debit, ...) commit or roll back
together.

Example:
    def _debit(self, message: DebitHearts) -> HeartsState:
        with self._uow:
            state = self._hearts_repository.get_for_update(user_id, path_id)
            state.debit(now, interval)
            self._hearts_repository.save(state)
            self._uow.commit()
            return state
"""

from abc import ABC, abstractmethod
from types import TracebackType
from typing import Self


class UnitOfWork(ABC):
    """
    Unit of Work interface (Port).

    Infrastructure provides the concrete implementation
    (SQLAlchemyUnitOfWork).
    """

    @abstractmethod
    def commit(self) -> None:
        """Persist all changes made within the unit of work."""
        raise NotImplementedError

    @abstractmethod
    def rollback(self) -> None:
        """Discard all changes made within the unit of work."""
        raise NotImplementedError

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """
        Roll back if the block raised. Otherwise do nothing
        (commit must be called explicitly).
        """
        if exc_type is not None:
            self.rollback()
