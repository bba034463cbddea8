"""Protocol for hearts persistence."""

from datetime import datetime
from typing import Protocol

from progression.domain.common.value_objects import NodeId, UserId
from progression.domain.gamification.entities.hearts_state import HeartsState


class HeartsRepositoryProtocol(Protocol):
    def get_or_create(
        self,
        user_id: UserId,
        path_id: NodeId,
        max_hearts: int,
        now: datetime,
        for_update: bool = False,
    ) -> HeartsState:
        """
        Load the hearts row for (user, path), creating it full if missing.

        Args:
            for_update: Lock the row for the rest of the transaction

        Returns:
            HeartsState as stored (not yet regenerated)
        """
        ...

    def save(self, state: HeartsState) -> HeartsState:
        """
        Write the state back if nobody changed it since it was read.

        Raises:
            ConcurrencyConflictError: If the stored version moved on
        """
        ...
