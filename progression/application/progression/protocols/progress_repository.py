"""Protocol for the per-user progress ledger."""

from collections.abc import Iterable
from typing import Protocol

from progression.domain.common.value_objects import NodeId, UserId
from progression.domain.progression.entities.progress_record import ProgressRecord


class ProgressRepositoryProtocol(Protocol):
    def find(self, user_id: UserId, node_id: NodeId) -> ProgressRecord | None: ...

    def is_completed(self, user_id: UserId, node_id: NodeId) -> bool: ...

    def completed_among(self, user_id: UserId, node_ids: Iterable[NodeId]) -> set[NodeId]:
        """Subset of ``node_ids`` the user has completed."""
        ...

    def scores_for(self, user_id: UserId, node_ids: Iterable[NodeId]) -> dict[NodeId, int]:
        """Best scores keyed by node id, for completed nodes only."""
        ...

    def record_completion(self, record: ProgressRecord) -> ProgressRecord:
        """
        Insert the record, or keep the best score if one already exists for
        (user, node). Must be atomic against a concurrent completion.

        Returns:
            The stored record after the upsert
        """
        ...
