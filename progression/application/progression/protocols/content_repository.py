"""Protocol for the read-only content hierarchy."""

from collections.abc import Iterable
from typing import Protocol

from progression.domain.common.value_objects import NodeId
from progression.domain.content.entities.content_node import ContentNode


class ContentRepositoryProtocol(Protocol):
    """Lookups over the Domain -> Path -> Unit -> Lesson -> Flashcard tree."""

    def get_node(self, node_id: NodeId) -> ContentNode | None:
        """
        Find a node by id.

        Args:
            node_id: Any node id, regardless of kind

        Returns:
            The node, or None if it doesn't exist
        """
        ...

    def get_child_at(self, parent_id: NodeId, position: int) -> ContentNode | None:
        """Child of ``parent_id`` at the given ordinal position, if any."""
        ...

    def list_children(self, parent_id: NodeId) -> list[ContentNode]:
        """Children of a node ordered by ordinal position."""
        ...

    def get_many(self, node_ids: Iterable[NodeId]) -> dict[NodeId, ContentNode]:
        """Nodes keyed by id. Missing ids are simply absent."""
        ...
