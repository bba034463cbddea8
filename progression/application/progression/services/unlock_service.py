"""Application service running unlock evaluation against the repositories."""

from collections.abc import Iterable

import structlog

from progression.application.progression.protocols.content_repository import (
    ContentRepositoryProtocol,
)
from progression.application.progression.protocols.path_access_policy import (
    PathAccessPolicyProtocol,
)
from progression.application.progression.protocols.progress_repository import (
    ProgressRepositoryProtocol,
)
from progression.domain.common.exceptions import EntityNotFoundError
from progression.domain.common.value_objects import NodeId, UserId
from progression.domain.content.entities.content_node import ContentNode, NodeKind
from progression.domain.progression.services.unlock_evaluator import (
    UnlockDecision,
    UnlockEvaluator,
)

logger = structlog.get_logger(__name__)


class UnlockService:
    """Shared by the unlock queries and the lesson flow."""

    def __init__(
        self,
        content_repository: ContentRepositoryProtocol,
        progress_repository: ProgressRepositoryProtocol,
        path_access_policy: PathAccessPolicyProtocol,
    ) -> None:
        self.content_repository = content_repository
        self.progress_repository = progress_repository
        self.path_access_policy = path_access_policy

    def require_node(self, node_id: NodeId, kind: NodeKind) -> ContentNode:
        """
        Load a node and check its kind.

        Raises:
            EntityNotFoundError: If the node is missing or of another kind
        """
        node = self.content_repository.get_node(node_id)
        if node is None or node.kind is not kind:
            raise EntityNotFoundError(kind.value.capitalize(), int(node_id))
        return node

    def find_ancestor(self, node: ContentNode, kind: NodeKind) -> ContentNode | None:
        current: ContentNode | None = node
        while current is not None and current.kind is not kind:
            if current.parent_id is None:
                return None
            current = self.content_repository.get_node(current.parent_id)
        return current

    def evaluate(self, user_id: UserId, node: ContentNode) -> UnlockDecision:
        evaluator = UnlockEvaluator(
            hierarchy=self.content_repository,
            is_completed=lambda node_id: self.progress_repository.is_completed(user_id, node_id),
            path_access=lambda path: self.path_access_policy.allows(user_id, path),
        )
        decision = evaluator.evaluate(node)
        if decision.integrity_issue:
            logger.warning(
                "unlock_integrity_issue",
                user_id=user_id.value,
                node_id=node.id.value,
                issue=decision.integrity_issue,
            )
        return decision

    def unlocked_among(self, user_id: UserId, nodes: Iterable[ContentNode]) -> set[NodeId]:
        return {node.id for node in nodes if self.evaluate(user_id, node).unlocked}

    def successors(self, node: ContentNode) -> list[ContentNode]:
        """
        Nodes whose unlock state may change when ``node`` gets completed:
        the next sibling and its chain of first children.
        """
        if node.parent_id is None:
            return []
        sibling = self.content_repository.get_child_at(node.parent_id, node.ordinal_position + 1)
        if sibling is None:
            return []

        chain = [sibling]
        current = sibling
        while current.kind not in (NodeKind.LESSON, NodeKind.FLASHCARD):
            first_child = self.content_repository.get_child_at(current.id, 0)
            if first_child is None:
                break
            chain.append(first_child)
            current = first_child
        return chain
