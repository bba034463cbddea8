"""Protocol for the path access rule delegated by the unlock evaluator."""

from typing import Protocol

from progression.domain.common.value_objects import UserId
from progression.domain.content.entities.content_node import ContentNode


class PathAccessPolicyProtocol(Protocol):
    def allows(self, user_id: UserId, path: ContentNode) -> bool: ...
