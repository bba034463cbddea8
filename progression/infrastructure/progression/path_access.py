"""Path access policy backed by the path's lock flag and unlock requirement."""

from typing import assert_never

import structlog

from progression.application.gamification.protocols.xp_repository import XpRepositoryProtocol
from progression.application.progression.protocols.content_repository import (
    ContentRepositoryProtocol,
)
from progression.application.progression.protocols.progress_repository import (
    ProgressRepositoryProtocol,
)
from progression.domain.common.value_objects import NodeId, UserId
from progression.domain.content.entities.content_node import (
    ContentNode,
    NodeKind,
    UnlockRequirement,
)
from progression.domain.progression.services.unlock_evaluator import allow_unlocked_paths

logger = structlog.get_logger(__name__)


class RequirementPathAccessPolicy:
    """
    Denies paths flagged as locked, then checks the path's unlock requirement.

    - ``previous_path``: the path named by the value must be completed. A
      missing value or a path that no longer exists doesn't block.
    - ``xp_threshold``: the user's total XP must reach the value.
    - ``admin_approval``: denied until approvals are modelled.

    Group or subscription based access plugs in here by implementing
    PathAccessPolicyProtocol.
    """

    def __init__(
        self,
        content_repository: ContentRepositoryProtocol,
        progress_repository: ProgressRepositoryProtocol,
        xp_repository: XpRepositoryProtocol,
    ) -> None:
        self.content_repository = content_repository
        self.progress_repository = progress_repository
        self.xp_repository = xp_repository

    def allows(self, user_id: UserId, path: ContentNode) -> bool:
        if not allow_unlocked_paths(path):
            return False

        requirement = path.unlock_requirement_type
        value = path.unlock_requirement_value
        match requirement:
            case None | UnlockRequirement.NONE:
                return True
            case UnlockRequirement.PREVIOUS_PATH:
                if value is None or value < 1:
                    return True
                required = self.content_repository.get_node(NodeId(value))
                if required is None or required.kind is not NodeKind.PATH:
                    logger.warning(
                        "unlock_requirement_path_missing",
                        path_id=path.id.value,
                        required_path_id=value,
                    )
                    return True
                return self.progress_repository.is_completed(user_id, required.id)
            case UnlockRequirement.XP_THRESHOLD:
                if not value:
                    return True
                return self.xp_repository.total(user_id) >= value
            case UnlockRequirement.ADMIN_APPROVAL:
                return False
            case _:
                assert_never(requirement)
