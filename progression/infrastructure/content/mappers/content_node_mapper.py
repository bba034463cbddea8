"""Mapper for ContentNode ORM → Domain conversion. Content is read-only here."""

from progression.domain.common.value_objects import NodeId
from progression.domain.content.entities.content_node import (
    ContentNode,
    NodeKind,
    UnlockRequirement,
)
from progression.models import ContentNode as ContentNodeORM


class ContentNodeMapper:
    def to_domain(self, orm_model: ContentNodeORM) -> ContentNode:
        return ContentNode(
            id=NodeId(orm_model.id),
            parent_id=NodeId(orm_model.parent_id) if orm_model.parent_id else None,
            kind=NodeKind(orm_model.kind),
            ordinal_position=orm_model.ordinal_position,
            title=orm_model.title,
            xp_reward=orm_model.xp_reward,
            is_locked=orm_model.is_locked,
            unlock_requirement_type=(
                UnlockRequirement(orm_model.unlock_requirement_type)
                if orm_model.unlock_requirement_type
                else None
            ),
            unlock_requirement_value=orm_model.unlock_requirement_value,
            question=orm_model.question,
            answer=orm_model.answer,
            difficulty=orm_model.difficulty,
        )
