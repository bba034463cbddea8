"""Read-only repository over the content hierarchy."""

from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session

from progression.domain.common.value_objects import NodeId
from progression.domain.content.entities.content_node import ContentNode
from progression.infrastructure.content.mappers.content_node_mapper import ContentNodeMapper
from progression.models import ContentNode as ContentNodeORM


class ContentRepository:
    """Repository for ContentNode lookups."""

    def __init__(self, db: Session) -> None:
        self.db = db
        self.mapper = ContentNodeMapper()

    def get_node(self, node_id: NodeId) -> ContentNode | None:
        orm_model = self.db.get(ContentNodeORM, node_id.value)
        return self.mapper.to_domain(orm_model) if orm_model else None

    def get_child_at(self, parent_id: NodeId, position: int) -> ContentNode | None:
        stmt = select(ContentNodeORM).where(
            ContentNodeORM.parent_id == parent_id.value,
            ContentNodeORM.ordinal_position == position,
        )
        orm_model = self.db.execute(stmt).scalar_one_or_none()
        return self.mapper.to_domain(orm_model) if orm_model else None

    def list_children(self, parent_id: NodeId) -> list[ContentNode]:
        stmt = (
            select(ContentNodeORM)
            .where(ContentNodeORM.parent_id == parent_id.value)
            .order_by(ContentNodeORM.ordinal_position.asc())
        )
        return [self.mapper.to_domain(orm) for orm in self.db.execute(stmt).scalars().all()]

    def get_many(self, node_ids: Iterable[NodeId]) -> dict[NodeId, ContentNode]:
        ids = [node_id.value for node_id in node_ids]
        if not ids:
            return {}
        stmt = select(ContentNodeORM).where(ContentNodeORM.id.in_(ids))
        nodes = (self.mapper.to_domain(orm) for orm in self.db.execute(stmt).scalars().all())
        return {node.id: node for node in nodes}
