"""Mapper for HeartsState ORM ↔ Domain conversion."""

from progression.domain.common.value_objects import HeartsStateId, NodeId, UserId, as_utc
from progression.domain.gamification.entities.hearts_state import HeartsState
from progression.models import HeartsState as HeartsStateORM


class HeartsStateMapper:
    def to_domain(self, orm_model: HeartsStateORM) -> HeartsState:
        return HeartsState(
            id=HeartsStateId(orm_model.id),
            user_id=UserId(orm_model.user_id),
            path_id=NodeId(orm_model.path_id),
            hearts_remaining=orm_model.hearts_remaining,
            max_hearts=orm_model.max_hearts,
            last_refill_at=as_utc(orm_model.last_refill_at),
            version=orm_model.version,
        )

    def to_values(self, state: HeartsState) -> dict[str, object]:
        return {
            "user_id": state.user_id.value,
            "path_id": state.path_id.value,
            "hearts_remaining": state.hearts_remaining,
            "max_hearts": state.max_hearts,
            "last_refill_at": state.last_refill_at,
            "version": state.version,
        }
