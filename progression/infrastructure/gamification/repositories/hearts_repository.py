"""Repository for hearts with row locking and optimistic version checks."""

from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from progression.domain.common.exceptions import ConcurrencyConflictError
from progression.domain.common.value_objects import NodeId, UserId
from progression.domain.gamification.entities.hearts_state import HeartsState
from progression.infrastructure.common.dialect import upsert_insert
from progression.infrastructure.gamification.mappers.hearts_state_mapper import HeartsStateMapper
from progression.models import HeartsState as HeartsStateORM


class HeartsRepository:
    """Repository for HeartsState persistence."""

    def __init__(self, db: Session) -> None:
        self.db = db
        self.mapper = HeartsStateMapper()

    def get_or_create(
        self,
        user_id: UserId,
        path_id: NodeId,
        max_hearts: int,
        now: datetime,
        for_update: bool = False,
    ) -> HeartsState:
        """
        Load (and optionally lock) the row, creating it full if missing.

        Creation uses INSERT ... ON CONFLICT DO NOTHING so two first-time
        requests racing each other both end up reading the same row.
        """
        stmt = (
            select(HeartsStateORM)
            .where(
                HeartsStateORM.user_id == user_id.value,
                HeartsStateORM.path_id == path_id.value,
            )
            .execution_options(populate_existing=True)
        )
        if for_update:
            stmt = stmt.with_for_update()

        orm_model = self.db.execute(stmt).scalar_one_or_none()
        if orm_model is None:
            initial = HeartsState.start(user_id, path_id, max_hearts, now)
            insert_stmt = (
                upsert_insert(self.db, HeartsStateORM)
                .values(**self.mapper.to_values(initial))
                .on_conflict_do_nothing(index_elements=["user_id", "path_id"])
            )
            self.db.execute(insert_stmt)
            orm_model = self.db.execute(stmt).scalar_one()

        return self.mapper.to_domain(orm_model)

    def save(self, state: HeartsState) -> HeartsState:
        """
        Conditional update on the version read earlier.

        Raises:
            ConcurrencyConflictError: If another transaction updated the row first
        """
        stmt = (
            update(HeartsStateORM)
            .where(
                HeartsStateORM.id == state.id.value,
                HeartsStateORM.version == state.version,
            )
            .values(
                hearts_remaining=state.hearts_remaining,
                last_refill_at=state.last_refill_at,
                version=state.version + 1,
            )
            .execution_options(synchronize_session=False)
        )
        result = self.db.execute(stmt)
        if result.rowcount == 0:
            raise ConcurrencyConflictError("HeartsState", state.id.value)

        state.version += 1
        return state
