"""Protocol for reading learning activity used by the streak."""

from collections.abc import Generator
from datetime import date, datetime, tzinfo
from typing import Protocol

from progression.domain.common.value_objects import UserId


class ActivityRepositoryProtocol(Protocol):
    def activity_days(self, user_id: UserId, tz: tzinfo, until: datetime) -> Generator[date, None, None]:
        """
        Distinct calendar days (in ``tz``) with a review or lesson completion,
        newest first, not later than ``until``.

        The generator is lazy so a short streak reads only a few rows. Callers
        close it when done to release the underlying cursors.
        """
        ...
