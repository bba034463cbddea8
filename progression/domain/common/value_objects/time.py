"""Time helpers shared by the domain.

All timestamps inside the domain are timezone-aware UTC. Calendar days are
derived by converting into a configured timezone.
"""

from datetime import UTC, date, datetime, time, timedelta, tzinfo


def as_utc(value: datetime) -> datetime:
    """Return an aware UTC datetime. Naive values are assumed to already be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def local_day(value: datetime, tz: tzinfo) -> date:
    """Calendar day of a timestamp as seen from the given timezone."""
    return as_utc(value).astimezone(tz).date()


def day_bounds(day: date, tz: tzinfo, days: int = 1) -> tuple[datetime, datetime]:
    """UTC [start, end) range covering `days` calendar days starting at `day` in `tz`."""
    start = datetime.combine(day, time.min, tzinfo=tz)
    end = datetime.combine(day + timedelta(days=days), time.min, tzinfo=tz)
    return start.astimezone(UTC), end.astimezone(UTC)
