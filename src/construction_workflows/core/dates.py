"""Whole-day arithmetic shared by the scheduler and the alert evaluator."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

__all__ = ["ONE_DAY", "add_days", "as_utc", "ceil_days"]

ONE_DAY = timedelta(days=1)


def ceil_days(delta: timedelta) -> int:
    """Return ``ceil(delta / 1 day)`` without going through floats.

    Args:
        delta: The interval to measure. May be negative.

    Returns:
        The number of days rounded towards positive infinity.

    Example:
        >>> ceil_days(timedelta(hours=36))
        2
        >>> ceil_days(timedelta(hours=-36))
        -1
    """
    days, remainder = divmod(delta, ONE_DAY)
    return days + 1 if remainder else days


def add_days(moment: datetime, days: int) -> datetime:
    """Shift ``moment`` by a whole number of days."""
    return moment + timedelta(days=days)


def as_utc(moment: datetime) -> datetime:
    """Return ``moment`` as an aware datetime.

    Naive values are taken to be in UTC. Aware values are returned unchanged.

    Example:
        >>> as_utc(datetime(2024, 1, 3))
        datetime.datetime(2024, 1, 3, 0, 0, tzinfo=datetime.timezone.utc)
    """
    return moment.replace(tzinfo=UTC) if moment.tzinfo is None else moment
