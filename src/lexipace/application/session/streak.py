"""
Consecutive-day streak rules.

Pure functions of two instants; calendar days are taken in `tz`
(local time when None).
"""

from datetime import date, datetime, tzinfo


def calendar_day(timestamp_ms: int, tz: tzinfo | None = None) -> date:
    return datetime.fromtimestamp(timestamp_ms / 1000, tz=tz).date()


def days_between(earlier_ms: int, later_ms: int, tz: tzinfo | None = None) -> int:
    """Whole calendar days from `earlier_ms` to `later_ms` (negative if reversed)."""
    return (calendar_day(later_ms, tz) - calendar_day(earlier_ms, tz)).days


def advance_streak(
    last_active_ms: int | None,
    consecutive_days: int,
    now_ms: int,
    tz: tzinfo | None = None,
) -> int:
    """
    Streak after an activity at `now_ms`.

    Same day keeps the stored count (at least 1, since the learner is active
    now), the following day extends it, anything else starts over at 1.
    """
    if last_active_ms is None:
        return 1

    gap = days_between(last_active_ms, now_ms, tz)
    if gap == 0:
        return max(consecutive_days, 1)
    if gap == 1:
        return consecutive_days + 1
    return 1


def current_streak(
    last_active_ms: int | None,
    consecutive_days: int,
    now_ms: int,
    tz: tzinfo | None = None,
) -> int:
    """
    Streak as it stands at `now_ms` without recording new activity.

    A streak last extended yesterday is still alive; older ones have lapsed.
    """
    if last_active_ms is None:
        return 0
    gap = days_between(last_active_ms, now_ms, tz)
    if gap in (0, 1):
        return consecutive_days
    return 0
