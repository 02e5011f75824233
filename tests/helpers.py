"""Shared builders for scheduler tests."""

from lexipace.domain.learning.models import LearningRecord

HOUR_MS = 60 * 60 * 1000
# 2023-11-14 22:13:20 UTC
NOW = 1_700_000_000_000


def make_record(
    item_id: str,
    total: int,
    correct: int,
    hours_ago: float | None,
    review_count: int | None = None,
    frequency: int = 0,
    time_spent_ms: int | None = None,
    now: int = NOW,
) -> LearningRecord:
    """Builds a consistent record last reviewed `hours_ago` hours before `now`."""
    record = LearningRecord(
        item_id=item_id,
        total_attempts=total,
        correct_attempts=correct,
        total_time_spent_ms=time_spent_ms if time_spent_ms is not None else total * 1000,
        last_review_ms=None if hours_ago is None else now - int(round(hours_ago * HOUR_MS)),
        review_count=correct if review_count is None else review_count,
        frequency=frequency,
        first_seen_ms=now - 30 * 24 * HOUR_MS,
    )
    record.refresh_rates()
    return record
