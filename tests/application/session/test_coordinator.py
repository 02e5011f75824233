"""Tests for SessionCoordinator: recommendations, answers, advice and profile refresh."""

from datetime import UTC, datetime
from unittest.mock import MagicMock

import pytest

from lexipace.application.session.coordinator import SessionCoordinator
from lexipace.domain.learning.models import (
    AdvicePriority,
    ItemMeta,
    LearnerProfile,
    RecommendationType,
    ReviewCandidate,
    StatisticsSummary,
)
from lexipace.domain.learning.ports import ItemCatalog
from lexipace.infrastructure.catalog.file_catalog import InMemoryItemCatalog
from tests.helpers import HOUR_MS, NOW, make_record


def _at(hour: int, minute: int = 0, day: int = 15) -> int:
    return int(datetime(2023, 11, day, hour, minute, tzinfo=UTC).timestamp() * 1000)


def _stats(rate: float = 0.85, response_ms: float = 2000, learned: int = 5) -> StatisticsSummary:
    return StatisticsSummary(
        total_items=learned,
        items_learned=learned,
        average_correct_rate=rate,
        average_response_time_ms=response_ms,
        total_study_time_ms=0,
        total_attempts=10,
        total_correct=int(rate * 10),
    )


# --- next_recommendation ---


def test_new_items_when_nothing_is_due(coordinator):
    rec = coordinator.next_recommendation({}, NOW)

    assert rec.type is RecommendationType.NEW
    assert len(rec.items) == 10
    assert rec.item_ids == [f"w{i:02d}" for i in range(1, 11)]
    assert rec.estimated_minutes == 30
    assert all(isinstance(item, ItemMeta) for item in rec.items)


def test_review_cap_applied_before_time_estimate(coordinator):
    records = {
        f"d{i}": make_record(f"d{i}", total=4, correct=i % 3, hours_ago=2 + i)
        for i in range(7)
    }

    rec = coordinator.next_recommendation(records, NOW)

    assert rec.type is RecommendationType.REVIEW
    assert len(rec.items) == 5
    assert rec.estimated_minutes == 10
    assert all(isinstance(item, ReviewCandidate) for item in rec.items)
    full = coordinator.scheduler.due_reviews(records, NOW)
    assert rec.item_ids == [c.item_id for c in full[:5]]


def test_any_recorded_item_counts_as_learned(coordinator):
    # Answered wrong a moment ago: poor, but not due yet and no longer "new"
    records = {"w01": make_record("w01", total=1, correct=0, hours_ago=0.1)}

    rec = coordinator.next_recommendation(records, NOW)

    assert rec.type is RecommendationType.NEW
    assert "w01" not in rec.item_ids
    assert rec.item_ids[0] == "w02"


def test_caught_up_when_nothing_left(config):
    coordinator = SessionCoordinator(InMemoryItemCatalog([]), config=config)

    rec = coordinator.next_recommendation({}, NOW)

    assert rec.type is RecommendationType.CAUGHT_UP
    assert rec.items == []
    assert rec.estimated_minutes == 0


def test_catalog_receives_recorded_ids(config):
    catalog = MagicMock(spec=ItemCatalog)
    catalog.list_unlearned_ranked.return_value = []
    coordinator = SessionCoordinator(catalog, config=config)
    records = {"a": make_record("a", total=1, correct=1, hours_ago=0.5)}

    coordinator.next_recommendation(records, NOW)

    catalog.list_unlearned_ranked.assert_called_once_with({"a"}, 10)


# --- record_answer ---


def test_record_answer_seeds_frequency_from_catalog(coordinator, catalog_items):
    records = {}
    record = coordinator.record_answer("w03", True, 900, records, now=NOW)
    assert record.frequency == catalog_items[2].frequency


def test_record_answer_for_unknown_item(coordinator):
    records = {}
    record = coordinator.record_answer("zzz", False, 900, records, now=NOW)
    assert record.frequency == 0
    assert records["zzz"].total_attempts == 1


def test_catalog_not_consulted_for_existing_record(config):
    catalog = MagicMock(spec=ItemCatalog)
    coordinator = SessionCoordinator(catalog, config=config)
    records = {"a": make_record("a", total=1, correct=1, hours_ago=1, frequency=7)}

    coordinator.record_answer("a", True, 100, records, now=NOW)

    catalog.get_meta.assert_not_called()
    assert records["a"].frequency == 7


# --- advice ---


def test_advice_order_for_struggling_learner(coordinator):
    items = coordinator.advice(_stats(0.5, 6000, 50), streak_days=7, now=_at(7), tz=UTC)

    assert [i.type for i in items] == [
        "slow_down",
        "speed_training",
        "review_focus",
        "learning_strategy",
        "speed_improvement",
        "encouragement",
        "time_advice",
    ]
    assert items[0].priority is AdvicePriority.HIGH
    assert items[0].icon == "🐌"
    assert items[3].priority is None
    assert items[-1].icon == "🌅"


@pytest.mark.parametrize(
    "hour,expected",
    [(5, False), (6, True), (8, True), (9, False)],
)
def test_morning_window_is_inclusive(coordinator, hour, expected):
    items = coordinator.advice(_stats(), streak_days=0, now=_at(hour, 30), tz=UTC)
    assert ("time_advice" in [i.type for i in items]) is expected


def test_no_advice_for_steady_learner_in_the_evening(coordinator):
    assert coordinator.advice(_stats(), streak_days=6, now=_at(20), tz=UTC) == []


@pytest.mark.parametrize(
    "stats,streak,expected",
    [
        (_stats(rate=0.7), 0, []),
        (_stats(rate=0.69), 0, ["slow_down", "learning_strategy"]),
        (_stats(response_ms=5000), 0, []),
        (_stats(response_ms=5001), 0, ["speed_training", "speed_improvement"]),
        (_stats(), 6, []),
        (_stats(), 7, ["encouragement"]),
    ],
)
def test_advice_trigger_boundaries(coordinator, stats, streak, expected):
    items = coordinator.advice(stats, streak_days=streak, now=_at(20), tz=UTC)
    assert [i.type for i in items] == expected


# --- refresh_profile ---


def test_refresh_profile_updates_summary_and_streak(coordinator):
    yesterday = _at(21, day=14)
    now = _at(10, day=15)
    records = {
        "good": make_record("good", total=5, correct=5, hours_ago=1, now=now),
        "bad": make_record("bad", total=5, correct=1, hours_ago=1, now=now),
    }
    profile = LearnerProfile(last_active_ms=yesterday, consecutive_days=3)

    updated = coordinator.refresh_profile(profile, records, now=now, tz=UTC)

    assert updated.consecutive_days == 4
    assert updated.last_active_ms == now
    assert updated.items_learned == 1
    assert updated.learning_speed == "normal"
    assert updated.strengths == ["good"]
    assert updated.weaknesses == ["bad"]
    assert profile.consecutive_days == 3
    assert profile.strengths == []


@pytest.mark.parametrize(
    "correct,speed",
    [(10, "fast"), (7, "normal"), (5, "slow")],
)
def test_refresh_profile_learning_speed(coordinator, correct, speed):
    records = {"x": make_record("x", total=10, correct=correct, hours_ago=1)}
    updated = coordinator.refresh_profile(LearnerProfile(), records, now=NOW, tz=UTC)
    assert updated.learning_speed == speed
    assert updated.consecutive_days == 1


# --- review_reminder ---


def test_review_reminder_none_when_nothing_due(coordinator):
    records = {"a": make_record("a", total=3, correct=3, hours_ago=0.5)}
    assert coordinator.review_reminder(records, NOW) is None


def test_review_reminder_previews_top_items(coordinator):
    records = {
        f"d{i}": make_record(f"d{i}", total=2, correct=0, hours_ago=1 + i) for i in range(8)
    }

    reminder = coordinator.review_reminder(records, NOW + HOUR_MS)

    assert reminder.due_count == 8
    assert len(reminder.preview_ids) == 5
    assert reminder.preview_ids[0] == "d7"
