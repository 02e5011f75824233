"""
Learning Session Coordinator — Application layer orchestrator.

Combines due reviews with new material from the catalog and turns
scheduler statistics into learner-facing advice.
"""

import logging
from collections.abc import Mapping, MutableMapping
from dataclasses import replace
from datetime import datetime, tzinfo

from lexipace.application.config import SchedulerConfig
from lexipace.application.scheduler.review_scheduler import ReviewScheduler, now_ms
from lexipace.domain.learning.models import (
    AdviceItem,
    LearnerProfile,
    LearningRecord,
    Recommendation,
    RecommendationType,
    ReviewReminder,
    StatisticsSummary,
)
from lexipace.domain.learning.ports import ItemCatalog

from . import advice as tables
from .streak import advance_streak

logger = logging.getLogger(__name__)


class SessionCoordinator:
    """
    Sequences "what next" decisions for one learner.

    Holds no learner state: records, profiles and the clock are passed in
    on every call, so persistence stays entirely with the caller.
    """

    def __init__(
        self,
        catalog: ItemCatalog,
        config: SchedulerConfig | None = None,
        scheduler: ReviewScheduler | None = None,
    ):
        """
        Args:
            catalog: The port supplying ranked new items and their metadata.
            config: Tuning values; defaults are used if not provided.
            scheduler: Optional custom scheduler; built from config if not provided.
        """
        self.config = config or (scheduler.config if scheduler else SchedulerConfig())
        self._catalog = catalog
        self._scheduler = scheduler or ReviewScheduler(self.config)

    @property
    def scheduler(self) -> ReviewScheduler:
        return self._scheduler

    def next_recommendation(
        self, records: Mapping[str, LearningRecord], now: int | None = None
    ) -> Recommendation:
        """
        Due reviews first, otherwise the next unlearned catalog items.

        Returns:
            A REVIEW or NEW recommendation, or CAUGHT_UP when there is
            nothing due and the catalog has no unlearned items left.
        """
        cfg = self.config
        due = self._scheduler.due_reviews(records, now)
        if due:
            picked = due[: cfg.max_review_items]
            logger.debug(f"{len(due)} items due, recommending {len(picked)}")
            return Recommendation(
                type=RecommendationType.REVIEW,
                items=list(picked),
                reason_tag=tables.REASON_REVIEW_DUE,
                estimated_minutes=len(picked) * cfg.minutes_per_review_item,
            )

        # Any id with a record counts as learned, whatever its correct rate
        new_items = self._catalog.list_unlearned_ranked(
            set(records.keys()), cfg.default_learning_count
        )
        if new_items:
            logger.debug(f"Nothing due, recommending {len(new_items)} new items")
            return Recommendation(
                type=RecommendationType.NEW,
                items=list(new_items),
                reason_tag=tables.REASON_NEW_HIGH_FREQUENCY,
                estimated_minutes=len(new_items) * cfg.minutes_per_new_item,
            )

        logger.info("Learner is caught up: no reviews due and no new items left")
        return Recommendation(
            type=RecommendationType.CAUGHT_UP,
            items=[],
            reason_tag=tables.REASON_CAUGHT_UP,
            estimated_minutes=0,
        )

    def record_answer(
        self,
        item_id: str,
        correct: bool,
        latency_ms: int,
        records: MutableMapping[str, LearningRecord],
        now: int | None = None,
    ) -> LearningRecord:
        """
        Record one answer, seeding frequency from the catalog for new items.

        Unknown ids are still recorded, with a frequency of 0.
        """
        meta = None
        if item_id not in records:
            meta = self._catalog.get_meta(item_id)
            if meta is None:
                logger.warning(f"Item {item_id!r} not found in catalog; frequency defaults to 0")

        return self._scheduler.record_answer(item_id, correct, latency_ms, records, meta, now)

    def statistics(self, records: Mapping[str, LearningRecord]) -> StatisticsSummary:
        return self._scheduler.statistics(records)

    def advice(
        self,
        stats: StatisticsSummary,
        streak_days: int,
        now: int | None = None,
        tz: tzinfo | None = None,
    ) -> list[AdviceItem]:
        """
        Ordered advice: scheduler strategies first, then the session checks.

        Args:
            stats: Output of statistics().
            streak_days: Current consecutive-day streak.
            now: Epoch milliseconds, used for the time-of-day hint.
            tz: Zone for the time-of-day hint; local time when None.
        """
        cfg = self.config
        if now is None:
            now = now_ms()

        items = [
            AdviceItem(
                type=tip.type.value,
                message=tip.message,
                icon=tables.icon_for(tip.type.value),
                priority=tip.priority,
            )
            for tip in self._scheduler.recommend_strategies(stats)
        ]

        checks = [
            ("learning_strategy", stats.average_correct_rate < cfg.good_correct_rate),
            (
                "speed_improvement",
                stats.average_response_time_ms > cfg.response_time_threshold_ms,
            ),
            ("encouragement", streak_days >= cfg.streak_encouragement_days),
            ("time_advice", self._is_morning(now, tz)),
        ]
        for advice_type, fired in checks:
            if fired:
                items.append(
                    AdviceItem(
                        type=advice_type,
                        message=tables.ADVICE_MESSAGES[advice_type],
                        icon=tables.icon_for(advice_type),
                    )
                )

        return items

    def _is_morning(self, now: int, tz: tzinfo | None) -> bool:
        hour = datetime.fromtimestamp(now / 1000, tz=tz).hour
        return self.config.morning_start_hour <= hour <= self.config.morning_end_hour

    def refresh_profile(
        self,
        profile: LearnerProfile,
        records: Mapping[str, LearningRecord],
        now: int | None = None,
        tz: tzinfo | None = None,
    ) -> LearnerProfile:
        """
        Profile after activity at `now`: streak, pace, strengths and weaknesses.

        Returns a new LearnerProfile; the one passed in is left untouched.
        """
        cfg = self.config
        if now is None:
            now = now_ms()

        stats = self._scheduler.statistics(records)

        if stats.average_correct_rate > cfg.excellent_correct_rate:
            speed = "fast"
        elif stats.average_correct_rate < cfg.poor_correct_rate:
            speed = "slow"
        else:
            speed = "normal"

        strengths = self._scheduler.analyze_strengths(records, cfg.profile_analysis_limit)
        weaknesses = self._scheduler.analyze_weaknesses(records, cfg.profile_analysis_limit)

        return replace(
            profile,
            items_learned=stats.items_learned,
            learning_speed=speed,
            strengths=[s.item_id for s in strengths],
            weaknesses=[w.item_id for w in weaknesses],
            consecutive_days=advance_streak(
                profile.last_active_ms, profile.consecutive_days, now, tz
            ),
            last_active_ms=now,
        )

    def review_reminder(
        self, records: Mapping[str, LearningRecord], now: int | None = None
    ) -> ReviewReminder | None:
        """
        The check a caller runs on its own timer (see review_check_interval_ms).

        Returns None when nothing is due.
        """
        due = self._scheduler.due_reviews(records, now)
        if not due:
            return None
        preview = [cand.item_id for cand in due[: self.config.reminder_preview_size]]
        logger.info(f"{len(due)} items are due for review")
        return ReviewReminder(due_count=len(due), preview_ids=preview)
