"""
Review scheduler built on a simplified Ebbinghaus forgetting curve.

This is a pure computation module with no I/O. The only method that
mutates anything is record_answer, and it touches just the mapping it is given.
"""

import time
from collections.abc import Mapping, MutableMapping

from lexipace.application.config import SchedulerConfig
from lexipace.domain.constants import HOURS_PER_DAY, MS_PER_HOUR
from lexipace.domain.errors import InvalidRecordError
from lexipace.domain.learning.models import (
    AdvicePriority,
    ItemMeta,
    LearningRecord,
    ReviewCandidate,
    StatisticsSummary,
    StrategyTip,
    StrategyType,
    StrongItem,
    WeakItem,
)

STRATEGY_MESSAGES: dict[StrategyType, tuple[str, AdvicePriority]] = {
    StrategyType.SLOW_DOWN: (
        "Slow the pace down a little; repeated practice helps new words stick.",
        AdvicePriority.HIGH,
    ),
    StrategyType.SPEED_TRAINING: (
        "Get familiar with each word's spelling and sound first to answer faster.",
        AdvicePriority.MEDIUM,
    ),
    StrategyType.REVIEW_FOCUS: (
        "You have learned plenty of words; focus on reviewing and consolidating them.",
        AdvicePriority.MEDIUM,
    ),
}


def now_ms() -> int:
    """Current wall-clock time as epoch milliseconds."""
    return int(time.time() * 1000)


class ReviewScheduler:
    """
    Decides which items are due, in what order, and summarizes progress.

    Stateless apart from its configuration.
    """

    def __init__(self, config: SchedulerConfig | None = None):
        self.config = config or SchedulerConfig()
        self.curve = self.config.forgetting_curve

    # --- intervals ---

    def curve_index(self, record: LearningRecord) -> int:
        """
        Position on the forgetting curve a record is scheduled against.

        Well-known items walk the full curve, middling ones only its first
        four checkpoints, and weak ones always restart at the shortest interval.
        """
        cfg = self.config
        if record.correct_rate >= cfg.excellent_correct_rate:
            index = min(record.review_count, cfg.excellent_curve_cap)
        elif record.correct_rate >= cfg.good_correct_rate:
            index = min(record.review_count, cfg.good_curve_cap)
        else:
            index = 0
        return min(index, len(self.curve.review_points_hours) - 1)

    def required_interval(self, record: LearningRecord) -> float:
        """Hours that must pass after the last review before the item is due."""
        return self.curve.point(self.curve_index(record))

    def expected_retention(self, record: LearningRecord) -> float:
        """Retention rate paired with the record's current checkpoint."""
        return self.curve.retention(self.curve_index(record))

    def next_review_at(self, record: LearningRecord, now: int | None = None) -> int:
        """
        Epoch milliseconds at which the record becomes due.

        Unreviewed records are measured from `now`.
        """
        base = record.last_review_ms
        if base is None:
            base = now if now is not None else now_ms()
        return base + int(self.required_interval(record) * MS_PER_HOUR)

    def is_due(self, record: LearningRecord, hours_since_review: float) -> bool:
        return hours_since_review >= self.required_interval(record)

    # --- ranking ---

    def review_priority(self, record: LearningRecord, hours_since_review: float) -> float:
        """
        Priority = value + urgency + staleness.

        Staleness is capped so very old items do not dominate forever.
        """
        cfg = self.config
        frequency_weight = record.frequency / cfg.frequency_normalization_factor
        error_weight = (1 - record.correct_rate) * cfg.error_weight_multiplier
        time_weight = min(hours_since_review / HOURS_PER_DAY, cfg.max_time_weight)
        return frequency_weight + error_weight + time_weight

    def due_reviews(
        self, records: Mapping[str, LearningRecord], now: int | None = None
    ) -> list[ReviewCandidate]:
        """
        Items whose elapsed time meets their required interval.

        Args:
            records: item_id -> LearningRecord mapping (not modified).
            now: Epoch milliseconds; defaults to the current time.

        Returns:
            Due candidates sorted by priority, highest first. Equal priorities
            keep the mapping's iteration order.
        """
        if now is None:
            now = now_ms()

        due: list[ReviewCandidate] = []
        for item_id, record in records.items():
            if record.last_review_ms is None:
                continue

            hours_since = (now - record.last_review_ms) / MS_PER_HOUR
            if self.is_due(record, hours_since):
                due.append(
                    ReviewCandidate(
                        item_id=item_id,
                        priority=self.review_priority(record, hours_since),
                        hours_since_review=hours_since,
                        record=record,
                    )
                )

        return sorted(due, key=lambda cand: cand.priority, reverse=True)

    # --- updates ---

    def record_answer(
        self,
        item_id: str,
        correct: bool,
        latency_ms: int,
        records: MutableMapping[str, LearningRecord],
        meta: ItemMeta | None = None,
        now: int | None = None,
    ) -> LearningRecord:
        """
        Apply one answer to the item's record, creating it on first sight.

        Every call is monotonic: attempts and time only grow, and a correct
        answer also advances the item along the forgetting curve.

        Raises:
            InvalidRecordError: On negative latency or a stored record whose
                counters are already inconsistent.
        """
        if latency_ms < 0:
            raise InvalidRecordError(f"latency must be non-negative, got {latency_ms}")
        if now is None:
            now = now_ms()

        record = records.get(item_id)
        if record is None:
            record = LearningRecord(
                item_id=item_id,
                frequency=meta.frequency if meta else 0,
                first_seen_ms=now,
            )
            records[item_id] = record
        else:
            self._check_counters(record)

        record.total_attempts += 1
        record.total_time_spent_ms += latency_ms
        record.last_review_ms = now

        if correct:
            record.correct_attempts += 1
            record.review_count += 1

        record.refresh_rates()
        return record

    def _check_counters(self, record: LearningRecord) -> None:
        if min(record.total_attempts, record.correct_attempts, record.review_count) < 0:
            raise InvalidRecordError(f"record {record.item_id!r} has negative counters")
        if record.correct_attempts > record.total_attempts:
            raise InvalidRecordError(
                f"record {record.item_id!r} has more correct answers "
                f"({record.correct_attempts}) than attempts ({record.total_attempts})"
            )

    # --- insights ---

    def statistics(self, records: Mapping[str, LearningRecord]) -> StatisticsSummary:
        """Attempt-weighted totals across every record."""
        total_attempts = 0
        total_correct = 0
        total_time = 0
        learned = 0

        for record in records.values():
            total_attempts += record.total_attempts
            total_correct += record.correct_attempts
            total_time += record.total_time_spent_ms
            if record.correct_rate > self.config.poor_correct_rate:
                learned += 1

        return StatisticsSummary(
            total_items=len(records),
            items_learned=learned,
            average_correct_rate=total_correct / total_attempts if total_attempts else 0.0,
            average_response_time_ms=total_time / total_attempts if total_attempts else 0.0,
            total_study_time_ms=total_time,
            total_attempts=total_attempts,
            total_correct=total_correct,
        )

    def weakness_score(self, record: LearningRecord) -> float:
        cfg = self.config
        error_rate = 1 - record.correct_rate
        attempt_weight = min(record.total_attempts / 10, 1)
        frequency_weight = record.frequency / cfg.frequency_normalization_factor
        slow_weight = 1 if record.average_response_time_ms > cfg.response_time_threshold_ms else 0
        return error_rate * 2 + attempt_weight + frequency_weight + slow_weight

    def analyze_weaknesses(
        self, records: Mapping[str, LearningRecord], limit: int | None = None
    ) -> list[WeakItem]:
        """
        Items answered poorly often enough to be trusted, worst first.

        A minimum number of attempts keeps one unlucky answer from counting.
        """
        cfg = self.config
        if limit is None:
            limit = cfg.analysis_limit

        weak = [
            WeakItem(
                item_id=item_id,
                correct_rate=record.correct_rate,
                total_attempts=record.total_attempts,
                average_response_time_ms=record.average_response_time_ms,
                score=self.weakness_score(record),
            )
            for item_id, record in records.items()
            if record.correct_rate < cfg.good_correct_rate
            and record.total_attempts >= cfg.min_attempts_for_analysis
        ]
        return sorted(weak, key=lambda w: w.score, reverse=True)[:limit]

    def analyze_strengths(
        self, records: Mapping[str, LearningRecord], limit: int | None = None
    ) -> list[StrongItem]:
        cfg = self.config
        if limit is None:
            limit = cfg.analysis_limit

        strong = [
            StrongItem(
                item_id=item_id,
                correct_rate=record.correct_rate,
                total_attempts=record.total_attempts,
                average_response_time_ms=record.average_response_time_ms,
                review_count=record.review_count,
            )
            for item_id, record in records.items()
            if record.correct_rate >= cfg.excellent_correct_rate
            and record.total_attempts >= cfg.min_attempts_for_analysis
        ]
        return sorted(strong, key=lambda s: s.correct_rate, reverse=True)[:limit]

    def recommend_strategies(self, stats: StatisticsSummary) -> list[StrategyTip]:
        """Every strategy whose trigger fires; the caller picks how many to show."""
        cfg = self.config
        fired: list[StrategyType] = []

        if stats.average_correct_rate < cfg.good_correct_rate:
            fired.append(StrategyType.SLOW_DOWN)
        if stats.average_response_time_ms > cfg.response_time_threshold_ms:
            fired.append(StrategyType.SPEED_TRAINING)
        if stats.items_learned >= cfg.review_focus_learned_items:
            fired.append(StrategyType.REVIEW_FOCUS)

        tips = []
        for strategy in fired:
            message, priority = STRATEGY_MESSAGES[strategy]
            tips.append(StrategyTip(type=strategy, message=message, priority=priority))
        return tips
