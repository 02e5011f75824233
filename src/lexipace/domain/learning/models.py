"""
Domain models for learning history and scheduling output.

These are pure data structures with no I/O or external dependencies.
"""

from dataclasses import dataclass, field
from enum import Enum


@dataclass
class LearningRecord:
    """
    Accumulated performance history for a single item.

    Attributes:
        item_id: Stable identifier, key into the record mapping.
        total_attempts: Number of answers given for the item.
        correct_attempts: Number of correct answers (never above total_attempts).
        total_time_spent_ms: Cumulative response latency.
        last_review_ms: Epoch milliseconds of the latest attempt, None before the first.
        review_count: Successful reinforcements; indexes the forgetting curve.
        correct_rate: correct_attempts / total_attempts (0 without attempts).
        average_response_time_ms: total_time_spent_ms / total_attempts.
        frequency: Catalog weight copied at first encounter.
        first_seen_ms: Epoch milliseconds of creation.
    """

    item_id: str
    total_attempts: int = 0
    correct_attempts: int = 0
    total_time_spent_ms: int = 0
    last_review_ms: int | None = None
    review_count: int = 0
    correct_rate: float = 0.0
    average_response_time_ms: float = 0.0
    frequency: int = 0
    first_seen_ms: int | None = None

    def refresh_rates(self) -> None:
        """Recompute the derived rate fields from the raw counters."""
        if self.total_attempts > 0:
            self.correct_rate = self.correct_attempts / self.total_attempts
            self.average_response_time_ms = self.total_time_spent_ms / self.total_attempts
        else:
            self.correct_rate = 0.0
            self.average_response_time_ms = 0.0


@dataclass(frozen=True)
class ItemMeta:
    """Static catalog metadata for an item."""

    item_id: str
    frequency: int = 0
    rank: int = 0


@dataclass(frozen=True)
class ReviewCandidate:
    """A due item scored for ranking. Transient, never persisted."""

    item_id: str
    priority: float
    hours_since_review: float
    record: LearningRecord


@dataclass(frozen=True)
class StatisticsSummary:
    total_items: int
    items_learned: int
    average_correct_rate: float
    average_response_time_ms: float
    total_study_time_ms: int
    total_attempts: int
    total_correct: int


@dataclass(frozen=True)
class WeakItem:
    item_id: str
    correct_rate: float
    total_attempts: int
    average_response_time_ms: float
    score: float


@dataclass(frozen=True)
class StrongItem:
    item_id: str
    correct_rate: float
    total_attempts: int
    average_response_time_ms: float
    review_count: int


class StrategyType(str, Enum):
    SLOW_DOWN = "slow_down"
    SPEED_TRAINING = "speed_training"
    REVIEW_FOCUS = "review_focus"


class AdvicePriority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"


@dataclass(frozen=True)
class StrategyTip:
    type: StrategyType
    message: str
    priority: AdvicePriority


class RecommendationType(str, Enum):
    REVIEW = "review"
    NEW = "new"
    CAUGHT_UP = "caught_up"


@dataclass(frozen=True)
class Recommendation:
    """
    What the learner should practice next.

    `items` holds ReviewCandidate objects for reviews and ItemMeta objects
    for new material. CAUGHT_UP carries no items.
    """

    type: RecommendationType
    items: list[ReviewCandidate | ItemMeta]
    reason_tag: str
    estimated_minutes: int

    @property
    def item_ids(self) -> list[str]:
        return [item.item_id for item in self.items]


@dataclass(frozen=True)
class AdviceItem:
    type: str
    message: str
    icon: str
    priority: AdvicePriority | None = None


@dataclass(frozen=True)
class ReviewReminder:
    due_count: int
    preview_ids: list[str]


@dataclass
class LearnerProfile:
    """
    Per-learner summary kept alongside the record mapping.

    Persisted by the caller; the coordinator only returns refreshed copies.
    """

    items_learned: int = 0
    learning_speed: str = "normal"  # slow, normal, fast
    strengths: list[str] = field(default_factory=list)
    weaknesses: list[str] = field(default_factory=list)
    last_active_ms: int | None = None
    consecutive_days: int = 0
