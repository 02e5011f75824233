# Domain Learning Package
from .models import (
    AdviceItem,
    AdvicePriority,
    ItemMeta,
    LearnerProfile,
    LearningRecord,
    Recommendation,
    RecommendationType,
    ReviewCandidate,
    ReviewReminder,
    StatisticsSummary,
    StrategyTip,
    StrategyType,
    StrongItem,
    WeakItem,
)
from .ports import ItemCatalog

__all__ = [
    "AdviceItem",
    "AdvicePriority",
    "ItemCatalog",
    "ItemMeta",
    "LearnerProfile",
    "LearningRecord",
    "Recommendation",
    "RecommendationType",
    "ReviewCandidate",
    "ReviewReminder",
    "StatisticsSummary",
    "StrategyTip",
    "StrategyType",
    "StrongItem",
    "WeakItem",
]
