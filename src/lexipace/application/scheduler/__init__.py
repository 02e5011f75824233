# Application Scheduler Package
from .review_scheduler import STRATEGY_MESSAGES, ReviewScheduler, now_ms

__all__ = ["ReviewScheduler", "STRATEGY_MESSAGES", "now_ms"]
