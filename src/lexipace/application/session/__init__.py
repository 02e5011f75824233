# Application Session Package
from .coordinator import SessionCoordinator
from .streak import advance_streak, current_streak

__all__ = ["SessionCoordinator", "advance_streak", "current_streak"]
