"""SQLAlchemy models for the reward ledger."""

from .point_history import PointHistory, PointHistoryType
from .reward import Reward, RewardPin, RewardStatus, RewardType
from .user import User

__all__ = [
    "PointHistory",
    "PointHistoryType",
    "Reward",
    "RewardPin",
    "RewardStatus",
    "RewardType",
    "User",
]
