"""Public schema exports."""

from .points import BalanceSummary, HistoryEntry
from .reward import RedemptionCreate, RedemptionResult, RewardView

__all__ = [
	"BalanceSummary",
	"HistoryEntry",
	"RedemptionCreate",
	"RedemptionResult",
	"RewardView",
]
