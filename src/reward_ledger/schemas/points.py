"""Pydantic schemas for balance and history reads."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from ..models import PointHistoryType


class BalanceSummary(BaseModel):
    """Current balance alongside lifetime totals."""

    current_points: int
    total_earned: int
    total_used: int = Field(..., ge=0, description="Always reported as a non-negative magnitude.")


class HistoryEntry(BaseModel):
    """One ledger entry as shown to its owner."""

    model_config = ConfigDict(from_attributes=True)

    points: int
    type: PointHistoryType
    created_at: datetime
