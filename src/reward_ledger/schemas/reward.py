"""Pydantic schemas for redemption workflows."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ..models import Reward, RewardStatus, RewardType


class RedemptionCreate(BaseModel):
    """Incoming payload for redeeming points.

    Both fields are optional at the schema level so the service can report
    missing values with its own error kinds.
    """

    model_config = ConfigDict(json_schema_extra={
        "example": {"reward_type": "TEN_THOUSAND", "quantity": 3}
    })

    reward_type: Optional[str] = Field(default=None, description="FIVE_THOUSAND, TEN_THOUSAND or THIRTY_THOUSAND.")
    quantity: Optional[int] = Field(default=None, description="Number of vouchers, 1 to 50.")


class RedemptionResult(BaseModel):
    """Confirmation returned by a redemption; lifecycle fields are not part of it."""

    id: int
    points_used: int
    reward_type: RewardType
    quantity: int
    pin_numbers: list[str]

    @classmethod
    def from_reward(cls, reward: Reward) -> "RedemptionResult":
        return cls(
            id=reward.id,
            points_used=reward.points_used,
            reward_type=reward.reward_type,
            quantity=reward.quantity,
            pin_numbers=[pin.pin_number for pin in reward.pins],
        )


class RewardView(BaseModel):
    """Full reward record for list and detail reads."""

    id: int
    points_used: int
    reward_type: RewardType
    quantity: int
    status: RewardStatus
    created_at: datetime
    processed_at: Optional[datetime] = None
    pin_numbers: list[str]

    @classmethod
    def from_reward(cls, reward: Reward) -> "RewardView":
        return cls(
            id=reward.id,
            points_used=reward.points_used,
            reward_type=reward.reward_type,
            quantity=reward.quantity,
            status=reward.status,
            created_at=reward.created_at,
            processed_at=reward.processed_at,
            pin_numbers=[pin.pin_number for pin in reward.pins],
        )
