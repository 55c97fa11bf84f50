"""Reward redemption and voucher pin models."""

import enum

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    Enum as SAEnum,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from ..core.database import Base
from ..utils.datetime import utcnow


class RewardType(str, enum.Enum):
    """Voucher denominations; ``unit_cost`` is the point price of one voucher."""

    FIVE_THOUSAND = "FIVE_THOUSAND"
    TEN_THOUSAND = "TEN_THOUSAND"
    THIRTY_THOUSAND = "THIRTY_THOUSAND"

    @property
    def unit_cost(self) -> int:
        return _UNIT_COSTS[self]


_UNIT_COSTS = {
    RewardType.FIVE_THOUSAND: 5000,
    RewardType.TEN_THOUSAND: 10000,
    RewardType.THIRTY_THOUSAND: 30000,
}


class RewardStatus(str, enum.Enum):
    """Possible redemption states."""

    REQUESTED = "REQUESTED"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class Reward(Base):
    """A redemption converting points into one or more vouchers."""

    __tablename__ = "rewards"
    __table_args__ = (
        CheckConstraint("points_used > 0", name="rewards_points_used_positive"),
        CheckConstraint("quantity >= 1 AND quantity <= 50", name="rewards_quantity_range"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False)
    points_used = Column(Integer, nullable=False)
    reward_type = Column(SAEnum(RewardType, name="reward_type"), nullable=False)
    quantity = Column(Integer, nullable=False)
    status = Column(SAEnum(RewardStatus, name="reward_status"), nullable=False, default=RewardStatus.REQUESTED)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    processed_at = Column(DateTime)

    user = relationship("User", back_populates="rewards")
    pins = relationship(
        "RewardPin",
        back_populates="reward",
        cascade="all, delete-orphan",
        order_by="RewardPin.id",
    )

    def approve(self) -> None:
        self._finish(RewardStatus.APPROVED)

    def reject(self) -> None:
        self._finish(RewardStatus.REJECTED)

    def _finish(self, target: RewardStatus) -> None:
        if self.status not in (None, RewardStatus.REQUESTED):
            raise ValueError(f"Cannot move reward from {self.status.value} to {target.value}")
        self.status = target
        self.processed_at = utcnow()


class RewardPin(Base):
    """Voucher code issued by a reward; has no lifecycle of its own."""

    __tablename__ = "reward_pins"
    __table_args__ = (
        UniqueConstraint("pin_number", name="reward_pins_pin_number_unique"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    reward_id = Column(Integer, ForeignKey("rewards.id", ondelete="CASCADE"), nullable=False)
    pin_number = Column(String(19), nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    reward = relationship("Reward", back_populates="pins")
