"""Point history model capturing balance movements."""

import enum

from sqlalchemy import CheckConstraint, Column, DateTime, Enum, ForeignKey, Index, Integer
from sqlalchemy.orm import relationship

from ..core.database import Base
from ..utils.datetime import utcnow


class PointHistoryType(str, enum.Enum):
    """Ledger event classification."""

    EARNED = "EARNED"
    USED = "USED"


class PointHistory(Base):
    """Immutable ledger of point movements for each user.

    ``points`` is always a positive magnitude; ``type`` carries the direction.
    """

    __tablename__ = "point_history"
    __table_args__ = (
        CheckConstraint("points > 0", name="point_history_points_positive"),
        Index("ix_point_history_user_created", "user_id", "created_at"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False)
    points = Column(Integer, nullable=False)
    type = Column(Enum(PointHistoryType, name="point_history_type"), nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    user = relationship("User", back_populates="history")
