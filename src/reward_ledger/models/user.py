"""Balance holder model."""

from sqlalchemy import CheckConstraint, Column, DateTime, Integer
from sqlalchemy.orm import relationship

from ..core.database import Base
from ..utils.datetime import utcnow


class User(Base):
    """User record as far as the ledger is concerned: identity plus balance."""

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("points >= 0", name="users_points_non_negative"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    points = Column(Integer, nullable=False, default=0)
    version = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    history = relationship("PointHistory", back_populates="user")
    rewards = relationship("Reward", back_populates="user")

    # Every balance write is guarded by "WHERE version = <loaded version>".
    __mapper_args__ = {"version_id_col": version}

    def has_enough_points(self, required: int) -> bool:
        return self.points >= required

    def use_points(self, amount: int) -> None:
        if amount > self.points:
            raise ValueError(f"cannot debit {amount} points from balance {self.points}")
        self.points -= amount

    def add_points(self, amount: int) -> None:
        self.points += amount
