"""Persistence operations the ledger services are written against."""

from __future__ import annotations

from typing import Iterable, Sequence

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from ..models import PointHistory, PointHistoryType, Reward, RewardPin, User
from .exceptions import UserNotFound


class LedgerStore:
    """Thin query layer over a SQLAlchemy session.

    The store never commits; the calling service owns the transaction.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_user(self, user_id: int, *, for_update: bool = False) -> User:
        stmt = select(User).where(User.id == user_id)
        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        user = self.session.execute(stmt).scalar_one_or_none()
        if user is None:
            raise UserNotFound(user_id)
        return user

    def save_user(self, user: User) -> None:
        self.session.add(user)
        self.session.flush()

    def append_history(self, user: User, points: int, entry_type: PointHistoryType) -> PointHistory:
        entry = PointHistory(user_id=user.id, points=points, type=entry_type)
        self.session.add(entry)
        return entry

    def sum_history(self, user_id: int, entry_type: PointHistoryType) -> int:
        stmt = select(func.coalesce(func.sum(PointHistory.points), 0)).where(
            PointHistory.user_id == user_id,
            PointHistory.type == entry_type,
        )
        return int(self.session.execute(stmt).scalar_one())

    def list_history(self, user_id: int) -> Sequence[PointHistory]:
        stmt = (
            select(PointHistory)
            .where(PointHistory.user_id == user_id)
            .order_by(PointHistory.created_at.desc(), PointHistory.id.desc())
        )
        return self.session.execute(stmt).scalars().all()

    def add_reward(self, reward: Reward) -> Reward:
        self.session.add(reward)
        self.session.flush()
        return reward

    def get_reward(self, reward_id: int) -> Reward | None:
        stmt = (
            select(Reward)
            .options(selectinload(Reward.pins))
            .where(Reward.id == reward_id)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def list_rewards(self, user_id: int) -> Sequence[Reward]:
        stmt = (
            select(Reward)
            .options(selectinload(Reward.pins))
            .where(Reward.user_id == user_id)
            .order_by(Reward.id)
        )
        return self.session.execute(stmt).scalars().all()

    def existing_pins(self, candidates: Iterable[str]) -> set[str]:
        """Return the subset of ``candidates`` that is already issued."""

        candidates = list(candidates)
        if not candidates:
            return set()
        stmt = select(RewardPin.pin_number).where(RewardPin.pin_number.in_(candidates))
        return set(self.session.execute(stmt).scalars().all())
