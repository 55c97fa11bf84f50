"""Balance reads, upstream credits and ledger reconciliation."""

from __future__ import annotations

import logging
from typing import Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from ..core.config import Settings, get_settings
from ..models import PointHistoryType, User
from ..schemas import BalanceSummary, HistoryEntry
from .exceptions import InvalidPointAmount, LedgerConflict
from .ledger_store import LedgerStore

logger = logging.getLogger(__name__)


def _summarize(store: LedgerStore, user: User) -> BalanceSummary:
    total_earned = store.sum_history(user.id, PointHistoryType.EARNED)
    total_used = store.sum_history(user.id, PointHistoryType.USED)
    return BalanceSummary(
        current_points=user.points,
        total_earned=total_earned,
        # USED entries are stored as magnitudes; abs() keeps the contract if that ever changes.
        total_used=abs(total_used),
    )


def get_balance_summary(session: Session, *, user_id: int) -> BalanceSummary:
    """Return the user's current balance with lifetime earned and used totals."""

    store = LedgerStore(session)
    user = store.get_user(user_id)
    summary = _summarize(store, user)
    logger.debug(
        "balance for user %s: current=%s earned=%s used=%s",
        user_id,
        summary.current_points,
        summary.total_earned,
        summary.total_used,
    )
    return summary


def get_history(session: Session, *, user_id: int) -> Sequence[HistoryEntry]:
    """Return the user's ledger entries, newest first."""

    store = LedgerStore(session)
    user = store.get_user(user_id)
    entries = [HistoryEntry.model_validate(entry) for entry in store.list_history(user.id)]
    logger.debug("history for user %s: %s entries", user_id, len(entries))
    return entries


def earn_points(
    session: Session,
    *,
    user_id: int,
    points: int,
    settings: Settings | None = None,
) -> BalanceSummary:
    """Apply an add-credit instruction from the activity system.

    The caller has already decided the user earned ``points``; this only
    records it, keeping the balance and the ledger in step.
    """

    if isinstance(points, bool) or not isinstance(points, int) or points <= 0:
        raise InvalidPointAmount("Earned points must be a positive whole number.")

    settings = settings or get_settings()
    store = LedgerStore(session)

    for attempt in range(1, settings.redeem_max_attempts + 1):
        try:
            user = store.get_user(user_id, for_update=True)
            user.add_points(points)
            store.append_history(user, points, PointHistoryType.EARNED)
            store.save_user(user)
            session.commit()
        except StaleDataError:
            session.rollback()
            logger.warning("balance for user %s changed concurrently (attempt %s)", user_id, attempt)
            continue
        except Exception:
            session.rollback()
            raise

        logger.info("credited %s points to user %s", points, user_id)
        return _summarize(store, user)

    raise LedgerConflict(
        f"Credit for user {user_id} kept conflicting with concurrent updates; try again."
    )


def audit_balances(session: Session) -> dict[str, object]:
    """Compare every balance with its ledger.

    Returns summary statistics useful for logging/testing.
    """

    store = LedgerStore(session)
    summary: dict[str, object] = {
        "users_checked": 0,
        "mismatched_users": [],
    }

    users = session.execute(select(User).order_by(User.id)).scalars().all()
    for user in users:
        earned = store.sum_history(user.id, PointHistoryType.EARNED)
        used = store.sum_history(user.id, PointHistoryType.USED)
        expected = earned - used
        if user.points != expected:
            logger.warning(
                "ledger mismatch for user %s: balance=%s ledger=%s",
                user.id,
                user.points,
                expected,
            )
            summary["mismatched_users"].append(user.id)
        summary["users_checked"] += 1

    return summary
