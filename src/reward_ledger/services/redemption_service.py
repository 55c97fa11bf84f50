"""Domain logic for point redemptions."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from ..core.config import Settings, get_settings
from ..models import PointHistoryType, Reward, RewardPin, RewardStatus, RewardType
from ..schemas import RedemptionResult, RewardView
from .exceptions import (
    Forbidden,
    InsufficientPoints,
    InvalidQuantity,
    InvalidRewardType,
    LedgerConflict,
    PinAllocationExhausted,
    RewardNotFound,
)
from .ledger_store import LedgerStore
from .pin_allocator import PinAllocator

logger = logging.getLogger(__name__)

_SUPPORTED_TYPES = ", ".join(member.value for member in RewardType)


def parse_reward_type(code: Optional[str]) -> RewardType:
    if code is not None and not isinstance(code, str):
        raise InvalidRewardType("Reward type must be text.")
    if code is None or not code.strip():
        raise InvalidRewardType("Reward type is required.")
    try:
        return RewardType(code.strip().upper())
    except ValueError as exc:
        raise InvalidRewardType(f"Unsupported reward type. ({_SUPPORTED_TYPES})") from exc


def validate_quantity(quantity: Optional[int], limit: int = 50) -> int:
    if quantity is None:
        raise InvalidQuantity("Quantity is required.")
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise InvalidQuantity("Quantity must be a whole number.")
    if quantity <= 0:
        raise InvalidQuantity("Quantity must be at least 1.")
    if quantity > limit:
        raise InvalidQuantity(f"At most {limit} vouchers can be redeemed at once.")
    return quantity


def _is_pin_conflict(exc: IntegrityError) -> bool:
    return "pin_number" in str(exc.orig)


def _redeem_once(
    store: LedgerStore,
    allocator: PinAllocator,
    *,
    user_id: int,
    reward_type: RewardType,
    quantity: int,
) -> tuple[Reward, int]:
    total_cost = reward_type.unit_cost * quantity

    user = store.get_user(user_id, for_update=True)
    if not user.has_enough_points(total_cost):
        raise InsufficientPoints(user.points, total_cost)

    user.use_points(total_cost)
    store.append_history(user, total_cost, PointHistoryType.USED)

    reward = Reward(
        user_id=user.id,
        points_used=total_cost,
        reward_type=reward_type,
        quantity=quantity,
        status=RewardStatus.REQUESTED,
    )
    reward.pins = [RewardPin(pin_number=pin) for pin in allocator.allocate(quantity)]
    # Nothing reviews redemptions yet, so approval is immediate.
    reward.approve()

    store.save_user(user)
    store.add_reward(reward)
    return reward, user.points


def redeem(
    session: Session,
    *,
    user_id: int,
    reward_type: Optional[str],
    quantity: Optional[int],
    settings: Settings | None = None,
) -> tuple[RedemptionResult, int]:
    """Convert points into vouchers and return the confirmation with the remaining balance.

    The debit, its ledger entry, the reward and its pins are committed together.
    A lost race on the user's balance version or on a pin number rolls the
    whole unit back and runs it again against fresh state. Each kind of race
    has its own cap: stale balances end in ``LedgerConflict``, pins taken at
    commit end in ``PinAllocationExhausted``.
    """

    settings = settings or get_settings()
    parsed_type = parse_reward_type(reward_type)
    quantity = validate_quantity(quantity, settings.max_quantity_per_redemption)

    store = LedgerStore(session)
    allocator = PinAllocator(store, max_attempts=settings.pin_max_attempts)

    stale_conflicts = 0
    pin_conflicts = 0
    while True:
        try:
            reward, remaining = _redeem_once(
                store,
                allocator,
                user_id=user_id,
                reward_type=parsed_type,
                quantity=quantity,
            )
            session.commit()
        except StaleDataError:
            session.rollback()
            stale_conflicts += 1
            logger.warning("balance for user %s changed concurrently (attempt %s)", user_id, stale_conflicts)
            if stale_conflicts >= settings.redeem_max_attempts:
                raise LedgerConflict(
                    f"Redemption for user {user_id} kept conflicting with concurrent updates; try again."
                )
            continue
        except IntegrityError as exc:
            session.rollback()
            if not _is_pin_conflict(exc):
                raise
            pin_conflicts += 1
            logger.warning("pin number taken at commit for user %s (attempt %s)", user_id, pin_conflicts)
            if pin_conflicts >= settings.pin_max_attempts:
                logger.error("pin allocation for user %s gave up at commit", user_id)
                raise PinAllocationExhausted(
                    f"Could not store unique voucher codes after {pin_conflicts} attempts."
                )
            continue
        except Exception:
            session.rollback()
            raise

        logger.info(
            "user %s redeemed %s x %s for %s points (reward %s)",
            user_id,
            quantity,
            parsed_type.value,
            reward.points_used,
            reward.id,
        )
        return RedemptionResult.from_reward(reward), remaining


def list_rewards(session: Session, *, user_id: int) -> Sequence[RewardView]:
    """Return every reward owned by the user, oldest first."""

    rewards = LedgerStore(session).list_rewards(user_id)
    return [RewardView.from_reward(reward) for reward in rewards]


def get_reward(session: Session, *, user_id: int, reward_id: int) -> RewardView:
    """Return a single reward, readable only by its owner."""

    reward = LedgerStore(session).get_reward(reward_id)
    if reward is None:
        raise RewardNotFound(reward_id)
    if reward.user_id != user_id:
        raise Forbidden("You do not have access to this reward.")
    return RewardView.from_reward(reward)
