"""Endpoints for reward redemptions."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...schemas import RedemptionCreate, RedemptionResult, RewardView
from ...services import redemption_service
from ...services.exceptions import LedgerError
from ..deps import get_current_user_id, to_http_exception

router = APIRouter(prefix="/rewards", tags=["rewards"])


@router.post(
    "",
    response_model=RedemptionResult,
    status_code=status.HTTP_201_CREATED,
    summary="Redeem points for vouchers",
    responses={
        201: {
            "description": "Redemption completed",
            "content": {
                "application/json": {
                    "example": {
                        "id": 42,
                        "points_used": 30000,
                        "reward_type": "TEN_THOUSAND",
                        "quantity": 3,
                        "pin_numbers": [
                            "4821-1937-6650-2048",
                            "9013-5572-1184-7305",
                            "3366-8120-4491-5907",
                        ],
                    }
                }
            },
        },
        400: {"description": "Invalid reward type, invalid quantity or insufficient points"},
        404: {"description": "User not found"},
    },
)
def redeem_points(
    payload: RedemptionCreate,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> RedemptionResult:
    """Redeem points for fixed-denomination vouchers.

    Example request body::

        {
            "reward_type": "TEN_THOUSAND",
            "quantity": 3
        }
    """

    try:
        result, _ = redemption_service.redeem(
            db,
            user_id=user_id,
            reward_type=payload.reward_type,
            quantity=payload.quantity,
        )
    except LedgerError as exc:
        raise to_http_exception(exc) from exc
    return result


@router.get("", response_model=List[RewardView], summary="List the caller's rewards")
def list_rewards(
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> List[RewardView]:
    return list(redemption_service.list_rewards(db, user_id=user_id))


@router.get(
    "/{reward_id}",
    response_model=RewardView,
    summary="Get one of the caller's rewards",
    responses={
        403: {"description": "Reward belongs to another user"},
        404: {"description": "Reward not found"},
    },
)
def get_reward(
    reward_id: int,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> RewardView:
    try:
        return redemption_service.get_reward(db, user_id=user_id, reward_id=reward_id)
    except LedgerError as exc:
        raise to_http_exception(exc) from exc
