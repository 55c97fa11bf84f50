"""Balance and history endpoints."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...schemas import BalanceSummary, HistoryEntry
from ...services import points_service
from ...services.exceptions import LedgerError
from ..deps import get_current_user_id, to_http_exception

router = APIRouter(prefix="/points", tags=["points"])


@router.get("", response_model=BalanceSummary, summary="Current balance and lifetime totals")
def get_points(
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> BalanceSummary:
    try:
        return points_service.get_balance_summary(db, user_id=user_id)
    except LedgerError as exc:
        raise to_http_exception(exc) from exc


@router.get("/history", response_model=List[HistoryEntry], summary="Ledger entries, newest first")
def get_point_history(
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> List[HistoryEntry]:
    try:
        return list(points_service.get_history(db, user_id=user_id))
    except LedgerError as exc:
        raise to_http_exception(exc) from exc
