"""Request dependencies shared by the v1 routers."""

from __future__ import annotations

from typing import Optional

from fastapi import Header, HTTPException, status

from ..services.exceptions import LedgerError


def get_current_user_id(x_user_id: Optional[str] = Header(default=None)) -> int:
    """Resolve the caller's user id, already authenticated upstream."""

    if x_user_id is None or not x_user_id.strip().isdigit():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"code": "UNAUTHENTICATED", "message": "A valid X-User-Id header is required."},
        )
    return int(x_user_id.strip())


def to_http_exception(exc: LedgerError) -> HTTPException:
    return HTTPException(
        status_code=exc.status_code,
        detail={"code": exc.code, "message": exc.detail},
    )
