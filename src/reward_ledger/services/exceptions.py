"""Typed failures raised by the ledger services."""

from __future__ import annotations


class LedgerError(Exception):
    """Base class for business rule failures.

    ``code`` is stable and machine-readable, ``detail`` is the human-readable
    message and ``status_code`` is what the HTTP boundary answers with.
    """

    code = "LEDGER_ERROR"
    status_code = 400

    def __init__(self, detail: str, status_code: int | None = None) -> None:
        super().__init__(detail)
        self.detail = detail
        if status_code is not None:
            self.status_code = status_code


class UserNotFound(LedgerError):
    code = "USER_NOT_FOUND"
    status_code = 404

    def __init__(self, user_id: int) -> None:
        super().__init__(f"User {user_id} not found")
        self.user_id = user_id


class InvalidRewardType(LedgerError):
    code = "INVALID_REWARD_TYPE"


class InvalidQuantity(LedgerError):
    code = "INVALID_QUANTITY"


class InvalidPointAmount(LedgerError):
    code = "INVALID_POINT_AMOUNT"


class InsufficientPoints(LedgerError):
    code = "INSUFFICIENT_POINTS"

    def __init__(self, current_points: int, required_points: int) -> None:
        super().__init__(
            f"Not enough points. Current: {current_points}, required: {required_points}."
        )
        self.current_points = current_points
        self.required_points = required_points

    @property
    def shortfall(self) -> int:
        return self.required_points - self.current_points


class RewardNotFound(LedgerError):
    code = "REWARD_NOT_FOUND"
    status_code = 404

    def __init__(self, reward_id: int) -> None:
        super().__init__(f"Reward {reward_id} not found")
        self.reward_id = reward_id


class Forbidden(LedgerError):
    code = "FORBIDDEN"
    status_code = 403


class PinAllocationExhausted(LedgerError):
    code = "PIN_ALLOCATION_EXHAUSTED"
    status_code = 503


class LedgerConflict(LedgerError):
    """Raised when concurrent writers kept winning the race for a balance."""

    code = "LEDGER_CONFLICT"
    status_code = 409
