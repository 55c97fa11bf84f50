"""Voucher code generation."""

from __future__ import annotations

import logging
import re
import secrets
from typing import Callable

from .exceptions import PinAllocationExhausted
from .ledger_store import LedgerStore

logger = logging.getLogger(__name__)

PIN_GROUPS = 4
PIN_PATTERN = re.compile(r"^[1-9]\d{3}(?:-[1-9]\d{3}){3}$")


def generate_pin(randbelow: Callable[[int], int] = secrets.randbelow) -> str:
    """Return a code shaped ``DDDD-DDDD-DDDD-DDDD``, each group in 1000..9999."""

    return "-".join(str(1000 + randbelow(9000)) for _ in range(PIN_GROUPS))


class PinAllocator:
    """Hands out codes that are not issued yet, checked against the store."""

    def __init__(
        self,
        store: LedgerStore,
        *,
        max_attempts: int = 5,
        generator: Callable[[], str] = generate_pin,
    ) -> None:
        self.store = store
        self.max_attempts = max_attempts
        self.generator = generator

    def allocate(self, count: int) -> list[str]:
        allocated: list[str] = []
        taken: set[str] = set()
        for _ in range(count):
            pin = self._next_unique(taken)
            taken.add(pin)
            allocated.append(pin)
        return allocated

    def _next_unique(self, taken: set[str]) -> str:
        for attempt in range(1, self.max_attempts + 1):
            candidate = self.generator()
            if candidate not in taken and not self.store.existing_pins([candidate]):
                return candidate
            logger.warning("pin collision on attempt %s, regenerating", attempt)

        logger.error("pin allocation gave up after %s attempts", self.max_attempts)
        raise PinAllocationExhausted(
            f"Could not allocate a unique voucher code after {self.max_attempts} attempts."
        )
