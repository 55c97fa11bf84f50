"""Service layer exports."""

from . import (
	ledger_store,
	pin_allocator,
	points_service,
	redemption_service,
)

__all__ = [
	"ledger_store",
	"pin_allocator",
	"points_service",
	"redemption_service",
]
