"""Date-time helpers for ledger timestamps."""

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Return the current UTC time as a naive timestamp, matching the DateTime columns."""

    return datetime.now(timezone.utc).replace(tzinfo=None)
