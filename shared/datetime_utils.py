"""
Date/time helpers — framework-agnostic.

All datetimes are timezone-aware UTC; the Mongo client is created with
tz_aware=True so stored expiries compare directly against utcnow().
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional


def utcnow() -> datetime:
    """Return the current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def expires_in(seconds: int, now: Optional[datetime] = None) -> datetime:
    """Return the UTC instant *seconds* after *now* (default: current time)."""
    return (now or utcnow()) + timedelta(seconds=seconds)

