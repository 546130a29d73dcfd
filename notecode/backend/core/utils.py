"""
Core Utilities.

Shared helpers used across the backend.
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """
    Return current UTC time as timezone-naive datetime.

    Every timestamp column (created_at, updated_at) stores naive UTC, and
    every comparison in the code assumes it.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)
