"""
UTC datetime utilities for consistent timezone handling.

Token expiry is tracked as timezone-aware UTC. Use these helpers
instead of datetime.now() or datetime.utcnow().
"""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """
    Return the current UTC datetime with timezone info.

    Returns:
        Timezone-aware datetime in UTC
    """
    return datetime.now(UTC)
