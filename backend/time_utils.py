"""
Time utilities for the task list application.

This module provides a single source of truth for time operations so that
session expiry is computed and compared the same way everywhere.
"""

from datetime import datetime, timezone, timedelta
from typing import Optional


def utc_now() -> datetime:
    """
    Get current UTC time.
    Single source of truth for "now" throughout the application.

    Returns:
        timezone-aware datetime in UTC
    """
    return datetime.now(timezone.utc)


def expiry_from_now(days: int) -> datetime:
    """
    Calculate the expiry timestamp for something that lives `days` days.

    Args:
        days: Lifetime in days

    Returns:
        timezone-aware datetime in UTC
    """
    return utc_now() + timedelta(days=days)


def is_expired(expires_at: Optional[datetime]) -> bool:
    """
    Check if an expiry timestamp lies in the past.

    SQLite hands back naive datetimes even for timezone-aware columns, so
    naive values are treated as UTC.

    Args:
        expires_at: Expiry timestamp, naive (UTC) or timezone-aware

    Returns:
        True if expired, False if still valid or no expiry is set
    """
    if expires_at is None:
        return False
    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=timezone.utc)
    return expires_at <= utc_now()
