"""
Recycle bin retention rules.

A soft-deleted record can be restored for 7 days. After that it is only
eligible for permanent removal.
"""

from datetime import datetime, timedelta

from core.models.recycle_bin import RecycleBinEntry

RETENTION = timedelta(days=7)


def is_eligible_for_restore(entry: RecycleBinEntry, now: datetime) -> bool:
    """Deleted no more than 7 days ago (the 7-day mark itself still counts)."""
    return now - entry.deleted_at <= RETENTION


def is_eligible_for_purge(entry: RecycleBinEntry, now: datetime) -> bool:
    """Deleted more than 7 days ago."""
    return now - entry.deleted_at > RETENTION


def days_remaining(entry: RecycleBinEntry, now: datetime) -> int:
    """Whole days left to restore, for the recycle bin list. Never negative."""
    days_passed = (now - entry.deleted_at) // timedelta(days=1)
    return max(0, RETENTION.days - days_passed)
