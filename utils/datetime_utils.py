"""Utilities for UTC timestamps and whole-day indices."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Optional, Union

UTC = timezone.utc
EPOCH = date(1970, 1, 1)


def utc_now() -> datetime:
    return datetime.now(UTC)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def epoch_seconds(dt: Optional[datetime] = None) -> int:
    """Return ``dt`` (default: now) as whole seconds since the Unix epoch."""

    value = ensure_utc(dt) if dt is not None else utc_now()
    return int(value.timestamp())


def day_index(value: Union[date, datetime]) -> int:
    """Convert a date or datetime to the number of whole UTC days since 1970-01-01."""

    if isinstance(value, datetime):
        value = ensure_utc(value).date()
    return (value - EPOCH).days


def today_index() -> int:
    return day_index(utc_now())


def date_of(day: int) -> date:
    # Out-of-range indices raise OverflowError; callers never handle it.
    return EPOCH + timedelta(days=day)


def weekday_of(day: int) -> int:
    """Monday=0 … Sunday=6."""
    return date_of(day).weekday()


def day_of_month(day: int) -> int:
    return date_of(day).day


def monday_of(day: int) -> int:
    return day - weekday_of(day)


__all__ = [
    "EPOCH",
    "UTC",
    "date_of",
    "day_index",
    "day_of_month",
    "ensure_utc",
    "epoch_seconds",
    "monday_of",
    "today_index",
    "utc_now",
    "weekday_of",
]
