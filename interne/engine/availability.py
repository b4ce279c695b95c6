#!/usr/bin/env python3
"""
availability.py
---------------
Review scheduling for entries.

An entry that has never been visited is always available. Once visited,
it stays hidden until `duration` units of its interval have passed since
`dismissed_at`; the boundary is inclusive, so an entry becomes available
at exactly `dismissed_at + span`.

All functions take the current instant as an argument and never read
the clock themselves. A stored `dismissed_at` that cannot be parsed is
treated as `now` (just dismissed) instead of raising.

Functions:
    - availability: Whether an entry is visible and, if not, for how long
    - format_remaining: "in N days|hours|minutes"
    - format_last_seen: "N <unit>s ago" or "just now"
    - coerce_instant: Tolerant conversion of stored instants
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Optional, Union

from interne.core.validators import DataValidator
from interne.database.models.enums import Interval
from interne.engine.constants import DAYS_PER_MONTH, DAYS_PER_WEEK, DAYS_PER_YEAR

SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 3600
SECONDS_PER_DAY = 86400


@dataclass(frozen=True)
class Availability:
    """
    Result of an availability check.

    Attributes:
        is_available: True when the entry should be shown as ready
        remaining: Human readable wait ("in 3 days"); None when available
    """

    is_available: bool
    remaining: Optional[str] = None


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}" if count == 1 else f"{count} {unit}s"


def _as_utc(now: datetime) -> datetime:
    normalized = DataValidator.normalize_instant(now)
    if normalized is None:
        raise TypeError(f"now must be a datetime, got {type(now).__name__}")
    return normalized


def coerce_instant(value: Any, now: datetime) -> Optional[datetime]:
    """
    Turn a stored instant into an aware UTC datetime.

    Args:
        value: datetime, ISO 8601 text, or None
        now: Instant substituted when the value cannot be parsed

    Returns:
        None for None, otherwise an aware UTC datetime
    """
    if value is None:
        return None
    parsed = DataValidator.normalize_instant(value)
    return parsed if parsed is not None else _as_utc(now)


def format_remaining(diff: timedelta) -> str:
    """
    Render a positive wait using the largest whole unit among days, hours, minutes.

    Sub-minute waits render as "in 0 minutes".
    """
    seconds = max(int(diff.total_seconds()), 0)
    if seconds >= SECONDS_PER_DAY:
        return f"in {_plural(seconds // SECONDS_PER_DAY, 'day')}"
    if seconds >= SECONDS_PER_HOUR:
        return f"in {_plural(seconds // SECONDS_PER_HOUR, 'hour')}"
    return f"in {_plural(seconds // SECONDS_PER_MINUTE, 'minute')}"


def availability(
    duration: int,
    interval: Union[Interval, str],
    dismissed_at: Any,
    now: datetime,
) -> Availability:
    """
    Decide whether an entry is currently available.

    Args:
        duration: Positive number of interval units
        interval: Interval or its persisted string value
        dismissed_at: Instant of the last visit (datetime, ISO text or None)
        now: Current instant, read once by the caller

    Returns:
        Availability with a remaining string only when not available

    Raises:
        ValidationError: If interval is not a known unit
    """
    now = _as_utc(now)
    dismissed = coerce_instant(dismissed_at, now)
    if dismissed is None:
        return Availability(is_available=True)

    available_at = dismissed + Interval.parse(interval).span(duration)
    if now >= available_at:
        return Availability(is_available=True)
    return Availability(is_available=False, remaining=format_remaining(available_at - now))


def format_last_seen(dismissed_at: Any, now: datetime) -> Optional[str]:
    """
    Describe how long ago an entry was last visited.

    Picks the largest unit that applies, in the order years (more than
    365 days), months (more than 30), weeks (more than 7), days, hours,
    minutes. Anything under a minute, and clock skew into the future,
    reads "just now".

    Returns:
        None when the entry was never visited
    """
    now = _as_utc(now)
    dismissed = coerce_instant(dismissed_at, now)
    if dismissed is None:
        return None

    seconds = max(int((now - dismissed).total_seconds()), 0)
    days = seconds // SECONDS_PER_DAY

    if days > DAYS_PER_YEAR:
        return f"{_plural(days // DAYS_PER_YEAR, 'year')} ago"
    if days > DAYS_PER_MONTH:
        return f"{_plural(days // DAYS_PER_MONTH, 'month')} ago"
    if days > DAYS_PER_WEEK:
        return f"{_plural(days // DAYS_PER_WEEK, 'week')} ago"
    if days > 0:
        return f"{_plural(days, 'day')} ago"

    hours = seconds // SECONDS_PER_HOUR
    if hours > 0:
        return f"{_plural(hours, 'hour')} ago"

    minutes = seconds // SECONDS_PER_MINUTE
    if minutes > 0:
        return f"{_plural(minutes, 'minute')} ago"
    return "just now"
