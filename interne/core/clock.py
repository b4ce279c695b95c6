#!/usr/bin/env python3
"""
clock.py
--------------------
Source of the current instant.

Anything that needs "now" takes a Clock and reads it once per
operation, so a whole listing is computed against a single instant and
tests can pin time with FixedClock.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Protocol


class Clock(Protocol):
    """Protocol for clocks."""

    def now(self) -> datetime:
        """Return the current instant as an aware UTC datetime."""
        ...


class SystemClock:
    """Wall-clock time in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """
    Clock frozen at a given instant.

    Naive instants are taken as UTC. advance() moves the clock forward,
    which is handy for walking an entry through its review interval.
    """

    def __init__(self, instant: datetime):
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)
        self.instant = instant.astimezone(timezone.utc)

    def now(self) -> datetime:
        return self.instant

    def advance(self, delta: timedelta) -> datetime:
        self.instant = self.instant + delta
        return self.instant


system_clock = SystemClock()
