"""
Enumeration Types
------------------

Enum classes for the Interne database models.

Enums:
    - Interval: Unit of an entry's review duration

Interval values are persisted as their lowercase string. The mapping is
strict in both directions: a value outside the five units is a
data-integrity problem, not something to coerce.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from datetime import timedelta
from enum import Enum
from typing import List, Union

# --- Local imports ---
from interne.core.exceptions import ValidationError


class Interval(str, Enum):
    """
    Enumeration of review interval units.

    Months and years are fixed-length approximations (30 and 365 days),
    not calendar arithmetic.
    """

    HOURS = "hours"
    DAYS = "days"
    WEEKS = "weeks"
    MONTHS = "months"
    YEARS = "years"

    @classmethod
    def choices(cls) -> List[str]:
        """Get all available interval choices."""
        return [interval.value for interval in cls]

    @classmethod
    def parse(cls, value: Union["Interval", str]) -> "Interval":
        """
        Resolve a persisted or submitted value to an Interval.

        Raises:
            ValidationError: If the value is not one of the five units
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise ValidationError(f"Unknown interval: {value!r}")

    def span(self, duration: int) -> timedelta:
        """Convert `duration` units of this interval into a concrete time span."""
        if self is Interval.HOURS:
            return timedelta(hours=duration)
        if self is Interval.DAYS:
            return timedelta(days=duration)
        if self is Interval.WEEKS:
            return timedelta(weeks=duration)
        if self is Interval.MONTHS:
            return timedelta(days=duration * 30)
        return timedelta(days=duration * 365)
