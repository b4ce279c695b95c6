"""
test_availability.py
--------------------
Tests for the availability engine: when a dismissed entry comes back
and how remaining and elapsed time are rendered.
"""
import pytest
from datetime import datetime, timedelta, timezone

from interne.core.exceptions import ValidationError
from interne.database.models import Interval
from interne.engine.availability import (
    Availability,
    availability,
    coerce_instant,
    format_last_seen,
    format_remaining,
)


NOW = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


class TestAvailability:
    """Tests for availability()."""

    def test_never_dismissed_is_available(self):
        result = availability(3, Interval.DAYS, None, NOW)
        assert result == Availability(is_available=True, remaining=None)

    def test_boundary_is_inclusive(self):
        dismissed = NOW - timedelta(days=3)
        result = availability(3, Interval.DAYS, dismissed, NOW)
        assert result.is_available is True
        assert result.remaining is None

    def test_just_before_boundary_is_waiting(self):
        dismissed = NOW - timedelta(days=3) + timedelta(seconds=1)
        result = availability(3, Interval.DAYS, dismissed, NOW)
        assert result.is_available is False
        assert result.remaining.startswith("in ")

    def test_three_day_entry_dismissed_two_days_ago(self):
        result = availability(3, "days", NOW - timedelta(days=2), NOW)
        assert result.is_available is False
        assert result.remaining == "in 1 day"

    def test_three_day_entry_dismissed_three_days_ago(self):
        result = availability(3, "days", NOW - timedelta(days=3), NOW)
        assert result.is_available is True
        assert result.remaining is None

    @pytest.mark.parametrize(
        "interval,span",
        [
            (Interval.HOURS, timedelta(hours=2)),
            (Interval.DAYS, timedelta(days=2)),
            (Interval.WEEKS, timedelta(weeks=2)),
            (Interval.MONTHS, timedelta(days=60)),
            (Interval.YEARS, timedelta(days=730)),
        ],
    )
    def test_interval_spans(self, interval, span):
        assert availability(2, interval, NOW - span, NOW).is_available is True
        assert availability(2, interval, NOW - span + timedelta(minutes=1), NOW).is_available is False

    def test_accepts_iso_text(self):
        dismissed = (NOW - timedelta(hours=1)).isoformat()
        result = availability(2, "hours", dismissed, NOW)
        assert result.is_available is False
        assert result.remaining == "in 1 hour"

    def test_malformed_timestamp_treated_as_now(self):
        result = availability(1, "hours", "garbage", NOW)
        assert result.is_available is False
        assert result.remaining == "in 1 hour"

    def test_unknown_interval_raises(self):
        with pytest.raises(ValidationError):
            availability(1, "fortnights", NOW - timedelta(days=1), NOW)

    def test_now_must_be_datetime(self):
        with pytest.raises(TypeError):
            availability(1, "days", None, "yesterday")


class TestFormatRemaining:
    """Singular/plural rendering of the wait."""

    @pytest.mark.parametrize(
        "diff,expected",
        [
            (timedelta(days=1), "in 1 day"),
            (timedelta(days=2), "in 2 days"),
            (timedelta(days=2, hours=23), "in 2 days"),
            (timedelta(hours=1), "in 1 hour"),
            (timedelta(hours=5), "in 5 hours"),
            (timedelta(minutes=1), "in 1 minute"),
            (timedelta(minutes=45), "in 45 minutes"),
            (timedelta(seconds=30), "in 0 minutes"),
        ],
    )
    def test_units(self, diff, expected):
        assert format_remaining(diff) == expected


class TestFormatLastSeen:
    """Elapsed-time rendering thresholds."""

    @pytest.mark.parametrize(
        "elapsed,expected",
        [
            (timedelta(0), "just now"),
            (timedelta(seconds=59), "just now"),
            (timedelta(minutes=1), "1 minute ago"),
            (timedelta(minutes=45), "45 minutes ago"),
            (timedelta(hours=1), "1 hour ago"),
            (timedelta(hours=5), "5 hours ago"),
            (timedelta(days=1), "1 day ago"),
            (timedelta(days=7), "7 days ago"),
            (timedelta(days=8), "1 week ago"),
            (timedelta(weeks=3), "3 weeks ago"),
            (timedelta(days=30), "4 weeks ago"),
            (timedelta(days=31), "1 month ago"),
            (timedelta(days=90), "3 months ago"),
            (timedelta(days=365), "12 months ago"),
            (timedelta(days=400), "1 year ago"),
            (timedelta(days=800), "2 years ago"),
        ],
    )
    def test_thresholds(self, elapsed, expected):
        assert format_last_seen(NOW - elapsed, NOW) == expected

    def test_never_visited(self):
        assert format_last_seen(None, NOW) is None

    def test_future_dismissal_reads_just_now(self):
        assert format_last_seen(NOW + timedelta(hours=2), NOW) == "just now"

    def test_malformed_timestamp_reads_just_now(self):
        assert format_last_seen("not-a-date", NOW) == "just now"


class TestCoerceInstant:
    def test_none(self):
        assert coerce_instant(None, NOW) is None

    def test_unparseable_becomes_now(self):
        assert coerce_instant("???", NOW) == NOW

    def test_naive_datetime_taken_as_utc(self):
        assert coerce_instant(datetime(2024, 4, 30, 12, 0), NOW) == NOW - timedelta(days=1)
