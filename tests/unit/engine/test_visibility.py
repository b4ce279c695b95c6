"""Tests for the entry listing aggregator."""
import pytest
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

from interne.core.exceptions import ValidationError
from interne.engine.visibility import EntryFilter, EntryView, build_entry_views


NOW = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


def row(entry_id, dismissed_at=None, visits=0, duration=1, interval="days"):
    entry = SimpleNamespace(
        id=entry_id,
        url=f"https://example.com/{entry_id}",
        title=f"Entry {entry_id}",
        description=None,
        duration=duration,
        interval=interval,
        dismissed_at=dismissed_at,
    )
    return entry, visits


@pytest.fixture
def rows():
    return [
        row(1, NOW - timedelta(days=5), visits=2),        # ready
        row(2, NOW - timedelta(hours=2), visits=1),       # waiting
        row(3),                                            # never visited
        row(4, NOW - timedelta(hours=1), visits=1),       # waiting, most recent
    ]


class TestEntryFilter:
    def test_parse_default(self):
        assert EntryFilter.parse(None) is EntryFilter.READY

    def test_parse_case_insensitive(self):
        assert EntryFilter.parse(" Waiting ") is EntryFilter.WAITING

    def test_parse_unknown(self):
        with pytest.raises(ValidationError, match="Unknown entry filter"):
            EntryFilter.parse("later")

    def test_choices(self):
        assert EntryFilter.choices() == ["ready", "waiting", "unseen", "all"]


class TestBuildEntryViews:
    def test_ready(self, rows):
        views = build_entry_views(rows, EntryFilter.READY, NOW)
        assert [v.id for v in views] == [3, 1]
        assert all(v.is_available for v in views)

    def test_waiting(self, rows):
        views = build_entry_views(rows, "waiting", NOW)
        assert [v.id for v in views] == [4, 2]
        assert all(v.remaining.startswith("in ") for v in views)

    def test_unseen(self, rows):
        views = build_entry_views(rows, "unseen", NOW)
        assert [v.id for v in views] == [3]

    def test_all_ordering(self, rows):
        views = build_entry_views(rows, "all", NOW)
        assert [v.id for v in views] == [3, 4, 2, 1]

    def test_ties_broken_by_id(self):
        same = NOW - timedelta(days=2)
        views = build_entry_views([row(9, same), row(5, same), row(7)], "all", NOW)
        assert [v.id for v in views] == [7, 5, 9]

    def test_view_fields(self):
        views = build_entry_views([row(1, NOW - timedelta(days=2), visits=3, duration=3)], "all", NOW)
        assert views == [
            EntryView(
                id=1,
                url="https://example.com/1",
                title="Entry 1",
                description=None,
                last_seen="2 days ago",
                remaining="in 1 day",
                is_available=False,
                visit_count=3,
            )
        ]

    def test_never_visited_view(self):
        view = build_entry_views([row(1)], "all", NOW)[0]
        assert view.last_seen is None
        assert view.remaining is None
        assert view.is_available is True

    def test_malformed_timestamp_sorts_as_now(self):
        views = build_entry_views(
            [row(1, NOW - timedelta(hours=3)), row(2, "bogus")], "all", NOW
        )
        assert [v.id for v in views] == [2, 1]
        assert views[0].last_seen == "just now"

    def test_empty_input(self):
        assert build_entry_views([], "ready", NOW) == []
