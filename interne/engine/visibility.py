#!/usr/bin/env python3
"""
visibility.py
-------------
Builds the entry listings shown to a user.

Input is the candidate set loaded by the store: (entry, visit_count)
pairs for every entry the user may see. Each row gets its availability
and last-seen text computed against one `now`, is filtered, then
ordered most recently dismissed first with never-dismissed entries at
the top. Ties are broken by entry id.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Iterable, List, Optional, Protocol, Tuple, Union

from interne.core.exceptions import ValidationError
from interne.engine.availability import availability, coerce_instant, format_last_seen


class EntryFilter(str, Enum):
    """Listing selectors."""

    READY = "ready"
    WAITING = "waiting"
    UNSEEN = "unseen"
    ALL = "all"

    @classmethod
    def choices(cls) -> List[str]:
        return [f.value for f in cls]

    @classmethod
    def parse(cls, value: Union["EntryFilter", str, None]) -> "EntryFilter":
        """
        Resolve a selector; None means the default "ready" listing.

        Raises:
            ValidationError: If the selector is unknown
        """
        if value is None:
            return cls.READY
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValidationError(f"Unknown entry filter: {value!r}")


class ScheduledEntry(Protocol):
    id: int
    url: str
    title: str
    description: Optional[str]
    duration: int
    interval: Any
    dismissed_at: Any


@dataclass(frozen=True)
class EntryView:
    """
    Display record for one entry.

    Attributes:
        id: Entry id
        url: Link target
        title: Display title
        description: Optional free text
        last_seen: "3 days ago" style text, None if never visited
        remaining: "in 2 hours" style text, None when available
        is_available: Whether the entry is ready to revisit
        visit_count: Total number of visits
    """

    id: int
    url: str
    title: str
    description: Optional[str]
    last_seen: Optional[str]
    remaining: Optional[str]
    is_available: bool
    visit_count: int


def _keep(view: EntryView, entry_filter: EntryFilter) -> bool:
    if entry_filter is EntryFilter.READY:
        return view.is_available
    if entry_filter is EntryFilter.WAITING:
        return not view.is_available
    if entry_filter is EntryFilter.UNSEEN:
        return view.visit_count == 0
    return True


def build_entry_views(
    rows: Iterable[Tuple[ScheduledEntry, int]],
    entry_filter: Union[EntryFilter, str, None],
    now: datetime,
) -> List[EntryView]:
    """
    Compute, filter and order entry views for one listing.

    Args:
        rows: (entry, visit_count) pairs; order does not matter
        entry_filter: ready, waiting, unseen or all
        now: The single instant every row is evaluated against

    Returns:
        Views ordered by dismissed_at descending, never-dismissed first
    """
    selector = EntryFilter.parse(entry_filter)

    ranked = []
    for entry, visit_count in rows:
        dismissed = coerce_instant(entry.dismissed_at, now)
        state = availability(entry.duration, entry.interval, dismissed, now)
        view = EntryView(
            id=entry.id,
            url=entry.url,
            title=entry.title,
            description=entry.description,
            last_seen=format_last_seen(dismissed, now),
            remaining=state.remaining,
            is_available=state.is_available,
            visit_count=int(visit_count or 0),
        )
        if not _keep(view, selector):
            continue
        if dismissed is None:
            key = (0, 0.0, entry.id)
        else:
            key = (1, -dismissed.timestamp(), entry.id)
        ranked.append((key, view))

    ranked.sort(key=lambda item: item[0])
    return [view for _, view in ranked]
