"""
Core Models
------------

Central models for the Interne database.

Models:
    - Entry: A saved link with its review schedule (the primary model)
    - Visit: Append-only log of entry visits

An entry's creator (user_id) and its optional collection (collection_id)
are independent relations: putting an entry in a shared collection makes
it visible to the members but does not change who owns it.
"""
from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import CheckConstraint, Enum as SQLEnum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .associations import entry_tags
from .base import Base, IsoDateTime, TimestampMixin, utc_now
from .enums import Interval

if TYPE_CHECKING:
    from .entities import Collection, Tag, User


# ----- Entry Model -----
class Entry(Base, TimestampMixin):
    """
    A saved link that hides itself for `duration` `interval`s after each visit.

    Attributes:
        id: Primary key
        user_id: Creator and owner of the entry
        collection_id: Shared collection the entry is placed in (optional)
        url: Link target (http or https)
        title: Display title
        description: Optional free text
        duration: Positive number of interval units
        interval: Unit of the duration (hours/days/weeks/months/years)
        dismissed_at: Instant of the last visit; None means never visited
        created_at: When this record was created
        updated_at: When this record was last updated

    Relationships:
        owner: Many-to-one with User
        collection: Many-to-one with Collection (optional)
        visits: One-to-many with Visit
        tags: Many-to-many with Tag
    """

    __tablename__ = "entries"
    __table_args__ = (
        CheckConstraint("url != ''", name="ck_entry_non_empty_url"),
        CheckConstraint("title != ''", name="ck_entry_non_empty_title"),
        CheckConstraint("duration >= 1", name="ck_entry_positive_duration"),
    )

    # ---- Primary fields ----
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    collection_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("collections.id", ondelete="CASCADE"), nullable=True, index=True
    )
    url: Mapped[str] = mapped_column(String(2048), nullable=False)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    duration: Mapped[int] = mapped_column(Integer, nullable=False)
    interval: Mapped[Interval] = mapped_column(
        SQLEnum(
            Interval,
            name="interval",
            values_callable=lambda x: [e.value for e in x],
            validate_strings=True,
            create_constraint=True,
        ),
        nullable=False,
    )
    dismissed_at: Mapped[Optional[datetime]] = mapped_column(
        IsoDateTime(), nullable=True, index=True
    )

    # ---- Relationships ----
    owner: Mapped["User"] = relationship("User", back_populates="entries")
    collection: Mapped[Optional["Collection"]] = relationship(
        "Collection", back_populates="entries"
    )
    visits: Mapped[List["Visit"]] = relationship(
        "Visit",
        back_populates="entry",
        cascade="all, delete",
        passive_deletes=True,
    )
    tags: Mapped[List["Tag"]] = relationship(
        "Tag", secondary=entry_tags, back_populates="entries"
    )

    # ---- Computed properties ----
    @property
    def visit_count(self) -> int:
        """Total number of recorded visits."""
        return len(self.visits)

    @property
    def tag_names(self) -> List[str]:
        """Tag names sorted alphabetically."""
        return sorted(tag.name for tag in self.tags)

    @property
    def is_shared(self) -> bool:
        return self.collection_id is not None

    def __repr__(self) -> str:
        return f"<Entry(id={self.id}, title='{self.title}', user_id={self.user_id})>"

    def __str__(self) -> str:
        return self.title


# ----- Visit Model -----
class Visit(Base):
    """
    One visit of an entry by a user.

    Rows are only ever inserted; the visit count of an entry is the number
    of rows pointing at it.

    Attributes:
        id: Primary key
        entry_id: Visited entry
        user_id: Who visited
        visited_at: Instant of the visit
    """

    __tablename__ = "visits"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    entry_id: Mapped[int] = mapped_column(
        ForeignKey("entries.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    visited_at: Mapped[datetime] = mapped_column(
        IsoDateTime(), nullable=False, default=utc_now
    )

    entry: Mapped["Entry"] = relationship("Entry", back_populates="visits")

    def __repr__(self) -> str:
        return f"<Visit(id={self.id}, entry_id={self.entry_id}, user_id={self.user_id})>"
