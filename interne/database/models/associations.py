"""
Association Tables
-------------------

Many-to-many relationship tables for the Interne database.

- entry_tags: Entries with tags. The composite primary key makes a
  duplicate (entry, tag) link impossible.

Collection membership carries a joined_at timestamp and is therefore a
mapped class (CollectionMember in entities.py), not a bare table.
"""
# --- Third party imports ---
from sqlalchemy import Column, ForeignKey, Integer, Table

# --- Local imports ---
from .base import Base

entry_tags = Table(
    "entry_tags",
    Base.metadata,
    Column(
        "entry_id",
        Integer,
        ForeignKey("entries.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "tag_id",
        Integer,
        ForeignKey("tags.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    ),
)
