"""
Database Models Package
------------------------

SQLAlchemy ORM models for the Interne database.

- base: Base class, IsoDateTime column type, timestamp mixin
- enums: Interval
- associations: entry_tags
- core: Entry, Visit
- entities: User, Collection, CollectionMember, Tag

Usage:
    from interne.database.models import Entry, Collection, Tag
"""
from .base import Base, IsoDateTime, TimestampMixin, utc_now
from .enums import Interval
from .associations import entry_tags
from .core import Entry, Visit
from .entities import Collection, CollectionMember, Tag, User, new_invite_code

__all__ = [
    # Base
    "Base",
    "IsoDateTime",
    "TimestampMixin",
    "utc_now",
    # Enums
    "Interval",
    # Association tables
    "entry_tags",
    # Core
    "Entry",
    "Visit",
    # Entities
    "User",
    "Collection",
    "CollectionMember",
    "Tag",
    "new_invite_code",
]
