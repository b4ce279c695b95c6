"""
Entity Models
--------------

Users, collections and tags.

Models:
    - User: Account authenticated by its invite code
    - Collection: Shared namespace of entries with one owner
    - CollectionMember: Non-owner membership of a collection
    - Tag: Lower-cased keyword attached to entries

The owner of a collection is never stored as a CollectionMember row;
ownership is Collection.owner_id alone.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import uuid
from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

# --- Third party imports ---
from sqlalchemy import CheckConstraint, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

# --- Local imports ---
from .associations import entry_tags
from .base import Base, IsoDateTime, TimestampMixin, utc_now

if TYPE_CHECKING:
    from .core import Entry


def new_invite_code() -> str:
    """Fresh random invite code."""
    return str(uuid.uuid4())


class User(Base, TimestampMixin):
    """
    An invited user.

    The invite code doubles as the login credential, so it is unique
    and never shown to other users.

    Attributes:
        id: Primary key
        name: Display name
        email: Optional email address (unique when present)
        invite_code: Secret bearer credential used to log in

    Relationships:
        entries: One-to-many with Entry (entries the user created)
        owned_collections: One-to-many with Collection
        memberships: One-to-many with CollectionMember
    """

    __tablename__ = "users"
    __table_args__ = (CheckConstraint("name != ''", name="ck_user_non_empty_name"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(255), unique=True, nullable=True)
    invite_code: Mapped[str] = mapped_column(
        String(64), unique=True, nullable=False, default=new_invite_code
    )

    entries: Mapped[List["Entry"]] = relationship(
        "Entry", back_populates="owner", passive_deletes=True
    )
    owned_collections: Mapped[List["Collection"]] = relationship(
        "Collection", back_populates="owner", passive_deletes=True
    )
    memberships: Mapped[List["CollectionMember"]] = relationship(
        "CollectionMember", back_populates="user", passive_deletes=True
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, name='{self.name}')>"

    def __str__(self) -> str:
        return self.name


class Collection(Base, TimestampMixin):
    """
    A shared set of entries.

    Anyone presenting the current invite code may join; only the owner
    may rename, delete, rotate the code or remove members.

    Attributes:
        id: Primary key
        owner_id: Owning user
        name: Display name
        invite_code: Secret code for joining (rotatable)

    Relationships:
        owner: Many-to-one with User
        members: One-to-many with CollectionMember
        entries: One-to-many with Entry (deleted with the collection)
    """

    __tablename__ = "collections"
    __table_args__ = (CheckConstraint("name != ''", name="ck_collection_non_empty_name"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    owner_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    invite_code: Mapped[str] = mapped_column(
        String(64), unique=True, nullable=False, default=new_invite_code
    )

    owner: Mapped["User"] = relationship("User", back_populates="owned_collections")
    members: Mapped[List["CollectionMember"]] = relationship(
        "CollectionMember",
        back_populates="collection",
        cascade="all, delete",
    )
    entries: Mapped[List["Entry"]] = relationship(
        "Entry",
        back_populates="collection",
        cascade="all, delete",
    )

    @property
    def member_count(self) -> int:
        """Number of people with access, owner included."""
        return len(self.members) + 1

    def __repr__(self) -> str:
        return f"<Collection(id={self.id}, name='{self.name}', owner_id={self.owner_id})>"

    def __str__(self) -> str:
        return self.name


class CollectionMember(Base):
    """
    Membership of a non-owner user in a collection.

    Attributes:
        collection_id: Collection joined (part of the primary key)
        user_id: Member (part of the primary key)
        joined_at: When the user joined
    """

    __tablename__ = "collection_members"

    collection_id: Mapped[int] = mapped_column(
        ForeignKey("collections.id", ondelete="CASCADE"), primary_key=True
    )
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), primary_key=True, index=True
    )
    joined_at: Mapped[datetime] = mapped_column(
        IsoDateTime(), nullable=False, default=utc_now
    )

    collection: Mapped["Collection"] = relationship("Collection", back_populates="members")
    user: Mapped["User"] = relationship("User", back_populates="memberships")

    def __repr__(self) -> str:
        return f"<CollectionMember(collection_id={self.collection_id}, user_id={self.user_id})>"


class Tag(Base):
    """
    Keyword tag for entries.

    Names are stored trimmed and lower-cased, which makes the unique
    constraint case-insensitive in practice.

    Attributes:
        id: Primary key
        name: The tag text (unique)
        created_at: When the tag was first used

    Relationships:
        entries: Many-to-many with Entry
    """

    __tablename__ = "tags"
    __table_args__ = (CheckConstraint("name != ''", name="ck_tag_non_empty_name"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(
        IsoDateTime(), nullable=False, default=utc_now
    )

    entries: Mapped[List["Entry"]] = relationship(
        "Entry", secondary=entry_tags, back_populates="tags"
    )

    def __repr__(self) -> str:
        return f"<Tag(id={self.id}, name='{self.name}')>"

    def __str__(self) -> str:
        return self.name
