#!/usr/bin/env python3
"""
access.py
---------
Authorization predicates for entries and collections.

Rules:
    - An entry is visible to its creator, and to the owner and members of
      the collection it is placed in.
    - Only the creator may edit, delete or visit an entry. Membership
      grants viewing, never mutation.
    - A collection is visible to its owner and its members.
    - Only the owner may rename or delete a collection, rotate its invite
      code or remove members.
    - A member may leave; the owner cannot leave their own collection.
    - Joining with a valid invite code adds a membership unless the user
      already owns or belongs to the collection.

Every predicate is pure. The caller loads the actor's Membership once
and passes it in; an actor id of None (unauthenticated) is denied
everything.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Optional, Protocol


class EntryLike(Protocol):
    """Anything with the ownership fields of an entry."""

    user_id: int
    collection_id: Optional[int]


class CollectionLike(Protocol):
    """Anything with the ownership fields of a collection."""

    id: int
    owner_id: int


@dataclass(frozen=True)
class Membership:
    """
    Collections an actor is connected to.

    Attributes:
        owned_collection_ids: Collections the actor owns
        member_collection_ids: Collections the actor has joined
    """

    owned_collection_ids: FrozenSet[int] = field(default_factory=frozenset)
    member_collection_ids: FrozenSet[int] = field(default_factory=frozenset)

    @classmethod
    def of(
        cls, owned: Iterable[int] = (), member: Iterable[int] = ()
    ) -> "Membership":
        """Build from any iterables of collection ids."""
        return cls(frozenset(owned), frozenset(member))

    @property
    def visible_collection_ids(self) -> FrozenSet[int]:
        return self.owned_collection_ids | self.member_collection_ids

    def owns(self, collection_id: Optional[int]) -> bool:
        return collection_id is not None and collection_id in self.owned_collection_ids

    def belongs_to(self, collection_id: Optional[int]) -> bool:
        return collection_id is not None and collection_id in self.member_collection_ids


EMPTY_MEMBERSHIP = Membership()


# ----- Entries -----
def can_view_entry(
    actor_id: Optional[int], entry: EntryLike, membership: Membership
) -> bool:
    if actor_id is None:
        return False
    if entry.user_id == actor_id:
        return True
    return entry.collection_id is not None and (
        membership.owns(entry.collection_id) or membership.belongs_to(entry.collection_id)
    )


def can_mutate_entry(actor_id: Optional[int], entry: EntryLike) -> bool:
    """Edit, delete and visit are reserved for the entry's creator."""
    return actor_id is not None and entry.user_id == actor_id


# ----- Collections -----
def can_view_collection(
    actor_id: Optional[int], collection: CollectionLike, membership: Membership
) -> bool:
    if actor_id is None:
        return False
    return collection.owner_id == actor_id or membership.belongs_to(collection.id)


def can_mutate_collection(actor_id: Optional[int], collection: CollectionLike) -> bool:
    """Rename, delete, invite rotation and member removal are owner-only."""
    return actor_id is not None and collection.owner_id == actor_id


def can_leave_collection(
    actor_id: Optional[int], collection: CollectionLike, membership: Membership
) -> bool:
    if actor_id is None or collection.owner_id == actor_id:
        return False
    return membership.belongs_to(collection.id)


def should_join_collection(
    actor_id: Optional[int], collection: CollectionLike, membership: Membership
) -> bool:
    """
    True when presenting the collection's invite code must add a membership row.

    Owners and existing members get False, which callers treat as a
    successful no-op.
    """
    if actor_id is None or collection.owner_id == actor_id:
        return False
    return not membership.belongs_to(collection.id)
