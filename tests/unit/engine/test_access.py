"""Tests for the access control predicates."""
from types import SimpleNamespace

from interne.engine.access import (
    EMPTY_MEMBERSHIP,
    Membership,
    can_leave_collection,
    can_mutate_collection,
    can_mutate_entry,
    can_view_collection,
    can_view_entry,
    should_join_collection,
)


OWNER, MEMBER, STRANGER = 1, 2, 3


def entry(user_id=OWNER, collection_id=None):
    return SimpleNamespace(user_id=user_id, collection_id=collection_id)


def collection(collection_id=10, owner_id=OWNER):
    return SimpleNamespace(id=collection_id, owner_id=owner_id)


class TestMembership:
    def test_of_builds_frozensets(self):
        membership = Membership.of([1, 2], (3,))
        assert membership.owned_collection_ids == frozenset({1, 2})
        assert membership.member_collection_ids == frozenset({3})
        assert membership.visible_collection_ids == frozenset({1, 2, 3})

    def test_owns_and_belongs_to(self):
        membership = Membership.of([1], [2])
        assert membership.owns(1) and not membership.owns(2)
        assert membership.belongs_to(2) and not membership.belongs_to(1)
        assert not membership.owns(None)
        assert not membership.belongs_to(None)


class TestEntryAccess:
    def test_owner_can_view_private_entry(self):
        assert can_view_entry(OWNER, entry(), EMPTY_MEMBERSHIP)

    def test_stranger_cannot_view_private_entry(self):
        assert not can_view_entry(STRANGER, entry(), EMPTY_MEMBERSHIP)

    def test_member_can_view_shared_entry(self):
        assert can_view_entry(MEMBER, entry(collection_id=10), Membership.of(member=[10]))

    def test_collection_owner_can_view_entries_placed_by_others(self):
        shared = entry(user_id=MEMBER, collection_id=10)
        assert can_view_entry(OWNER, shared, Membership.of(owned=[10]))

    def test_non_member_cannot_view_shared_entry(self):
        assert not can_view_entry(STRANGER, entry(collection_id=10), Membership.of(member=[11]))

    def test_member_cannot_mutate_shared_entry(self):
        assert not can_mutate_entry(MEMBER, entry(collection_id=10))

    def test_owner_can_mutate_regardless_of_membership(self):
        assert can_mutate_entry(OWNER, entry(collection_id=10))
        assert can_mutate_entry(OWNER, entry())

    def test_anonymous_denied(self):
        assert not can_view_entry(None, entry(), EMPTY_MEMBERSHIP)
        assert not can_mutate_entry(None, entry())


class TestCollectionAccess:
    def test_owner_can_view_and_mutate(self):
        assert can_view_collection(OWNER, collection(), EMPTY_MEMBERSHIP)
        assert can_mutate_collection(OWNER, collection())

    def test_member_can_view_not_mutate(self):
        membership = Membership.of(member=[10])
        assert can_view_collection(MEMBER, collection(), membership)
        assert not can_mutate_collection(MEMBER, collection())

    def test_stranger_cannot_view(self):
        assert not can_view_collection(STRANGER, collection(), EMPTY_MEMBERSHIP)

    def test_owner_cannot_leave(self):
        assert not can_leave_collection(OWNER, collection(), Membership.of(owned=[10]))

    def test_member_can_leave(self):
        assert can_leave_collection(MEMBER, collection(), Membership.of(member=[10]))

    def test_stranger_cannot_leave(self):
        assert not can_leave_collection(STRANGER, collection(), EMPTY_MEMBERSHIP)

    def test_should_join(self):
        assert should_join_collection(STRANGER, collection(), EMPTY_MEMBERSHIP)
        assert not should_join_collection(MEMBER, collection(), Membership.of(member=[10]))
        assert not should_join_collection(OWNER, collection(), Membership.of(owned=[10]))
        assert not should_join_collection(None, collection(), EMPTY_MEMBERSHIP)
