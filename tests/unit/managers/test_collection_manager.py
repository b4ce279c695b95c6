"""
test_collection_manager.py
--------------------------
Unit tests for CollectionManager: owner operations, invite-code joins
and membership.
"""
import pytest

from interne.core.exceptions import FormValidationError
from interne.database.models import Collection, CollectionMember, Entry


@pytest.fixture
def club(collection_manager, alice):
    return collection_manager.create(alice, {"name": "Club"})


class TestCreate:
    def test_create(self, collection_manager, alice):
        collection = collection_manager.create(alice, {"name": "  Reading club "})
        assert collection.id is not None
        assert collection.name == "Reading club"
        assert collection.owner_id == alice.id
        assert collection.invite_code

    def test_invite_code_differs_from_owner_code(self, club, alice):
        assert club.invite_code != alice.invite_code

    @pytest.mark.parametrize(
        "name,message",
        [("", "Name is required"), ("n" * 101, "Name must be under 100 characters")],
    )
    def test_invalid_name(self, collection_manager, alice, name, message):
        with pytest.raises(FormValidationError) as exc_info:
            collection_manager.create(alice, {"name": name})
        assert exc_info.value.errors == {"name": message}


class TestRead:
    def test_owner_and_member_can_get(self, collection_manager, club, alice, bob):
        collection_manager.join(bob, club.invite_code)
        assert collection_manager.get(alice, club.id) is club
        assert collection_manager.get(bob, club.id) is club

    def test_stranger_gets_none(self, collection_manager, club, carol):
        assert collection_manager.get(carol, club.id) is None

    def test_missing(self, collection_manager, alice):
        assert collection_manager.get(alice, 999) is None

    def test_visible_to_with_member_counts(self, collection_manager, club, alice, bob, carol):
        other = collection_manager.create(bob, {"name": "Another"})
        collection_manager.join(bob, club.invite_code)
        collection_manager.join(carol, club.invite_code)

        assert collection_manager.visible_to(alice.id) == [(club, 3)]
        assert collection_manager.visible_to(bob.id) == [(other, 1), (club, 3)]
        assert collection_manager.visible_to(carol.id) == [(club, 3)]

    def test_is_member_and_is_owner(self, collection_manager, club, alice, bob):
        collection_manager.join(bob, club.invite_code)

        assert collection_manager.is_owner(club.id, alice.id)
        assert not collection_manager.is_owner(club.id, bob.id)
        assert collection_manager.is_member(club.id, bob.id)
        assert not collection_manager.is_member(club.id, alice.id)
        assert not collection_manager.is_owner(999, alice.id)

    def test_members(self, collection_manager, club, alice, bob, carol):
        collection_manager.join(bob, club.invite_code)
        collection_manager.join(carol, club.invite_code)

        assert collection_manager.members(club, alice) == [bob, carol]
        assert collection_manager.members(club.id, bob) == [bob, carol]

    def test_members_hidden_from_stranger(self, collection_manager, club, carol):
        assert collection_manager.members(club, carol) is None

    def test_members_of_missing_collection(self, collection_manager, alice):
        assert collection_manager.members(999, alice) is None


class TestOwnerOperations:
    def test_rename(self, collection_manager, club, alice):
        assert collection_manager.rename(alice, club.id, {"name": "Renamed"}) is club
        assert club.name == "Renamed"

    def test_rename_validates(self, collection_manager, club, alice):
        with pytest.raises(FormValidationError):
            collection_manager.rename(alice, club.id, {"name": " "})
        assert club.name == "Club"

    def test_member_cannot_rename(self, collection_manager, club, bob):
        collection_manager.join(bob, club.invite_code)
        assert collection_manager.rename(bob, club.id, {"name": "Mine now"}) is None
        assert club.name == "Club"

    def test_delete_removes_entries_and_members(
        self, collection_manager, entry_manager, db_session, club, alice, bob
    ):
        collection_manager.join(bob, club.invite_code)
        shared = entry_manager.create(
            bob,
            {"url": "https://x.io", "title": "x", "duration": 1, "interval": "days",
             "collection_id": club.id},
        )
        shared_id = shared.id

        assert collection_manager.delete(alice, club.id) is True
        assert db_session.get(Collection, club.id) is None
        assert db_session.get(Entry, shared_id) is None
        assert db_session.query(CollectionMember).count() == 0

    def test_member_cannot_delete(self, collection_manager, db_session, club, bob):
        collection_manager.join(bob, club.invite_code)
        assert collection_manager.delete(bob, club.id) is False
        assert db_session.get(Collection, club.id) is not None

    def test_regenerate_invite(self, collection_manager, club, alice, bob):
        old_code = club.invite_code
        new_code = collection_manager.regenerate_invite(alice, club.id)

        assert new_code and new_code != old_code
        assert collection_manager.join(bob, old_code) is None
        assert collection_manager.join(bob, new_code) is club

    def test_member_cannot_regenerate(self, collection_manager, club, bob):
        old_code = club.invite_code
        assert collection_manager.regenerate_invite(bob, club.id) is None
        assert club.invite_code == old_code

    def test_remove_member(self, collection_manager, club, alice, bob):
        collection_manager.join(bob, club.invite_code)
        assert collection_manager.remove_member(alice, club.id, bob.id) is True
        assert not collection_manager.is_member(club.id, bob.id)
        assert collection_manager.remove_member(alice, club.id, bob.id) is False

    def test_member_cannot_remove_others(self, collection_manager, club, bob, carol):
        collection_manager.join(bob, club.invite_code)
        collection_manager.join(carol, club.invite_code)
        assert collection_manager.remove_member(bob, club.id, carol.id) is False
        assert collection_manager.is_member(club.id, carol.id)


class TestMembership:
    def test_join(self, collection_manager, club, bob):
        assert collection_manager.join(bob, f" {club.invite_code} ") is club
        assert collection_manager.is_member(club.id, bob.id)

    def test_join_twice_single_row(self, collection_manager, db_session, club, bob):
        collection_manager.join(bob, club.invite_code)
        collection_manager.join(bob, club.invite_code)

        rows = db_session.query(CollectionMember).filter_by(collection_id=club.id).all()
        assert [row.user_id for row in rows] == [bob.id]

    def test_owner_join_is_noop(self, collection_manager, db_session, club, alice):
        assert collection_manager.join(alice, club.invite_code) is club
        assert db_session.query(CollectionMember).count() == 0

    @pytest.mark.parametrize("code", [None, "", "nope"])
    def test_join_unknown_code(self, collection_manager, club, bob, code):
        assert collection_manager.join(bob, code) is None

    def test_user_code_does_not_join(self, collection_manager, club, alice, bob):
        assert collection_manager.join(bob, alice.invite_code) is None

    def test_leave(self, collection_manager, club, bob):
        collection_manager.join(bob, club.invite_code)
        assert collection_manager.leave(bob, club.id) is True
        assert not collection_manager.is_member(club.id, bob.id)
        assert collection_manager.get(bob, club.id) is None

    def test_owner_cannot_leave(self, collection_manager, club, alice):
        assert collection_manager.leave(alice, club.id) is False

    def test_non_member_leave(self, collection_manager, club, carol):
        assert collection_manager.leave(carol, club.id) is False
        assert collection_manager.leave(carol, 999) is False

    def test_leaving_hides_shared_entries(
        self, collection_manager, entry_manager, club, alice, bob, clock
    ):
        collection_manager.join(bob, club.invite_code)
        entry = entry_manager.create(
            alice,
            {"url": "https://x.io", "title": "x", "duration": 1, "interval": "days",
             "collection_id": club.id},
        )
        assert entry_manager.get(bob, entry.id) is entry

        collection_manager.leave(bob, club.id)
        assert entry_manager.get(bob, entry.id) is None
