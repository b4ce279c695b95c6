"""
test_tag_manager.py
-------------------
Unit tests for TagManager: get-or-create, linking and per-user counts.
"""
import pytest

from interne.core.exceptions import ValidationError
from interne.database.models import Tag, entry_tags


def link_count(db_session, entry):
    return db_session.execute(
        entry_tags.select().where(entry_tags.c.entry_id == entry.id)
    ).all()


class TestGetOrCreate:
    def test_creates_normalized(self, tag_manager):
        tag = tag_manager.get_or_create("  Python ")
        assert tag.id is not None
        assert tag.name == "python"

    def test_returns_existing(self, tag_manager, db_session):
        first = tag_manager.get_or_create("python")
        second = tag_manager.get_or_create("PYTHON")
        assert first is second
        assert db_session.query(Tag).count() == 1

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_empty_rejected(self, tag_manager, name):
        with pytest.raises(ValidationError, match="Tag cannot be empty"):
            tag_manager.get_or_create(name)

    def test_get(self, tag_manager):
        tag_manager.get_or_create("python")
        assert tag_manager.get(" Python").name == "python"
        assert tag_manager.get("rust") is None
        assert tag_manager.get("") is None


class TestLinking:
    def test_link_is_idempotent(self, tag_manager, db_session, alice, make_entry):
        entry = make_entry(alice)
        tag_manager.link_to_entry(alice, entry, "reading")
        tag_manager.link_to_entry(alice, entry, "Reading")

        assert entry.tag_names == ["reading"]
        assert len(link_count(db_session, entry)) == 1

    def test_unlink(self, tag_manager, alice, make_entry):
        entry = make_entry(alice, tags="reading, later")
        assert tag_manager.unlink_from_entry(alice, entry, "later") is True
        assert entry.tag_names == ["reading"]

    def test_unlink_missing(self, tag_manager, alice, make_entry):
        entry = make_entry(alice)
        assert tag_manager.unlink_from_entry(alice, entry, "later") is False
        assert tag_manager.unlink_from_entry(alice, entry, "never-created") is False

    def test_set_entry_tags_replaces(self, tag_manager, alice, make_entry):
        entry = make_entry(alice, tags="a, b")
        names = tag_manager.set_entry_tags(alice, entry, "b, c")

        assert names == ["b", "c"]
        assert entry.tag_names == ["b", "c"]

    def test_set_same_tags_twice_no_duplicates(self, tag_manager, db_session, alice, make_entry):
        entry = make_entry(alice)
        tag_manager.set_entry_tags(alice, entry, "x, y")
        tag_manager.set_entry_tags(alice, entry, ["Y", "x"])

        assert len(link_count(db_session, entry)) == 2
        assert db_session.query(Tag).count() == 2

    def test_set_empty_clears(self, tag_manager, alice, make_entry):
        entry = make_entry(alice, tags="a")
        assert tag_manager.set_entry_tags(alice, entry, "") == []
        assert entry.tag_names == []

    def test_get_for_entry(self, tag_manager, alice, make_entry):
        entry = make_entry(alice, tags="zeta, alpha")
        assert tag_manager.get_for_entry(entry) == ["alpha", "zeta"]


class TestTagWriteAccess:
    @pytest.fixture
    def shared_entry(self, collection_manager, entry_manager, alice, bob, make_entry):
        club = collection_manager.create(alice, {"name": "Club"})
        collection_manager.join(bob, club.invite_code)
        entry = make_entry(alice, tags="mine", collection_id=club.id)
        assert entry_manager.get(bob, entry.id) is entry
        return entry

    def test_member_cannot_link(self, tag_manager, shared_entry, bob, db_session):
        assert tag_manager.link_to_entry(bob, shared_entry, "vandal") is None
        assert shared_entry.tag_names == ["mine"]
        assert db_session.query(Tag).filter_by(name="vandal").count() == 0

    def test_member_cannot_replace(self, tag_manager, shared_entry, bob):
        assert tag_manager.set_entry_tags(bob, shared_entry, "overwritten") is None
        assert shared_entry.tag_names == ["mine"]

    def test_member_cannot_unlink(self, tag_manager, shared_entry, bob):
        assert tag_manager.unlink_from_entry(bob, shared_entry, "mine") is False
        assert shared_entry.tag_names == ["mine"]

    def test_stranger_and_anonymous_rejected(self, tag_manager, shared_entry, carol):
        assert tag_manager.link_to_entry(carol.id, shared_entry, "x") is None
        assert tag_manager.set_entry_tags(None, shared_entry, "x") is None
        assert shared_entry.tag_names == ["mine"]

    def test_owner_by_id(self, tag_manager, shared_entry, alice):
        assert tag_manager.set_entry_tags(alice.id, shared_entry, "mine, ours") == ["mine", "ours"]
        assert shared_entry.tag_names == ["mine", "ours"]


class TestUserQueries:
    def test_counts_for_user_only_own_entries(
        self, tag_manager, collection_manager, alice, bob, make_entry
    ):
        club = collection_manager.create(alice, {"name": "Club"})
        collection_manager.join(bob, club.invite_code)
        make_entry(alice, tags="reading, later")
        make_entry(alice, tags="reading")
        make_entry(bob, tags="reading, bob-only", collection_id=club.id)

        assert tag_manager.counts_for_user(alice.id) == [("later", 1), ("reading", 2)]
        assert tag_manager.counts_for_user(bob.id) == [("bob-only", 1), ("reading", 1)]

    def test_counts_for_user_without_tags(self, tag_manager, alice):
        assert tag_manager.counts_for_user(alice.id) == []

    def test_cloud_for_user(self, tag_manager, alice, make_entry):
        make_entry(alice, tags="common, rare")
        make_entry(alice, tags="common")
        make_entry(alice, tags="common")

        weights = {w.name: w for w in tag_manager.cloud_for_user(alice.id)}
        assert weights["common"].size > weights["rare"].size
        assert weights["common"].count == 3

    def test_entries_for_tag(self, tag_manager, alice, bob, make_entry):
        first = make_entry(alice, title="First", tags="reading")
        second = make_entry(alice, title="Second", tags="reading")
        make_entry(alice, title="Untagged")
        make_entry(bob, title="Bob's", tags="reading")

        entries = tag_manager.entries_for_tag(alice.id, "Reading")
        assert {e.id for e in entries} == {first.id, second.id}

    def test_entries_for_unknown_tag(self, tag_manager, alice):
        assert tag_manager.entries_for_tag(alice.id, "nothing") == []
        assert tag_manager.entries_for_tag(alice.id, "") == []
