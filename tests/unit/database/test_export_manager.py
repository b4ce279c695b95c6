"""Tests for ExportManager."""
import json
import pytest
from datetime import datetime, timezone
from unittest.mock import patch

from interne.core.exceptions import ExportError, TemporalFileError
from interne.database.export_manager import ExportManager


NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def exporter():
    return ExportManager(logger=None)


class TestExportUser:
    def test_empty_user(self, exporter, db_session, alice):
        data = exporter.export_user(db_session, alice, NOW)
        assert data == {"exported_at": "2024-05-01T12:00:00+00:00", "entries": []}

    def test_entries_with_tags(self, exporter, db_session, alice, make_entry):
        entry = make_entry(alice, title="First", tags="reading, later", description="notes")

        data = exporter.export_user(db_session, alice.id, NOW)

        assert len(data["entries"]) == 1
        exported = data["entries"][0]
        assert exported["id"] == entry.id
        assert exported["title"] == "First"
        assert exported["description"] == "notes"
        assert exported["duration"] == 3
        assert exported["interval"] == "days"
        assert exported["dismissed_at"] is None
        assert exported["tags"] == ["later", "reading"]
        assert exported["created_at"] is not None

    def test_dismissed_at_written_as_stored(self, exporter, db_session, alice, make_entry, entry_manager, clock):
        entry = make_entry(alice)
        entry_manager.visit(alice, entry.id, clock=clock)

        exported = exporter.export_user(db_session, alice, NOW)["entries"][0]
        assert exported["dismissed_at"] == "2024-05-01T12:00:00+00:00"

    def test_only_own_entries_regardless_of_collection(
        self, exporter, db_session, alice, bob, make_entry, collection_manager
    ):
        club = collection_manager.create(alice, {"name": "Club"})
        collection_manager.join(bob, club.invite_code)
        make_entry(alice, title="Mine", collection_id=club.id)
        make_entry(bob, title="Bob's shared", collection_id=club.id)
        make_entry(bob, title="Bob's private")

        titles = [e["title"] for e in exporter.export_user(db_session, alice, NOW)["entries"]]
        assert titles == ["Mine"]


class TestExportToJson:
    def test_writes_file(self, exporter, db_session, alice, make_entry, tmp_path):
        make_entry(alice)
        output = tmp_path / "out.json"

        path = exporter.export_to_json(db_session, alice, output, NOW)

        assert path == output
        data = json.loads(output.read_text(encoding="utf-8"))
        assert len(data["entries"]) == 1
        assert list(tmp_path.iterdir()) == [output]

    def test_directory_gets_default_name(self, exporter, db_session, alice, tmp_path):
        path = exporter.export_to_json(db_session, alice, tmp_path, NOW)
        assert path == tmp_path / "interne-export-2024-05-01.json"
        assert path.exists()

    def test_creates_parent_directories(self, exporter, db_session, alice, tmp_path):
        output = tmp_path / "nested" / "deeper" / "export.json"
        exporter.export_to_json(db_session, alice, output, NOW)
        assert output.exists()

    def test_write_failure_raises_export_error(self, exporter, db_session, alice, tmp_path):
        with patch(
            "interne.database.export_manager.TemporalFileManager.commit",
            side_effect=TemporalFileError("disk full"),
        ):
            with pytest.raises(ExportError, match="disk full"):
                exporter.export_to_json(db_session, alice, tmp_path / "out.json", NOW)

        assert not (tmp_path / "out.json").exists()
        assert list(tmp_path.iterdir()) == []

    def test_default_filename(self):
        assert ExportManager.default_filename(NOW) == "interne-export-2024-05-01.json"
