#!/usr/bin/env python3
"""
export_manager.py
-----------------
JSON export of a user's entries.

The export is a read-only projection: every entry the user created
(collection placement does not matter) with its tag names and raw
timestamps. No availability is computed; dismissed_at is written as
stored.

Export Format:
    {
        "exported_at": "2024-05-01T12:00:00+00:00",
        "entries": [
            {
                "id": 1,
                "url": "https://example.com",
                "title": "Example",
                "description": null,
                "duration": 3,
                "interval": "days",
                "dismissed_at": "2024-04-28T09:30:00.000000+00:00",
                "created_at": "...",
                "updated_at": "...",
                "tags": ["later", "reading"]
            }
        ]
    }

Usage:
    exporter = ExportManager(logger=db.logger)

    with db.session_scope() as session:
        data = exporter.export_user(session, user)
        path = exporter.export_to_json(session, user, Path("exports"))

Notes:
    - Entries are ordered by creation time
    - Files are staged and moved into place only once fully written
    - Default file name: interne-export-YYYY-MM-DD.json
"""
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Union

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from interne.core.exceptions import ExportError, TemporalFileError
from interne.core.logging_manager import InterneLogger
from interne.core.temporal_files import TemporalFileManager

from .decorators import handle_db_errors, log_database_operation
from .models import Entry, User


def _timestamp(value: Any) -> Optional[str]:
    """Stored instants as text; unparseable legacy values pass through."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


class ExportManager:
    """
    Handles data export operations for the database.

    Stateless apart from the logger; every call takes the session it
    should read from.
    """

    def __init__(self, logger: Optional[InterneLogger] = None) -> None:
        """
        Initialize export manager.

        Args:
            logger: Optional logger for export operations
        """
        self.logger = logger

    @staticmethod
    def default_filename(now: Optional[datetime] = None) -> str:
        now = now or datetime.now(timezone.utc)
        return f"interne-export-{now.strftime('%Y-%m-%d')}.json"

    @staticmethod
    def _serialize_entry(entry: Entry) -> Dict[str, Any]:
        return {
            "id": entry.id,
            "url": entry.url,
            "title": entry.title,
            "description": entry.description,
            "duration": entry.duration,
            "interval": entry.interval.value,
            "dismissed_at": _timestamp(entry.dismissed_at),
            "created_at": _timestamp(entry.created_at),
            "updated_at": _timestamp(entry.updated_at),
            "tags": entry.tag_names,
        }

    @handle_db_errors
    @log_database_operation("export_user")
    def export_user(
        self,
        session: Session,
        user: Union[User, int],
        now: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        """
        Build the export document for one user.

        Args:
            session: SQLAlchemy session
            user: User or user id
            now: Export timestamp (defaults to the current time)

        Returns:
            Dictionary with exported_at and entries
        """
        user_id = user.id if isinstance(user, User) else user
        now = now or datetime.now(timezone.utc)

        entries = session.scalars(
            select(Entry)
            .options(selectinload(Entry.tags))
            .where(Entry.user_id == user_id)
            .order_by(Entry.created_at, Entry.id)
        ).all()

        return {
            "exported_at": now.isoformat(),
            "entries": [self._serialize_entry(entry) for entry in entries],
        }

    @log_database_operation("export_to_json")
    def export_to_json(
        self,
        session: Session,
        user: Union[User, int],
        output: Union[str, Path],
        now: Optional[datetime] = None,
    ) -> Path:
        """
        Write a user's export to a JSON file.

        Args:
            session: SQLAlchemy session
            user: User or user id
            output: Target file, or a directory to place the default file name in
            now: Export timestamp (defaults to the current time)

        Returns:
            Path to exported JSON file

        Raises:
            ExportError: If the file cannot be written
        """
        now = now or datetime.now(timezone.utc)
        output = Path(output).expanduser()
        if output.is_dir():
            output = output / self.default_filename(now)

        data = self.export_user(session, user, now)

        try:
            output.parent.mkdir(parents=True, exist_ok=True)
            with TemporalFileManager(output.parent) as temp_manager:
                staged = temp_manager.create_temp_file(suffix=".json")
                with open(staged, "w", encoding="utf-8") as f:
                    json.dump(data, f, ensure_ascii=False, indent=2)
                temp_manager.commit(staged, output)
        except (OSError, TemporalFileError) as e:
            raise ExportError(f"Failed to write export to {output}: {e}") from e

        if self.logger:
            self.logger.log_operation(
                "export_written",
                {"output": str(output), "entries": len(data["entries"])},
            )

        return output
