#!/usr/bin/env python3
"""
import_manager.py
-----------------
Import of the legacy browser-extension bookmark export.

The legacy file is a JSON list of objects:

    {
        "id": "abc123",
        "url": "https://example.com",
        "title": "Example",
        "description": "optional",
        "duration": "3",              # string or integer
        "interval": "days",
        "visited": 4,                 # optional visit count
        "createdAt": "...",           # optional
        "updatedAt": "...",           # optional
        "dismissedAt": "..."          # optional
    }

Every item becomes an entry owned by the target user. Timestamps are
kept exactly as they appear in the file; the availability engine copes
with values it cannot parse. A `visited` count turns into that many
Visit rows stamped with the import time.

This is the one place where an unknown interval is tolerated: it is
logged as a warning and imported as days. Items without a URL or title
are skipped with a warning. Everything else that is wrong with the file
aborts the import, and the surrounding session rolls back.
"""
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Union

from sqlalchemy.orm import Session

from interne.core.exceptions import LegacyImportError, ValidationError
from interne.core.logging_manager import InterneLogger, safe_logger
from interne.core.validators import DataValidator

from .decorators import handle_db_errors, log_database_operation
from .models import Entry, Interval, User, Visit


class ImportManager:
    """Reads legacy JSON exports into the database."""

    def __init__(self, logger: Optional[InterneLogger] = None) -> None:
        """
        Initialize import manager.

        Args:
            logger: Optional logger for import operations
        """
        self.logger = logger

    @staticmethod
    def _load(source_file: Path) -> list:
        try:
            with open(source_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except OSError as e:
            raise LegacyImportError(f"Cannot read {source_file}: {e}") from e
        except json.JSONDecodeError as e:
            raise LegacyImportError(f"Invalid JSON in {source_file}: {e}") from e

        if not isinstance(data, list):
            raise LegacyImportError("Expected a JSON list of entries")
        return data

    def _interval(self, value: Any, index: int) -> Interval:
        try:
            return Interval.parse(value)
        except ValidationError:
            safe_logger(self.logger).log_warning(
                f"Unknown interval: {value}, defaulting to days", {"item": index}
            )
            return Interval.DAYS

    @handle_db_errors
    @log_database_operation("import_legacy")
    def import_legacy(
        self,
        session: Session,
        source_file: Union[str, Path],
        user_id: int,
        now: Optional[datetime] = None,
    ) -> Dict[str, int]:
        """
        Import a legacy export file for one user.

        Args:
            session: SQLAlchemy session
            source_file: Path to the legacy JSON file
            user_id: Owner of the imported entries
            now: Timestamp for missing createdAt/updatedAt and for visits

        Returns:
            Statistics: imported, skipped, visits

        Raises:
            LegacyImportError: If the user does not exist or the file is unreadable
        """
        if session.get(User, user_id) is None:
            raise LegacyImportError(f"User with ID '{user_id}' not found")

        items = self._load(Path(source_file).expanduser())
        now = now or datetime.now(timezone.utc)
        stats = {"imported": 0, "skipped": 0, "visits": 0}

        for index, item in enumerate(items):
            if not isinstance(item, dict):
                raise LegacyImportError(f"Item {index} is not an object")

            url = DataValidator.normalize_string(item.get("url"))
            title = DataValidator.normalize_string(item.get("title"))
            if url is None or title is None:
                safe_logger(self.logger).log_warning(
                    "Skipping legacy item without url or title", {"item": index}
                )
                stats["skipped"] += 1
                continue

            duration = DataValidator.normalize_int(item.get("duration"))
            entry = Entry(
                user_id=user_id,
                url=url,
                title=title,
                description=DataValidator.normalize_string(item.get("description")),
                duration=duration if duration and duration > 0 else 1,
                interval=self._interval(item.get("interval"), index),
                dismissed_at=item.get("dismissedAt"),
                created_at=item.get("createdAt") or now,
                updated_at=item.get("updatedAt") or now,
            )
            session.add(entry)
            session.flush()

            visited = DataValidator.normalize_int(item.get("visited")) or 0
            for _ in range(max(visited, 0)):
                session.add(Visit(entry_id=entry.id, user_id=user_id, visited_at=now))
            stats["visits"] += max(visited, 0)
            stats["imported"] += 1

        session.flush()

        if self.logger:
            self.logger.log_operation("legacy_import_complete", {"user_id": user_id, **stats})

        return stats
