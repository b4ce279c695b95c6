#!/usr/bin/env python3
"""
validators.py
--------------------
Data validation and normalization utilities for Interne operations.

Provides type-safe conversion and the field-level checks applied to
entry and collection input before anything reaches the database.
"""
from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from interne.engine.constants import (
    COLLECTION_NAME_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    URL_SCHEMES,
)
from .exceptions import ValidationError

# Fractional seconds of any width; fromisoformat wants 3 or 6 digits before 3.11
_FRACTION = re.compile(r"(?<=:\d\d)\.(\d+)")


class DataValidator:
    """Centralized data validation for database operations."""

    @staticmethod
    def normalize_string(value: Any) -> Optional[str]:
        """Strip surrounding whitespace; empty or missing values become None."""
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    @staticmethod
    def normalize_tag(value: Any) -> Optional[str]:
        """Tags are compared case-insensitively: trim and lower-case."""
        text = DataValidator.normalize_string(value)
        return text.lower() if text else None

    @staticmethod
    def split_tags(value: Any) -> List[str]:
        """
        Split a comma separated tag string (or a list) into normalized names.

        Empty names are dropped and duplicates collapsed, first occurrence wins.
        """
        if value is None:
            return []
        parts = value.split(",") if isinstance(value, str) else list(value)
        seen: List[str] = []
        for part in parts:
            name = DataValidator.normalize_tag(part)
            if name and name not in seen:
                seen.append(name)
        return seen

    @staticmethod
    def normalize_int(value: Any) -> Optional[int]:
        """
        Convert value to integer safely.

        Returns:
            Integer value, or None when the value is missing or not numeric
        """
        if value is None or isinstance(value, bool):
            return None
        try:
            return int(str(value).strip())
        except (TypeError, ValueError):
            return None

    @staticmethod
    def normalize_instant(value: Any) -> Optional[datetime]:
        """
        Parse an instant into an aware UTC datetime.

        Accepts datetimes and ISO 8601 / RFC 3339 text, including the
        SQLite 'YYYY-MM-DD HH:MM:SS' form and a trailing 'Z'. Naive
        values are taken to be UTC.

        Returns:
            Aware UTC datetime, or None if the value cannot be parsed
        """
        if isinstance(value, datetime):
            parsed = value
        elif isinstance(value, str):
            text = value.strip()
            if text.endswith(("Z", "z")):
                text = text[:-1] + "+00:00"
            text = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
            try:
                parsed = datetime.fromisoformat(text)
            except ValueError:
                return None
        else:
            return None

        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed.astimezone(timezone.utc)

    @staticmethod
    def validate_entry_fields(data: Dict[str, Any]) -> Dict[str, str]:
        """
        Check entry input and collect one message per bad field.

        Args:
            data: Raw entry input with url, title, duration

        Returns:
            Mapping of field name to message; empty when the input is valid
        """
        errors: Dict[str, str] = {}

        duration = DataValidator.normalize_int(data.get("duration"))
        if duration is None or duration < 1:
            errors["duration"] = "Duration must be at least 1"

        url = DataValidator.normalize_string(data.get("url"))
        if url is None:
            errors["url"] = "URL is required"
        elif not url.lower().startswith(URL_SCHEMES):
            errors["url"] = "URL must start with http:// or https://"

        title = DataValidator.normalize_string(data.get("title"))
        if title is None:
            errors["title"] = "Title is required"
        elif len(title) > TITLE_MAX_LENGTH:
            errors["title"] = f"Title must be under {TITLE_MAX_LENGTH} characters"

        return errors

    @staticmethod
    def validate_collection_fields(data: Dict[str, Any]) -> Dict[str, str]:
        """Same as validate_entry_fields, for collection input."""
        errors: Dict[str, str] = {}
        name = DataValidator.normalize_string(data.get("name"))
        if name is None:
            errors["name"] = "Name is required"
        elif len(name) > COLLECTION_NAME_MAX_LENGTH:
            errors["name"] = f"Name must be under {COLLECTION_NAME_MAX_LENGTH} characters"
        return errors
