"""
Base Classes and Column Types
------------------------------

Foundational ORM classes for the Interne database.

Classes:
    - Base: Declarative base for all SQLAlchemy models
    - IsoDateTime: UTC instant stored as RFC 3339 text
    - TimestampMixin: created_at / updated_at columns

Instants are kept as text so that rows written by older tools (SQLite's
'YYYY-MM-DD HH:MM:SS', offsets other than UTC) stay readable. A stored
value that does not parse is handed back unchanged as a string; the
availability engine decides what to do with it.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from datetime import datetime, timezone
from typing import Any, Optional, Union

# --- Third party ---
from sqlalchemy import String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator

# --- Local imports ---
from interne.core.validators import DataValidator


def utc_now() -> datetime:
    """Default factory for timestamp columns."""
    return datetime.now(timezone.utc)


class IsoDateTime(TypeDecorator):
    """
    Aware UTC datetime persisted as 'YYYY-MM-DDTHH:MM:SS.ffffff+00:00'.

    Bound datetimes are converted to UTC (naive ones are assumed UTC);
    strings are stored verbatim. On load, parseable text becomes an aware
    datetime and anything else is returned as the raw string.
    """

    impl = String
    cache_ok = True

    def process_bind_param(self, value: Any, dialect) -> Optional[str]:
        if value is None or isinstance(value, str):
            return value
        instant = DataValidator.normalize_instant(value)
        return instant.isoformat(timespec="microseconds") if instant else None

    def process_result_value(self, value: Any, dialect) -> Optional[Union[datetime, str]]:
        if value is None:
            return None
        parsed = DataValidator.normalize_instant(value)
        return parsed if parsed is not None else value


# --- Base ORM class ---
class Base(DeclarativeBase):
    """
    Base class for all ORM models.

    Serves as the declarative base for SQLAlchemy models and provides
    access to the metadata object for table creation and migrations.
    """

    pass


class TimestampMixin:
    """created_at / updated_at maintained by the ORM."""

    created_at: Mapped[datetime] = mapped_column(
        IsoDateTime(), nullable=False, default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        IsoDateTime(), nullable=False, default=utc_now, onupdate=utc_now
    )
