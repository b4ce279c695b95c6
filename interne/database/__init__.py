#!/usr/bin/env python3
"""
Interne Database Package
------------------------
SQLite persistence for Interne.

Modules:
    - manager: InterneDB (engine, sessions, schema and migrations)
    - models: SQLAlchemy models
    - managers: per-entity managers bound to a session
    - export_manager / import_manager: JSON export and legacy import
    - cli: administrative command-line interface

Import InterneDB from interne.database.manager; this package only
re-exports the shared exceptions and decorators.
"""
from interne.core.exceptions import (
    DatabaseError,
    DatabaseLockedError,
    ExportError,
    FormValidationError,
    LegacyImportError,
    ValidationError,
)
from .decorators import handle_db_errors, is_lock_error, log_database_operation

__all__ = [
    # Exceptions
    "DatabaseError",
    "DatabaseLockedError",
    "ExportError",
    "FormValidationError",
    "LegacyImportError",
    "ValidationError",
    # Decorators
    "handle_db_errors",
    "is_lock_error",
    "log_database_operation",
]
