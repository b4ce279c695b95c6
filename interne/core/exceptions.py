#!/usr/bin/env python3
"""
exceptions.py
--------------------
Custom exception classes for the Interne project.

This module defines a hierarchy of exceptions used throughout the project
to handle specific error conditions in different subsystems.

Exception Hierarchy:
    Exception (built-in)
    ├── DatabaseError - Base for all database-related errors
    │   ├── ExportError - Data export operation failures
    │   └── LegacyImportError - Legacy JSON import failures
    ├── ValidationError - Data validation failures
    │   └── FormValidationError - Field-level validation failures
    └── TemporalFileError - Temporary file management errors

Unauthorized mutations and hidden entities are not exceptions: managers
return False/None for them so that callers cannot tell a denied
operation from a missing entity.

Usage:
    from interne.core.exceptions import DatabaseError, ValidationError

    try:
        db.entries.create(user, {...})
    except FormValidationError as e:
        show(e.errors)
    except DatabaseError as e:
        logger.error(f"Database operation failed: {e}")
"""
from typing import Dict, Optional


class DatabaseError(Exception):
    """
    Base exception for database-related errors.

    Raised when database operations fail due to connection issues,
    query errors, integrity violations, or other database problems.

    Examples:
        >>> raise DatabaseError("Connection to database failed")
        >>> raise DatabaseError("Data integrity violation: duplicate invite code")
    """

    pass


class DatabaseLockedError(DatabaseError):
    """
    Raised when SQLite reports the database as locked or busy.

    The transaction that hit the lock has been rolled back; the whole
    unit of work can be retried in a fresh session
    (see InterneDB.run_with_retry).
    """

    pass


class ExportError(DatabaseError):
    """
    Exception for data export operation failures.

    Raised when writing the JSON export fails:
    - Output directory not writable
    - Serialization issues

    Examples:
        >>> raise ExportError("Failed to write export: permission denied")
    """

    pass


class LegacyImportError(DatabaseError):
    """
    Exception for legacy JSON import failures.

    Raised when the legacy bookmark export cannot be read or does not
    belong to an existing user.

    Examples:
        >>> raise LegacyImportError("User with id 42 not found")
        >>> raise LegacyImportError("Expected a JSON list of entries")
    """

    pass


class ValidationError(Exception):
    """
    Exception for data validation failures.

    Raised when input data fails validation checks:
    - Missing required fields
    - Unknown enumeration values
    - Type mismatches

    Examples:
        >>> raise ValidationError("Missing required field: 'title'")
        >>> raise ValidationError("Unknown interval: 'fortnights'")
    """

    pass


class FormValidationError(ValidationError):
    """
    Validation failure carrying one message per offending field.

    Raised by entry and collection managers before anything is written,
    so the caller can show the messages next to the form fields and let
    the user correct them.

    Attributes:
        errors: Mapping of field name to a human-readable message

    Examples:
        >>> raise FormValidationError({"title": "Title is required"})
    """

    def __init__(self, errors: Dict[str, str], message: Optional[str] = None):
        self.errors = dict(errors)
        if message is None:
            message = "; ".join(f"{field}: {msg}" for field, msg in self.errors.items())
        super().__init__(message)


class TemporalFileError(Exception):
    """
    Exception for temporary file management errors.

    Raised when the staging file used for an atomic export cannot be
    created or cleaned up.

    Examples:
        >>> raise TemporalFileError("Failed to create temporary file: disk full")
    """

    pass
