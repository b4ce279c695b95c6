#!/usr/bin/env python3
"""
decorators.py
--------------------
Decorators wrapped around every entity-manager operation.

    @handle_db_errors
    @log_database_operation("create_entry")
    def create(self, owner, metadata): ...

handle_db_errors turns SQLAlchemy failures into the Interne exception
hierarchy. SQLite lock contention becomes DatabaseLockedError so that
InterneDB.run_with_retry can replay the unit of work. Input rejected
by validation passes through untouched.

log_database_operation records each call with the id it acts on and its
duration. Validation rejections are logged as warnings, not errors.
"""
import time
from functools import wraps
from typing import Any, Callable, Dict, Optional

from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError

from interne.core.exceptions import DatabaseError, DatabaseLockedError, ValidationError

_LOCK_MARKERS = ("database is locked", "database table is locked", "database is busy")


def is_lock_error(error: BaseException) -> bool:
    """
    Whether an error (or anything in its cause chain) is SQLite lock contention.

    Accepts raw OperationalErrors as well as the DatabaseLockedError
    they are translated into.
    """
    seen = set()
    current: Optional[BaseException] = error
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        if isinstance(current, DatabaseLockedError):
            return True
        if isinstance(current, OperationalError):
            message = str(current.orig if current.orig is not None else current).lower()
            if any(marker in message for marker in _LOCK_MARKERS):
                return True
        current = current.__cause__ or current.__context__
    return False


def _call_details(args: tuple, kwargs: Dict[str, Any]) -> Dict[str, Any]:
    """Log context for a call: kwargs keys and the id of the first argument."""
    details: Dict[str, Any] = {"kwargs_keys": sorted(kwargs)}
    if args:
        first = args[0]
        target_id = getattr(first, "id", first)
        if isinstance(target_id, int) and not isinstance(target_id, bool):
            details["target_id"] = target_id
    return details


def log_database_operation(operation_name: str):
    """
    Decorator to log a manager operation with timing.

    Args:
        operation_name: Name used in the log records

    Returns:
        Decorator function
    """

    def decorator(function: Callable) -> Callable:
        @wraps(function)
        def wrapper(self, *args, **kwargs):
            logger = getattr(self, "logger", None)
            if not logger:
                return function(self, *args, **kwargs)

            details = _call_details(args, kwargs)
            started = time.perf_counter()
            logger.log_debug(f"Starting {operation_name}", details)

            try:
                result = function(self, *args, **kwargs)
            except ValidationError as e:
                logger.log_warning(
                    f"{operation_name} rejected: {e}",
                    {**details, "fields": sorted(getattr(e, "errors", {}) or {})},
                )
                raise
            except Exception as e:
                logger.log_error(
                    e,
                    {
                        "operation": operation_name,
                        "duration_ms": round((time.perf_counter() - started) * 1000, 3),
                        "lock_contention": is_lock_error(e),
                        **details,
                    },
                )
                raise

            logger.log_operation(
                f"{operation_name}_completed",
                {
                    **details,
                    "duration_ms": round((time.perf_counter() - started) * 1000, 3),
                    "success": True,
                },
            )
            return result

        return wrapper

    return decorator


def handle_db_errors(function: Callable) -> Callable:
    """
    Decorator converting SQLAlchemy errors to DatabaseError subclasses.

    Errors that already belong to the Interne hierarchy (DatabaseError,
    ValidationError) and non-database exceptions propagate unchanged.

    Args:
        function: Function to wrap

    Returns:
        Wrapped function with error handling
    """

    @wraps(function)
    def wrapper(*args, **kwargs):
        try:
            return function(*args, **kwargs)
        except IntegrityError as e:
            raise DatabaseError(f"Data integrity violation: {e.orig}") from e
        except OperationalError as e:
            if is_lock_error(e):
                raise DatabaseLockedError(f"Database is locked: {e.orig}") from e
            raise DatabaseError(f"Database operation failed: {e}") from e
        except SQLAlchemyError as e:
            raise DatabaseError(f"Database operation failed: {e}") from e

    return wrapper
