#!/usr/bin/env python3
"""
manager.py
--------------------
Database manager for the Interne bookmark scheduler.

Provides the InterneDB class for interacting with the SQLite database.
Handles:
    - Initialization of the database engine and sessionmaker
    - Transactional session scopes with per-session entity managers
    - Schema creation and migration management via Alembic
    - Logging of database lifecycle events

Key Features:
    - Transaction management with automatic rollback
    - Foreign key enforcement on every SQLite connection
    - Working SAVEPOINTs for insert-or-ignore style writes
    - Entity managers bound lazily to the active session
    - Whole-transaction retry when SQLite reports a locked database

Usage:
    db = InterneDB(DB_PATH, ALEMBIC_DIR, log_dir=LOG_DIR)

    with db.session_scope() as session:
        user = db.users.authenticate(code)
        views = db.entries.list_views(user, "ready")

Notes
==============
- All instants are stored as UTC text (see models.base.IsoDateTime)
- A fresh database is created from the models and stamped at head;
  an existing one is upgraded with Alembic
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import time
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, Optional, TypeVar, Union

# --- Third party ---
from sqlalchemy import Engine, create_engine, event
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, sessionmaker

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext

# --- Local imports ---
from interne.core.exceptions import DatabaseError, DatabaseLockedError
from interne.core.logging_manager import InterneLogger
from interne.core.paths import ALEMBIC_INI
from .decorators import handle_db_errors, is_lock_error, log_database_operation
from .export_manager import ExportManager
from .import_manager import ImportManager
from .managers import CollectionManager, EntryManager, TagManager, UserManager
from .models import Base

T = TypeVar("T")


def _configure_sqlite(engine: Engine) -> None:
    """
    Enable foreign keys and let SQLAlchemy own transaction boundaries.

    pysqlite's implicit BEGIN handling breaks SAVEPOINT; disabling it and
    emitting BEGIN from the engine restores nested transactions.
    """

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        del connection_record
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


# ----- Main Database Manager -----
class InterneDB:
    """
    Main database manager for the Interne database.

    Attributes:
        - db_path (Path): Filesystem path to the SQLite database file.
        - alembic_dir (Path): Filesystem path to the Alembic directory.
        - engine (Engine): SQLAlchemy engine instance.
        - SessionLocal (sessionmaker): SQLAlchemy session factory.
        - export_manager (ExportManager): JSON export
        - import_manager (ImportManager): Legacy JSON import

    Usage:
        db = InterneDB("~/interne/interne.db", "interne/migrations")
        with db.session_scope() as session:
            entries = db.entries.visible_to(user.id)
    """

    # ---- Initialization ----
    def __init__(
        self,
        db_path: Union[str, Path],
        alembic_dir: Union[str, Path],
        log_dir: Optional[Union[str, Path]] = None,
    ) -> None:
        """
        Initialize database engine and session factory.

        Args:
            db_path (str | Path): Path to the SQLite file.
            alembic_dir (str | Path): Path to the Alembic directory.
            log_dir (str | Path): Directory for log files (optional)
        """
        self.db_path = Path(db_path).expanduser().resolve()
        self.alembic_dir = Path(alembic_dir).expanduser().resolve()

        # --- Logging ---
        if log_dir:
            self.log_dir = Path(log_dir).expanduser().resolve()
            self.logger: Optional[InterneLogger] = InterneLogger(
                self.log_dir, component_name="database"
            )
        else:
            self.logger = None

        self.export_manager = ExportManager(self.logger)
        self.import_manager = ImportManager(self.logger)

        # Entity managers (bound in session_scope)
        self._user_manager: Optional[UserManager] = None
        self._entry_manager: Optional[EntryManager] = None
        self._collection_manager: Optional[CollectionManager] = None
        self._tag_manager: Optional[TagManager] = None

        self._setup_engine()

    def _setup_engine(self) -> None:
        """Initialize database engine and session factory."""
        try:
            if self.logger:
                self.logger.log_operation(
                    "database_init_start",
                    {
                        "db_path": str(self.db_path),
                        "alembic_dir": str(self.alembic_dir),
                    },
                )

            is_new = not self.db_path.exists()
            self.db_path.parent.mkdir(parents=True, exist_ok=True)

            self.engine: Engine = create_engine(
                f"sqlite:///{self.db_path}",
                echo=False,
                pool_pre_ping=True,
            )
            _configure_sqlite(self.engine)

            self.SessionLocal: sessionmaker = sessionmaker(
                bind=self.engine,
                autoflush=True,
                expire_on_commit=False,
            )

            self.alembic_cfg: Config = self._setup_alembic()

            if is_new:
                self.initialize_schema()

            if self.logger:
                self.logger.log_operation("database_init_complete", {"success": True})

        except Exception as e:
            if self.logger:
                self.logger.log_error(e, {"operation": "database_init"})
            raise DatabaseError(f"Database initialization failed: {e}") from e

    # ---- Session Management ----
    @contextmanager
    def session_scope(self):
        """
        Provide a transactional scope around operations with logging.

        Commits on success and rolls back on any exception. Entity
        managers are available via properties (db.users, db.entries,
        db.collections, db.tags) for the duration of the scope.

        Usage:
            with db.session_scope() as session:
                entry = db.entries.create(user, {...})
                db.entries.visit(user, entry.id)
        """
        session = self.SessionLocal()
        session_id = datetime.now().strftime("%Y%m%d_%H%M%S_%f")

        self._user_manager = UserManager(session, self.logger)
        self._entry_manager = EntryManager(session, self.logger)
        self._collection_manager = CollectionManager(session, self.logger)
        self._tag_manager = TagManager(session, self.logger)

        if self.logger:
            self.logger.log_debug("session_start", {"session_id": session_id})

        try:
            yield session
            session.commit()
            if self.logger:
                self.logger.log_debug("session_commit", {"session_id": session_id})

        except Exception as e:
            session.rollback()
            if self.logger:
                self.logger.log_error(
                    e, {"operation": "session_rollback", "session_id": session_id}
                )
            raise
        finally:
            self._user_manager = None
            self._entry_manager = None
            self._collection_manager = None
            self._tag_manager = None

            session.close()
            if self.logger:
                self.logger.log_debug("session_close", {"session_id": session_id})

    def run_with_retry(
        self,
        operation: Callable[[Session], T],
        max_retries: int = 3,
        retry_delay: float = 0.1,
    ) -> T:
        """
        Run a unit of work in its own session, replaying it on lock contention.

        SQLite rolls the whole transaction back when a write hits a
        locked database, so each attempt gets a fresh session_scope and
        calls operation again from the start.

        Args:
            operation: Callable receiving the session; entity managers
                (db.entries, db.tags, ...) are bound while it runs
            max_retries: Total number of attempts
            retry_delay: Base delay between attempts (exponential backoff)

        Returns:
            Whatever operation returns

        Raises:
            DatabaseLockedError: If the database is still locked after the last attempt
        """
        for attempt in range(max_retries):
            try:
                with self.session_scope() as session:
                    return operation(session)
            except (DatabaseError, OperationalError) as e:
                if not is_lock_error(e):
                    raise
                if attempt == max_retries - 1:
                    if isinstance(e, DatabaseLockedError):
                        raise
                    raise DatabaseLockedError(f"Database is locked: {e}") from e

                wait_time = retry_delay * (2**attempt)
                if self.logger:
                    self.logger.log_warning(
                        f"Database locked, retrying in {wait_time}s",
                        {"attempt": attempt + 1, "max_retries": max_retries},
                    )
                time.sleep(wait_time)

        raise DatabaseLockedError("Retry loop completed without success")

    # -------------------------------------------------------------------------
    # Entity Manager Properties
    # -------------------------------------------------------------------------

    @property
    def users(self) -> UserManager:
        """
        Access UserManager for account operations.

        Raises:
            DatabaseError: If accessed outside of session_scope context
        """
        if self._user_manager is None:
            raise DatabaseError(
                "UserManager requires active session. Use within session_scope."
            )
        return self._user_manager

    @property
    def entries(self) -> EntryManager:
        """
        Access EntryManager for entry operations.

        Recommended usage:
            with db.session_scope():
                views = db.entries.list_views(user, "waiting")

        Raises:
            DatabaseError: If accessed outside of session_scope context
        """
        if self._entry_manager is None:
            raise DatabaseError(
                "EntryManager requires active session. "
                "Use within session_scope: "
                "with db.session_scope() as session: db.entries.create(...)"
            )
        return self._entry_manager

    @property
    def collections(self) -> CollectionManager:
        """
        Access CollectionManager for collection and membership operations.

        Raises:
            DatabaseError: If accessed outside of session_scope context
        """
        if self._collection_manager is None:
            raise DatabaseError(
                "CollectionManager requires active session. Use within session_scope."
            )
        return self._collection_manager

    @property
    def tags(self) -> TagManager:
        """
        Access TagManager for tag operations.

        Raises:
            DatabaseError: If accessed outside of session_scope context
        """
        if self._tag_manager is None:
            raise DatabaseError(
                "TagManager requires active session. Use within session_scope."
            )
        return self._tag_manager

    # ---- Alembic setup ----
    def _setup_alembic(self) -> Config:
        """Setup Alembic configuration."""
        try:
            if self.logger:
                self.logger.log_debug("Setting up Alembic configuration...")

            alembic_cfg: Config = Config(str(ALEMBIC_INI))
            alembic_cfg.set_main_option("script_location", str(self.alembic_dir))
            alembic_cfg.set_main_option("sqlalchemy.url", f"sqlite:///{self.db_path}")

            return alembic_cfg
        except Exception as e:
            if self.logger:
                self.logger.log_error(e, {"operation": "setup_alembic"})
            raise DatabaseError(f"Alembic configuration failed: {e}") from e

    @handle_db_errors
    @log_database_operation("initialize_schema")
    def initialize_schema(self) -> None:
        """
        Initialize database - create tables if needed and run migrations.

        Actions:
            Checks if the database is fresh (no tables)
            If fresh,
                creates all tables from the ORM models
                stamps the Alembic revision to head
            If not,
                runs pending migrations to update schema
        """
        try:
            with self.engine.connect() as conn:
                table_names = self.engine.dialect.get_table_names(conn)
                is_fresh_db: bool = len(table_names) == 0

            if is_fresh_db:
                Base.metadata.create_all(bind=self.engine)
                command.stamp(self.alembic_cfg, "head")
                if self.logger:
                    self.logger.log_operation(
                        "fresh_database_created",
                        {"tables_created": len(Base.metadata.tables)},
                    )
            else:
                self.upgrade_database()
                if self.logger:
                    self.logger.log_operation(
                        "existing_database_migrated",
                        {"table_count": len(table_names)},
                    )

        except Exception as e:
            raise DatabaseError(f"Could not initialize database: {e}") from e

    @handle_db_errors
    @log_database_operation("upgrade_database")
    def upgrade_database(self, revision: str = "head") -> None:
        """
        Upgrade the database schema to the specified Alembic revision.

        Args:
            revision (str, optional):
                The target revision to upgrade to.
                Defaults to 'head' (latest revision).
        """
        try:
            command.upgrade(self.alembic_cfg, revision)
        except Exception as e:
            raise DatabaseError(f"Database upgrade failed: {e}") from e

    def get_migration_history(self) -> Dict[str, Optional[str]]:
        """
        Get the current migration status of the database.

        Returns:
            Dictionary with keys:
                - 'current_revision' (str | None)
                - 'status' (str): 'up_to_date' or 'needs_migration'
                - 'error' (str, optional): Present if an exception occurred
        """
        try:
            with self.engine.connect() as conn:
                context = MigrationContext.configure(conn)
                current_rev = context.get_current_revision()
            return {
                "current_revision": current_rev,
                "status": "up_to_date" if current_rev else "needs_migration",
            }
        except Exception as e:
            if self.logger:
                self.logger.log_error(e, {"operation": "get_migration_history"})
            return {"error": str(e)}

    def close(self) -> None:
        """Dispose of the engine and close log handlers."""
        self.engine.dispose()
        if self.logger:
            self.logger.close()

    # ----- Context Manager Support -----
    def __enter__(self) -> "InterneDB":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        del exc_type, exc_val, exc_tb
        self.close()
