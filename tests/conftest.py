"""
conftest.py
-----------
Shared pytest fixtures for Interne tests.

Provides fixtures for:
- Database setup and teardown
- Entity managers bound to a test session
- A pinned clock
- Test data factories
"""
import pytest
from datetime import datetime, timezone
from pathlib import Path
from tempfile import TemporaryDirectory

from interne.core.clock import FixedClock


NOW = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


# ----- Path Fixtures -----

@pytest.fixture
def tmp_dir():
    """Create a temporary directory for test file operations."""
    with TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def clock():
    """Clock pinned to 2024-05-01 12:00 UTC."""
    return FixedClock(NOW)


# ----- Database Fixtures -----

@pytest.fixture
def test_db_path(tmp_dir):
    """Create temporary test database path."""
    return tmp_dir / "test.db"


@pytest.fixture
def test_alembic_dir():
    """Path to Alembic directory."""
    return Path(__file__).parent.parent / "interne" / "migrations"


@pytest.fixture
def test_db(test_db_path, test_alembic_dir):
    """
    Create test database instance with schema.

    Tables are created up front so InterneDB sees an existing file and
    does not run Alembic.
    """
    from sqlalchemy import create_engine
    from interne.database.manager import InterneDB
    from interne.database.models import Base

    engine = create_engine(f"sqlite:///{test_db_path}")
    Base.metadata.create_all(engine)
    engine.dispose()

    db = InterneDB(db_path=test_db_path, alembic_dir=test_alembic_dir)

    yield db

    db.close()
    if test_db_path.exists():
        test_db_path.unlink()


@pytest.fixture
def db_session(test_db):
    """
    Create a database session for tests.

    Provides a session with automatic rollback after test.
    """
    with test_db.session_scope() as session:
        yield session
        session.rollback()


# ----- Manager Fixtures -----

@pytest.fixture
def user_manager(db_session):
    from interne.database.managers import UserManager
    return UserManager(db_session, logger=None)


@pytest.fixture
def entry_manager(db_session):
    from interne.database.managers import EntryManager
    return EntryManager(db_session, logger=None)


@pytest.fixture
def collection_manager(db_session):
    from interne.database.managers import CollectionManager
    return CollectionManager(db_session, logger=None)


@pytest.fixture
def tag_manager(db_session):
    from interne.database.managers import TagManager
    return TagManager(db_session, logger=None)


# ----- Data Factories -----

@pytest.fixture
def make_user(user_manager):
    """Factory creating users with distinct names."""
    counter = {"n": 0}

    def _make(name=None, email=None):
        counter["n"] += 1
        return user_manager.create({"name": name or f"user{counter['n']}", "email": email})

    return _make


@pytest.fixture
def alice(make_user):
    return make_user("alice")


@pytest.fixture
def bob(make_user):
    return make_user("bob")


@pytest.fixture
def carol(make_user):
    return make_user("carol")


@pytest.fixture
def make_entry(entry_manager):
    """Factory creating entries with sensible defaults."""

    def _make(owner, **overrides):
        data = {
            "url": "https://example.com",
            "title": "Example",
            "duration": 3,
            "interval": "days",
        }
        data.update(overrides)
        return entry_manager.create(owner, data)

    return _make
