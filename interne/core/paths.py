#!/usr/bin/env python3
"""
paths.py
-------------------
Path constants for the Interne project.

All paths are Path objects relative to the project root:

    ROOT/
    ├── interne/          # Package source
    │   └── migrations/   # Alembic environment
    ├── data/             # SQLite database
    ├── exports/          # JSON exports
    └── logs/             # Application logs

The CLI uses these as defaults; each can be overridden per invocation
or through INTERNE_* environment variables.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from pathlib import Path


def _get_project_root() -> Path:
    """
    Determine project root directory.

    Assumes this file is at ROOT/interne/core/paths.py.

    Raises:
        RuntimeError: If the package directory cannot be found above this file
    """
    current_file = Path(__file__).resolve()
    root = current_file.parent.parent.parent

    if not (root / "interne").is_dir():
        raise RuntimeError(
            f"Cannot determine valid project root. "
            f"Expected {root / 'interne'} to exist. "
            f"Current file: {current_file}"
        )
    return root


# ----- Project directory -----
ROOT: Path = _get_project_root()
PACKAGE_DIR = ROOT / "interne"

# --- Database ---
DATA_DIR = ROOT / "data"
DB_PATH = DATA_DIR / "interne.db"
ALEMBIC_DIR = PACKAGE_DIR / "migrations"
ALEMBIC_INI = ROOT / "alembic.ini"

# --- Output ---
EXPORT_DIR = ROOT / "exports"
LOG_DIR = ROOT / "logs"
