#!/usr/bin/env python3
"""
temporal_files.py
--------------------
Temporary file management for exports.

Files are staged under a temporary name and only moved into place once
fully written, so an interrupted export never leaves a truncated file
at the destination.

Usage:
    from interne.core.temporal_files import TemporalFileManager

    with TemporalFileManager(output.parent) as temp_manager:
        staged = temp_manager.create_temp_file(suffix=".json")
        staged.write_text(payload)
        temp_manager.commit(staged, output)
    # Anything not committed is removed on exit
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional

# --- Local imports ---
from .exceptions import TemporalFileError


class TemporalFileManager:
    """
    Tracks temporary files and removes the ones left over on exit.

    Usage:
        with TemporalFileManager() as temp_manager:
            temp_file = temp_manager.create_temp_file(suffix=".txt")
            # ... use temp_file ...
        # Automatic cleanup on context exit
    """

    def __init__(self, base_dir: Optional[Path] = None) -> None:
        """
        Initialize temporal file manager.

        Args:
            base_dir: Base directory for temporary files. Uses system temp if None.
        """
        self.base_dir = Path(base_dir) if base_dir else Path(tempfile.gettempdir())
        self.active_files: List[Path] = []

    def create_temp_file(self, suffix: str = "", prefix: str = "interne_") -> Path:
        """
        Create an empty temporary file and track it for cleanup.

        Raises:
            TemporalFileError: If file creation fails
        """
        try:
            self.base_dir.mkdir(parents=True, exist_ok=True)
            fd, temp_path = tempfile.mkstemp(suffix=suffix, prefix=prefix, dir=self.base_dir)
            os.close(fd)
        except OSError as e:
            raise TemporalFileError(f"Failed to create temporary file: {e}") from e

        path_obj = Path(temp_path)
        self.active_files.append(path_obj)
        return path_obj

    def commit(self, temp_file: Path, destination: Path) -> Path:
        """
        Move a staged file to its final location, replacing any existing file.

        Raises:
            TemporalFileError: If the file is not tracked or cannot be moved
        """
        if temp_file not in self.active_files:
            raise TemporalFileError(f"Not a tracked temporary file: {temp_file}")
        try:
            os.replace(temp_file, destination)
        except OSError as e:
            raise TemporalFileError(f"Failed to move {temp_file} to {destination}: {e}") from e
        self.active_files.remove(temp_file)
        return destination

    def cleanup(self) -> Dict[str, int]:
        """
        Remove all tracked temporary files.

        Returns:
            Dictionary with cleanup statistics
        """
        cleanup_stats = {"files_removed": 0, "errors": 0}

        for temp_file in self.active_files[:]:
            try:
                if temp_file.exists():
                    temp_file.unlink()
                    cleanup_stats["files_removed"] += 1
                self.active_files.remove(temp_file)
            except OSError:
                cleanup_stats["errors"] += 1

        return cleanup_stats

    def __enter__(self) -> "TemporalFileManager":
        return self

    def __exit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[Exception],
        exc_tb: Optional[Any],
    ) -> None:
        del exc_type, exc_val, exc_tb
        self.cleanup()
