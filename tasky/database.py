"""SQLite connection handling and the database location."""

from __future__ import annotations

import os
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from platformdirs import user_data_dir

from .errors import DatabaseError
from .migrations import run_migrations

_ENV_PATH = "TASKY_DB_PATH"


class Database:
    """An open SQLite database holding todos."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = path
        self.conn = self._connect(str(path))

    @staticmethod
    def _connect(target: str) -> sqlite3.Connection:
        try:
            conn = sqlite3.connect(target, isolation_level=None)
            conn.execute("PRAGMA foreign_keys = ON")
        except sqlite3.Error as exc:
            raise DatabaseError(exc) from exc
        return conn

    @classmethod
    def open_default(cls) -> Database:
        """Open the database at the default path, creating its directory."""
        path = cls.default_path()
        path.parent.mkdir(parents=True, exist_ok=True)
        return cls(path)

    @classmethod
    def in_memory(cls) -> Database:
        """Open a fresh, private in-memory database."""
        return cls(":memory:")

    @staticmethod
    def default_path() -> Path:
        """The path from ``TASKY_DB_PATH``, or ``tasky.db`` in the user data directory."""
        custom = os.environ.get(_ENV_PATH)
        if custom is not None:
            return Path(custom)
        try:
            data_dir = user_data_dir("tasky", appauthor=False, roaming=True)
        except Exception:  # no usable home or data directory
            return Path("tasky.db")
        return Path(data_dir) / "tasky.db"

    def close(self) -> None:
        try:
            self.conn.close()
        except sqlite3.Error as exc:
            raise DatabaseError(exc) from exc

    def initialize(self) -> None:
        """Create the schema if it is missing."""
        run_migrations(self.conn)

    def is_initialized(self) -> bool:
        """True when the todos table exists."""
        try:
            row = self.conn.execute(
                "SELECT name FROM sqlite_master WHERE type='table' AND name='todos'"
            ).fetchone()
        except sqlite3.Error:
            return False
        return row is not None

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Run the block in a transaction, committing on success, rolling back on error."""
        try:
            self.conn.execute("BEGIN")
        except sqlite3.Error as exc:
            raise DatabaseError(exc) from exc
        try:
            yield self.conn
        except BaseException:
            self.conn.execute("ROLLBACK")
            raise
        try:
            self.conn.execute("COMMIT")
        except sqlite3.Error as exc:
            raise DatabaseError(exc) from exc

    def __enter__(self) -> Database:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()