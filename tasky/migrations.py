"""Schema creation for the todo database."""

from __future__ import annotations

import sqlite3

from .errors import DatabaseError

_TABLE = "todos"

_COLUMNS: tuple[tuple[str, str], ...] = (
    ("id", "INTEGER PRIMARY KEY AUTOINCREMENT"),
    ("title", "TEXT NOT NULL"),
    ("description", "TEXT"),
    ("priority", "INTEGER NOT NULL DEFAULT 1"),
    ("status", "INTEGER NOT NULL DEFAULT 0"),
    ("created_at", "TEXT NOT NULL"),
    ("updated_at", "TEXT NOT NULL"),
    ("due_date", "TEXT"),
)

_CONSTRAINTS: tuple[str, ...] = (
    "priority IN (0, 1, 2)",
    "status IN (0, 1)",
)

# Columns that queries filter or sort on.
_INDEXED_COLUMNS: tuple[str, ...] = ("status", "priority", "due_date", "created_at")


def _table_statement() -> str:
    parts = [f"{name} {declaration}" for name, declaration in _COLUMNS]
    parts.extend(f"CHECK ({condition})" for condition in _CONSTRAINTS)
    body = ",\n    ".join(parts)
    return f"CREATE TABLE IF NOT EXISTS {_TABLE} (\n    {body}\n)"


def _index_statements() -> list[str]:
    return [
        f"CREATE INDEX IF NOT EXISTS idx_{_TABLE}_{column} ON {_TABLE}({column})"
        for column in _INDEXED_COLUMNS
    ]


def run_migrations(conn: sqlite3.Connection) -> None:
    """Create the todos table and its indexes; safe to run repeatedly."""
    try:
        conn.execute(_table_statement())
        for statement in _index_statements():
            conn.execute(statement)
    except sqlite3.Error as exc:
        raise DatabaseError(exc) from exc