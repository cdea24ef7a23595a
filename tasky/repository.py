"""Storage of todos in the SQLite ``todos`` table."""

from __future__ import annotations

import sqlite3
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any

from .errors import DatabaseError
from .models import (
    CreateTodo,
    Priority,
    SortBy,
    SortOrder,
    Status,
    Todo,
    TodoFilter,
    TodoStats,
    UpdateTodo,
)

_COLUMNS = "id, title, description, priority, status, created_at, updated_at, due_date"


def _to_text(value: datetime | None) -> str | None:
    if value is None:
        return None
    return value.astimezone(timezone.utc).isoformat(sep=" ", timespec="microseconds")


def _from_text(value: str | None) -> datetime | None:
    if value is None:
        return None
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _row_to_todo(row: tuple[Any, ...]) -> Todo:
    todo_id, title, description, priority, status, created, updated, due = row
    return Todo(
        id=todo_id,
        title=title,
        description=description,
        priority=Priority(priority) if priority in (0, 1, 2) else Priority.MEDIUM,
        status=Status(status) if status in (0, 1) else Status.PENDING,
        created_at=_from_text(created),
        updated_at=_from_text(updated),
        due_date=_from_text(due),
    )


def _filter_clause(todo_filter: TodoFilter) -> tuple[str, list[Any]]:
    checks = (
        ("status = ?", todo_filter.status, int),
        ("priority = ?", todo_filter.priority, int),
        ("created_at < ?", todo_filter.created_before, _to_text),
        ("created_at > ?", todo_filter.created_after, _to_text),
        ("due_date < ?", todo_filter.due_before, _to_text),
        ("due_date >= ?", todo_filter.due_after, _to_text),
    )
    conditions = []
    params = []
    for condition, value, convert in checks:
        if value is not None:
            conditions.append(condition)
            params.append(convert(value))
    where = f"WHERE {' AND '.join(conditions)}" if conditions else ""
    return where, params


class TodoRepository:
    """Reads and writes todos through an open SQLite connection."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    def _execute(self, sql: str, params: tuple | list = ()) -> sqlite3.Cursor:
        try:
            return self.conn.execute(sql, params)
        except sqlite3.Error as exc:
            raise DatabaseError(exc) from exc

    def _count(self, sql: str, params: tuple = ()) -> int:
        return self._execute(sql, params).fetchone()[0]

    def create(self, todo: CreateTodo) -> Todo:
        """Insert a new pending todo and return it with its id."""
        now = datetime.now(timezone.utc)
        stamp = _to_text(now)
        cursor = self._execute(
            "INSERT INTO todos (title, description, priority, status, "
            "created_at, updated_at, due_date) VALUES (?, ?, ?, ?, ?, ?, ?)",
            (
                todo.title,
                todo.description,
                int(todo.priority),
                int(Status.PENDING),
                stamp,
                stamp,
                _to_text(todo.due_date),
            ),
        )
        return Todo(
            id=cursor.lastrowid,
            title=todo.title,
            description=todo.description,
            priority=todo.priority,
            status=Status.PENDING,
            created_at=now,
            updated_at=now,
            due_date=todo.due_date,
        )

    def find_by_id(self, todo_id: int) -> Todo | None:
        row = self._execute(
            f"SELECT {_COLUMNS} FROM todos WHERE id = ?", (todo_id,)
        ).fetchone()
        return None if row is None else _row_to_todo(row)

    def find_all(
        self,
        todo_filter: TodoFilter | None = None,
        sort_by: SortBy = SortBy.CREATED_AT,
        sort_order: SortOrder = SortOrder.DESC,
    ) -> list[Todo]:
        """Todos matching the filter, in the requested order."""
        where, params = _filter_clause(todo_filter or TodoFilter())
        query = (
            f"SELECT {_COLUMNS} FROM todos {where} "
            f"ORDER BY {sort_by.value} {sort_order.value}"
        )
        return [_row_to_todo(row) for row in self._execute(query, params)]

    def update(self, todo_id: int, changes: UpdateTodo) -> Todo | None:
        """Apply the set fields of ``changes``; None when no such todo exists."""
        existing = self.find_by_id(todo_id)
        if existing is None:
            return None

        fields = {
            name: value
            for name, value in (
                ("title", changes.title),
                ("description", changes.description),
                ("priority", changes.priority),
                ("due_date", changes.due_date),
                ("status", changes.status),
            )
            if value is not None
        }
        updated = replace(existing, **fields, updated_at=datetime.now(timezone.utc))

        self._execute(
            "UPDATE todos SET title = ?, description = ?, priority = ?, "
            "status = ?, due_date = ?, updated_at = ? WHERE id = ?",
            (
                updated.title,
                updated.description,
                int(updated.priority),
                int(updated.status),
                _to_text(updated.due_date),
                _to_text(updated.updated_at),
                todo_id,
            ),
        )
        return updated

    def delete(self, todo_id: int) -> bool:
        """Remove a todo; True if one was removed."""
        return self._execute("DELETE FROM todos WHERE id = ?", (todo_id,)).rowcount > 0

    def get_stats(self) -> TodoStats:
        total = self._count("SELECT COUNT(*) FROM todos")
        pending = self._count("SELECT COUNT(*) FROM todos WHERE status = 0")
        completed = self._count("SELECT COUNT(*) FROM todos WHERE status = 1")
        high = self._count("SELECT COUNT(*) FROM todos WHERE priority = 2")
        overdue = self._count(
            "SELECT COUNT(*) FROM todos WHERE status = 0 AND due_date < ? "
            "AND due_date IS NOT NULL",
            (_to_text(datetime.now(timezone.utc)),),
        )
        rate = completed / total * 100.0 if total > 0 else 0.0
        return TodoStats(
            total_todos=total,
            pending_todos=pending,
            completed_todos=completed,
            high_priority_todos=high,
            overdue_todos=overdue,
            completion_rate=rate,
        )