"""Business rules for todos on top of the repository."""

from __future__ import annotations

from dataclasses import replace

from .dates import today_end, today_start
from .database import Database
from .errors import EmptyTitleError, InvalidInputError, TodoNotFoundError
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
from .repository import TodoRepository

_MAX_TITLE_BYTES = 200
_MAX_DESCRIPTION_BYTES = 1000


def _check_title(title: str) -> None:
    if not title.strip():
        raise EmptyTitleError()
    if len(title.encode("utf-8")) > _MAX_TITLE_BYTES:
        raise InvalidInputError("제목은 200자를 초과할 수 없습니다.")


def _check_description(description: str | None) -> None:
    if description is not None and len(description.encode("utf-8")) > _MAX_DESCRIPTION_BYTES:
        raise InvalidInputError("설명은 1000자를 초과할 수 없습니다.")


def _strip_or_none(value: str | None) -> str | None:
    return None if value is None else value.strip()


class TodoService:
    """Validates input and carries out todo operations against a database."""

    def __init__(self, db: Database) -> None:
        self.db = db
        self._repo = TodoRepository(db.conn)

    @classmethod
    def open_default(cls) -> TodoService:
        """Open the default database, creating the schema if needed."""
        db = Database.open_default()
        if not db.is_initialized():
            db.initialize()
        return cls(db)

    @classmethod
    def in_memory(cls) -> TodoService:
        """A service over a fresh, initialised in-memory database."""
        db = Database.in_memory()
        db.initialize()
        return cls(db)

    def close(self) -> None:
        self.db.close()

    def __enter__(self) -> TodoService:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def create_todo(self, create_todo: CreateTodo) -> Todo:
        """Validate, trim and store a new todo."""
        _check_title(create_todo.title)
        _check_description(create_todo.description)
        cleaned = replace(
            create_todo,
            title=create_todo.title.strip(),
            description=_strip_or_none(create_todo.description),
        )
        return self._repo.create(cleaned)

    def get_todo_by_id(self, todo_id: int) -> Todo:
        todo = self._repo.find_by_id(todo_id)
        if todo is None:
            raise TodoNotFoundError(todo_id)
        return todo

    def list_todos(
        self,
        todo_filter: TodoFilter | None = None,
        sort_by: SortBy | None = None,
        sort_order: SortOrder | None = None,
    ) -> list[Todo]:
        """Todos matching the filter; newest first unless told otherwise."""
        return self._repo.find_all(
            todo_filter or TodoFilter(),
            sort_by or SortBy.CREATED_AT,
            sort_order or SortOrder.DESC,
        )

    def update_todo(self, todo_id: int, update_todo: UpdateTodo) -> Todo:
        """Validate, trim and apply changes to an existing todo."""
        if update_todo.title is not None:
            _check_title(update_todo.title)
        _check_description(update_todo.description)
        cleaned = replace(
            update_todo,
            title=_strip_or_none(update_todo.title),
            description=_strip_or_none(update_todo.description),
        )
        todo = self._repo.update(todo_id, cleaned)
        if todo is None:
            raise TodoNotFoundError(todo_id)
        return todo

    def delete_todo(self, todo_id: int) -> bool:
        if not self._repo.delete(todo_id):
            raise TodoNotFoundError(todo_id)
        return True

    def complete_todo(self, todo_id: int) -> Todo:
        return self.update_todo(todo_id, UpdateTodo(status=Status.DONE))

    def uncomplete_todo(self, todo_id: int) -> Todo:
        return self.update_todo(todo_id, UpdateTodo(status=Status.PENDING))

    def get_stats(self) -> TodoStats:
        return self._repo.get_stats()

    def get_today_todos(self) -> list[Todo]:
        """Todos due today, earliest first."""
        todo_filter = TodoFilter(due_after=today_start(), due_before=today_end())
        return self.list_todos(todo_filter, SortBy.DUE_DATE, SortOrder.ASC)

    def get_urgent_todos(self) -> list[Todo]:
        """Pending high-priority todos, earliest due first."""
        todo_filter = TodoFilter(status=Status.PENDING, priority=Priority.HIGH)
        return self.list_todos(todo_filter, SortBy.DUE_DATE, SortOrder.ASC)

    def get_overdue_todos(self) -> list[Todo]:
        """Pending todos due before the start of today, earliest first."""
        todo_filter = TodoFilter(status=Status.PENDING, due_before=today_start())
        return self.list_todos(todo_filter, SortBy.DUE_DATE, SortOrder.ASC)