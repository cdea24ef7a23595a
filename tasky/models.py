"""Domain types for todos: priorities, statuses, filters and records."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum, IntEnum

from .dates import today_start
from .errors import InvalidPriorityError, InvalidSortByError, InvalidStatusError


class Priority(IntEnum):
    """How important a todo is; the value is what the database stores."""

    LOW = 0
    MEDIUM = 1
    HIGH = 2

    @classmethod
    def parse(cls, source: str) -> Priority:
        """Parse an English, Korean or one-letter priority name."""
        try:
            return _PRIORITY_NAMES[source.lower()]
        except KeyError:
            raise InvalidPriorityError(source) from None

    def display(self) -> str:
        return _PRIORITY_DISPLAY[self]

    def emoji(self) -> str:
        return _PRIORITY_EMOJI[self]

    def __str__(self) -> str:
        return self.display()


class Status(IntEnum):
    """Whether a todo is still open; the value is what the database stores."""

    PENDING = 0
    DONE = 1

    @classmethod
    def parse(cls, source: str) -> Status:
        """Parse an English, Korean or one-letter status name."""
        try:
            return _STATUS_NAMES[source.lower()]
        except KeyError:
            raise InvalidStatusError(source) from None

    def display(self) -> str:
        return _STATUS_DISPLAY[self]

    def emoji(self) -> str:
        return _STATUS_EMOJI[self]

    def __str__(self) -> str:
        return self.display()


class SortBy(Enum):
    """Sort key; the value is the column it sorts on."""

    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"
    DUE_DATE = "due_date"
    PRIORITY = "priority"
    TITLE = "title"

    @classmethod
    def parse(cls, source: str) -> SortBy:
        try:
            return _SORT_BY_NAMES[source.lower()]
        except KeyError:
            raise InvalidSortByError(source) from None


class SortOrder(Enum):
    """Sort direction; unknown names fall back to descending."""

    ASC = "ASC"
    DESC = "DESC"

    @classmethod
    def parse(cls, source: str) -> SortOrder:
        if source.lower() in ("asc", "ascending"):
            return cls.ASC
        return cls.DESC


_PRIORITY_NAMES = {
    "low": Priority.LOW,
    "낮음": Priority.LOW,
    "l": Priority.LOW,
    "medium": Priority.MEDIUM,
    "보통": Priority.MEDIUM,
    "m": Priority.MEDIUM,
    "high": Priority.HIGH,
    "높음": Priority.HIGH,
    "h": Priority.HIGH,
}
_PRIORITY_DISPLAY = {Priority.LOW: "낮음", Priority.MEDIUM: "보통", Priority.HIGH: "높음"}
_PRIORITY_EMOJI = {Priority.LOW: "🟢", Priority.MEDIUM: "🟡", Priority.HIGH: "🔴"}

_STATUS_NAMES = {
    "pending": Status.PENDING,
    "대기": Status.PENDING,
    "p": Status.PENDING,
    "done": Status.DONE,
    "완료": Status.DONE,
    "d": Status.DONE,
}
_STATUS_DISPLAY = {Status.PENDING: "대기중", Status.DONE: "완료"}
_STATUS_EMOJI = {Status.PENDING: "⏳", Status.DONE: "✅"}

_SORT_BY_NAMES = {
    "created": SortBy.CREATED_AT,
    "created_at": SortBy.CREATED_AT,
    "updated": SortBy.UPDATED_AT,
    "updated_at": SortBy.UPDATED_AT,
    "due": SortBy.DUE_DATE,
    "due_date": SortBy.DUE_DATE,
    "priority": SortBy.PRIORITY,
    "title": SortBy.TITLE,
}


def _whole_days(delta: timedelta) -> int:
    seconds = abs(delta // timedelta(microseconds=1)) // 1_000_000
    days = seconds // 86_400
    return days if delta >= timedelta(0) else -days


@dataclass(kw_only=True)
class Todo:
    """A stored todo item."""

    id: int | None = None
    title: str
    description: str | None = None
    priority: Priority = Priority.MEDIUM
    status: Status = Status.PENDING
    created_at: datetime
    updated_at: datetime
    due_date: datetime | None = None

    def is_overdue(self) -> bool:
        """True for a pending todo due before the start of today."""
        if self.status is Status.DONE or self.due_date is None:
            return False
        return self.due_date < today_start()

    def days_until_due(self) -> int | None:
        """Whole days from the start of today to the due date, if any."""
        if self.due_date is None:
            return None
        return _whole_days(self.due_date - today_start())


@dataclass
class CreateTodo:
    """Fields for a new todo."""

    title: str
    description: str | None = None
    priority: Priority = Priority.MEDIUM
    due_date: datetime | None = None


@dataclass
class UpdateTodo:
    """Fields to change on a todo; ``None`` leaves a field unchanged."""

    title: str | None = None
    description: str | None = None
    priority: Priority | None = None
    status: Status | None = None
    due_date: datetime | None = None


@dataclass
class TodoFilter:
    """Conditions a listed todo must meet; ``None`` means no condition."""

    status: Status | None = None
    priority: Priority | None = None
    created_before: datetime | None = None
    created_after: datetime | None = None
    due_before: datetime | None = None
    due_after: datetime | None = None


@dataclass
class TodoStats:
    """Counts over all todos."""

    total_todos: int
    pending_todos: int
    completed_todos: int
    high_priority_todos: int
    overdue_todos: int
    completion_rate: float