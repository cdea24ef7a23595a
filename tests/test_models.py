from datetime import datetime, timedelta, timezone

import pytest

from tasky.dates import today_start
from tasky.errors import InvalidPriorityError, InvalidSortByError, InvalidStatusError
from tasky.models import (
    CreateTodo,
    Priority,
    SortBy,
    SortOrder,
    Status,
    Todo,
    TodoFilter,
    UpdateTodo,
)


def _todo(**kwargs):
    now = datetime.now(timezone.utc)
    return Todo(title="task", created_at=now, updated_at=now, **kwargs)


@pytest.mark.parametrize(
    "name, expected",
    [
        ("low", Priority.LOW),
        ("낮음", Priority.LOW),
        ("L", Priority.LOW),
        ("Medium", Priority.MEDIUM),
        ("보통", Priority.MEDIUM),
        ("m", Priority.MEDIUM),
        ("HIGH", Priority.HIGH),
        ("높음", Priority.HIGH),
        ("h", Priority.HIGH),
    ],
)
def test_priority_parse(name, expected):
    assert Priority.parse(name) is expected


def test_priority_parse_invalid():
    with pytest.raises(InvalidPriorityError) as info:
        Priority.parse("urgent")
    assert info.value.priority == "urgent"


def test_priority_display_and_emoji():
    assert Priority.LOW.display() == "낮음"
    assert Priority.MEDIUM.display() == "보통"
    assert Priority.HIGH.display() == "높음"
    assert str(Priority.HIGH) == "높음"
    assert Priority.LOW.emoji() == "🟢"
    assert Priority.HIGH.emoji() == "🔴"


def test_priority_stored_values():
    assert [int(p) for p in (Priority.LOW, Priority.MEDIUM, Priority.HIGH)] == [0, 1, 2]
    assert Priority(2) is Priority.HIGH


@pytest.mark.parametrize(
    "name, expected",
    [
        ("pending", Status.PENDING),
        ("대기", Status.PENDING),
        ("P", Status.PENDING),
        ("Done", Status.DONE),
        ("완료", Status.DONE),
        ("d", Status.DONE),
    ],
)
def test_status_parse(name, expected):
    assert Status.parse(name) is expected


def test_status_parse_invalid():
    with pytest.raises(InvalidStatusError) as info:
        Status.parse("later")
    assert info.value.status == "later"


def test_status_display_and_emoji():
    assert Status.PENDING.display() == "대기중"
    assert Status.DONE.display() == "완료"
    assert str(Status.DONE) == "완료"
    assert Status.PENDING.emoji() == "⏳"
    assert Status.DONE.emoji() == "✅"
    assert int(Status.DONE) == 1


@pytest.mark.parametrize(
    "name, expected",
    [
        ("created", SortBy.CREATED_AT),
        ("created_at", SortBy.CREATED_AT),
        ("UPDATED", SortBy.UPDATED_AT),
        ("updated_at", SortBy.UPDATED_AT),
        ("due", SortBy.DUE_DATE),
        ("due_date", SortBy.DUE_DATE),
        ("priority", SortBy.PRIORITY),
        ("Title", SortBy.TITLE),
    ],
)
def test_sort_by_parse(name, expected):
    assert SortBy.parse(name) is expected


def test_sort_by_parse_invalid():
    with pytest.raises(InvalidSortByError) as info:
        SortBy.parse("colour")
    assert info.value.sort_by == "colour"


@pytest.mark.parametrize(
    "name, expected",
    [
        ("asc", SortOrder.ASC),
        ("Ascending", SortOrder.ASC),
        ("desc", SortOrder.DESC),
        ("descending", SortOrder.DESC),
        ("sideways", SortOrder.DESC),
    ],
)
def test_sort_order_parse(name, expected):
    assert SortOrder.parse(name) is expected


def test_create_todo_defaults():
    create = CreateTodo("write report")
    assert create.title == "write report"
    assert create.priority is Priority.MEDIUM
    assert create.description is None
    assert create.due_date is None


def test_update_and_filter_default_to_no_change():
    update = UpdateTodo()
    assert (update.title, update.description, update.priority, update.status, update.due_date) == (
        None,
        None,
        None,
        None,
        None,
    )
    todo_filter = TodoFilter(status=Status.DONE)
    assert todo_filter.status is Status.DONE
    assert todo_filter.due_before is None


def test_todo_defaults():
    todo = _todo()
    assert todo.id is None
    assert todo.status is Status.PENDING
    assert todo.priority is Priority.MEDIUM


def test_is_overdue():
    start = today_start()
    assert _todo(due_date=start - timedelta(seconds=1)).is_overdue() is True
    assert _todo(due_date=start).is_overdue() is False
    assert _todo(due_date=start + timedelta(days=1)).is_overdue() is False
    assert _todo().is_overdue() is False
    done = _todo(due_date=start - timedelta(days=3), status=Status.DONE)
    assert done.is_overdue() is False


def test_days_until_due():
    start = today_start()
    assert _todo().days_until_due() is None
    assert _todo(due_date=start).days_until_due() == 0
    assert _todo(due_date=start + timedelta(days=3, hours=1)).days_until_due() == 3
    assert _todo(due_date=start - timedelta(days=2)).days_until_due() == -2
    # Partial days are truncated toward zero.
    assert _todo(due_date=start - timedelta(hours=12)).days_until_due() == 0