from datetime import datetime, timedelta, timezone

import pytest

from tasky.dates import today_start
from tasky.errors import EmptyTitleError, InvalidInputError, TodoNotFoundError
from tasky.models import (
    CreateTodo,
    Priority,
    SortBy,
    SortOrder,
    Status,
    TodoFilter,
    UpdateTodo,
)
from tasky.service import TodoService


@pytest.fixture
def service():
    svc = TodoService.in_memory()
    yield svc
    svc.close()


def test_create_todo(service):
    todo = service.create_todo(CreateTodo("테스트 할일"))
    assert todo.title == "테스트 할일"
    assert todo.status == Status.PENDING
    assert todo.priority == Priority.MEDIUM


def test_complete_todo(service):
    todo = service.create_todo(CreateTodo("완료할 할일"))
    completed = service.complete_todo(todo.id)
    assert completed.status == Status.DONE
    uncompleted = service.uncomplete_todo(todo.id)
    assert uncompleted.status == Status.PENDING


def test_validate_empty_title(service):
    with pytest.raises(EmptyTitleError):
        service.create_todo(CreateTodo("   "))


def test_delete_todo(service):
    todo = service.create_todo(CreateTodo("삭제할 할일"))
    assert service.delete_todo(todo.id) is True
    with pytest.raises(TodoNotFoundError):
        service.get_todo_by_id(todo.id)


def test_get_stats(service):
    service.create_todo(CreateTodo("할일 1", priority=Priority.HIGH))
    service.create_todo(CreateTodo("할일 2"))
    todo3 = service.create_todo(CreateTodo("할일 3"))
    service.complete_todo(todo3.id)

    stats = service.get_stats()
    assert stats.total_todos == 3
    assert stats.pending_todos == 2
    assert stats.completed_todos == 1
    assert stats.high_priority_todos == 1


def test_overdue_todos(service):
    now = datetime.now(timezone.utc)
    service.create_todo(CreateTodo("늦은 할일", due_date=now - timedelta(days=1)))
    service.create_todo(CreateTodo("오늘 할일", due_date=today_start()))
    service.create_todo(CreateTodo("내일 할일", due_date=now + timedelta(days=1)))

    overdue = service.get_overdue_todos()
    assert [t.title for t in overdue] == ["늦은 할일"]

    today = service.get_today_todos()
    assert [t.title for t in today] == ["오늘 할일"]


def test_create_trims_title_and_description(service):
    todo = service.create_todo(CreateTodo("  제목  ", description="  설명 \n"))
    assert todo.title == "제목"
    assert todo.description == "설명"
    assert service.get_todo_by_id(todo.id).description == "설명"


def test_title_too_long_is_rejected(service):
    with pytest.raises(InvalidInputError):
        service.create_todo(CreateTodo("a" * 201))


def test_title_limit_counts_bytes(service):
    # 67 Hangul syllables take 201 bytes in UTF-8.
    with pytest.raises(InvalidInputError):
        service.create_todo(CreateTodo("가" * 67))
    assert service.create_todo(CreateTodo("a" * 200)).title == "a" * 200


def test_description_too_long_is_rejected(service):
    with pytest.raises(InvalidInputError):
        service.create_todo(CreateTodo("ok", description="x" * 1001))


def test_update_rejects_empty_title(service):
    todo = service.create_todo(CreateTodo("원래"))
    with pytest.raises(EmptyTitleError):
        service.update_todo(todo.id, UpdateTodo(title="  "))
    assert service.get_todo_by_id(todo.id).title == "원래"


def test_update_trims_and_persists(service):
    todo = service.create_todo(CreateTodo("원래"))
    updated = service.update_todo(
        todo.id, UpdateTodo(title=" 새 제목 ", priority=Priority.LOW)
    )
    assert updated.title == "새 제목"
    stored = service.get_todo_by_id(todo.id)
    assert stored.title == "새 제목"
    assert stored.priority == Priority.LOW


def test_update_missing_raises(service):
    with pytest.raises(TodoNotFoundError) as info:
        service.update_todo(42, UpdateTodo(title="x"))
    assert info.value.id == 42


def test_delete_missing_raises(service):
    with pytest.raises(TodoNotFoundError):
        service.delete_todo(7)


def test_complete_missing_raises(service):
    with pytest.raises(TodoNotFoundError):
        service.complete_todo(99)


def test_list_filters_by_status(service):
    a = service.create_todo(CreateTodo("a"))
    service.create_todo(CreateTodo("b"))
    service.complete_todo(a.id)
    done = service.list_todos(TodoFilter(status=Status.DONE))
    assert [t.title for t in done] == ["a"]


def test_list_sorted_by_title(service):
    for title in ("banana", "apple", "cherry"):
        service.create_todo(CreateTodo(title))
    asc = service.list_todos(None, SortBy.TITLE, SortOrder.ASC)
    assert [t.title for t in asc] == ["apple", "banana", "cherry"]
    desc = service.list_todos(None, SortBy.TITLE, SortOrder.DESC)
    assert [t.title for t in desc] == ["cherry", "banana", "apple"]


def test_list_defaults_to_newest_first(service):
    for title in ("first", "second", "third"):
        service.create_todo(CreateTodo(title))
    assert [t.title for t in service.list_todos()] == ["third", "second", "first"]


def test_urgent_todos(service):
    now = datetime.now(timezone.utc)
    service.create_todo(CreateTodo("low", priority=Priority.LOW))
    late = service.create_todo(
        CreateTodo("late", priority=Priority.HIGH, due_date=now + timedelta(days=5))
    )
    service.create_todo(
        CreateTodo("soon", priority=Priority.HIGH, due_date=now + timedelta(days=1))
    )
    finished = service.create_todo(CreateTodo("finished", priority=Priority.HIGH))
    service.complete_todo(finished.id)

    urgent = service.get_urgent_todos()
    assert [t.title for t in urgent] == ["soon", "late"]
    assert urgent[1].id == late.id


def test_open_default_uses_env_path(tmp_path, monkeypatch):
    db_file = tmp_path / "sub" / "tasks.db"
    monkeypatch.setenv("TASKY_DB_PATH", str(db_file))
    with TodoService.open_default() as svc:
        created = svc.create_todo(CreateTodo("저장"))
    assert db_file.exists()
    with TodoService.open_default() as svc:
        assert svc.get_todo_by_id(created.id).title == "저장"