import pytest

from tasky.database import Database
from tasky.errors import DatabaseError


def _insert(conn, title):
    conn.execute(
        "INSERT INTO todos (title, created_at, updated_at) VALUES (?, 'a', 'a')",
        (title,),
    )


def _titles(db):
    return [row[0] for row in db.conn.execute("SELECT title FROM todos ORDER BY id")]


def test_in_memory_database_starts_uninitialized():
    db = Database.in_memory()
    assert db.is_initialized() is False


def test_initialize_marks_initialized():
    db = Database.in_memory()
    db.initialize()
    assert db.is_initialized() is True


def test_default_path(monkeypatch):
    monkeypatch.delenv("TASKY_DB_PATH", raising=False)
    path = Database.default_path()
    assert "tasky" in str(path)
    assert path.name == "tasky.db"


def test_default_path_from_environment(monkeypatch, tmp_path):
    target = tmp_path / "custom.db"
    monkeypatch.setenv("TASKY_DB_PATH", str(target))
    assert Database.default_path() == target


def test_open_default_creates_parent_directory(monkeypatch, tmp_path):
    target = tmp_path / "nested" / "dir" / "todo.db"
    monkeypatch.setenv("TASKY_DB_PATH", str(target))
    db = Database.open_default()
    assert db.is_initialized() is False
    db.initialize()
    assert db.is_initialized() is True
    db.close()
    assert target.parent.is_dir()
    assert target.exists()


def test_data_persists_on_disk(tmp_path):
    path = tmp_path / "todo.db"
    with Database(path) as db:
        db.initialize()
        _insert(db.conn, "kept")
    with Database(path) as db:
        assert db.is_initialized() is True
        assert _titles(db) == ["kept"]


def test_foreign_keys_enabled():
    db = Database.in_memory()
    assert db.conn.execute("PRAGMA foreign_keys").fetchone()[0] == 1


def test_transaction_commits():
    db = Database.in_memory()
    db.initialize()
    with db.transaction() as conn:
        _insert(conn, "one")
        _insert(conn, "two")
    assert _titles(db) == ["one", "two"]


def test_transaction_rolls_back_on_error():
    db = Database.in_memory()
    db.initialize()
    with pytest.raises(RuntimeError):
        with db.transaction() as conn:
            _insert(conn, "lost")
            raise RuntimeError("boom")
    assert _titles(db) == []


def test_is_initialized_false_after_close():
    db = Database.in_memory()
    db.initialize()
    db.close()
    assert db.is_initialized() is False


def test_initialize_after_close_raises():
    db = Database.in_memory()
    db.close()
    with pytest.raises(DatabaseError):
        db.initialize()


def test_open_directory_raises_database_error(tmp_path):
    with pytest.raises(DatabaseError):
        Database(tmp_path)