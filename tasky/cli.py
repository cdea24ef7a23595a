"""Command-line interface: argument parsing, command handlers and entry point."""

from __future__ import annotations

import argparse
import os
import sqlite3
import stat
import sys
import time
from collections.abc import Sequence
from datetime import datetime, timezone
from pathlib import Path

from tabulate import tabulate
from termcolor import colored

from .database import Database
from .dates import format_date, parse_date
from .errors import TaskyError
from .models import (
    CreateTodo,
    Priority,
    SortBy,
    SortOrder,
    Status,
    Todo,
    TodoFilter,
    UpdateTodo,
)
from .service import TodoService
from .text import truncate_title_for_terminal

_VERSION = "0.1.8"
_ENV_PATH = "TASKY_DB_PATH"
_RELATED_SUFFIXES = ("-wal", "-shm", "-journal")
_MAX_REMOVE_ATTEMPTS = 5
_RETRY_DELAY = 0.5
_PROGRESS_WIDTH = 30

_PRIORITY_COLORS = {
    Priority.HIGH: "red",
    Priority.MEDIUM: "yellow",
    Priority.LOW: "green",
}


def build_parser() -> argparse.ArgumentParser:
    """The argument parser for the ``tasky`` command."""
    parser = argparse.ArgumentParser(prog="tasky", description="개인용 할일 관리 CLI 도구")
    parser.add_argument(
        "-V", "--version", action="version", version=f"tasky {_VERSION}"
    )
    commands = parser.add_subparsers(dest="command", required=True, metavar="COMMAND")

    add = commands.add_parser("add")
    add.add_argument("title")
    add.add_argument("-d", "--description")
    add.add_argument("-p", "--priority", default="medium")
    add.add_argument("--due")

    listing = commands.add_parser("list")
    listing.add_argument("-s", "--status")
    listing.add_argument("-p", "--priority")
    listing.add_argument("--sort", default="created")
    listing.add_argument("--order", default="desc")
    listing.add_argument("--today", action="store_true")
    listing.add_argument("--overdue", action="store_true")
    listing.add_argument("--urgent", action="store_true")
    listing.add_argument("-v", "--verbose", action="store_true")

    show = commands.add_parser("show")
    show.add_argument("id", type=int)

    done = commands.add_parser("done")
    done.add_argument("ids", type=int, nargs="*")

    undone = commands.add_parser("undone")
    undone.add_argument("id", type=int)

    remove = commands.add_parser("remove")
    remove.add_argument("id", type=int)

    edit = commands.add_parser("edit")
    edit.add_argument("id", type=int)
    edit.add_argument("-t", "--title")
    edit.add_argument("-d", "--description")
    edit.add_argument("-p", "--priority")
    edit.add_argument("--due")

    commands.add_parser("stats")

    init = commands.add_parser("init")
    init.add_argument("--force", action="store_true")

    commands.add_parser("db-info")
    return parser


def execute(args: argparse.Namespace, service: TodoService | None) -> None:
    """Run the parsed command against ``service``."""
    command = args.command
    if command == "init":
        _handle_init(args.force)
    elif command == "db-info":
        _handle_db_info()
    elif service is None:
        raise TaskyError(f"command {command!r} needs an open todo service")
    elif command == "add":
        _handle_add(service, args.title, args.description, args.priority, args.due)
    elif command == "list":
        _handle_list(service, args)
    elif command == "show":
        _handle_show(service, args.id)
    elif command == "done":
        _handle_done(service, args.ids)
    elif command == "undone":
        _handle_undone(service, args.id)
    elif command == "remove":
        _handle_remove(service, args.id)
    elif command == "edit":
        _handle_edit(
            service, args.id, args.title, args.description, args.priority, args.due
        )
    elif command == "stats":
        _handle_stats(service)
    else:
        raise TaskyError(f"unknown command: {command}")


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point of the ``tasky`` command; returns the exit status."""
    args = build_parser().parse_args(argv)
    try:
        with TodoService.open_default() as service:
            execute(args, service)
    except TaskyError as exc:
        print(f"{colored('오류:', 'red', attrs=['bold'])} {exc}", file=sys.stderr)
        return 1
    except OSError as exc:
        print(
            f"{colored('오류:', 'red', attrs=['bold'])} I/O 오류: {exc}", file=sys.stderr
        )
        return 1
    return 0


def _label(todo_enum: Priority | Status) -> str:
    return f"{todo_enum.emoji()} {todo_enum.display()}"


def _handle_add(
    service: TodoService,
    title: str,
    description: str | None,
    priority: str,
    due: str | None,
) -> None:
    create = CreateTodo(title=title, description=description)
    create.priority = Priority.parse(priority)
    if due is not None:
        create.due_date = parse_date(due)

    todo = service.create_todo(create)

    print(f"{colored('✅', 'green')} 할일이 추가되었습니다!")
    print(f"  ID: {colored(str(todo.id or 0), 'cyan')}")
    print(f"  제목: {colored(todo.title, attrs=['bold'])}")
    if todo.description is not None:
        print(f"  설명: {todo.description}")
    print(f"  우선순위: {_label(todo.priority)}")
    if todo.due_date is not None:
        print(f"  마감일: {colored(format_date(todo.due_date), 'yellow')}")


def _handle_list(service: TodoService, args: argparse.Namespace) -> None:
    if args.today:
        todos = service.get_today_todos()
    elif args.overdue:
        todos = service.get_overdue_todos()
    elif args.urgent:
        todos = service.get_urgent_todos()
    else:
        todo_filter = TodoFilter()
        if args.status is not None:
            todo_filter.status = Status.parse(args.status)
        if args.priority is not None:
            todo_filter.priority = Priority.parse(args.priority)
        sort_by = SortBy.parse(args.sort)
        sort_order = SortOrder.parse(args.order)
        todos = service.list_todos(todo_filter, sort_by, sort_order)

    if not todos:
        print(colored("할일이 없습니다.", "yellow"))
        return

    if args.verbose:
        _print_todos_verbose(todos)
    else:
        _print_todos_table(todos)
    print(f"\n총 {colored(str(len(todos)), 'cyan')}개의 할일")


def _handle_show(service: TodoService, todo_id: int) -> None:
    todo = service.get_todo_by_id(todo_id)
    none_text = colored("없음", attrs=["dark"])

    print(f"\n{colored('📋 할일 상세 정보', 'blue', attrs=['bold'])}")
    print("─" * 50)
    print(f"ID: {colored(str(todo.id or 0), 'cyan')}")
    print(f"제목: {colored(todo.title, attrs=['bold'])}")

    if todo.description is not None and todo.description.strip():
        print(f"설명: {todo.description}")
    else:
        print(f"설명: {none_text}")

    print(f"상태: {_label(todo.status)}")
    print(f"우선순위: {_label(todo.priority)}")

    if todo.due_date is not None:
        print(f"마감일: {colored(format_date(todo.due_date), 'yellow')}")
        days = todo.days_until_due()
        if days is not None:
            if days == 0:
                print(f"⚠️  {colored('오늘이 마감일입니다!', 'red', attrs=['bold'])}")
            elif days < 0:
                print(f"⚠️  {colored(str(-days), 'red', attrs=['bold'])}일 지났습니다")
            else:
                print(f"남은 일수: {colored(str(days), 'green')}일")
    else:
        print(f"마감일: {colored('설정되지 않음', attrs=['dark'])}")

    print(f"생성일: {format_date(todo.created_at)}")
    print(f"수정일: {format_date(todo.updated_at)}")
    print("─" * 50)


def _handle_done(service: TodoService, ids: Sequence[int]) -> None:
    if not ids:
        print(f"{colored('⚠️', 'yellow')} 완료할 할일 ID를 입력해주세요.")
        return

    completed = 0
    failures: list[tuple[int, TaskyError]] = []
    for todo_id in ids:
        try:
            todo = service.complete_todo(todo_id)
        except TaskyError as exc:
            failures.append((todo_id, exc))
            continue
        print(f"{colored('✅', 'green')} 할일을 완료했습니다!")
        print(
            f"  ID: {colored(str(todo_id), 'cyan')}, "
            f"제목: {colored(todo.title, attrs=['strike'])}"
        )
        completed += 1

    if failures:
        print(f"\n{colored('❌', 'red')} 완료 실패한 할일:")
        for todo_id, error in failures:
            print(f"  ID {colored(str(todo_id), 'cyan')}: {error}")

    if completed > 0:
        print(f"\n총 {colored(str(completed), 'green')}개의 할일을 완료했습니다.")


def _handle_undone(service: TodoService, todo_id: int) -> None:
    todo = service.uncomplete_todo(todo_id)
    print(f"{colored('⏳', 'yellow')} 할일을 다시 대기 상태로 변경했습니다.")
    print(f"  제목: {colored(todo.title, attrs=['bold'])}")


def _handle_remove(service: TodoService, todo_id: int) -> None:
    title = service.get_todo_by_id(todo_id).title
    service.delete_todo(todo_id)
    print(f"{colored('🗑️', 'red')} 할일을 삭제했습니다!")
    print(f"  제목: {colored(title, attrs=['dark'])}")


def _handle_edit(
    service: TodoService,
    todo_id: int,
    title: str | None,
    description: str | None,
    priority: str | None,
    due: str | None,
) -> None:
    changes = UpdateTodo(title=title, description=description)
    if priority is not None:
        changes.priority = Priority.parse(priority)
    if due is not None:
        changes.due_date = parse_date(due)

    todo = service.update_todo(todo_id, changes)

    print(f"{colored('✏️', 'blue')} 할일을 수정했습니다!")
    print(f"  ID: {colored(str(todo.id or 0), 'cyan')}")
    print(f"  제목: {colored(todo.title, attrs=['bold'])}")
    if todo.description is not None:
        print(f"  설명: {todo.description}")
    print(f"  우선순위: {_label(todo.priority)}")
    print(f"  상태: {_label(todo.status)}")
    if todo.due_date is not None:
        print(f"  마감일: {colored(format_date(todo.due_date), 'yellow')}")


def _handle_stats(service: TodoService) -> None:
    stats = service.get_stats()
    pending_percent = int(stats.pending_todos / max(stats.total_todos, 1) * 100.0)

    print(f"\n{colored('📊 할일 통계', 'blue', attrs=['bold'])}")
    print("─" * 40)
    print(f"전체 할일: {colored(str(stats.total_todos), 'cyan')}")
    print(f"대기중: {colored(str(stats.pending_todos), 'yellow')} ({pending_percent}%)")
    print(
        f"완료: {colored(str(stats.completed_todos), 'green')} "
        f"({int(stats.completion_rate)}%)"
    )
    print(f"높은 우선순위: {colored(str(stats.high_priority_todos), 'red')}")
    if stats.overdue_todos > 0:
        print(f"⚠️  기한 초과: {colored(str(stats.overdue_todos), 'red', attrs=['bold'])}")
    print("─" * 40)

    filled = int(stats.completion_rate / 100.0 * _PROGRESS_WIDTH)
    empty = _PROGRESS_WIDTH - filled
    print(
        f"완료율: [{colored('█' * filled, 'green')}"
        f"{colored('░' * empty, attrs=['dark'])}] {stats.completion_rate:.1f}%"
    )


def _sibling(path: Path, extension: str) -> Path:
    """``path`` with its last extension replaced by ``extension``."""
    return path.with_name(f"{path.stem}.{extension}")


def _handle_init(force: bool) -> None:
    db_path = Database.default_path()

    if db_path.exists() and not force:
        print(f"{colored('⚠️', 'yellow')} 데이터베이스가 이미 존재합니다.")
        print("기존 데이터베이스를 삭제하고 새로 만들려면 --force 옵션을 사용하세요.")
        return

    if db_path.exists():
        print(f"{colored('🗑️', 'yellow')} 기존 데이터베이스를 삭제하는 중...")
        for attempt in range(1, _MAX_REMOVE_ATTEMPTS + 1):
            try:
                _remove_database(db_path)
            except OSError as exc:
                if attempt >= _MAX_REMOVE_ATTEMPTS:
                    _init_with_backup(db_path)
                    return
                print(
                    f"{colored('⏳', 'yellow')} 삭제 시도 "
                    f"{attempt}/{_MAX_REMOVE_ATTEMPTS} 실패: {exc}"
                )
                time.sleep(_RETRY_DELAY)
            else:
                print(f"{colored('✅', 'green')} 기존 데이터베이스를 삭제했습니다.")
                break

    _create_database_at(db_path)


def _remove_database(db_path: Path) -> None:
    try:
        mode = db_path.stat().st_mode
    except OSError:
        mode = None
    if mode is not None and not mode & stat.S_IWRITE:
        os.chmod(db_path, mode | stat.S_IWRITE)

    for suffix in _RELATED_SUFFIXES:
        related = _sibling(db_path, f"db{suffix}")
        if related.exists():
            try:
                related.unlink()
            except OSError:
                pass  # the main file is what matters

    db_path.unlink()


def _init_with_backup(db_path: Path) -> None:
    print(f"{colored('⚠️', 'yellow')} 직접 삭제가 불가능합니다. 백업 전략을 사용합니다.")
    _print_database_lock_help()

    backup = _sibling(db_path, "db.backup")
    counter = 1
    while backup.exists():
        backup = _sibling(db_path, f"db.backup.{counter}")
        counter += 1

    try:
        db_path.rename(backup)
    except OSError:
        print(
            f"{colored('⚠️', 'yellow')} 파일 이동이 불가능합니다. "
            "원본 파일을 유지하고 계속 진행합니다."
        )
        try:
            _reinitialize_existing(db_path)
        except TaskyError:
            print(f"{colored('💡', 'blue')} 대체 경로에 새 데이터베이스를 생성합니다.")
            _create_database_at(_sibling(db_path, "db.new"))
        return

    print(f"{colored('📁', 'blue')} 기존 파일을 {backup}로 이동했습니다.")
    _create_database_at(db_path)


def _print_database_lock_help() -> None:
    print(f"\n{colored('💡 데이터베이스 파일 잠금 해결 방법:', 'blue', attrs=['bold'])}")
    print("  1. 실행 중인 다른 tasky 프로세스를 종료하세요")
    print("  2. Windows 작업 관리자에서 tasky.exe 프로세스를 찾아 종료하세요")
    print("  3. SQLite 브라우저나 DB 관리 도구가 파일을 열고 있다면 닫으세요")
    print("  4. 바이러스 백신이 파일을 스캔 중일 수 있으니 잠시 기다려보세요\n")


def _reinitialize_existing(db_path: Path) -> None:
    with Database(db_path) as db:
        try:
            db.conn.executescript(
                "DROP TABLE IF EXISTS todos; DROP TABLE IF EXISTS sqlite_sequence;"
            )
        except sqlite3.Error:
            pass
        db.initialize()
    print(f"{colored('🎉', 'green')} 기존 데이터베이스를 재초기화했습니다!")
    print(f"  경로: {colored(str(db_path), 'cyan')}")


def _create_database_at(db_path: Path) -> None:
    db_path.parent.mkdir(parents=True, exist_ok=True)
    with Database(db_path) as db:
        db.initialize()
    print(f"{colored('🎉', 'green')} 데이터베이스를 초기화했습니다!")
    print(f"  경로: {colored(str(db_path), 'cyan')}")


def _handle_db_info() -> None:
    db_path = Database.default_path()

    print(colored("📊 데이터베이스 정보", "blue", attrs=["bold"]))
    print("─" * 50)

    custom = os.environ.get(_ENV_PATH)
    if custom is not None:
        print(f"환경변수: {colored(_ENV_PATH, 'green')} 설정됨")
        print(f"커스텀 경로: {colored(custom, 'cyan')}")
    else:
        print(f"환경변수: {colored(_ENV_PATH, 'yellow')} 기본 경로 사용")

    print(f"실제 경로: {colored(str(db_path), 'cyan')}")

    if not db_path.exists():
        print(f"상태: {colored('❌', 'red')} 데이터베이스 파일이 존재하지 않습니다")
        print(f"{colored('💡', 'yellow')} 다음 명령어로 데이터베이스를 생성하세요:")
        print("  tasky init")
        return

    try:
        info = db_path.stat()
    except OSError:
        info = None
    if info is not None:
        print(f"크기: {colored(str(info.st_size), 'green')} bytes")
        modified = datetime.fromtimestamp(int(info.st_mtime), timezone.utc)
        print(f"수정일: {colored(modified.strftime('%Y-%m-%d %H:%M:%S'), 'yellow')}")

    try:
        db = Database(db_path)
    except TaskyError as exc:
        print(f"연결: {colored('❌', 'red')} 실패")
        print(f"오류: {colored(str(exc), 'red')}")
        message = str(exc)
        if "database is locked" in message or "다른 프로세스가 파일을 사용" in message:
            _print_database_lock_help()
    else:
        with db:
            _print_connection_details(db)

    found_related = False
    for suffix in _RELATED_SUFFIXES:
        related = _sibling(db_path, f"db{suffix}")
        if not related.exists():
            continue
        if not found_related:
            print(f"\n{colored('관련 파일:', attrs=['bold'])}")
            found_related = True
        try:
            print(f"  {related} ({related.stat().st_size} bytes)")
        except OSError:
            pass

    print("─" * 50)


def _print_connection_details(db: Database) -> None:
    print(f"연결: {colored('✅', 'green')} 성공")
    if not db.is_initialized():
        print(f"초기화: {colored('❌', 'red')} 미완료")
        print(f"{colored('💡', 'yellow')} 다음 명령어로 데이터베이스를 초기화하세요:")
        print("  tasky init --force")
        return

    print(f"초기화: {colored('✅', 'green')} 완료")
    try:
        count = db.conn.execute("SELECT COUNT(*) FROM todos").fetchone()[0]
    except sqlite3.Error:
        print(f"할일 개수: {colored('❌', 'red')} 조회 실패")
    else:
        print(f"할일 개수: {colored(str(count), 'cyan')}")


def _due_cell(todo: Todo) -> str:
    if todo.due_date is None:
        return "-"
    formatted = format_date(todo.due_date)
    days = todo.days_until_due()
    if days is None:
        return formatted
    if days < 0:
        return colored(f"{formatted} ({-days}일 전)", "red")
    if days <= 1:
        return colored(f"{formatted} ({days}일 후)", "yellow")
    return f"{formatted} ({days}일 후)"


def _title_cell(todo: Todo) -> str:
    title = truncate_title_for_terminal(todo.title)
    if todo.status is Status.DONE:
        return colored(title, attrs=["dark"])
    if todo.is_overdue():
        return colored(f"⚠️  {title}", "red")
    return title


def _print_todos_table(todos: Sequence[Todo]) -> None:
    headers = [
        colored(name, "cyan", attrs=["bold"])
        for name in ("ID", "상태", "우선순위", "제목", "마감일", "생성일")
    ]
    rows = [
        [
            str(todo.id or 0),
            _label(todo.status),
            colored(_label(todo.priority), _PRIORITY_COLORS[todo.priority]),
            _title_cell(todo),
            _due_cell(todo),
            format_date(todo.created_at),
        ]
        for todo in todos
    ]
    print(tabulate(rows, headers=headers, tablefmt="grid", disable_numparse=True))


def _print_todos_verbose(todos: Sequence[Todo]) -> None:
    for index, todo in enumerate(todos):
        if index > 0:
            print(colored("─" * 60, attrs=["dark"]))

        print(
            f"ID: {colored(str(todo.id or 0), 'cyan')} | "
            f"상태: {_label(todo.status)} | 우선순위: {_label(todo.priority)}"
        )

        if todo.status is Status.DONE:
            print(f"제목: {colored(todo.title, attrs=['strike'])}")
        elif todo.is_overdue():
            print(f"제목: ⚠️  {colored(todo.title, 'red')}")
        else:
            print(f"제목: {colored(todo.title, attrs=['bold'])}")

        if todo.description is not None and todo.description.strip():
            print(f"설명: {todo.description}")

        if todo.due_date is not None:
            formatted = format_date(todo.due_date)
            days = todo.days_until_due()
            if days is None:
                print(f"마감일: {formatted}")
            elif days < 0:
                print(
                    f"마감일: {colored('⚠️', 'red')} {colored(formatted, 'red')} "
                    f"({-days}일 전)"
                )
            elif days <= 1:
                print(f"마감일: {colored(formatted, 'yellow')} ({days}일 후)")
            else:
                print(f"마감일: {formatted} ({days}일 후)")

        print(f"생성일: {colored(format_date(todo.created_at), attrs=['dark'])}")


if __name__ == "__main__":
    sys.exit(main())