"""Exception hierarchy for the task manager."""

from __future__ import annotations


class TaskyError(Exception):
    """Base class for every error the task manager reports."""


class DatabaseError(TaskyError):
    """A failure reported by the underlying SQLite database."""

    def __init__(self, cause: BaseException | str) -> None:
        self.cause = cause
        super().__init__(f"데이터베이스 오류: {cause}")


class TodoNotFoundError(TaskyError):
    """No todo exists with the requested id."""

    def __init__(self, id: int) -> None:  # noqa: A002 - mirrors the field name
        self.id = id
        super().__init__(f"할일을 찾을 수 없습니다 (ID: {id})")


class InvalidPriorityError(TaskyError):
    """A priority name that is not recognised."""

    def __init__(self, priority: str) -> None:
        self.priority = priority
        super().__init__(
            f"잘못된 우선순위: {priority}. low, medium, high 중 하나여야 합니다"
        )


class InvalidStatusError(TaskyError):
    """A status name that is not recognised."""

    def __init__(self, status: str) -> None:
        self.status = status
        super().__init__(f"잘못된 상태: {status}. pending, done 중 하나여야 합니다")


class InvalidDateFormatError(TaskyError):
    """A date string that matches none of the supported formats."""

    def __init__(self, date: str) -> None:
        self.date = date
        super().__init__(
            f"잘못된 날짜 형식: {date}. 지원되는 형식: YYYY-MM-DD, YYYY/MM/DD, "
            "MM/DD/YYYY, DD/MM/YYYY, Dec 31, 2024, 31 Dec 2024"
        )


class InvalidSortByError(TaskyError):
    """A sort key that is not recognised."""

    def __init__(self, sort_by: str) -> None:
        self.sort_by = sort_by
        super().__init__(f"잘못된 정렬 기준: {sort_by}")


class EmptyTitleError(TaskyError):
    """A todo title that is empty or only whitespace."""

    def __init__(self) -> None:
        super().__init__("할일 제목은 비어있을 수 없습니다")


class InvalidInputError(TaskyError):
    """Input that fails validation for another reason."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(f"잘못된 입력: {message}")