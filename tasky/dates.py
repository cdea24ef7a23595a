"""Parsing and formatting of dates in the local time zone."""

from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta, timezone

from .errors import InvalidDateFormatError

_MONTHS = (
    "january",
    "february",
    "march",
    "april",
    "may",
    "june",
    "july",
    "august",
    "september",
    "october",
    "november",
    "december",
)

_RELATIVE = re.compile(r"([+-])([+-]?[0-9]+)")

# Tried in order; the first pattern that yields a valid date wins.
_PATTERNS = tuple(
    re.compile(pattern)
    for pattern in (
        r"(?P<y>[0-9]+)-(?P<m>[0-9]{1,2})-(?P<d>[0-9]{1,2})",
        r"(?P<y>[0-9]+)/(?P<m>[0-9]{1,2})/(?P<d>[0-9]{1,2})",
        r"(?P<y>[0-9]+)\.(?P<m>[0-9]{1,2})\.(?P<d>[0-9]{1,2})",
        r"(?P<m>[0-9]{1,2})/(?P<d>[0-9]{1,2})/(?P<y>[0-9]+)",
        r"(?P<d>[0-9]{1,2})/(?P<m>[0-9]{1,2})/(?P<y>[0-9]+)",
        r"(?P<b>[A-Za-z]+) (?P<d>[0-9]{1,2}), (?P<y>[0-9]+)",
        r"(?P<d>[0-9]{1,2}) (?P<b>[A-Za-z]+) (?P<y>[0-9]+)",
    )
)


def _month_number(name: str) -> int | None:
    lowered = name.lower()
    for number, full in enumerate(_MONTHS, start=1):
        if lowered in (full, full[:3]):
            return number
    return None


def _parse_calendar_date(text: str) -> date | None:
    for pattern in _PATTERNS:
        match = pattern.fullmatch(text)
        if match is None:
            continue
        fields = match.groupdict()
        if "b" in fields:
            month = _month_number(fields["b"])
            if month is None:
                continue
        else:
            month = int(fields["m"])
        try:
            return date(int(fields["y"]), month, int(fields["d"]))
        except ValueError:
            continue
    return None


def _local_to_utc(day: date, at: time = time()) -> datetime:
    return datetime.combine(day, at).astimezone().astimezone(timezone.utc)


def _truncating_div(value: int, divisor: int) -> int:
    quotient = abs(value) // divisor
    return quotient if value >= 0 else -quotient


def parse_date(date_str: str) -> datetime:
    """Parse a date (or a relative offset like ``+3``) as local midnight in UTC."""
    relative = _RELATIVE.fullmatch(date_str)
    if relative is not None:
        sign, amount = relative.groups()
        days = int(amount) if sign == "+" else -int(amount)
        try:
            target = date.today() + timedelta(days=days)
        except OverflowError as exc:
            raise InvalidDateFormatError(date_str) from exc
        return _local_to_utc(target)

    parsed = _parse_calendar_date(date_str)
    if parsed is None:
        raise InvalidDateFormatError(date_str)
    return _local_to_utc(parsed)


def format_datetime(dt: datetime) -> str:
    """Format as local ``YYYY년 MM월 DD일 HH:MM``."""
    local = dt.astimezone()
    return (
        f"{local.year:04d}년 {local.month:02d}월 {local.day:02d}일 "
        f"{local.hour:02d}:{local.minute:02d}"
    )


def format_date(dt: datetime) -> str:
    """Format as local ``YYYY-MM-DD``."""
    local = dt.astimezone()
    return f"{local.year:04d}-{local.month:02d}-{local.day:02d}"


def format_relative_time(dt: datetime) -> str:
    """Describe how far ``dt`` lies from now in days, hours or minutes."""
    delta = dt - datetime.now(timezone.utc)
    micros = delta // timedelta(microseconds=1)
    seconds = _truncating_div(micros, 1_000_000)
    days = _truncating_div(seconds, 86_400)
    hours = _truncating_div(seconds, 3_600)
    minutes = _truncating_div(seconds, 60)

    if days > 0:
        return f"{days}일 후"
    if days < 0:
        return f"{-days}일 전"
    if hours > 0:
        return f"{hours}시간 후"
    if hours < 0:
        return f"{-hours}시간 전"
    if minutes > 0:
        return f"{minutes}분 후"
    if minutes < 0:
        return f"{-minutes}분 전"
    return "지금"


def today_start() -> datetime:
    """Local midnight of today, in UTC."""
    return _local_to_utc(date.today())


def today_end() -> datetime:
    """Local 23:59:59 of today, in UTC."""
    return _local_to_utc(date.today(), time(23, 59, 59))