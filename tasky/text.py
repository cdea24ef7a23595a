"""Display-width aware text helpers."""

from __future__ import annotations

import os
import sys

from wcwidth import wcwidth

_MIN_TITLE_WIDTH = 7
_FALLBACK_TITLE_WIDTH = 50
_BORDER_PADDING = 20


def _char_width(ch: str) -> int:
    return max(wcwidth(ch), 0)


def text_width(text: str) -> int:
    """Number of terminal columns ``text`` occupies."""
    return sum(_char_width(ch) for ch in text)


def truncate_text(text: str, max_width: int) -> str:
    """Cut ``text`` to ``max_width`` columns, ending it with ``...`` when cut."""
    if text_width(text) <= max_width:
        return text

    target = max(max_width - 3, 0)
    kept = []
    width = 0
    for ch in text:
        ch_width = _char_width(ch)
        if width + ch_width > target:
            break
        kept.append(ch)
        width += ch_width
    return "".join(kept) + "..."


def _terminal_columns() -> int | None:
    try:
        return os.get_terminal_size(sys.__stdout__.fileno()).columns
    except (AttributeError, OSError, ValueError):
        return None


def truncate_title_for_terminal(title: str) -> str:
    """Truncate a title so the todo table fits the current terminal."""
    columns = _terminal_columns()
    if columns is None:
        return truncate_text(title, _FALLBACK_TITLE_WIDTH)

    other_columns = (
        text_width("999")
        + text_width("⏳ 대기중")
        + text_width("🔴 높음")
        + text_width("2025-09-19 (10일 전)")
        + text_width("2025-09-19")
        + _BORDER_PADDING
    )
    if columns > other_columns:
        available = max(columns - other_columns, _MIN_TITLE_WIDTH)
    else:
        available = _MIN_TITLE_WIDTH
    return truncate_text(title, available)