"""Formatting helpers shared by the renderers."""
from __future__ import annotations

from .pomodoro import Pomodoro

RESTART_TEXT = "Restart session?"
LONG_BREAK_MESSAGE = "Well done! You should now take a longer break."


def format_time(seconds: int) -> str:
    minutes, remainder = divmod(max(0, seconds), 60)
    return f"{minutes:02d}:{remainder:02d}"


def display_seconds(pomodoro: Pomodoro, count_down: bool) -> int:
    # elapsed stays the source of truth; counting down is only a view of it
    if count_down:
        return pomodoro.remaining_seconds
    return pomodoro.elapsed_seconds


def status_text(time_text: str, label: str, active_index: int, total: int, *, finished: bool = False) -> str:
    if finished:
        return RESTART_TEXT
    text = time_text
    if label:
        text += f" - {label}"
    if total > 1:
        text += f" ({active_index + 1} out of {total} pomodori)"
    return text
