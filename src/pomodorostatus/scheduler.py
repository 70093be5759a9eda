"""Pomodoro schedule helpers."""
from __future__ import annotations

import logging
from typing import List, Optional

from .config import SessionSettings
from .pomodoro import Pomodoro
from .ticker import Ticker


def build_pomodori(
    settings: SessionSettings,
    *,
    ticker: Optional[Ticker] = None,
    logger: Optional[logging.Logger] = None,
) -> List[Pomodoro]:
    """Create one fresh pomodoro per configured repetition.

    Args:
        settings: Durations and pomodoro count for the session.
        ticker: Tick source shared by every pomodoro of the session.
        logger: Logger handed to each pomodoro.
    """
    return [
        Pomodoro(settings.work_seconds, settings.rest_seconds, ticker=ticker, logger=logger)
        for _ in range(settings.pomodori)
    ]


def describe_plan(settings: SessionSettings) -> List[str]:
    lines: List[str] = []
    for index in range(1, settings.pomodori + 1):
        lines.append(f"Work {index}: {settings.work_minutes} minute(s)")
        lines.append(f"Rest {index}: {settings.rest_minutes} minute(s)")
    return lines
