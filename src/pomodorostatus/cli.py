"""Command line interface for the Pomodoro status timer."""
from __future__ import annotations

import argparse
import logging
import sys
import time
from typing import Callable, Iterable, Optional, TextIO

from . import scheduler
from .config import DEFAULTS, SessionConfigurationError, SessionSettings, load_settings
from .manager import PomodoroManager, SessionState
from .ticker import MonotonicTicker

BANNER = r"""
 ____   ___  __  __  ___   ___   ___   ____   ____   __   ____   ____
(  _ \ / __)(  )(  )/ __) / __) / __) (_  _) (_  _) / _\ (  _ \ / ___)
 )   /( (__  )(__)( \__ \( (__ ( (__    )(     )(  /    \ )   / \___ \
(__\_) \___)(______)(___/ \___) \___)  (__)   (__) \_/\_/(__\_) (____/
"""

FAST_TICK_LENGTH = 1 / 60


def parse_args(argv: Iterable[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run a Pomodoro session with a status line in your terminal.")
    parser.add_argument("--config", help="TOML file with a [session] table")
    parser.add_argument("--pomodori", type=int, help=f"number of pomodori in the session (default {DEFAULTS['pomodori']})")
    parser.add_argument("--work-minutes", type=int, help=f"minutes per work phase (default {DEFAULTS['work_minutes']})")
    parser.add_argument("--rest-minutes", type=int, help=f"minutes per rest phase (default {DEFAULTS['rest_minutes']})")
    parser.add_argument("--count-up", action="store_true", help="show elapsed time instead of time remaining")
    parser.add_argument("--fast", action="store_true", help="treat one real second as one Pomodoro minute (handy for demos)")
    parser.add_argument("--dry-run", action="store_true", help="show the schedule without running timers")
    parser.add_argument("--verbose", action="store_true", help="log state transitions")
    return parser.parse_args(list(argv))


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    return logging.getLogger("pomodorostatus")


def resolve_settings(args: argparse.Namespace) -> SessionSettings:
    settings = load_settings(args.config)
    return settings.with_overrides(
        work_minutes=args.work_minutes,
        rest_minutes=args.rest_minutes,
        pomodori=args.pomodori,
        count_down=False if args.count_up else None,
    )


class TerminalRenderer:
    """Redraws a single status line in place."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream or sys.stdout
        self._width = 0

    def render(self, state: SessionState) -> None:
        line = state.text.ljust(self._width)
        self._width = len(state.text)
        self.stream.write(f"\r{line}")
        if state.message:
            self.stream.write(f"\n{state.message}\n")
        self.stream.flush()


def run_session(
    manager: PomodoroManager,
    ticker: MonotonicTicker,
    *,
    sleep: Callable[[float], None] = time.sleep,
) -> None:
    manager.start()
    while not manager.is_session_finished:
        sleep(max(ticker.seconds_until_next_tick(), 0.01))
        ticker.poll()


def main(argv: Iterable[str] | None = None) -> None:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    logger = setup_logging(logging.DEBUG if args.verbose else logging.WARNING)

    try:
        settings = resolve_settings(args)
    except SessionConfigurationError as error:
        raise SystemExit(f"error: {error}") from error

    print(BANNER)
    print("Pomodori  :", settings.pomodori)
    print("Work      :", settings.work_minutes, "minute(s)")
    print("Rest      :", settings.rest_minutes, "minute(s)")
    print()

    if args.dry_run:
        print("Planned intervals:")
        for line in scheduler.describe_plan(settings):
            print(f"- {line}")
        return

    print("Press Ctrl+C to exit early. Running timers…")
    ticker = MonotonicTicker(tick_length=FAST_TICK_LENGTH if args.fast else 1.0)
    manager = PomodoroManager(TerminalRenderer(), settings, ticker=ticker, logger=logger.getChild("manager"))
    try:
        run_session(manager, ticker)
        print("\n✓ Done!")
    except KeyboardInterrupt:
        manager.pause()
        print("\nSession interrupted. See you next time!")
    finally:
        manager.dispose()


if __name__ == "__main__":  # pragma: no cover
    main()
