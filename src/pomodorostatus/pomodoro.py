"""A single work+rest cycle and its phase state machine."""
from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, List, Optional

from .ticker import ManualTicker, Subscription, Ticker


class Phase(str, Enum):
    NONE = "none"
    WORK = "work"
    BREAK = "break"
    REST = "rest"
    PAUSED = "paused"
    DONE = "done"


ADVANCING_PHASES = frozenset({Phase.WORK, Phase.REST})

TickListener = Callable[["Pomodoro"], None]


class Pomodoro:
    """One work phase followed by one rest phase.

    Elapsed time only moves while the pomodoro is in ``Work`` or ``Rest``,
    one second per tick from the ticker. The phase check for a tick is done
    before listeners hear about it, so they always see the post-transition
    phase.
    """

    def __init__(
        self,
        work_duration_seconds: int,
        rest_duration_seconds: int,
        *,
        ticker: Optional[Ticker] = None,
        logger: Optional[logging.Logger] = None,
    ):
        if work_duration_seconds < 0 or rest_duration_seconds < 0:
            raise ValueError("durations must not be negative")

        self.work_duration_seconds = int(work_duration_seconds)
        self.rest_duration_seconds = int(rest_duration_seconds)
        self.elapsed_seconds = 0
        self.phase = Phase.NONE

        self._ticker = ticker if ticker is not None else ManualTicker()
        self._logger = logger or logging.getLogger("pomodorostatus.pomodoro")
        self._resume_phase: Optional[Phase] = None
        self._subscription: Optional[Subscription] = None
        self._listeners: List[TickListener] = []

    def __repr__(self) -> str:
        return (
            f"Pomodoro(phase={self.phase.value}, elapsed={self.elapsed_seconds}, "
            f"work={self.work_duration_seconds}, rest={self.rest_duration_seconds})"
        )

    # ----- Listeners -----
    def add_listener(self, listener: TickListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: TickListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    # ----- Read accessors -----
    @property
    def active_phase(self) -> Optional[Phase]:
        """Phase whose clock is running, or was running before a pause."""
        if self.phase in ADVANCING_PHASES:
            return self.phase
        if self.phase == Phase.PAUSED:
            return self._resume_phase
        return None

    @property
    def phase_duration_seconds(self) -> int:
        if self.phase == Phase.DONE:
            return 0
        if self.active_phase == Phase.REST:
            return self.rest_duration_seconds
        return self.work_duration_seconds

    @property
    def remaining_seconds(self) -> int:
        return max(0, self.phase_duration_seconds - self.elapsed_seconds)

    @property
    def is_running(self) -> bool:
        return self._subscription is not None

    @property
    def is_done(self) -> bool:
        return self.phase == Phase.DONE

    # ----- Controls -----
    def start(self) -> None:
        if self.phase in ADVANCING_PHASES:
            if self.is_running:
                self._logger.debug("Pomodoro start ignored: already in %s", self.phase.value)
            else:
                # disposed while active; pick the ticks back up
                self._logger.info("Pomodoro resubscribed: phase=%s elapsed=%ss", self.phase.value, self.elapsed_seconds)
                self._subscribe()
            return

        if self.phase == Phase.PAUSED and self._resume_phase is not None:
            self.phase = self._resume_phase
            self._logger.info(
                "Pomodoro resumed: phase=%s elapsed=%ss",
                self.phase.value,
                self.elapsed_seconds,
            )
        else:
            self.phase = Phase.WORK
            self.elapsed_seconds = 0
            self._logger.info("Pomodoro started: work=%ss rest=%ss", self.work_duration_seconds, self.rest_duration_seconds)
        self._resume_phase = None
        self._subscribe()

    def pause(self) -> None:
        if self.phase not in ADVANCING_PHASES:
            self._logger.debug("Pomodoro pause ignored: phase=%s", self.phase.value)
            return

        self._unsubscribe()
        self._resume_phase = self.phase
        self.phase = Phase.PAUSED
        self._logger.info(
            "Pomodoro paused: phase=%s elapsed=%ss",
            self._resume_phase.value,
            self.elapsed_seconds,
        )

    def dispose(self) -> None:
        self._unsubscribe()

    # ----- Ticking -----
    def _subscribe(self) -> None:
        if self._subscription is None:
            self._subscription = self._ticker.subscribe(self._on_tick)

    def _unsubscribe(self) -> None:
        if self._subscription is not None:
            self._subscription.cancel()
            self._subscription = None

    def _on_tick(self) -> None:
        if self.phase not in ADVANCING_PHASES:
            return

        self.elapsed_seconds += 1
        if self.phase == Phase.WORK and self.elapsed_seconds >= self.work_duration_seconds:
            self.elapsed_seconds = 0
            self.phase = Phase.REST
            self._logger.info("Pomodoro work phase finished, resting for %ss", self.rest_duration_seconds)
        elif self.phase == Phase.REST and self.elapsed_seconds >= self.rest_duration_seconds:
            self.elapsed_seconds = 0
            self.phase = Phase.DONE
            self._unsubscribe()
            self._logger.info("Pomodoro done")

        for listener in list(self._listeners):
            listener(self)
