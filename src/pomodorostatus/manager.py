"""Session manager: runs a queue of pomodori and feeds a renderer."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Protocol, Tuple

from . import display, scheduler
from .config import SessionSettings
from .pomodoro import Phase, Pomodoro
from .ticker import ManualTicker, Ticker

STATE_LABELS = {
    Phase.WORK: "work",
    Phase.REST: "rest",
    Phase.PAUSED: "paused",
    Phase.BREAK: "break",
}


@dataclass(frozen=True)
class SessionState:
    """Everything a renderer needs to draw the session."""

    phase: Optional[Phase]
    label: str
    elapsed_seconds: int
    remaining_seconds: int
    display_seconds: int
    time_text: str
    active_index: int
    total: int
    is_finished: bool
    can_start: bool
    can_pause: bool
    text: str
    message: Optional[str] = None


class Renderer(Protocol):
    def render(self, state: SessionState) -> None:
        ...


class PomodoroManager:
    """Owns the pomodoro sequence and the index of the active one.

    The manager subscribes once to every pomodoro it builds. When the active
    pomodoro reports ``Done`` it moves to the next one and starts it, and
    after every state change it hands a fresh ``SessionState`` to the
    renderer.
    """

    def __init__(
        self,
        renderer: Renderer,
        settings: Optional[SessionSettings] = None,
        *,
        ticker: Optional[Ticker] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.renderer = renderer
        self.ticker = ticker if ticker is not None else ManualTicker()
        self._settings = settings or SessionSettings()
        self._logger = logger or logging.getLogger("pomodorostatus.manager")
        self._pomodori: Tuple[Pomodoro, ...] = ()
        self._active_index = 0
        self.reset()

    # ----- Read accessors -----
    @property
    def settings(self) -> SessionSettings:
        return self._settings

    @property
    def pomodori(self) -> Tuple[Pomodoro, ...]:
        return self._pomodori

    @property
    def active_index(self) -> int:
        return self._active_index

    @property
    def progress(self) -> Tuple[int, int]:
        return self._active_index, len(self._pomodori)

    @property
    def current_pomodoro(self) -> Optional[Pomodoro]:
        if self.is_session_finished:
            return None
        return self._pomodori[self._active_index]

    @property
    def is_session_finished(self) -> bool:
        return self._active_index >= len(self._pomodori)

    @property
    def current_state(self) -> str:
        pomodoro = self.current_pomodoro
        if pomodoro is None:
            return ""
        return STATE_LABELS.get(pomodoro.phase, "")

    def time_remaining(self) -> int:
        pomodoro = self.current_pomodoro
        return pomodoro.remaining_seconds if pomodoro is not None else 0

    def snapshot(self, message: Optional[str] = None) -> SessionState:
        index, total = self.progress
        pomodoro = self.current_pomodoro
        if pomodoro is None:
            return SessionState(
                phase=None,
                label="",
                elapsed_seconds=0,
                remaining_seconds=0,
                display_seconds=0,
                time_text=display.format_time(0),
                active_index=index,
                total=total,
                is_finished=True,
                can_start=True,
                can_pause=False,
                text=display.status_text("", "", index, total, finished=True),
                message=message,
            )

        seconds = display.display_seconds(pomodoro, self._settings.count_down)
        time_text = display.format_time(seconds)
        idle = pomodoro.phase in (Phase.NONE, Phase.PAUSED)
        return SessionState(
            phase=pomodoro.phase,
            label=self.current_state,
            elapsed_seconds=pomodoro.elapsed_seconds,
            remaining_seconds=pomodoro.remaining_seconds,
            display_seconds=seconds,
            time_text=time_text,
            active_index=index,
            total=total,
            is_finished=False,
            can_start=idle,
            can_pause=not idle,
            text=display.status_text(time_text, self.current_state, index, total),
            message=message,
        )

    # ----- Controls -----
    def reset(self, settings: Optional[SessionSettings] = None) -> None:
        if settings is not None:
            self._settings = settings
        self.dispose()

        pomodori = scheduler.build_pomodori(self._settings, ticker=self.ticker, logger=self._logger.getChild("pomodoro"))
        for pomodoro in pomodori:
            pomodoro.add_listener(self._on_pomodoro_tick)
        self._pomodori = tuple(pomodori)
        self._active_index = 0
        self._logger.info(
            "Session reset: pomodori=%s work=%smin rest=%smin",
            len(self._pomodori),
            self._settings.work_minutes,
            self._settings.rest_minutes,
        )
        self._render()

    def apply_settings(self, settings: SessionSettings) -> None:
        """Switch to new settings, resetting only when the schedule changes.

        Flipping ``count_down`` only changes how time is shown, so the running
        session is kept and just re-rendered.
        """
        if settings == self._settings:
            return
        if settings.with_overrides(count_down=self._settings.count_down) == self._settings:
            self._settings = settings
            self._render()
            return
        self.reset(settings)

    def start(self) -> None:
        if self.is_session_finished:
            self._logger.info("Session restarted")
            self._active_index = 0
        self._pomodori[self._active_index].start()
        self._render()

    def pause(self) -> None:
        pomodoro = self.current_pomodoro
        if pomodoro is not None:
            pomodoro.pause()
        self._render()

    def dispose(self) -> None:
        for pomodoro in self._pomodori:
            pomodoro.dispose()

    # ----- Internals -----
    def _on_pomodoro_tick(self, pomodoro: Pomodoro) -> None:
        if pomodoro is not self.current_pomodoro:
            return

        message = None
        if pomodoro.is_done:
            self._active_index += 1
            index, total = self.progress
            if self.is_session_finished:
                self._logger.info("Session finished after %s pomodori", total)
                if total > 1:
                    message = display.LONG_BREAK_MESSAGE
            else:
                self._logger.info("Advancing to pomodoro %s of %s", index + 1, total)
                self._pomodori[index].start()
        self._render(message)

    def _render(self, message: Optional[str] = None) -> None:
        self.renderer.render(self.snapshot(message))
