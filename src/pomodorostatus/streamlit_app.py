"""Streamlit dashboard for the Pomodoro status timer.

Features:
- Sidebar with durations, pomodoro count and count up/down.
- Large centered status line, progress bar, and Start/Pause/Reset buttons.
- The session manager lives in ``st.session_state``; every rerun polls its
  ticker so the timer catches up with the wall clock.
"""
from __future__ import annotations

import time
from typing import Optional

import streamlit as st

from .config import DEFAULTS, SessionConfigurationError, SessionSettings
from .manager import PomodoroManager, SessionState
from .ticker import MonotonicTicker

FAST_TICK_LENGTH = 1 / 60


class SessionStateRenderer:
    """Keeps the latest state for the next script run to draw."""

    def __init__(self) -> None:
        self.state: Optional[SessionState] = None
        self.message: Optional[str] = None

    def render(self, state: SessionState) -> None:
        self.state = state
        if state.message:
            self.message = state.message

    def pop_message(self) -> Optional[str]:
        message, self.message = self.message, None
        return message


def progress_percent(state: SessionState) -> int:
    total = state.elapsed_seconds + state.remaining_seconds
    if state.is_finished:
        return 100
    if total <= 0:
        return 0
    return int(min(100, (state.elapsed_seconds / total) * 100))


def get_manager(settings: SessionSettings, fast: bool) -> PomodoroManager:
    manager: Optional[PomodoroManager] = st.session_state.get("manager")
    tick_length = FAST_TICK_LENGTH if fast else 1.0
    if manager is None or manager.ticker.tick_length != tick_length:
        if manager is not None:
            manager.dispose()
        ticker = MonotonicTicker(tick_length=tick_length)
        manager = PomodoroManager(SessionStateRenderer(), settings, ticker=ticker)
        st.session_state.manager = manager
    else:
        manager.apply_settings(settings)
    return manager


def main() -> None:
    st.set_page_config(page_title="Pomodoro Status", layout="centered")

    st.title("Pomodoro")

    with st.sidebar:
        pomodori = st.number_input("Pomodori", min_value=1, value=DEFAULTS["pomodori"])
        work_minutes = st.number_input("Work minutes", min_value=1, value=DEFAULTS["work_minutes"])
        rest_minutes = st.number_input("Rest minutes", min_value=1, value=DEFAULTS["rest_minutes"])
        count_down = st.checkbox("Count down", value=DEFAULTS["count_down"])
        fast = st.checkbox("Fast demo (1s per minute)", value=False)

    try:
        settings = SessionSettings(
            work_minutes=int(work_minutes),
            rest_minutes=int(rest_minutes),
            pomodori=int(pomodori),
            count_down=bool(count_down),
        )
    except SessionConfigurationError as error:
        st.error(str(error))
        return

    manager = get_manager(settings, fast)
    renderer: SessionStateRenderer = manager.renderer
    manager.ticker.poll()

    st.markdown(
        """
        <style>
        .big-timer {font-size:56px; font-weight:700; text-align:center; margin: 12px 0}
        div.stButton > button {height:64px; width:100%; font-size:18px}
        </style>
        """,
        unsafe_allow_html=True,
    )

    state = renderer.state or manager.snapshot()
    c1, c2, c3 = st.columns([1, 1, 1])
    clicked = True
    if c1.button("Start", disabled=not state.can_start):
        manager.start()
    elif c2.button("Pause", disabled=not state.can_pause):
        manager.pause()
    elif c3.button("Reset"):
        manager.reset()
    else:
        clicked = False
    if clicked:
        # redraw the buttons with the new visibility flags
        st.rerun()

    st.markdown(f"<div class='big-timer'>{state.text}</div>", unsafe_allow_html=True)
    st.progress(progress_percent(state))

    message = renderer.pop_message()
    if message:
        st.success(message)

    if manager.current_pomodoro is not None and manager.current_pomodoro.is_running:
        time.sleep(max(manager.ticker.seconds_until_next_tick(), 0.05))
        st.rerun()


if __name__ == "__main__":
    main()
