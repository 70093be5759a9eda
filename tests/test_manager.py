from pomodorostatus.config import SessionSettings
from pomodorostatus.display import LONG_BREAK_MESSAGE
from pomodorostatus.manager import PomodoroManager
from pomodorostatus.pomodoro import Phase
from pomodorostatus.ticker import ManualTicker


class RecordingRenderer:
    def __init__(self):
        self.states = []

    def render(self, state):
        self.states.append(state)

    @property
    def last(self):
        return self.states[-1]


def make_manager(pomodori=1, work=1, rest=1, count_down=True):
    renderer = RecordingRenderer()
    ticker = ManualTicker()
    settings = SessionSettings(work_minutes=work, rest_minutes=rest, pomodori=pomodori, count_down=count_down)
    return PomodoroManager(renderer, settings, ticker=ticker), renderer, ticker


def test_construction_resets_and_renders_without_ticking():
    manager, renderer, ticker = make_manager(pomodori=3)
    assert len(manager.pomodori) == 3
    assert manager.progress == (0, 3)
    assert manager.current_pomodoro.phase == Phase.NONE
    assert not ticker.has_subscribers
    assert renderer.last.can_start
    assert not renderer.last.can_pause
    assert renderer.last.text == "01:00 (1 out of 3 pomodori)"


def test_single_pomodoro_scenario():
    manager, renderer, ticker = make_manager(pomodori=1)
    manager.start()
    assert manager.current_state == "work"
    ticker.advance(60)
    assert manager.current_pomodoro.phase == Phase.REST
    assert manager.current_pomodoro.elapsed_seconds == 0
    assert manager.current_state == "rest"
    ticker.advance(60)
    assert manager.is_session_finished
    assert manager.current_pomodoro is None
    assert manager.current_state == ""
    assert renderer.last.is_finished
    assert renderer.last.text == "Restart session?"
    assert renderer.last.message is None


def test_next_pomodoro_starts_without_external_start():
    manager, renderer, ticker = make_manager(pomodori=2)
    manager.start()
    ticker.advance(120)
    assert manager.active_index == 1
    current = manager.current_pomodoro
    assert current is manager.pomodori[1]
    assert current.phase == Phase.WORK
    assert current.elapsed_seconds == 0
    assert manager.pomodori[0].phase == Phase.DONE
    assert renderer.last.text == "01:00 - work (2 out of 2 pomodori)"


def test_index_advances_once_per_completion_and_finishes_after_last():
    manager, renderer, ticker = make_manager(pomodori=3)
    manager.start()
    indexes = []
    for _ in range(3):
        ticker.advance(120)
        indexes.append(manager.active_index)
    assert indexes == [1, 2, 3]
    assert manager.is_session_finished
    assert renderer.last.message == LONG_BREAK_MESSAGE
    ticker.advance(500)
    assert manager.active_index == 3


def test_only_one_pomodoro_ticks_at_a_time():
    manager, renderer, ticker = make_manager(pomodori=2)
    manager.start()
    ticker.advance(120)
    ticker.advance(30)
    assert manager.pomodori[0].elapsed_seconds == 0
    assert manager.pomodori[1].elapsed_seconds == 30


def test_start_on_finished_session_restarts_first_pomodoro():
    manager, renderer, ticker = make_manager(pomodori=2)
    manager.start()
    ticker.advance(240)
    assert manager.is_session_finished
    manager.start()
    assert manager.active_index == 0
    assert manager.current_pomodoro.phase == Phase.WORK
    assert manager.current_pomodoro.elapsed_seconds == 0
    ticker.advance(120)
    assert manager.active_index == 1
    assert manager.current_pomodoro.phase == Phase.WORK


def test_pause_and_resume_keep_elapsed():
    manager, renderer, ticker = make_manager(work=2)
    manager.start()
    ticker.advance(42)
    manager.pause()
    assert manager.current_state == "paused"
    assert renderer.last.can_start
    assert renderer.last.text == "01:18 - paused"
    ticker.advance(100)
    manager.start()
    assert manager.current_pomodoro.elapsed_seconds == 42
    assert manager.current_state == "work"


def test_pause_twice_matches_pause_once():
    manager, renderer, ticker = make_manager()
    manager.start()
    ticker.advance(5)
    manager.pause()
    first = renderer.last
    manager.pause()
    assert renderer.last == first


def test_renders_after_every_tick():
    manager, renderer, ticker = make_manager()
    manager.start()
    before = len(renderer.states)
    ticker.advance(3)
    assert len(renderer.states) == before + 3
    assert [s.elapsed_seconds for s in renderer.states[-3:]] == [1, 2, 3]


def test_count_up_shows_elapsed():
    manager, renderer, ticker = make_manager(count_down=False)
    manager.start()
    ticker.advance(5)
    assert renderer.last.time_text == "00:05"
    assert manager.time_remaining() == 55


def test_reset_replaces_pomodori_and_stops_ticking():
    manager, renderer, ticker = make_manager(pomodori=2)
    manager.start()
    ticker.advance(10)
    old = manager.pomodori
    manager.reset(SessionSettings(work_minutes=2, rest_minutes=1, pomodori=3))
    assert manager.pomodori is not old
    assert len(manager.pomodori) == 3
    assert manager.active_index == 0
    assert not ticker.has_subscribers
    assert old[0].elapsed_seconds == 10
    assert renderer.last.text == "02:00 (1 out of 3 pomodori)"


def test_dispose_stops_current_pomodoro():
    manager, renderer, ticker = make_manager()
    manager.start()
    manager.dispose()
    manager.dispose()
    ticker.advance(5)
    assert manager.current_pomodoro.elapsed_seconds == 0


def test_repeated_start_pause_cycles_do_not_duplicate_renders():
    manager, renderer, ticker = make_manager()
    for _ in range(3):
        manager.start()
        manager.pause()
    manager.start()
    before = len(renderer.states)
    ticker.advance()
    assert len(renderer.states) == before + 1


def test_toggling_count_down_keeps_running_session():
    manager, renderer, ticker = make_manager(pomodori=2)
    manager.start()
    ticker.advance(90)
    current = manager.current_pomodoro
    manager.apply_settings(SessionSettings(work_minutes=1, rest_minutes=1, pomodori=2, count_down=False))
    assert manager.current_pomodoro is current
    assert current.phase == Phase.REST
    assert current.elapsed_seconds == 30
    assert ticker.has_subscribers
    assert renderer.last.time_text == "00:30"
    assert not manager.settings.count_down


def test_changing_durations_resets_session():
    manager, renderer, ticker = make_manager(pomodori=2)
    manager.start()
    ticker.advance(30)
    manager.apply_settings(SessionSettings(work_minutes=3, rest_minutes=1, pomodori=2))
    assert manager.current_pomodoro.phase == Phase.NONE
    assert manager.current_pomodoro.work_duration_seconds == 180
    assert not ticker.has_subscribers


def test_same_settings_do_not_render_again():
    manager, renderer, ticker = make_manager()
    before = len(renderer.states)
    manager.apply_settings(SessionSettings(work_minutes=1, rest_minutes=1))
    assert len(renderer.states) == before


def test_start_after_dispose_picks_up_ticks():
    manager, renderer, ticker = make_manager(work=2)
    manager.start()
    ticker.advance(5)
    manager.dispose()
    manager.start()
    ticker.advance(5)
    assert manager.current_pomodoro.elapsed_seconds == 10
    assert renderer.last.can_pause
