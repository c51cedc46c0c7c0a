"""Tests for the fixed-rate phase lifecycle."""

import pytest

from coregfx.phase import Phase, PhaseState
from conftest import run_for


class Recorder:
    """Phase callbacks that log (clock time, event) pairs."""

    def __init__(self, clock):
        self.clock = clock
        self.events = []

    def __getattr__(self, name):
        return lambda phase: self.events.append((self.clock(), name))

    def times(self, name):
        return [t for t, e in self.events if e == name]


@pytest.fixture
def rec(clock):
    return Recorder(clock)


@pytest.fixture
def phase(rec, timers):
    return Phase(rec.init, rec.update, rec.draw, rec.end, name="test", timers=timers)


def test_begin_runs_init_then_ticks(clock, timers, rec, phase):
    phase.begin(20)
    assert rec.events == [(0, "init")]
    assert phase.state is PhaseState.RUNNING
    run_for(clock, timers, 100)
    assert rec.events[1:] == [(50, "update"), (50, "draw"), (100, "update"), (100, "draw")]


def test_callbacks_receive_the_phase(timers, clock):
    seen = []
    p = Phase(update=seen.append, timers=timers)
    p.begin(10)
    run_for(clock, timers, 100)
    assert seen == [p]


def test_missing_callbacks_default_to_noop(timers, clock):
    p = Phase(timers=timers)
    p.begin(60)
    run_for(clock, timers, 50)
    p.stop()
    assert p.state is PhaseState.ENDED


def test_pause_and_resume(clock, timers, rec, phase):
    phase.begin(20)
    run_for(clock, timers, 50)
    phase.pause()
    phase.pause()
    assert phase.state is PhaseState.PAUSED
    run_for(clock, timers, 200)
    assert rec.times("update") == [50]
    phase.resume(20)
    run_for(clock, timers, 50)
    assert rec.times("update") == [50, 300]


def test_resume_while_running_keeps_single_timer(clock, timers, rec, phase):
    phase.begin(20)
    phase.resume(20)
    phase.resume(100)
    run_for(clock, timers, 100)
    assert rec.times("update") == [50, 100]
    assert phase.rate == 20


def test_wait_skips_ticks_but_keeps_timer(clock, timers, rec, phase):
    phase.begin(20)
    phase.wait(200)
    assert phase.state is PhaseState.WAITING
    run_for(clock, timers, 200)
    assert rec.times("update") == []
    assert phase.state is PhaseState.RUNNING
    run_for(clock, timers, 50)
    assert rec.times("update") == [250]


def test_wait_from_inside_update(clock, timers):
    updates = []

    def update(phase):
        updates.append(clock())
        if len(updates) == 1:
            phase.wait(120)

    p = Phase(update=update, timers=timers)
    p.begin(20)
    run_for(clock, timers, 300)
    # waiting from t=50 until t=170: ticks at 100 and 150 are skipped
    assert updates == [50, 200, 250, 300]


def test_second_wait_replaces_first(clock, timers, rec, phase):
    phase.begin(20)
    phase.wait(100)
    run_for(clock, timers, 60)
    phase.wait(200)
    run_for(clock, timers, 200)
    assert rec.times("update") == []
    run_for(clock, timers, 50)
    assert rec.times("update") == [300]


def test_stop_runs_end_and_cancels_timer(clock, timers, rec, phase):
    phase.begin(20)
    run_for(clock, timers, 50)
    phase.stop()
    run_for(clock, timers, 200)
    assert rec.events[-1] == (50, "end")
    assert rec.times("update") == [50]
    assert phase.state is PhaseState.ENDED
    assert len(timers) == 0


def test_stop_clears_pending_wait(clock, timers, rec, phase):
    phase.begin(20)
    phase.wait(500)
    phase.stop()
    assert not phase.waiting
    assert len(timers) == 0


def test_switch_to(clock, timers, rec, phase):
    other_rec = Recorder(clock)
    other = Phase(other_rec.init, other_rec.update, other_rec.draw, other_rec.end, name="other", timers=timers)
    phase.begin(20)
    run_for(clock, timers, 50)
    phase.switch_to(other, 10)
    run_for(clock, timers, 200)
    assert rec.events[-1] == (50, "end")
    assert other_rec.events[0] == (50, "init")
    assert other_rec.times("update") == [150, 250]
    assert phase.state is PhaseState.ENDED
    assert other.state is PhaseState.RUNNING


def test_switch_from_inside_draw(clock, timers):
    log = []
    second = Phase(init=lambda p: log.append("second init"), timers=timers)

    def draw(p):
        log.append("first draw")
        p.switch_to(second, 20)

    first = Phase(draw=draw, end=lambda p: log.append("first end"), timers=timers)
    first.begin(20)
    run_for(clock, timers, 200)
    assert log == ["first draw", "first end", "second init"]


@pytest.mark.parametrize("rate", [0, -5])
def test_rate_must_be_positive(phase, rate):
    with pytest.raises(ValueError):
        phase.begin(rate)


def test_idle_before_begin(phase):
    assert phase.state is PhaseState.IDLE
    phase.pause()
    assert phase.state is PhaseState.IDLE
