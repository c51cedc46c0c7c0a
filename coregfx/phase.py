from enum import Enum, auto

from coregfx.timers import TimerQueue
from lib import tlog


class PhaseState(Enum):
    IDLE = auto()
    RUNNING = auto()
    WAITING = auto()
    PAUSED = auto()
    ENDED = auto()


class Phase:
    """A stage of the application that runs update then draw at a fixed rate.

    Every callback receives the phase itself, so a phase can pause, wait or
    switch to the next phase from inside its own update.
    """

    def __init__(self, init=None, update=None, draw=None, end=None, name="Phase", timers: TimerQueue | None = None):
        self.name = name
        self.init = init or self._noop
        self.update = update or self._noop
        self.draw = draw or self._noop
        self.end = end or self._noop
        self.timers = timers if timers is not None else TimerQueue.get()
        self.waiting = False
        self.interval = None
        self.rate = None
        self._wait_timer = None
        self._state = PhaseState.IDLE

    def _noop(self, phase):
        pass

    def __repr__(self):
        return f"Phase({self.name!r}, {self.state.name})"

    @property
    def state(self) -> PhaseState:
        if self._state is PhaseState.RUNNING and self.waiting:
            return PhaseState.WAITING
        return self._state

    def begin(self, framerate):
        tlog.info(f"Phase: begin '{self.name}' at {framerate} fps")
        self.init(self)
        self.resume(framerate)

    def stop(self):
        self.pause()
        self._cancel_wait()
        self._state = PhaseState.ENDED
        tlog.info(f"Phase: stop '{self.name}'")
        self.end(self)

    def switch_to(self, that: "Phase", framerate):
        tlog.info(f"Phase: switch '{self.name}' -> '{that.name}'")
        self.stop()
        that.begin(framerate)

    def wait(self, duration):
        """Skip update/draw for the next duration ms. The tick timer keeps running."""
        self._cancel_wait()
        self.waiting = True
        self._wait_timer = self.timers.after(duration, self._end_wait)

    def _end_wait(self):
        self.waiting = False
        self._wait_timer = None

    def _cancel_wait(self):
        if self._wait_timer is not None:
            self._wait_timer.cancel()
            self._wait_timer = None
        self.waiting = False

    def pause(self):
        if self.interval is not None:
            self.interval.cancel()
            self.interval = None
            self._state = PhaseState.PAUSED

    def resume(self, framerate):
        if framerate <= 0:
            raise ValueError("framerate must be positive")
        if self.interval is None:
            self.rate = framerate
            self.interval = self.timers.every(1000 / framerate, self._tick)
            self._state = PhaseState.RUNNING

    def _tick(self):
        if not self.waiting:
            self.update(self)
            self.draw(self)
