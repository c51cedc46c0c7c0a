"""Shared fakes: a recording drawing surface, a hand-driven asset source and a manual clock."""

import pytest

from coregfx.graphics import CoreGraphics
from coregfx.timers import ManualClock, TimerQueue


class RecordingSurface:
    def __init__(self, width=320, height=240):
        self.width = width
        self.height = height
        self.font = "10px sans-serif"
        self.fill_style = "#000000"
        self.text_align = "start"
        self.text_baseline = "alphabetic"
        self.calls = []

    def fill_rect(self, x, y, w, h, color=None):
        self.calls.append(("fill_rect", (x, y, w, h), color))

    def draw_image(self, image, *args):
        self.calls.append(("draw_image", image, args))

    def fill_text(self, text, *args):
        style = (self.font, self.fill_style, self.text_align, self.text_baseline)
        self.calls.append(("fill_text", text, args, style))

    def drawn(self):
        """Content of every draw call, in order."""
        return [c[1] for c in self.calls if c[0] in ("draw_image", "fill_text")]


class ManualAssetSource:
    def __init__(self):
        self.requests = {}

    def fetch(self, path, on_load, on_error):
        self.requests[path] = (on_load, on_error)

    def complete(self, path, image=None):
        on_load, _ = self.requests.pop(path)
        on_load(image if image is not None else f"<image {path}>")

    def fail(self, path, error=None):
        _, on_error = self.requests.pop(path)
        on_error(error or OSError(f"cannot read {path}"))


@pytest.fixture
def surface():
    return RecordingSurface()


@pytest.fixture
def surface_factory():
    return RecordingSurface


@pytest.fixture
def source():
    return ManualAssetSource()


@pytest.fixture
def gfx(surface):
    """A CoreGraphics with nothing registered, already loaded."""
    g = CoreGraphics(surface)
    g.load()
    return g


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def timers(clock):
    return TimerQueue(clock)


def run_for(clock, timers, ms, step=1):
    """Advance the manual clock in small steps, firing due timers along the way."""
    for _ in range(int(ms / step)):
        clock.advance(step)
        timers.run_due()
