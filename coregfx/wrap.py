from dataclasses import dataclass, field, fields, replace
from enum import Enum, auto
from typing import Callable

from coregfx.easing import Curve, resolve_curve
from coregfx.errors import DeadWrapError


class DrawKind(Enum):
    IMAGE = auto()
    TEXT = auto()


@dataclass(frozen=True)
class TextStyle:
    """Text properties captured when a text wrap is created. None means unset."""

    font: str | None = None
    color: object = None
    align: str | None = None
    baseline: str | None = None

    def merged(self, props: dict) -> "TextStyle":
        known = {f.name for f in fields(self)}
        unknown = set(props) - known
        if unknown:
            raise ValueError(f"Unknown text properties: {', '.join(sorted(unknown))}")
        return replace(self, **props)

    def items(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if value is not None:
                yield f.name, value


@dataclass
class Animation:
    start: list
    target: list
    curve: Curve
    steps: int
    step: int = 0
    callback: Callable | None = field(default=None, repr=False)


class Wrap:
    """A single drawable held by a Depth list.

    A wrap is alive while a Depth holds it. Ephemeral wraps die when the frame
    list is reaped after render; persistent ones die on kill() or kill_all().
    """

    def __init__(self, kind: DrawKind, style: TextStyle, content, *args):
        self.kind = kind
        self.style = style
        self.content = content
        self.args = list(args)
        self.animation: Animation | None = None
        self.depth = None
        self._owner = None

    def __repr__(self):
        return f"Wrap({self.kind.name}, depth={self.depth!r}, args={self.args!r})"

    @property
    def owner(self):
        return self._owner() if self._owner is not None else None

    @property
    def alive(self) -> bool:
        return self.owner is not None

    @property
    def animating(self) -> bool:
        return self.animation is not None

    def _require_alive(self, action: str):
        if not self.alive:
            raise DeadWrapError(self, f"Cannot {action} a wrap that is no longer drawn")

    def move(self, *args):
        """Overwrite the leading draw arguments and cancel any running animation."""
        self._require_alive("move")
        if len(args) > len(self.args):
            raise ValueError(f"Expected at most {len(self.args)} arguments, got {len(args)}")
        self.animation = None
        self.args[: len(args)] = args

    def move_animated(self, mode, callback, steps: int, *args):
        """Interpolate every argument to args over steps renders, then call callback(self)."""
        self._require_alive("animate")
        if not isinstance(steps, int) or isinstance(steps, bool) or steps <= 0:
            raise ValueError(f"steps must be a positive integer, got {steps!r}")
        if len(args) != len(self.args):
            raise ValueError(f"Expected {len(self.args)} target arguments, got {len(args)}")
        self.animation = Animation(
            start=self.args[:], target=list(args), curve=resolve_curve(mode), steps=steps, callback=callback
        )

    def step(self):
        anim = self.animation
        if anim is None:
            return
        anim.step += 1
        eased = anim.curve(anim.step / anim.steps)
        for i, (a, b) in enumerate(zip(anim.start, anim.target)):
            self.args[i] = a + (b - a) * eased
        if anim.step == anim.steps:
            self.args[:] = anim.target
            self.animation = None
            if anim.callback:
                anim.callback(self)

    def change_depth(self, n):
        self._require_alive("change the depth of")
        owner = self.owner
        owner.remove(self)
        owner.add(n, self)

    def kill(self):
        owner = self.owner
        if owner is not None:
            owner.remove(self)
