from typing import Callable, Union

Curve = Callable[[float], float]


def smooth(t): return 3 * t * t - 2 * t * t * t
def linear(t): return t


class AnimationCurve:
    SMOOTH, LINEAR = smooth, linear


CURVES: dict[str, Curve] = {
    "smooth": smooth,
    "linear": linear,
}


def resolve_curve(mode: Union[str, Curve]) -> Curve:
    """Accept a curve name ("SMOOTH", "linear") or any t -> t callable."""
    if callable(mode):
        return mode
    try:
        return CURVES[str(mode).lower()]
    except KeyError:
        raise ValueError(f"Unknown animation curve {mode!r}") from None
