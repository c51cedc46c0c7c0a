"""Environment-driven configuration for windowed hosts (COREGFX_* variables)."""

import os
from dataclasses import dataclass
from typing import Mapping

ENV_PREFIX = "COREGFX_"


@dataclass(frozen=True, slots=True)
class GraphicsConfig:
    width: int = 1280
    height: int = 720
    title: str = "coregfx"
    fps: int = 60
    clear_color: str = "#000000"
    asset_prefix: str = "assets/"
    log_path: str = "coregfx.log"
    log_sample_rate: float = 1.0
    log_echo: bool = False


def _raw(name: str, *, env: Mapping[str, str] | None = None) -> str | None:
    key = ENV_PREFIX + name
    value = os.getenv(key) if env is None else env.get(key)
    return None if value is None else str(value)


def _flag(name: str, default: bool, *, env: Mapping[str, str] | None = None) -> bool:
    raw = _raw(name, env=env)
    if raw is None:
        return bool(default)
    value = raw.strip().lower()
    if value in {"1", "true", "yes", "on"}:
        return True
    if value in {"0", "false", "no", "off"}:
        return False
    return bool(default)


def _int(name: str, default: int, *, minimum: int | None = None, env: Mapping[str, str] | None = None) -> int:
    raw = _raw(name, env=env)
    try:
        value = int(default) if raw is None else int(raw.strip())
    except ValueError:
        value = int(default)
    return value if minimum is None else max(int(minimum), value)


def _float(
    name: str,
    default: float,
    *,
    minimum: float | None = None,
    maximum: float | None = None,
    env: Mapping[str, str] | None = None,
) -> float:
    raw = _raw(name, env=env)
    try:
        value = float(default) if raw is None else float(raw.strip())
    except ValueError:
        value = float(default)
    if minimum is not None:
        value = max(float(minimum), value)
    if maximum is not None:
        value = min(float(maximum), value)
    return value


def _text(name: str, default: str, *, env: Mapping[str, str] | None = None) -> str:
    raw = _raw(name, env=env)
    if raw is None:
        return str(default)
    value = raw.strip()
    return value if value else str(default)


def load_config(env: Mapping[str, str] | None = None) -> GraphicsConfig:
    d = GraphicsConfig()
    return GraphicsConfig(
        width=_int("WIDTH", d.width, minimum=1, env=env),
        height=_int("HEIGHT", d.height, minimum=1, env=env),
        title=_text("TITLE", d.title, env=env),
        fps=_int("FPS", d.fps, minimum=1, env=env),
        clear_color=_text("CLEAR_COLOR", d.clear_color, env=env),
        asset_prefix=_text("ASSET_PREFIX", d.asset_prefix, env=env),
        log_path=_text("LOG_PATH", d.log_path, env=env),
        log_sample_rate=_float("LOG_SAMPLE_RATE", d.log_sample_rate, minimum=0.0, maximum=1.0, env=env),
        log_echo=_flag("LOG_ECHO", d.log_echo, env=env),
    )
