"""Environment driven settings and logging setup.

All knobs are plain environment variables (``VIDPART_*``) so the desktop app,
tests and ad-hoc scripts can tweak behaviour without a config file.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

from ..services.errors import ConfigError

__all__ = [
    "Settings",
    "load_settings",
    "configure_logging",
    "debug_timeline_enabled",
    "get_str",
    "get_int",
    "get_float",
    "get_bool",
]

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def get_str(key: str, default: str = "") -> str:
    return os.getenv(key, default)


def get_bool(key: str, default: bool = False) -> bool:
    raw = os.getenv(key)
    if raw is None:
        return default
    return raw.strip().lower() in ("true", "1", "yes", "y", "on")


def get_int(key: str, default: int) -> int:
    raw = os.getenv(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigError(f"{key} must be an integer, got {raw!r}") from exc


def get_float(key: str, default: float) -> float:
    raw = os.getenv(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigError(f"{key} must be a number, got {raw!r}") from exc


@dataclass(frozen=True)
class Settings:
    default_target_gb: float = 4.0
    thumbnail_count: int = 20
    thumbnail_height: int = 60
    screen_index: Optional[int] = None
    ffmpeg_binary: Optional[str] = None
    debug_timeline: bool = False


def load_settings() -> Settings:
    """Read ``VIDPART_*`` variables; raises ConfigError on malformed numbers."""
    screen_raw = get_str("VIDPART_SCREEN_INDEX").strip()
    screen_index = None
    if screen_raw:
        screen_index = get_int("VIDPART_SCREEN_INDEX", 0)
    return Settings(
        default_target_gb=get_float("VIDPART_DEFAULT_TARGET_GB", 4.0),
        thumbnail_count=max(1, get_int("VIDPART_THUMBNAIL_COUNT", 20)),
        thumbnail_height=max(8, get_int("VIDPART_THUMBNAIL_HEIGHT", 60)),
        screen_index=screen_index,
        ffmpeg_binary=get_str("VIDPART_FFMPEG").strip() or None,
        debug_timeline=debug_timeline_enabled(),
    )


def debug_timeline_enabled() -> bool:
    return get_bool("VIDPART_DEBUG_TIMELINE")


def configure_logging(level: Optional[str] = None) -> None:
    level_name = (level or get_str("VIDPART_LOG_LEVEL", "INFO")).upper()
    if debug_timeline_enabled():
        level_name = "DEBUG"
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO), format=LOG_FORMAT
    )
