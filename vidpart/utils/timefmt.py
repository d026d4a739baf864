"""Time formatting utilities.

`format_time` is used for precise playhead labels (mm:ss.mmm), `format_duration`
for coarse summaries (HH:MM:SS) and `format_ffmpeg_time` for command arguments.
"""

from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP

__all__ = ["format_time", "format_duration", "format_ffmpeg_time"]


def format_time(seconds: float) -> str:
    """Return a human-friendly timestamp mm:ss.mmm for UI labels.

    Uses ROUND_HALF_UP semantics for milliseconds to avoid Python's bankers rounding
    edge cases (e.g., 1.2345 -> 1.235). Accepts negative (clamps display to 0).
    """
    if seconds < 0:
        seconds = 0.0
    ms_total = int(
        (Decimal(str(seconds)) * Decimal(1000)).to_integral_value(
            rounding=ROUND_HALF_UP
        )
    )
    m, rem = divmod(ms_total, 60000)
    s, ms = divmod(rem, 1000)
    return f"{m:02d}:{s:02d}.{ms:03d}"  # mm:ss.mmm


def format_duration(total_seconds: float) -> str:
    """Format seconds as HH:MM:SS, dropping the hour field below one hour."""
    total = max(0, int(total_seconds))
    hours, rem = divmod(total, 3600)
    minutes, seconds = divmod(rem, 60)
    parts = []
    if hours > 0:
        parts.append(f"{hours:02d}")
    parts.append(f"{minutes:02d}")
    parts.append(f"{seconds:02d}")
    return ":".join(parts)


def format_ffmpeg_time(seconds: float) -> str:
    # HH:MM:SS.mmm as accepted by -ss / -to
    if seconds < 0:
        seconds = 0.0
    ms_total = int(
        (Decimal(str(seconds)) * Decimal(1000)).to_integral_value(
            rounding=ROUND_HALF_UP
        )
    )
    hours, rem = divmod(ms_total, 3600000)
    minutes, rem = divmod(rem, 60000)
    secs, ms = divmod(rem, 1000)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}.{ms:03d}"
