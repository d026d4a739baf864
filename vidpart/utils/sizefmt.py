"""Byte size helpers (1024 based)."""

from __future__ import annotations

__all__ = ["BYTES_PER_GB", "format_file_size", "gb_to_bytes", "bytes_to_gb"]

BYTES_PER_GB = 1024 * 1024 * 1024

_UNITS = ["B", "KB", "MB", "GB", "TB"]


def format_file_size(num_bytes: int) -> str:
    """Return e.g. ``"500 B"``, ``"1.00 KB"`` or ``"4.00 GB"``."""
    if num_bytes <= 0:
        return "0 B"
    value = float(num_bytes)
    i = 0
    while value >= 1024 and i < len(_UNITS) - 1:
        value /= 1024
        i += 1
    if i == 0:
        return f"{int(value)} B"
    return f"{value:.2f} {_UNITS[i]}"


def gb_to_bytes(gb: float) -> int:
    return int(round(gb * BYTES_PER_GB))


def bytes_to_gb(num_bytes: float) -> float:
    return num_bytes / BYTES_PER_GB
