from __future__ import annotations

import math
import os

__all__ = ["VIDEO_EXTENSIONS", "MAX_PARTITION_GB", "is_valid_partition_size", "is_video_file"]

VIDEO_EXTENSIONS = (
    ".mp4",
    ".mkv",
    ".avi",
    ".mov",
    ".wmv",
    ".flv",
    ".webm",
    ".m4v",
    ".ts",
    ".mts",
)

MAX_PARTITION_GB = 100.0


def is_valid_partition_size(size_gb: float) -> bool:
    """True when ``size_gb`` is a finite value in (0, 100]."""
    try:
        value = float(size_gb)
    except (TypeError, ValueError):
        return False
    return math.isfinite(value) and 0 < value <= MAX_PARTITION_GB


def is_video_file(path: str) -> bool:
    # Windows style paths are accepted on every platform
    name = path.replace("\\", "/").rsplit("/", 1)[-1]
    ext = os.path.splitext(name)[1].lower()
    return ext in VIDEO_EXTENSIONS
