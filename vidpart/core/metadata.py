"""Video metadata record and merge rule.

Metadata arrives twice for every loaded file: a quick read from the decoder
(duration and frame size, no file size) and a slower probe that knows codecs,
bitrate and the byte size. `merge_metadata` combines them field by field.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace, fields
from typing import Optional

__all__ = ["VideoMetadata", "merge_metadata"]

UNKNOWN = "unknown"


@dataclass(frozen=True)
class VideoMetadata:
    file_path: str = ""
    file_name: str = ""
    file_size: int = 0  # bytes
    duration_secs: float = 0.0
    width: int = 0
    height: int = 0
    video_codec: str = UNKNOWN
    audio_codec: Optional[str] = None
    bitrate: int = 0  # bits per second
    format: str = UNKNOWN

    @property
    def ready(self) -> bool:
        """Partition math needs a positive duration."""
        return self.duration_secs > 0

    @classmethod
    def for_path(cls, path: str, **values) -> "VideoMetadata":
        name = os.path.basename(path.replace("\\", "/"))
        ext = os.path.splitext(name)[1].lstrip(".").lower() or UNKNOWN
        values.setdefault("format", ext)
        return cls(file_path=path, file_name=name, **values)


def _is_blank(value) -> bool:
    return value is None or value == 0 or value == "" or value == UNKNOWN


def merge_metadata(
    current: Optional[VideoMetadata], incoming: VideoMetadata
) -> VideoMetadata:
    """Prefer ``incoming`` values, falling back to ``current`` where incoming is blank.

    Blank means zero, empty, None or ``"unknown"``; this keeps the decoder's
    duration when the probe could not parse one and vice versa.
    """
    if current is None:
        return incoming
    merged = {}
    for f in fields(VideoMetadata):
        new = getattr(incoming, f.name)
        merged[f.name] = getattr(current, f.name) if _is_blank(new) else new
    return replace(incoming, **merged)
