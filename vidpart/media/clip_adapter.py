"""Thread-safe adapter around MoviePy VideoFileClip.

Decoding from the preview timer and from the thumbnail thread share one
reader, so every frame access goes through the adapter's mutex. The adapter is
also the quick metadata source: MoviePy knows duration and frame size as soon
as the file is opened, well before the ffmpeg probe finishes.
"""

from __future__ import annotations

import logging
import os

from moviepy import VideoFileClip
from PySide6.QtCore import QMutex

from ..core.metadata import VideoMetadata

logger = logging.getLogger(__name__)


class ClipAdapter:
    def __init__(self, clip, path: str = ""):
        self._clip = clip
        self._path = path or getattr(clip, "filename", "") or ""
        self._mutex = QMutex()

    @property
    def clip(self):
        return self._clip

    @property
    def path(self) -> str:
        return self._path

    @property
    def duration(self) -> float:
        return float(getattr(self._clip, "duration", 0.0) or 0.0)

    @property
    def fps(self) -> float:
        return float(getattr(self._clip, "fps", 0.0) or 0.0)

    def get_frame(self, t: float):
        t = max(0.0, min(t, self.duration))
        self._mutex.lock()
        try:
            return self._clip.get_frame(t)
        finally:
            self._mutex.unlock()

    def quick_metadata(self) -> VideoMetadata:
        """Approximate metadata; file size and codecs are left for the probe."""
        size = getattr(self._clip, "size", None) or (0, 0)
        return VideoMetadata.for_path(
            self._path,
            duration_secs=self.duration,
            width=int(size[0]),
            height=int(size[1]),
        )

    def close(self) -> None:
        self._mutex.lock()
        try:
            self._clip.close()
        except Exception as e:  # pragma: no cover
            logger.debug("clip close failed: %s", e)
        finally:
            self._mutex.unlock()

    @classmethod
    def from_path(cls, path: str) -> "ClipAdapter":
        clip = VideoFileClip(path)
        logger.debug("opened %s (%.2fs)", os.path.basename(path), clip.duration)
        return cls(clip, path)


__all__ = ["ClipAdapter"]
