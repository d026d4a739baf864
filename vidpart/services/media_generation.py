"""Asynchronous thumbnail extraction for the timeline strip.

A ThumbnailWorker lives on its own QThread and emits the ordered images once
all frames are decoded. Every request carries a generation id; the timeline
drops results from generations it has since superseded.
"""

from __future__ import annotations

import logging
from io import BytesIO
from typing import List

from PIL import Image
from PySide6.QtCore import QObject, QThread, Signal
from PySide6.QtGui import QImage

logger = logging.getLogger(__name__)

__all__ = ["thumbnail_times", "ThumbnailWorker"]


def thumbnail_times(duration: float, count: int) -> List[float]:
    """Evenly spaced sample times, one at the start of each slot."""
    if duration <= 0 or count <= 0:
        return []
    step = duration / count
    return [i * step for i in range(count)]


class ThumbnailWorker(QObject):
    finished = Signal(int, list, list)  # generation_id, images(QImage), times
    failed = Signal(int, str)

    def __init__(self, adapter, generation_id: int, count: int, height: int):
        super().__init__()
        self._adapter = adapter
        self._gen = generation_id
        self._count = count
        self._height = height

    def run(self):  # executed in thread
        logger.debug("thumbnail generation start gen=%d", self._gen)
        times = thumbnail_times(self._adapter.duration, self._count)
        if not times:
            self.failed.emit(self._gen, "non-positive duration")
            return
        images: List[QImage] = []
        for ts in times:
            if QThread.currentThread().isInterruptionRequested():
                logger.debug("thumbnail generation interrupted gen=%d", self._gen)
                return
            try:
                frame = self._adapter.get_frame(ts)
            except Exception as e:
                self.failed.emit(self._gen, f"decode error at {ts:.2f}s: {e}")
                return
            image = Image.fromarray(frame).convert("RGB")
            new_w = max(1, int(self._height * image.width / image.height))
            image = image.resize((new_w, self._height))
            buf = BytesIO()
            image.save(buf, format="PNG")
            images.append(QImage.fromData(buf.getvalue(), "PNG"))
        logger.debug("thumbnail generation finished gen=%d images=%d", self._gen, len(images))
        self.finished.emit(self._gen, images, times)
