"""Video playback controller & preview widget.

VideoPlaybackController wraps a ClipAdapter and exposes:
    load(adapter)
    play() / pause() / toggle()
    seek(seconds)
    position() -> float
Signals:
    frameReady(np.ndarray, float)   # frame array + timestamp seconds
    positionChanged(float)          # updated during playback or seek
    stateChanged(str)               # 'stopped'|'playing'|'paused'
    clipLoaded(float)               # duration

Playback is paced from a QTimer on the GUI thread. Each tick derives the
desired frame from wall-clock time since play started and jumps straight to it,
so slow decoding drops frames instead of drifting.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from time import perf_counter
from typing import Optional

import numpy as np
from PySide6.QtCore import QObject, QSize, Qt, QTimer, Signal
from PySide6.QtGui import QImage, QPixmap
from PySide6.QtWidgets import QLabel, QSizePolicy

from .clip_adapter import ClipAdapter

logger = logging.getLogger(__name__)

DEFAULT_FPS = 24.0


@dataclass
class PlaybackState:
    playing: bool = False
    current_frame: int = 0
    total_frames: int = 0
    duration: float = 0.0
    fps: float = DEFAULT_FPS


class VideoPlaybackController(QObject):
    frameReady = Signal(object, float)  # (numpy array, t seconds)
    positionChanged = Signal(float)
    stateChanged = Signal(str)
    clipLoaded = Signal(float)  # duration

    def __init__(self, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._adapter: Optional[ClipAdapter] = None
        self._state = PlaybackState()
        self._timer = QTimer(self)
        self._timer.setTimerType(Qt.PreciseTimer)
        self._timer.timeout.connect(self._tick)
        self._play_start: Optional[float] = None

    @property
    def state(self) -> PlaybackState:
        return self._state

    def is_playing(self) -> bool:
        return self._state.playing

    def load(self, adapter: ClipAdapter):
        self.unload()
        self._adapter = adapter
        fps = adapter.fps or DEFAULT_FPS
        duration = adapter.duration
        self._state = PlaybackState(
            playing=False,
            current_frame=0,
            total_frames=int(round(fps * duration)) if duration > 0 else 0,
            duration=duration,
            fps=fps,
        )
        self.clipLoaded.emit(duration)
        self.stateChanged.emit("stopped")
        self.seek(0.0)

    def unload(self):
        self._timer.stop()
        self._adapter = None
        self._state = PlaybackState()

    def play(self):
        if self._adapter is None or self._state.total_frames <= 0:
            return
        if self._state.current_frame >= self._state.total_frames - 1:
            self._state.current_frame = 0
        fps = self._state.fps
        if not self._timer.isActive():
            self._play_start = perf_counter() - self._state.current_frame / fps
            self._timer.start(int(1000 / fps))
        self._state.playing = True
        self.stateChanged.emit("playing")

    def pause(self):
        self._timer.stop()
        self._state.playing = False
        self.stateChanged.emit("paused")

    def toggle(self):
        if self._state.playing:
            self.pause()
        else:
            self.play()

    def seek(self, t: float, emit_frame: bool = True):
        if self._adapter is None:
            return
        index = int(t * self._state.fps)
        self._state.current_frame = max(0, min(index, self._state.total_frames - 1))
        if self._state.playing:
            self._play_start = perf_counter() - self.position()
        if emit_frame:
            self._emit_current_frame()
        self.positionChanged.emit(self.position())

    def position(self) -> float:
        if self._adapter is None or self._state.total_frames <= 0:
            return 0.0
        return self._state.current_frame / self._state.fps

    def _emit_current_frame(self):
        t = self.position()
        try:
            frame = self._adapter.get_frame(t)
        except Exception as e:
            logger.warning("frame decode failed at %.3fs: %s", t, e)
            return
        self.frameReady.emit(frame, t)

    def _tick(self):
        if self._adapter is None:
            self._timer.stop()
            return
        desired = int((perf_counter() - self._play_start) * self._state.fps)
        target = max(self._state.current_frame + 1, desired)
        if target >= self._state.total_frames:
            self.pause()
            return
        self._state.current_frame = target
        self._emit_current_frame()
        self.positionChanged.emit(self.position())


class VideoPreviewWidget(QLabel):
    """QLabel that shows the controller's latest frame, scaled to fit."""

    def __init__(self, controller: VideoPlaybackController, parent=None):
        super().__init__(parent)
        self.setAlignment(Qt.AlignCenter)
        self.setStyleSheet("background:#000;color:#888;font-size:18px;")
        self.setText("Open a video to start")
        controller.frameReady.connect(self._onFrame)
        self._last_frame = None
        # Ignored lets layouts shrink the label below the last pixmap size
        self.setSizePolicy(QSizePolicy.Ignored, QSizePolicy.Ignored)

    def sizeHint(self):  # type: ignore[override]
        return QSize(320, 180)

    def clear(self):  # type: ignore[override]
        self._last_frame = None
        super().clear()
        self.setText("Open a video to start")

    def _renderFrame(self):
        frame = self._last_frame
        if frame is None or self.width() <= 0 or self.height() <= 0:
            return
        if frame.ndim == 2:
            frame = np.stack([frame] * 3, axis=-1)
        frame = np.ascontiguousarray(frame, dtype=np.uint8)
        h, w = frame.shape[0], frame.shape[1]
        qimg = QImage(frame.data, w, h, w * 3, QImage.Format.Format_RGB888)
        scaled = qimg.scaled(
            self.width(), self.height(), Qt.KeepAspectRatio, Qt.FastTransformation
        )
        self.setPixmap(QPixmap.fromImage(scaled))

    def _onFrame(self, frame, t: float):
        if frame is None:
            return
        self._last_frame = frame
        self._renderFrame()

    def resizeEvent(self, event):  # type: ignore[override]
        self._renderFrame()
        super().resizeEvent(event)


__all__ = ["PlaybackState", "VideoPlaybackController", "VideoPreviewWidget"]
