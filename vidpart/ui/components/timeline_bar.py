"""Exclusion timeline widget.

Draws the thumbnail strip, exclusion zones, the in-progress drag, partition
cut markers and the playhead, and turns mouse input into exclusion edits.

Signals:
    seekRequested(float): user is dragging a handle; show the frame at t.
    exclusionsChanged(): a drag was committed into the session.
    dragStarted() / dragEnded()
"""

from __future__ import annotations

import logging
from typing import List, Optional

from PySide6.QtCore import QRectF, QThread, Qt, Signal
from PySide6.QtGui import QColor, QImage, QPainter, QPen, QPixmap
from PySide6.QtWidgets import QHBoxLayout, QLabel, QVBoxLayout, QWidget

from ...core.editor import ExclusionEditor, hit_test, pixel_to_time
from ...core.session import EditingSession
from ...core.timeline_model import build_render_model
from ...services.media_generation import ThumbnailWorker
from ...utils.settings import debug_timeline_enabled
from ...utils.timefmt import format_duration

logger = logging.getLogger(__name__)

_BG = QColor(55, 65, 81)
_EXCLUSION = QColor(127, 29, 29, 130)
_DRAG = QColor(239, 68, 68, 80)
_DRAG_BORDER = QColor(248, 113, 113, 140)
_MARKER = QColor(250, 204, 21)
_PLAYHEAD = QColor(96, 165, 250)


class _TimelineBar(QWidget):
    """Paint surface + pointer routing; state lives in the owner."""

    def __init__(self, owner: "ExclusionTimelineWidget"):
        super().__init__(owner)
        self._owner = owner
        self.setMinimumHeight(56)
        self.setMouseTracking(True)
        self.setCursor(Qt.CrossCursor)

    def paintEvent(self, event):  # type: ignore[override]
        p = QPainter(self)
        p.fillRect(self.rect(), _BG)
        model = self._owner.renderModel()
        if model is None:
            p.end()
            return
        w = self.width()
        h = self.height()
        pixmaps = self._owner._pixmaps
        for pix, slot in zip(pixmaps, model.thumbnail_slots):
            target = QRectF(slot.left * w, 0, slot.width * w, h)
            p.drawPixmap(target, pix, QRectF(pix.rect()))
        for span in model.exclusions:
            p.fillRect(QRectF(span.left * w, 0, span.width * w, h), _EXCLUSION)
        if model.drag is not None:
            r = QRectF(model.drag.left * w, 0, model.drag.width * w, h - 1)
            p.fillRect(r, _DRAG)
            p.setPen(QPen(_DRAG_BORDER, 1))
            p.drawRect(r)
        p.setPen(QPen(_MARKER, 2))
        for ratio in model.partition_markers:
            x = int(ratio * w)
            p.drawLine(x, 0, x, h)
        p.setPen(QPen(_PLAYHEAD, 2))
        x = int(model.playhead * w)
        p.drawLine(x, 0, x, h)
        p.end()

    def mousePressEvent(self, event):  # type: ignore[override]
        if event.button() != Qt.LeftButton:
            return
        self._owner._pointerPressed(event.position().x())

    def mouseMoveEvent(self, event):  # type: ignore[override]
        self._owner._pointerMoved(event.position().x())

    def mouseReleaseEvent(self, event):  # type: ignore[override]
        if event.button() != Qt.LeftButton:
            return
        self._owner._pointerReleased()

    def leaveEvent(self, event):  # type: ignore[override]
        self._owner._pointerReleased()
        super().leaveEvent(event)


class ExclusionTimelineWidget(QWidget):
    seekRequested = Signal(float)
    exclusionsChanged = Signal()
    dragStarted = Signal()
    dragEnded = Signal()

    def __init__(self, session: EditingSession, parent: QWidget | None = None):
        super().__init__(parent)
        self._session = session
        self._editor = ExclusionEditor()
        self._position = 0.0
        self._pixmaps: List[QPixmap] = []
        self._thumb_gen_id = 0
        self._thumb_thread: Optional[QThread] = None
        self._thumb_worker: Optional[ThumbnailWorker] = None
        self._debug = debug_timeline_enabled()

        outer = QVBoxLayout()
        outer.setContentsMargins(0, 0, 0, 0)
        self.bar = _TimelineBar(self)
        outer.addWidget(self.bar)

        label_row = QHBoxLayout()
        self.label_stats = QLabel("")
        self.label_time = QLabel("")
        for lbl in (self.label_stats, self.label_time):
            lbl.setStyleSheet("color:#9ca3af;font-size:11px;")
        label_row.addWidget(self.label_stats)
        label_row.addStretch(1)
        label_row.addWidget(self.label_time)
        outer.addLayout(label_row)
        self.setLayout(outer)
        self.refresh()

    # --- Public API ---
    @property
    def editor(self) -> ExclusionEditor:
        return self._editor

    def setPosition(self, t: float):
        self._position = max(0.0, t)
        self.refresh()

    def currentPosition(self) -> float:
        return self._position

    def renderModel(self):
        return build_render_model(
            self._session.duration,
            self._position,
            self._session.exclusions,
            self._editor.drag,
            self._session.partition_points,
            len(self._pixmaps),
        )

    def refresh(self):
        duration = self._session.duration
        if duration <= 0:
            self.label_stats.setText("Load a video to see the timeline")
            self.label_time.setText("")
        else:
            stats = (
                f"Partitions: {len(self._session.partition_points)} | "
                f"Exclusions: {len(self._session.exclusions)}"
            )
            if self._editor.is_dragging:
                stats += " | Drag to select exclusion"
            self.label_stats.setText(stats)
            self.label_time.setText(
                f"{format_duration(self._position)} / {format_duration(duration)}"
            )
        self.bar.update()

    def clear(self):
        self._editor.cancel()
        self._position = 0.0
        self._stopThumbnailThread()
        self._thumb_gen_id += 1
        self._pixmaps = []
        self.refresh()

    # --- Pointer handling (called by the bar) ---
    def _pointerPressed(self, x: float):
        duration = self._session.duration
        if duration <= 0:
            return
        width = self.bar.width()
        hit = hit_test(x, width, duration, self._session.exclusions)
        t = pixel_to_time(x, width, duration)
        if self._editor.press(t, hit, self._session.exclusions):
            self.dragStarted.emit()
            self.refresh()

    def _pointerMoved(self, x: float):
        if not self._editor.is_dragging:
            return
        t = pixel_to_time(x, self.bar.width(), self._session.duration)
        seek_to = self._editor.move(t)
        if seek_to is not None:
            self._position = seek_to
            self.seekRequested.emit(seek_to)
        self.refresh()

    def _pointerReleased(self):
        if not self._editor.is_dragging:
            return
        updated, changed = self._editor.release(
            self._session.exclusions, self._session.duration
        )
        if changed:
            self._session.set_exclusions(updated)
            self.exclusionsChanged.emit()
        self.dragEnded.emit()
        self.refresh()

    # --- Thumbnails ---
    def setMedia(self, adapter, count: int = 20, height: int = 60):
        """Start background thumbnail extraction for ``adapter``."""
        self._stopThumbnailThread()
        self._pixmaps = []
        self._thumb_gen_id += 1
        gen_id = self._thumb_gen_id
        worker = ThumbnailWorker(adapter, gen_id, count, height)
        thread = QThread()
        self._thumb_thread = thread
        self._thumb_worker = worker
        worker.moveToThread(thread)
        thread.started.connect(worker.run)
        worker.finished.connect(self._onThumbsReady)
        worker.failed.connect(self._onThumbsFailed)
        worker.finished.connect(lambda *_: thread.quit())
        worker.failed.connect(lambda *_: thread.quit())
        thread.finished.connect(worker.deleteLater)
        thread.finished.connect(self._clearThread)
        thread.start()
        if self._debug:
            logger.debug("thumbnail thread spawned gen=%d", gen_id)

    def _stopThumbnailThread(self):
        thread = self._thumb_thread
        if thread is not None and thread.isRunning():
            thread.requestInterruption()
            thread.quit()
            thread.wait(2000)

    def _clearThread(self):
        thread = self._thumb_thread
        if thread is not None and thread.isFinished():
            self._thumb_thread = None
            self._thumb_worker = None

    def _onThumbsReady(self, gen_id: int, images: list, times: list):
        if gen_id != self._thumb_gen_id:
            return  # stale
        self._pixmaps = [QPixmap.fromImage(img) for img in images if isinstance(img, QImage)]
        if self._debug:
            logger.debug("thumbnails applied gen=%d count=%d", gen_id, len(self._pixmaps))
        self.bar.update()

    def _onThumbsFailed(self, gen_id: int, reason: str):
        if gen_id != self._thumb_gen_id:
            return
        logger.warning("thumbnail generation failed: %s", reason)
        self._pixmaps = []
        self.bar.update()

    def closeEvent(self, event):  # type: ignore[override]
        self._stopThumbnailThread()
        super().closeEvent(event)


__all__ = ["ExclusionTimelineWidget"]
