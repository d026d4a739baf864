"""Main application window (UI layer).

Layout:
+---------------------------------------------+-------------------+
| Video preview + transport                   | Partition         |
|                                             | settings panel    |
+---------------------------------------------+                   |
| Exclusion timeline                          |                   |
+---------------------------------------------+-------------------+

The window owns the EditingSession and is the only place that starts
background work (metadata probe, thumbnails, split).
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional

from PySide6.QtCore import QThread, Qt
from PySide6.QtGui import QAction, QGuiApplication, QKeySequence, QShortcut
from PySide6.QtWidgets import (
    QApplication,
    QFileDialog,
    QMainWindow,
    QMessageBox,
    QSplitter,
    QStatusBar,
    QVBoxLayout,
    QWidget,
)

from ..core.session import EditingSession
from ..media.clip_adapter import ClipAdapter
from ..services.errors import ConfigError
from ..services.ffmpeg import ffmpeg_available
from ..services.probe import ProbeWorker
from ..services.splitter import SplitWorker
from ..utils.settings import Settings, configure_logging, load_settings
from ..utils.validators import is_video_file
from .components.partition_panel import PartitionPanel
from .components.preview_panel import PreviewPanel
from .components.timeline_bar import ExclusionTimelineWidget

logger = logging.getLogger(__name__)

VIDEO_FILTER = "Video Files (*.mp4 *.mkv *.avi *.mov *.wmv *.flv *.webm *.m4v *.ts *.mts)"


class MainWindow(QMainWindow):
    def __init__(self, settings: Optional[Settings] = None):
        super().__init__()
        self.settings = settings or Settings()
        self.session = EditingSession(default_target_gb=self.settings.default_target_gb)
        self.adapter: Optional[ClipAdapter] = None
        self._threads: list[tuple[QThread, object]] = []
        self._resume_after_drag = False
        self.setWindowTitle("Video Partitioner")
        self.setGeometry(100, 100, 1100, 700)
        self.setStatusBar(QStatusBar())
        self._createMenuBar()
        self._createLayout()
        self._createShortcuts()

    def centerOnPreferredScreen(self):
        """Center on VIDPART_SCREEN_INDEX if valid, else the primary screen."""
        screens = QGuiApplication.screens()
        if not screens:
            return
        idx = self.settings.screen_index
        screen = None
        if idx is not None and 0 <= idx < len(screens):
            screen = screens[idx]
        if screen is None:
            screen = QGuiApplication.primaryScreen() or screens[0]
        geo = screen.availableGeometry()
        win_geo = self.frameGeometry()
        win_geo.moveCenter(geo.center())
        self.move(win_geo.topLeft())

    # --- Construction ---
    def _createMenuBar(self):
        file_menu = self.menuBar().addMenu("File")
        open_action = QAction("Open Video...", self)
        open_action.setShortcut(QKeySequence.Open)
        open_action.triggered.connect(self._openVideo)
        file_menu.addAction(open_action)
        self.change_action = QAction("Change Video", self)
        self.change_action.triggered.connect(self.changeVideo)
        self.change_action.setEnabled(False)
        file_menu.addAction(self.change_action)
        file_menu.addSeparator()
        exit_action = QAction("Exit", self)
        exit_action.triggered.connect(self.close)
        file_menu.addAction(exit_action)

        about_menu = self.menuBar().addMenu("About")
        about_action = QAction("About Video Partitioner", self)
        about_action.triggered.connect(self._showAboutDialog)
        about_menu.addAction(about_action)

    def _showAboutDialog(self):
        QMessageBox.about(
            self,
            "About Video Partitioner",
            "Video Partitioner\nSplit large videos into size-limited parts, skipping excluded ranges.",
        )

    def _createLayout(self):
        self.preview_panel = PreviewPanel(self)
        self.controller = self.preview_panel.controller
        self.timeline = ExclusionTimelineWidget(self.session)
        self.partition_panel = PartitionPanel(self.session)

        left = QWidget()
        left_layout = QVBoxLayout()
        left_layout.setContentsMargins(0, 0, 0, 0)
        left_layout.addWidget(self.preview_panel, stretch=1)
        left_layout.addWidget(self.timeline)
        left.setLayout(left_layout)

        splitter = QSplitter()
        splitter.setOrientation(Qt.Horizontal)
        splitter.addWidget(left)
        splitter.addWidget(self.partition_panel)
        splitter.setStretchFactor(0, 3)
        splitter.setStretchFactor(1, 1)
        self.setCentralWidget(splitter)

        self.controller.positionChanged.connect(self.timeline.setPosition)
        self.timeline.seekRequested.connect(self._onTimelineSeek)
        self.timeline.exclusionsChanged.connect(self.partition_panel.refresh)
        self.timeline.dragStarted.connect(self._onDragStarted)
        self.timeline.dragEnded.connect(self._onDragEnded)
        self.partition_panel.targetSizeChanged.connect(lambda _gb: self.timeline.refresh())
        self.partition_panel.exclusionRemoved.connect(lambda _i: self.timeline.refresh())
        self.partition_panel.splitRequested.connect(self._chooseOutputAndSplit)

    def _createShortcuts(self):
        QShortcut(QKeySequence(Qt.Key_Space), self, activated=self.controller.toggle)
        QShortcut(QKeySequence(Qt.Key_Delete), self, activated=self.removeSelectedExclusion)

    # --- Video lifecycle ---
    def _openVideo(self):
        path, _ = QFileDialog.getOpenFileName(self, "Open Video", "", VIDEO_FILTER)
        if path:
            self.loadVideo(path)

    def loadVideo(self, path: str) -> bool:
        if self._refuseWhileSplitting():
            return False
        if not is_video_file(path):
            QMessageBox.warning(self, "Unsupported File", f"Not a video file: {path}")
            return False
        self._closeAdapter()
        self.session.load_video(path)
        try:
            adapter = ClipAdapter.from_path(path)
        except Exception as e:
            logger.exception("failed to open %s", path)
            self.session.fail(f"Failed to load video: {e}")
            self._refreshAll()
            QMessageBox.critical(self, "Error", f"Failed to load video: {e}")
            return False
        self.adapter = adapter
        self.preview_panel.load(adapter)
        self.session.update_metadata(adapter.quick_metadata())
        self.timeline.setMedia(
            adapter, self.settings.thumbnail_count, self.settings.thumbnail_height
        )
        self.change_action.setEnabled(True)
        self._refreshAll()
        self._startProbe(path)
        self.statusBar().showMessage(f"Loaded {os.path.basename(path)}")
        return True

    def changeVideo(self) -> bool:
        if self._refuseWhileSplitting():
            return False
        self._closeAdapter()
        self.session.reset()
        self.preview_panel.unload()
        self.timeline.clear()
        self.change_action.setEnabled(False)
        self._refreshAll()
        self.statusBar().showMessage("")
        return True

    def _refuseWhileSplitting(self) -> bool:
        # the running SplitWorker reports into this session
        if not self.session.is_processing:
            return False
        QMessageBox.warning(
            self, "Split In Progress", "Wait for the current split to finish before changing the video."
        )
        return True

    def _closeAdapter(self):
        if self.adapter is not None:
            self.timeline.clear()
            self.preview_panel.unload()
            self.adapter.close()
            self.adapter = None

    def _refreshAll(self):
        self.timeline.refresh()
        self.partition_panel.refresh()

    # --- Metadata probe ---
    def _startProbe(self, path: str):
        worker = ProbeWorker(path)
        worker.finished.connect(self._onProbeFinished)
        worker.failed.connect(self._onProbeFailed)
        self._runInThread(worker)

    def _onProbeFinished(self, path: str, meta):
        if path != self.session.video_path:
            return  # video changed meanwhile
        self.session.update_metadata(meta)
        self._refreshAll()

    def _onProbeFailed(self, path: str, message: str):
        if path != self.session.video_path:
            return
        logger.error("metadata probe failed: %s", message)
        self.statusBar().showMessage(f"Metadata error: {message}")

    # --- Exclusions / seeking ---
    def removeSelectedExclusion(self):
        index = self.partition_panel.selectedExclusion()
        if self.session.remove_exclusion(index):
            self._refreshAll()

    def _onTimelineSeek(self, t: float):
        self.controller.seek(t)

    def _onDragStarted(self):
        self._resume_after_drag = self.controller.is_playing()
        if self._resume_after_drag:
            self.controller.pause()

    def _onDragEnded(self):
        if self._resume_after_drag:
            self._resume_after_drag = False
            self.controller.play()

    # --- Split ---
    def _chooseOutputAndSplit(self):
        out_dir = QFileDialog.getExistingDirectory(self, "Select output folder")
        if out_dir:
            self.startSplit(out_dir)

    def startSplit(self, output_dir: str) -> bool:
        if self.session.is_processing:
            return False
        request = self.session.split_request(output_dir)
        if request is None:
            self.session.fail("Please select a video file and output directory")
            self._refreshAll()
            return False
        self.session.begin_split(output_dir)
        self.partition_panel.refresh()
        worker = SplitWorker(request)
        worker.progress.connect(self._onSplitProgress)
        worker.finished.connect(self._onSplitFinished)
        worker.failed.connect(self._onSplitFailed)
        self._runInThread(worker)
        return True

    def _onSplitProgress(self, percent: int):
        self.session.set_progress(percent)
        self.partition_panel.refresh()

    def _onSplitFinished(self, paths: list):
        self.session.finish_split()
        self.partition_panel.refresh()
        self.statusBar().showMessage(f"Split complete: {len(paths)} partition(s) created")

    def _onSplitFailed(self, message: str):
        self.session.fail(message)
        self.partition_panel.refresh()
        QMessageBox.critical(self, "Split Failed", message)

    # --- Threads ---
    def _runInThread(self, worker):
        thread = QThread()
        worker.moveToThread(thread)
        thread.started.connect(worker.run)
        worker.finished.connect(lambda *_: thread.quit())
        worker.failed.connect(lambda *_: thread.quit())
        thread.finished.connect(worker.deleteLater)
        self._threads.append((thread, worker))
        thread.finished.connect(self._reapThreads)
        thread.start()

    def _reapThreads(self):
        self._threads = [(t, w) for t, w in self._threads if not t.isFinished()]

    def closeEvent(self, event):  # type: ignore[override]
        for thread, _worker in list(self._threads):
            thread.quit()
            thread.wait(2000)
        self._closeAdapter()
        super().closeEvent(event)

    def _ensureFFmpeg(self):
        if not ffmpeg_available(self.settings):
            QMessageBox.warning(
                self,
                "FFmpeg Missing",
                "FFmpeg not found. Install ffmpeg or set VIDPART_FFMPEG to enable splitting.",
            )


def run():  # convenience launcher
    configure_logging()
    app = QApplication(sys.argv)
    try:
        settings = load_settings()
    except ConfigError as e:
        logger.error("%s", e)
        QMessageBox.critical(None, "Configuration Error", str(e))
        sys.exit(2)
    window = MainWindow(settings)
    window._ensureFFmpeg()
    window.show()
    window.centerOnPreferredScreen()
    if len(sys.argv) > 1:
        window.loadVideo(sys.argv[1])
    sys.exit(app.exec())


__all__ = ["MainWindow", "run"]
