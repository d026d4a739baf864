"""Preview panel: frame display plus a minimal transport row.

Public API:
    load(adapter) -> attach a ClipAdapter to the playback controller
    unload()
    controller (VideoPlaybackController)
    preview (VideoPreviewWidget)
"""

from __future__ import annotations

from PySide6.QtWidgets import QHBoxLayout, QLabel, QPushButton, QVBoxLayout, QWidget

from ...media.clip_adapter import ClipAdapter
from ...media.playback import VideoPlaybackController, VideoPreviewWidget
from ...utils.timefmt import format_time


class PreviewPanel(QWidget):
    def __init__(self, parent=None):
        super().__init__(parent)
        self.controller = VideoPlaybackController(self)
        self.preview = VideoPreviewWidget(self.controller)

        layout = QVBoxLayout()
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self.preview, stretch=1)

        transport = QHBoxLayout()
        transport.setContentsMargins(4, 2, 4, 2)
        self.play_button = QPushButton("▶")
        self.play_button.setFixedWidth(36)
        self.play_button.setEnabled(False)
        self.position_label = QLabel(format_time(0.0))
        transport.addWidget(self.play_button)
        transport.addWidget(self.position_label)
        transport.addStretch(1)
        layout.addLayout(transport)
        self.setLayout(layout)

        self.play_button.clicked.connect(self.controller.toggle)
        self.controller.stateChanged.connect(self._onState)
        self.controller.positionChanged.connect(
            lambda t: self.position_label.setText(format_time(t))
        )

    def load(self, adapter: ClipAdapter):
        self.controller.load(adapter)
        self.play_button.setEnabled(True)

    def unload(self):
        self.controller.unload()
        self.preview.clear()
        self.play_button.setEnabled(False)
        self.play_button.setText("▶")
        self.position_label.setText(format_time(0.0))

    def _onState(self, state: str):
        self.play_button.setText("❚❚" if state == "playing" else "▶")


__all__ = ["PreviewPanel"]
