"""Partition settings side panel.

Shows file facts, the target size input, the estimated partition count, the
exclusion list (with remove buttons), the split button and split status.
The panel reads and writes the shared EditingSession; it never computes
partitions itself.
"""

from __future__ import annotations

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import (
    QDoubleSpinBox,
    QHBoxLayout,
    QLabel,
    QListWidget,
    QListWidgetItem,
    QProgressBar,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from ...core.session import EditingSession, ProcessingStatus
from ...utils.sizefmt import format_file_size
from ...utils.timefmt import format_duration
from ...utils.validators import MAX_PARTITION_GB


class _ExclusionRow(QWidget):
    removeRequested = Signal(int)

    def __init__(self, index: int, text: str):
        super().__init__()
        layout = QHBoxLayout()
        layout.setContentsMargins(4, 0, 4, 0)
        label = QLabel(text)
        btn = QPushButton("Remove")
        btn.setFlat(True)
        btn.setStyleSheet("color:#f87171;")
        btn.clicked.connect(lambda: self.removeRequested.emit(index))
        layout.addWidget(label)
        layout.addStretch(1)
        layout.addWidget(btn)
        self.setLayout(layout)
        self.remove_button = btn


class PartitionPanel(QWidget):
    """Signals:
    targetSizeChanged(float): GB value accepted by the session.
    exclusionRemoved(int)
    splitRequested()
    """

    targetSizeChanged = Signal(float)
    exclusionRemoved = Signal(int)
    splitRequested = Signal()

    def __init__(self, session: EditingSession, parent=None):
        super().__init__(parent)
        self._session = session
        self._updating = False

        layout = QVBoxLayout()
        title = QLabel("Partition Settings")
        title.setStyleSheet("font-size:16px;font-weight:600;")
        layout.addWidget(title)

        self.info_label = QLabel("")
        self.info_label.setStyleSheet("color:#9ca3af;")
        self.info_label.setTextFormat(Qt.PlainText)
        layout.addWidget(self.info_label)

        layout.addWidget(QLabel("Target partition size (GB)"))
        self.size_spin = QDoubleSpinBox()
        self.size_spin.setRange(0.1, MAX_PARTITION_GB)
        self.size_spin.setSingleStep(0.1)
        self.size_spin.setDecimals(2)
        self.size_spin.valueChanged.connect(self._onSizeChanged)
        layout.addWidget(self.size_spin)

        self.count_label = QLabel("")
        layout.addWidget(self.count_label)

        layout.addWidget(QLabel("Excluded Intervals"))
        self.exclusion_list = QListWidget()
        layout.addWidget(self.exclusion_list, stretch=1)
        self.empty_label = QLabel("No exclusions. Select intervals on the timeline.")
        self.empty_label.setStyleSheet("color:#6b7280;font-size:11px;")
        layout.addWidget(self.empty_label)

        self.split_button = QPushButton("Split Video")
        self.split_button.clicked.connect(self.splitRequested.emit)
        layout.addWidget(self.split_button)

        self.progress_bar = QProgressBar()
        self.progress_bar.setRange(0, 100)
        self.status_label = QLabel("Ready")
        self.status_label.setWordWrap(True)
        layout.addWidget(self.progress_bar)
        layout.addWidget(self.status_label)
        self.setLayout(layout)
        self.refresh()

    def selectedExclusion(self) -> int:
        return self.exclusion_list.currentRow()

    # --- Rendering ---
    def refresh(self):
        s = self._session
        self._updating = True
        try:
            self.size_spin.setValue(s.target_size_gb)
        finally:
            self._updating = False

        meta = s.metadata
        if meta is None:
            self.info_label.setText("")
        else:
            lines = [f"File: {meta.file_name}"]
            if meta.file_size > 0:
                lines.append(f"Size: {format_file_size(meta.file_size)}")
            lines.append(f"Duration: {format_duration(meta.duration_secs)}")
            lines.append(f"Resolution: {meta.width}x{meta.height}")
            if meta.video_codec != "unknown":
                lines.append(f"Codec: {meta.video_codec}")
            self.info_label.setText("\n".join(lines))

        count = len(s.partition_points)
        self.count_label.setText(f"Estimated partitions: {count}" if count else "")

        self.exclusion_list.clear()
        for i, iv in enumerate(s.exclusions):
            row = _ExclusionRow(i, f"{iv.start_secs:.1f}s - {iv.end_secs:.1f}s")
            row.removeRequested.connect(self._onRemove)
            item = QListWidgetItem()
            item.setSizeHint(row.sizeHint())
            self.exclusion_list.addItem(item)
            self.exclusion_list.setItemWidget(item, row)
        self.empty_label.setVisible(not s.exclusions)

        processing = s.status is ProcessingStatus.PROCESSING
        self.split_button.setEnabled(meta is not None and meta.ready and not processing)
        self.split_button.setText("Processing..." if processing else "Split Video")
        self._refreshStatus()

    def _refreshStatus(self):
        s = self._session
        self.progress_bar.setVisible(s.status is ProcessingStatus.PROCESSING)
        self.progress_bar.setValue(int(s.progress))
        if s.status is ProcessingStatus.IDLE:
            self.status_label.setText("Ready")
            self.status_label.setStyleSheet("color:#6b7280;")
        elif s.status is ProcessingStatus.COMPLETE:
            self.status_label.setText("Complete")
            self.status_label.setStyleSheet("color:#4ade80;")
        elif s.status is ProcessingStatus.ERROR:
            self.status_label.setText(s.error_message or "Error")
            self.status_label.setStyleSheet("color:#f87171;")
        else:
            self.status_label.setText(f"{s.progress:.0f}%")
            self.status_label.setStyleSheet("color:#9ca3af;")

    # --- Slots ---
    def _onSizeChanged(self, value: float):
        if self._updating:
            return
        if self._session.set_target_size_gb(value):
            self.targetSizeChanged.emit(value)
            self.refresh()

    def _onRemove(self, index: int):
        if self._session.remove_exclusion(index):
            self.exclusionRemoved.emit(index)
            self.refresh()


__all__ = ["PartitionPanel"]
