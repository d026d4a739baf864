"""Editing session: everything known about the currently loaded video.

One session object is owned by the main window and passed to whatever needs
it. Mutators that touch calculator inputs (metadata, target size, exclusions)
recompute the partition points immediately; there is no caching.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from ..utils.sizefmt import gb_to_bytes
from ..utils.validators import is_valid_partition_size
from .intervals import TimeInterval
from .metadata import VideoMetadata, merge_metadata
from .partition import PartitionPoint, calculate

logger = logging.getLogger(__name__)

__all__ = ["ProcessingStatus", "SplitRequest", "EditingSession", "DEFAULT_TARGET_GB"]

DEFAULT_TARGET_GB = 4.0


class ProcessingStatus(str, Enum):
    IDLE = "idle"
    CALCULATING = "calculating"
    PROCESSING = "processing"
    COMPLETE = "complete"
    ERROR = "error"


@dataclass(frozen=True)
class SplitRequest:
    input_path: str
    output_dir: str
    target_size_bytes: int
    exclusions: List[TimeInterval] = field(default_factory=list)


@dataclass
class EditingSession:
    default_target_gb: float = DEFAULT_TARGET_GB
    video_path: Optional[str] = None
    metadata: Optional[VideoMetadata] = None
    target_size_gb: float = field(default=DEFAULT_TARGET_GB, init=False)
    exclusions: List[TimeInterval] = field(default_factory=list)
    partition_points: List[PartitionPoint] = field(default_factory=list)
    output_dir: Optional[str] = None
    status: ProcessingStatus = ProcessingStatus.IDLE
    progress: float = 0.0
    error_message: Optional[str] = None

    def __post_init__(self):
        if not is_valid_partition_size(self.default_target_gb):
            self.default_target_gb = DEFAULT_TARGET_GB
        self.target_size_gb = self.default_target_gb

    # --- Derived values ---
    @property
    def target_size_bytes(self) -> int:
        return gb_to_bytes(self.target_size_gb)

    @property
    def duration(self) -> float:
        return self.metadata.duration_secs if self.metadata is not None else 0.0

    @property
    def is_processing(self) -> bool:
        return self.status is ProcessingStatus.PROCESSING

    # --- Video lifecycle ---
    def load_video(self, path: str) -> None:
        self.reset()
        self.video_path = path

    def update_metadata(self, metadata: VideoMetadata) -> None:
        self.metadata = merge_metadata(self.metadata, metadata)
        logger.debug(
            "metadata updated: duration=%.3f size=%d",
            self.metadata.duration_secs,
            self.metadata.file_size,
        )
        self.recalculate()

    def reset(self) -> None:
        self.video_path = None
        self.metadata = None
        self.target_size_gb = self.default_target_gb
        self.exclusions = []
        self.partition_points = []
        self.output_dir = None
        self.status = ProcessingStatus.IDLE
        self.progress = 0.0
        self.error_message = None

    # --- Calculator inputs ---
    def set_target_size_gb(self, size_gb: float) -> bool:
        if not is_valid_partition_size(size_gb):
            return False
        self.target_size_gb = float(size_gb)
        self.recalculate()
        return True

    def add_exclusion(self, interval: TimeInterval) -> None:
        self.exclusions = [*self.exclusions, interval]
        self.recalculate()

    def remove_exclusion(self, index: int) -> bool:
        if not 0 <= index < len(self.exclusions):
            return False
        self.exclusions = [iv for i, iv in enumerate(self.exclusions) if i != index]
        self.recalculate()
        return True

    def replace_exclusion(self, index: int, interval: TimeInterval) -> bool:
        if not 0 <= index < len(self.exclusions):
            return False
        updated = list(self.exclusions)
        updated[index] = interval
        self.exclusions = updated
        self.recalculate()
        return True

    def set_exclusions(self, exclusions: List[TimeInterval]) -> None:
        self.exclusions = list(exclusions)
        self.recalculate()

    def clear_exclusions(self) -> None:
        self.set_exclusions([])

    def recalculate(self) -> List[PartitionPoint]:
        points = calculate(self.metadata, self.target_size_bytes, self.exclusions)
        if points is not None:
            self.partition_points = points
        return self.partition_points

    # --- Split status ---
    def split_request(self, output_dir: Optional[str] = None) -> Optional[SplitRequest]:
        out = output_dir or self.output_dir
        if not self.video_path or not out:
            return None
        return SplitRequest(
            input_path=self.video_path,
            output_dir=out,
            target_size_bytes=self.target_size_bytes,
            exclusions=list(self.exclusions),
        )

    def begin_split(self, output_dir: str) -> None:
        self.output_dir = output_dir
        self.status = ProcessingStatus.PROCESSING
        self.progress = 0.0
        self.error_message = None

    def set_progress(self, percent: float) -> None:
        self.progress = max(0.0, min(100.0, float(percent)))

    def finish_split(self) -> None:
        self.status = ProcessingStatus.COMPLETE
        self.progress = 100.0

    def fail(self, message: str) -> None:
        self.error_message = message
        self.status = ProcessingStatus.ERROR
