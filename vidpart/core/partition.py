"""Partition point calculation.

Sizing happens on the *effective* timeline, i.e. the video with every excluded
range cut out. A uniform bitrate is assumed, so splitting the effective
duration into equal time slices also splits it into equal byte slices. Every
slice boundary is then mapped back to the original timeline for display and
for the split executor.

Known limitation: overlapping exclusions are summed as-is, which overstates
the excluded duration. Intervals are not merged here.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .intervals import TimeInterval, sort_by_start, total_duration
from .metadata import VideoMetadata

__all__ = [
    "PartitionPoint",
    "excluded_duration",
    "effective_to_original",
    "calculate",
]


@dataclass(frozen=True)
class PartitionPoint:
    index: int
    start_secs: float
    end_secs: float
    estimated_size_bytes: int


def excluded_duration(exclusions: Sequence[TimeInterval]) -> float:
    return total_duration(exclusions)


def effective_to_original(t: float, exclusions: Sequence[TimeInterval]) -> float:
    """Map an effective-timeline timestamp back onto the original timeline.

    Exclusions are walked in start order; each one the shifted timestamp has
    reached (``t + offset >= start``) pushes the result forward by its length.
    The walk stops at the first exclusion not yet reached.
    """
    offset = 0.0
    for iv in sort_by_start(exclusions):
        if t + offset >= iv.start_secs:
            offset += iv.end_secs - iv.start_secs
        else:
            break
    return t + offset


def calculate(
    metadata: Optional[VideoMetadata],
    target_size_bytes: int,
    exclusions: Sequence[TimeInterval],
) -> Optional[List[PartitionPoint]]:
    """Return partition points in original-timeline coordinates.

    ``None`` means "not ready" (no metadata yet) and callers should keep any
    previous result. An empty list means nothing is left to split: zero-length
    video, non-positive target, or exclusions covering the whole file.
    """
    if metadata is None:
        return None
    duration = metadata.duration_secs
    if duration <= 0 or target_size_bytes <= 0:
        return []

    effective_duration = duration - excluded_duration(exclusions)
    if effective_duration <= 0:
        return []

    effective_size = (effective_duration / duration) * metadata.file_size
    count = math.ceil(effective_size / target_size_bytes)
    if count <= 0:
        return []

    time_per_partition = effective_duration / count
    points: List[PartitionPoint] = []
    for i in range(count):
        eff_start = i * time_per_partition
        eff_end = min((i + 1) * time_per_partition, effective_duration)
        size = min(target_size_bytes, effective_size - i * target_size_bytes)
        points.append(
            PartitionPoint(
                index=i,
                start_secs=effective_to_original(eff_start, exclusions),
                end_secs=effective_to_original(eff_end, exclusions),
                estimated_size_bytes=max(0, int(size)),
            )
        )
    return points
