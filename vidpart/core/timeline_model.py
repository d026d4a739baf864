"""Pure projection of timeline state onto width ratios (0.0 - 1.0).

The widget multiplies these by its rendered width; nothing here is stateful.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from .editor import DragState, preview_interval, time_to_ratio
from .intervals import TimeInterval
from .partition import PartitionPoint

__all__ = ["Span", "TimelineRenderModel", "build_render_model"]


@dataclass(frozen=True)
class Span:
    left: float
    width: float

    @property
    def right(self) -> float:
        return self.left + self.width


@dataclass(frozen=True)
class TimelineRenderModel:
    playhead: float
    exclusions: List[Span] = field(default_factory=list)
    drag: Optional[Span] = None
    partition_markers: List[float] = field(default_factory=list)
    thumbnail_slots: List[Span] = field(default_factory=list)


def _span(iv: TimeInterval, duration: float) -> Span:
    left = time_to_ratio(iv.start_secs, duration)
    right = time_to_ratio(iv.end_secs, duration)
    return Span(left, max(0.0, right - left))


def build_render_model(
    duration: float,
    position: float,
    exclusions: Sequence[TimeInterval],
    drag: Optional[DragState],
    partition_points: Sequence[PartitionPoint],
    thumbnail_count: int = 0,
) -> Optional[TimelineRenderModel]:
    """Return None until a positive duration is known."""
    if duration <= 0:
        return None
    preview = preview_interval(drag, exclusions)
    # the first partition always starts at 0; only interior cuts get a marker
    markers = [
        time_to_ratio(p.start_secs, duration)
        for p in partition_points
        if p.index != 0
    ]
    slots = []
    if thumbnail_count > 0:
        w = 1.0 / thumbnail_count
        slots = [Span(i * w, w) for i in range(thumbnail_count)]
    return TimelineRenderModel(
        playhead=time_to_ratio(position, duration),
        exclusions=[_span(iv, duration) for iv in exclusions],
        drag=_span(preview, duration) if preview is not None else None,
        partition_markers=markers,
        thumbnail_slots=slots,
    )
