"""Exclusion interval editor: pointer interaction state machine.

The editor owns only the transient drag. The exclusion list it edits belongs
to the caller (normally an ``EditingSession``) and is passed into every call,
so the same editor can be driven by the Qt timeline widget or by tests.

States::

    Idle --press body--> Dragging(CreateDrag)
    Idle --press left handle--> Dragging(ResizeStartDrag)
    Idle --press right handle--> Dragging(ResizeEndDrag)
    Dragging --move--> Dragging (live time updated)
    Dragging --release / leave--> Idle (commit)

Coordinates are converted to seconds with `pixel_to_time` before they reach
the editor.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import List, Optional, Sequence, Tuple, Union

from .intervals import TimeInterval, normalize

__all__ = [
    "MIN_EXCLUSION_RATIO",
    "HANDLE_WIDTH_PX",
    "CreateDrag",
    "ResizeStartDrag",
    "ResizeEndDrag",
    "DragState",
    "HitBody",
    "HitStartHandle",
    "HitEndHandle",
    "Hit",
    "pixel_to_time",
    "time_to_ratio",
    "hit_test",
    "preview_interval",
    "commit_drag",
    "ExclusionEditor",
]

MIN_EXCLUSION_RATIO = 0.005  # 0.5% of the video duration
HANDLE_WIDTH_PX = 6.0


@dataclass(frozen=True)
class CreateDrag:
    anchor: float
    live: float


@dataclass(frozen=True)
class ResizeStartDrag:
    index: int
    live: float


@dataclass(frozen=True)
class ResizeEndDrag:
    index: int
    live: float


DragState = Union[CreateDrag, ResizeStartDrag, ResizeEndDrag]


@dataclass(frozen=True)
class HitBody:
    pass


@dataclass(frozen=True)
class HitStartHandle:
    index: int


@dataclass(frozen=True)
class HitEndHandle:
    index: int


Hit = Union[HitBody, HitStartHandle, HitEndHandle]


def pixel_to_time(x: float, width: float, duration: float) -> float:
    """Linear pixel -> seconds conversion clamped to ``[0, duration]``."""
    if width <= 0 or duration <= 0:
        return 0.0
    ratio = max(0.0, min(1.0, x / width))
    return ratio * duration


def time_to_ratio(t: float, duration: float) -> float:
    if duration <= 0:
        return 0.0
    return max(0.0, min(1.0, t / duration))


def hit_test(
    x: float,
    width: float,
    duration: float,
    exclusions: Sequence[TimeInterval],
    handle_px: float = HANDLE_WIDTH_PX,
) -> Hit:
    """Classify a press at pixel ``x``.

    Later intervals are painted on top, so they are tested first. Within one
    interval narrower than two handles the nearer edge wins.
    """
    if width <= 0 or duration <= 0:
        return HitBody()
    for index in range(len(exclusions) - 1, -1, -1):
        iv = exclusions[index]
        x_start = time_to_ratio(iv.start_secs, duration) * width
        x_end = time_to_ratio(iv.end_secs, duration) * width
        d_start = abs(x - x_start)
        d_end = abs(x - x_end)
        if d_start <= handle_px or d_end <= handle_px:
            if d_start <= d_end:
                return HitStartHandle(index)
            return HitEndHandle(index)
    return HitBody()


def preview_interval(
    drag: Optional[DragState], exclusions: Sequence[TimeInterval]
) -> Optional[TimeInterval]:
    """Interval the drag would produce if released now (None if invalid)."""
    if drag is None:
        return None
    if isinstance(drag, CreateDrag):
        return normalize(drag.anchor, drag.live)
    if not 0 <= drag.index < len(exclusions):
        return None
    target = exclusions[drag.index]
    if isinstance(drag, ResizeStartDrag):
        return normalize(drag.live, target.end_secs)
    if isinstance(drag, ResizeEndDrag):
        return normalize(target.start_secs, drag.live)
    raise TypeError(f"unknown drag state: {drag!r}")


def commit_drag(
    drag: DragState, exclusions: Sequence[TimeInterval], duration: float
) -> Tuple[List[TimeInterval], bool]:
    """Apply a finished drag to ``exclusions``.

    Returns the new list and whether it changed. Short intervals (below 0.5% of
    ``duration``) and stale resize indices leave the list untouched.
    """
    result = list(exclusions)
    candidate = preview_interval(drag, exclusions)
    if candidate is None:
        return result, False
    if candidate.duration < duration * MIN_EXCLUSION_RATIO:
        return result, False
    if isinstance(drag, CreateDrag):
        result.append(candidate)
    else:
        if result[drag.index] == candidate:
            return result, False
        result[drag.index] = candidate
    return result, True


def _edge(exclusions: Sequence[TimeInterval], index: int, fallback: float, start: bool) -> float:
    if not 0 <= index < len(exclusions):
        return fallback
    iv = exclusions[index]
    return iv.start_secs if start else iv.end_secs


class ExclusionEditor:
    """Holds the single in-progress drag, if any."""

    def __init__(self):
        self._drag: Optional[DragState] = None

    @property
    def drag(self) -> Optional[DragState]:
        return self._drag

    @property
    def is_dragging(self) -> bool:
        return self._drag is not None

    def press(
        self, t: float, hit: Hit, exclusions: Sequence[TimeInterval] = ()
    ) -> bool:
        """Start a drag; ignored while another drag is active.

        Resize drags start at the edge they grabbed, not at the pointer, so a
        click on a handle without movement leaves the interval as it was.
        """
        if self._drag is not None:
            return False
        if isinstance(hit, HitStartHandle):
            edge = _edge(exclusions, hit.index, t, start=True)
            self._drag = ResizeStartDrag(hit.index, edge)
        elif isinstance(hit, HitEndHandle):
            edge = _edge(exclusions, hit.index, t, start=False)
            self._drag = ResizeEndDrag(hit.index, edge)
        else:
            self._drag = CreateDrag(anchor=t, live=t)
        return True

    def move(self, t: float) -> Optional[float]:
        """Update the live time.

        Returns a seek target for resize drags so the player can show the frame
        under the handle; create drags return None.
        """
        if self._drag is None:
            return None
        self._drag = replace(self._drag, live=t)
        if isinstance(self._drag, (ResizeStartDrag, ResizeEndDrag)):
            return t
        return None

    def release(
        self, exclusions: Sequence[TimeInterval], duration: float
    ) -> Tuple[List[TimeInterval], bool]:
        """Commit and return to Idle (also used for pointer-leave)."""
        drag, self._drag = self._drag, None
        if drag is None:
            return list(exclusions), False
        return commit_drag(drag, exclusions, duration)

    def cancel(self) -> None:
        self._drag = None
