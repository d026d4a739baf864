"""Time interval value type used for exclusions.

An interval is the half-open range ``[start_secs, end_secs)`` on the original
video timeline. Exclusion sets are plain lists of intervals in insertion order;
overlapping entries are allowed and are never merged here.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence

__all__ = [
    "TimeInterval",
    "normalize",
    "overlaps",
    "sort_by_start",
    "total_duration",
]


@dataclass(frozen=True)
class TimeInterval:
    start_secs: float
    end_secs: float

    @property
    def duration(self) -> float:
        return self.end_secs - self.start_secs

    def contains(self, t: float) -> bool:
        """True when ``t`` lies strictly between the endpoints."""
        return self.start_secs < t < self.end_secs


def normalize(start: float, end: float) -> TimeInterval:
    """Build an interval from an unordered endpoint pair."""
    if end < start:
        start, end = end, start
    return TimeInterval(float(start), float(end))


def overlaps(a: TimeInterval, b: TimeInterval) -> bool:
    # half-open ranges: touching endpoints do not overlap
    return a.start_secs < b.end_secs and b.start_secs < a.end_secs


def sort_by_start(intervals: Iterable[TimeInterval]) -> List[TimeInterval]:
    return sorted(intervals, key=lambda iv: (iv.start_secs, iv.end_secs))


def total_duration(intervals: Sequence[TimeInterval]) -> float:
    """Sum of interval lengths; overlapping ranges are counted once per interval."""
    return sum(iv.end_secs - iv.start_secs for iv in intervals)
