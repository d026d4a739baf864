"""Split executor: cut the source into size-bounded parts with ffmpeg stream copy.

Partition boundaries come from the same calculator the preview uses. Each
partition is described on the effective timeline, mapped to one or more ranges
of the original file (skipping exclusions), extracted with ``-c copy`` and, when
it spans an exclusion, stitched back together with the concat demuxer.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from PySide6.QtCore import QObject, Signal

from ..core.intervals import TimeInterval, sort_by_start
from ..core.metadata import VideoMetadata
from ..core.partition import calculate, excluded_duration
from ..core.session import SplitRequest
from ..utils.timefmt import format_ffmpeg_time
from .errors import SplitError, VidpartError
from .ffmpeg import FFmpegResult, run_ffmpeg
from .probe import probe_metadata

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float], None]  # 0.0 - 1.0

__all__ = [
    "ProgressCallback",
    "Segment",
    "included_intervals",
    "map_to_original_segments",
    "effective_partition_ranges",
    "output_name",
    "split_video",
    "SplitWorker",
]


@dataclass(frozen=True)
class Segment:
    start: float
    end: float


def included_intervals(exclusions: Sequence[TimeInterval], duration: float) -> List[Segment]:
    """Complement of ``exclusions`` within ``[0, duration]``; overlaps collapse."""
    included: List[Segment] = []
    pos = 0.0
    for iv in sort_by_start(exclusions):
        if iv.start_secs > pos:
            included.append(Segment(pos, min(iv.start_secs, duration)))
        pos = max(pos, iv.end_secs)
    if pos < duration:
        included.append(Segment(pos, duration))
    return [s for s in included if s.end > s.start]


def map_to_original_segments(
    effective_start: float, effective_end: float, included: Sequence[Segment]
) -> List[Segment]:
    """Original-timeline pieces covering one effective range."""
    segments: List[Segment] = []
    effective_pos = 0.0
    for interval in included:
        length = interval.end - interval.start
        interval_eff_end = effective_pos + length
        if interval_eff_end > effective_start and effective_pos < effective_end:
            lo = max(effective_start, effective_pos) - effective_pos
            hi = min(effective_end, interval_eff_end) - effective_pos
            segments.append(Segment(interval.start + lo, interval.start + hi))
        effective_pos = interval_eff_end
        if effective_pos >= effective_end:
            break
    return segments


def effective_partition_ranges(
    duration: float, file_size: int, target_size_bytes: int, exclusions: Sequence[TimeInterval]
) -> List[Segment]:
    """Partition count from the calculator, ranges on the effective timeline."""
    points = calculate(
        VideoMetadata(file_size=file_size, duration_secs=duration),
        target_size_bytes,
        exclusions,
    )
    if not points:
        return []
    effective = duration - excluded_duration(exclusions)
    step = effective / len(points)
    return [
        Segment(i * step, effective if i == len(points) - 1 else (i + 1) * step)
        for i in range(len(points))
    ]


def output_name(stem: str, index: int, extension: str) -> str:
    return f"{stem}_part{index + 1}.{extension}"


def _check(result: FFmpegResult, output_path: Path, what: str) -> None:
    if result.ok:
        return
    if result.returncode < 0 and output_path.exists():
        # terminated by a signal after writing the file
        return
    raise SplitError(f"FFmpeg {what} exited with code {result.returncode}: {result.stderr.strip()[-500:]}")


def _extract(input_path: str, output_path: Path, seg: Segment) -> None:
    result = run_ffmpeg(
        [
            "-i",
            input_path,
            "-ss",
            format_ffmpeg_time(seg.start),
            "-to",
            format_ffmpeg_time(seg.end),
            "-c",
            "copy",
            "-avoid_negative_ts",
            "make_zero",
            "-y",
            str(output_path),
        ]
    )
    _check(result, output_path, "extract")


def _concat(parts: Sequence[Path], output_path: Path, work_dir: Path) -> None:
    list_path = work_dir / "_temp_concat_list.txt"
    lines = []
    for p in parts:
        escaped = str(p).replace("\\", "/").replace("'", "'\\''")
        lines.append(f"file '{escaped}'\n")
    try:
        list_path.write_text("".join(lines))
    except OSError as exc:
        raise SplitError(f"Failed to write concat list: {exc}") from exc
    try:
        result = run_ffmpeg(
            ["-f", "concat", "-safe", "0", "-i", str(list_path), "-c", "copy", "-y", str(output_path)]
        )
    finally:
        list_path.unlink(missing_ok=True)
    _check(result, output_path, "concat")


def split_video(request: SplitRequest, progress: Optional[ProgressCallback] = None) -> List[str]:
    """Run the split and return the written file paths.

    Raises SplitError with a user-facing message on any failure.
    """
    input_path = Path(request.input_path)
    if not input_path.is_file():
        raise SplitError(f"Input file not found: {request.input_path}")
    output_dir = Path(request.output_dir)
    if not output_dir.is_dir():
        raise SplitError(f"Output directory not found: {request.output_dir}")

    try:
        meta = probe_metadata(str(input_path))
    except VidpartError as exc:
        raise SplitError(str(exc)) from exc
    if meta.duration_secs <= 0:
        raise SplitError("Could not determine video duration from FFmpeg output")

    ranges = effective_partition_ranges(
        meta.duration_secs, meta.file_size, request.target_size_bytes, request.exclusions
    )
    if not ranges:
        raise SplitError(
            "No partition points calculated. Check file size and target partition size."
        )

    stem = input_path.stem or "output"
    extension = input_path.suffix.lstrip(".") or "mp4"
    included = included_intervals(request.exclusions, meta.duration_secs)
    written: List[str] = []
    try:
        for index, rng in enumerate(ranges):
            segments = map_to_original_segments(rng.start, rng.end, included)
            if not segments:
                continue
            final_path = output_dir / output_name(stem, index, extension)
            logger.info(
                "partition %d/%d -> %s (%d segment(s))",
                index + 1,
                len(ranges),
                final_path.name,
                len(segments),
            )
            if len(segments) == 1:
                _extract(str(input_path), final_path, segments[0])
            else:
                temp_paths = [
                    output_dir / f"_temp_{stem}_p{index + 1}_s{i}.{extension}"
                    for i in range(len(segments))
                ]
                try:
                    for seg, tmp in zip(segments, temp_paths):
                        _extract(str(input_path), tmp, seg)
                    _concat(temp_paths, final_path, output_dir)
                finally:
                    for tmp in temp_paths:
                        tmp.unlink(missing_ok=True)
            written.append(str(final_path))
            if progress:
                progress((index + 1) / len(ranges))
    except VidpartError as exc:
        if isinstance(exc, SplitError):
            raise
        raise SplitError(str(exc)) from exc
    return written


class SplitWorker(QObject):
    """Runs `split_video` on a QThread and relays status to the UI."""

    progress = Signal(int)  # 0 - 100
    finished = Signal(list)  # written paths
    failed = Signal(str)

    def __init__(self, request: SplitRequest):
        super().__init__()
        self._request = request

    def run(self):  # executed in thread
        try:
            paths = split_video(
                self._request, progress=lambda f: self.progress.emit(int(round(f * 100)))
            )
        except SplitError as e:
            logger.error("split failed: %s", e)
            self.failed.emit(str(e))
            return
        except Exception as e:  # surfaced to the user, not swallowed
            logger.exception("unexpected split failure")
            self.failed.emit(f"Unexpected error: {e}")
            return
        logger.info("split complete: %d partition(s) created", len(paths))
        self.finished.emit(paths)

