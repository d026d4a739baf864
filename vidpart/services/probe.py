"""Authoritative metadata read via ``ffmpeg -i``.

ffmpeg prints stream information to stderr and exits non-zero when no output
file is given; only the text matters here. Fields that cannot be parsed come
back as zero / ``"unknown"`` so `merge_metadata` can fall back to the quick read.
"""

from __future__ import annotations

import logging
import os
import re
from typing import Optional, Tuple

from PySide6.QtCore import QObject, Signal

from ..core.metadata import UNKNOWN, VideoMetadata
from .errors import ProbeError, VidpartError
from .ffmpeg import run_ffmpeg

logger = logging.getLogger(__name__)

__all__ = [
    "probe_metadata",
    "parse_probe_output",
    "parse_duration",
    "parse_resolution",
    "parse_video_codec",
    "parse_audio_codec",
    "parse_bitrate",
    "ProbeWorker",
]

_DURATION_RE = re.compile(r"Duration:\s*(\d+):(\d+):(\d+(?:\.\d+)?)")
_RESOLUTION_RE = re.compile(r"\b(\d{2,5})x(\d{2,5})\b")
_BITRATE_RE = re.compile(r"bitrate:\s*(\d+)\s*kb/s")


def parse_duration(output: str) -> float:
    m = _DURATION_RE.search(output)
    if not m:
        return 0.0
    hours, minutes, seconds = m.groups()
    return int(hours) * 3600 + int(minutes) * 60 + float(seconds)


def parse_resolution(output: str) -> Tuple[int, int]:
    for line in output.splitlines():
        if "Video:" not in line:
            continue
        for w, h in _RESOLUTION_RE.findall(line):
            width, height = int(w), int(h)
            if 16 <= width <= 15360 and 16 <= height <= 8640:
                return width, height
    return 0, 0


def _stream_codec(output: str, marker: str) -> Optional[str]:
    for line in output.splitlines():
        idx = line.find(marker)
        if idx < 0:
            continue
        rest = line[idx + len(marker):].strip()
        codec = re.split(r"[ ,]", rest, maxsplit=1)[0]
        if codec:
            return codec
    return None


def parse_video_codec(output: str) -> str:
    return _stream_codec(output, "Video:") or UNKNOWN


def parse_audio_codec(output: str) -> Optional[str]:
    return _stream_codec(output, "Audio:")


def parse_bitrate(output: str) -> int:
    m = _BITRATE_RE.search(output)
    return int(m.group(1)) * 1000 if m else 0  # kb/s -> b/s


def parse_probe_output(path: str, output: str, file_size: int = 0) -> VideoMetadata:
    width, height = parse_resolution(output)
    return VideoMetadata.for_path(
        path,
        file_size=file_size,
        duration_secs=parse_duration(output),
        width=width,
        height=height,
        video_codec=parse_video_codec(output),
        audio_codec=parse_audio_codec(output),
        bitrate=parse_bitrate(output),
    )


def probe_metadata(path: str) -> VideoMetadata:
    """Read file size from disk and stream details from ffmpeg."""
    if not os.path.isfile(path):
        raise ProbeError(f"File not found: {path}")
    try:
        file_size = os.path.getsize(path)
    except OSError as exc:
        raise ProbeError(f"Failed to read file metadata: {exc}") from exc
    try:
        result = run_ffmpeg(["-hide_banner", "-i", path])
        output = result.stderr
    except VidpartError as exc:
        # size alone still lets the quick read drive the calculator
        logger.warning("ffmpeg probe failed for %s: %s", path, exc)
        output = ""
    meta = parse_probe_output(path, output, file_size)
    logger.info(
        "probed %s: %.2fs %dx%d %s",
        meta.file_name,
        meta.duration_secs,
        meta.width,
        meta.height,
        meta.video_codec,
    )
    return meta


class ProbeWorker(QObject):
    """Runs `probe_metadata` off the GUI thread."""

    finished = Signal(str, object)  # path, VideoMetadata
    failed = Signal(str, str)  # path, message

    def __init__(self, path: str):
        super().__init__()
        self._path = path

    def run(self):  # executed in thread
        try:
            meta = probe_metadata(self._path)
        except VidpartError as e:
            self.failed.emit(self._path, str(e))
            return
        self.finished.emit(self._path, meta)
