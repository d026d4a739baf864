"""Thin subprocess wrapper around the ffmpeg binary.

The binary defaults to the one moviepy resolved (bundled via imageio-ffmpeg)
so the app works without a system install; ``VIDPART_FFMPEG`` overrides it.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from dataclasses import dataclass
from typing import Optional, Sequence

from moviepy.config import FFMPEG_BINARY

from ..utils.settings import Settings, load_settings
from .errors import VidpartError

logger = logging.getLogger(__name__)

__all__ = ["FFmpegResult", "ffmpeg_binary", "ffmpeg_available", "run_ffmpeg"]


@dataclass(frozen=True)
class FFmpegResult:
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def ffmpeg_binary(settings: Optional[Settings] = None) -> str:
    if settings is None:
        settings = load_settings()
    if settings.ffmpeg_binary:
        return settings.ffmpeg_binary
    if FFMPEG_BINARY and FFMPEG_BINARY != "ffmpeg-imageio":
        return FFMPEG_BINARY
    return "ffmpeg"


def ffmpeg_available(settings: Optional[Settings] = None) -> bool:
    binary = ffmpeg_binary(settings)
    return shutil.which(binary) is not None


def run_ffmpeg(args: Sequence[str]) -> FFmpegResult:
    """Run ffmpeg with ``args`` and capture decoded output.

    Raises VidpartError only when the process cannot be started; a non-zero exit
    code is returned to the caller, who knows whether it matters.
    """
    cmd = [ffmpeg_binary(), *args]
    logger.debug("running %s", " ".join(cmd))
    try:
        proc = subprocess.run(cmd, capture_output=True, check=False)
    except OSError as exc:
        raise VidpartError(f"Failed to run FFmpeg: {exc}") from exc
    return FFmpegResult(
        returncode=proc.returncode,
        stdout=proc.stdout.decode(errors="ignore"),
        stderr=proc.stderr.decode(errors="ignore"),
    )
