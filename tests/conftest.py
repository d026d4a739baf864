import os

import pytest

# widgets are constructed in tests; no display is needed
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PySide6.QtWidgets import QApplication  # noqa: E402


@pytest.fixture(scope="session")
def qapp():
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture
def color_video(tmp_path):
    """Write a short solid-color clip and return its path."""
    from moviepy import ColorClip

    video_path = tmp_path / "color.mp4"
    clip = ColorClip(size=(32, 32), color=(0, 255, 0), duration=0.5)
    clip.write_videofile(str(video_path), fps=24, logger=None)
    clip.close()
    return str(video_path)
