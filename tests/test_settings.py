import pytest

from vidpart.services.errors import ConfigError
from vidpart.services.ffmpeg import ffmpeg_binary
from vidpart.services.media_generation import thumbnail_times
from vidpart.utils.settings import Settings, load_settings


def test_defaults(monkeypatch):
    for key in (
        "VIDPART_DEFAULT_TARGET_GB",
        "VIDPART_THUMBNAIL_COUNT",
        "VIDPART_THUMBNAIL_HEIGHT",
        "VIDPART_SCREEN_INDEX",
        "VIDPART_FFMPEG",
        "VIDPART_DEBUG_TIMELINE",
    ):
        monkeypatch.delenv(key, raising=False)
    assert load_settings() == Settings()


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("VIDPART_DEFAULT_TARGET_GB", "2.5")
    monkeypatch.setenv("VIDPART_THUMBNAIL_COUNT", "0")
    monkeypatch.setenv("VIDPART_SCREEN_INDEX", "1")
    monkeypatch.setenv("VIDPART_FFMPEG", "/opt/ffmpeg/bin/ffmpeg")
    monkeypatch.setenv("VIDPART_DEBUG_TIMELINE", "yes")
    s = load_settings()
    assert s.default_target_gb == 2.5
    assert s.thumbnail_count == 1  # clamped
    assert s.screen_index == 1
    assert s.ffmpeg_binary == "/opt/ffmpeg/bin/ffmpeg"
    assert s.debug_timeline
    assert ffmpeg_binary() == "/opt/ffmpeg/bin/ffmpeg"


def test_malformed_number(monkeypatch):
    monkeypatch.setenv("VIDPART_THUMBNAIL_COUNT", "many")
    with pytest.raises(ConfigError):
        load_settings()


def test_thumbnail_times():
    assert thumbnail_times(10.0, 4) == [0.0, 2.5, 5.0, 7.5]
    assert thumbnail_times(0.0, 4) == []
    assert thumbnail_times(10.0, 0) == []


def test_ffmpeg_binary_comes_from_settings(monkeypatch):
    monkeypatch.delenv("VIDPART_FFMPEG", raising=False)
    assert ffmpeg_binary(Settings(ffmpeg_binary="/usr/local/bin/ffmpeg")) == "/usr/local/bin/ffmpeg"
    assert ffmpeg_binary(Settings()) == ffmpeg_binary()
