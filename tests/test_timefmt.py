from vidpart.utils.timefmt import format_duration, format_ffmpeg_time, format_time


def test_format_time_edge_cases():
    assert format_time(-1.0) == "00:00.000"  # negative clamps
    assert format_time(0.0) == "00:00.000"
    assert format_time(0.9996) == "00:01.000"
    assert format_time(61.0) == "01:01.000"
    assert format_time(3600 + 62.5).startswith("61:02")


def test_format_time_precision():
    assert format_time(1.2344) == "00:01.234"
    assert format_time(1.2345) == "00:01.235"  # rounds up (half-up)


def test_format_duration_drops_hours_below_one_hour():
    assert format_duration(0) == "00:00"
    assert format_duration(59.9) == "00:59"
    assert format_duration(61) == "01:01"
    assert format_duration(3600) == "01:00:00"
    assert format_duration(3723) == "01:02:03"
    assert format_duration(-5) == "00:00"


def test_format_ffmpeg_time():
    assert format_ffmpeg_time(0) == "00:00:00.000"
    assert format_ffmpeg_time(61.5) == "00:01:01.500"
    assert format_ffmpeg_time(3723) == "01:02:03.000"
    assert format_ffmpeg_time(-2) == "00:00:00.000"


def test_format_ffmpeg_time_carries_rounded_seconds():
    assert format_ffmpeg_time(59.9996) == "00:01:00.000"
    assert format_ffmpeg_time(3599.9999) == "01:00:00.000"
    assert format_ffmpeg_time(1.2345) == "00:00:01.235"
