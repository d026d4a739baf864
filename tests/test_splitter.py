from pathlib import Path

import pytest

from vidpart.core.intervals import TimeInterval
from vidpart.core.metadata import VideoMetadata
from vidpart.core.session import SplitRequest
from vidpart.services import splitter
from vidpart.services.errors import SplitError
from vidpart.services.ffmpeg import FFmpegResult
from vidpart.services.splitter import (
    Segment,
    SplitWorker,
    effective_partition_ranges,
    included_intervals,
    map_to_original_segments,
    output_name,
    split_video,
)


def test_included_intervals_complement():
    exclusions = [TimeInterval(50.0, 60.0), TimeInterval(0.0, 10.0), TimeInterval(55.0, 70.0)]
    assert included_intervals(exclusions, 100.0) == [Segment(10.0, 50.0), Segment(70.0, 100.0)]
    assert included_intervals([], 30.0) == [Segment(0.0, 30.0)]
    assert included_intervals([TimeInterval(0.0, 30.0)], 30.0) == []


def test_map_effective_range_across_gap():
    included = [Segment(0.0, 150.0), Segment(250.0, 600.0)]
    assert map_to_original_segments(0.0, 100.0, included) == [Segment(0.0, 100.0)]
    assert map_to_original_segments(100.0, 200.0, included) == [
        Segment(100.0, 150.0),
        Segment(250.0, 300.0),
    ]
    assert map_to_original_segments(400.0, 500.0, included) == [Segment(500.0, 600.0)]


def test_effective_ranges_follow_calculator_count():
    ranges = effective_partition_ranges(600.0, 6_000_000_000, 1_000_000_000, [TimeInterval(100.0, 200.0)])
    assert len(ranges) == 5
    assert ranges[0] == Segment(0.0, 100.0)
    assert ranges[-1].end == 500.0
    assert effective_partition_ranges(0.0, 10, 1, []) == []


def test_output_name():
    assert output_name("talk", 0, "mp4") == "talk_part1.mp4"
    assert output_name("talk", 9, "mkv") == "talk_part10.mkv"


@pytest.fixture
def fake_media(tmp_path, monkeypatch):
    source = tmp_path / "talk.mp4"
    source.write_bytes(b"\0" * 64)
    out = tmp_path / "out"
    out.mkdir()
    calls = []

    def fake_probe(path):
        return VideoMetadata.for_path(path, duration_secs=600.0, file_size=6_000_000_000)

    def fake_run(args):
        calls.append(list(args))
        Path(args[-1]).write_bytes(b"data")
        return FFmpegResult(0, "", "")

    monkeypatch.setattr(splitter, "probe_metadata", fake_probe)
    monkeypatch.setattr(splitter, "run_ffmpeg", fake_run)
    return source, out, calls


def test_split_writes_each_partition(fake_media):
    source, out, calls = fake_media
    seen = []
    req = SplitRequest(str(source), str(out), 1_000_000_000, [TimeInterval(150.0, 250.0)])
    paths = split_video(req, progress=seen.append)

    assert [Path(p).name for p in paths] == [f"talk_part{i}.mp4" for i in range(1, 6)]
    assert all(Path(p).exists() for p in paths)
    assert seen == pytest.approx([0.2, 0.4, 0.6, 0.8, 1.0])
    # partition 2 spans the exclusion: two extracts and one concat
    concat = [c for c in calls if c[:2] == ["-f", "concat"]]
    assert len(concat) == 1
    assert concat[0][-1].endswith("talk_part2.mp4")
    first = calls[0]
    assert first[first.index("-ss") + 1] == "00:00:00.000"
    assert first[first.index("-to") + 1] == "00:01:40.000"
    assert "copy" in first
    leftovers = sorted(p.name for p in out.iterdir() if p.name.startswith("_temp"))
    assert leftovers == []


def test_split_errors(fake_media, tmp_path, monkeypatch):
    source, out, _ = fake_media
    with pytest.raises(SplitError, match="Input file not found"):
        split_video(SplitRequest(str(tmp_path / "missing.mp4"), str(out), 1))
    with pytest.raises(SplitError, match="Output directory not found"):
        split_video(SplitRequest(str(source), str(tmp_path / "nowhere"), 1))
    with pytest.raises(SplitError, match="No partition points"):
        split_video(SplitRequest(str(source), str(out), 1_000_000_000, [TimeInterval(0.0, 600.0)]))

    monkeypatch.setattr(splitter, "run_ffmpeg", lambda args: FFmpegResult(1, "", "bad input"))
    with pytest.raises(SplitError, match="exited with code 1"):
        split_video(SplitRequest(str(source), str(out), 1_000_000_000))

    monkeypatch.setattr(
        splitter, "probe_metadata", lambda path: VideoMetadata.for_path(path, file_size=10)
    )
    with pytest.raises(SplitError, match="duration"):
        split_video(SplitRequest(str(source), str(out), 1_000_000_000))


def test_split_worker_signals(qapp, fake_media):
    source, out, _ = fake_media
    worker = SplitWorker(SplitRequest(str(source), str(out), 3_000_000_000))
    progress, finished, failed = [], [], []
    worker.progress.connect(progress.append)
    worker.finished.connect(finished.append)
    worker.failed.connect(failed.append)
    worker.run()
    assert failed == []
    assert progress == [50, 100]
    assert len(finished) == 1 and len(finished[0]) == 2


def test_split_worker_reports_failure(qapp, tmp_path):
    worker = SplitWorker(SplitRequest(str(tmp_path / "missing.mp4"), str(tmp_path), 1))
    failed = []
    worker.failed.connect(failed.append)
    worker.run()
    assert len(failed) == 1 and "not found" in failed[0]
