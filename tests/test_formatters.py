import math

import pytest

from vidpart.utils.sizefmt import BYTES_PER_GB, bytes_to_gb, format_file_size, gb_to_bytes
from vidpart.utils.validators import is_valid_partition_size, is_video_file


def test_format_file_size_units():
    assert format_file_size(0) == "0 B"
    assert format_file_size(500) == "500 B"
    assert format_file_size(1024) == "1.00 KB"
    assert format_file_size(1536) == "1.50 KB"
    assert format_file_size(5 * 1024 * 1024) == "5.00 MB"
    assert format_file_size(4294967296) == "4.00 GB"


def test_gb_conversions():
    assert gb_to_bytes(1) == BYTES_PER_GB
    assert gb_to_bytes(4.0) == 4294967296
    assert gb_to_bytes(0.5) == BYTES_PER_GB // 2
    assert bytes_to_gb(2 * BYTES_PER_GB) == 2.0


def test_partition_size_bounds():
    assert is_valid_partition_size(0.1)
    assert is_valid_partition_size(4)
    assert is_valid_partition_size(100)
    assert not is_valid_partition_size(0)
    assert not is_valid_partition_size(-1)
    assert not is_valid_partition_size(100.01)
    assert not is_valid_partition_size(math.nan)
    assert not is_valid_partition_size(math.inf)
    assert not is_valid_partition_size(None)
    assert not is_valid_partition_size("abc")


def test_video_file_detection():
    assert is_video_file("movie.mp4")
    assert is_video_file("/home/user/Clip.MKV")
    assert is_video_file("C:\\Videos\\show.ts")
    assert not is_video_file("notes.txt")
    assert not is_video_file("archive.mp4.zip")
    assert not is_video_file("noextension")


@pytest.mark.parametrize("gb", [0.1, 0.25, 1.0, 3.7, 42.42, 99.99])
def test_gb_round_trip(gb):
    assert bytes_to_gb(gb_to_bytes(gb)) == pytest.approx(gb, abs=1e-9)
