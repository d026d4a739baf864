import pytest

from vidpart.core.editor import CreateDrag, ResizeEndDrag
from vidpart.core.intervals import TimeInterval
from vidpart.core.partition import PartitionPoint
from vidpart.core.timeline_model import build_render_model


def test_no_model_without_duration():
    assert build_render_model(0.0, 0.0, [], None, []) is None


def test_ratios():
    points = [
        PartitionPoint(0, 0.0, 50.0, 10),
        PartitionPoint(1, 50.0, 100.0, 10),
    ]
    model = build_render_model(
        100.0, 25.0, [TimeInterval(10.0, 30.0)], CreateDrag(80.0, 60.0), points, 4
    )
    assert model.playhead == 0.25
    assert model.exclusions[0].left == pytest.approx(0.1)
    assert model.exclusions[0].width == pytest.approx(0.2)
    assert model.drag.left == pytest.approx(0.6)
    assert model.drag.right == pytest.approx(0.8)
    assert model.partition_markers == [0.5]  # first partition has no marker
    assert len(model.thumbnail_slots) == 4
    assert model.thumbnail_slots[3].left == pytest.approx(0.75)


def test_playhead_clamped_and_stale_drag_hidden():
    model = build_render_model(10.0, 20.0, [], ResizeEndDrag(2, 5.0), [])
    assert model.playhead == 1.0
    assert model.drag is None
    assert model.thumbnail_slots == []
