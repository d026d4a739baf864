from vidpart.core.editor import (
    CreateDrag,
    ExclusionEditor,
    HitBody,
    HitEndHandle,
    HitStartHandle,
    ResizeEndDrag,
    ResizeStartDrag,
    commit_drag,
    hit_test,
    pixel_to_time,
    preview_interval,
)
from vidpart.core.intervals import TimeInterval

DURATION = 100.0


def test_pixel_to_time_clamps():
    assert pixel_to_time(0, 1000, DURATION) == 0.0
    assert pixel_to_time(500, 1000, DURATION) == 50.0
    assert pixel_to_time(-20, 1000, DURATION) == 0.0
    assert pixel_to_time(1500, 1000, DURATION) == DURATION
    assert pixel_to_time(10, 0, DURATION) == 0.0


def test_hit_test_handles_and_body():
    exclusions = [TimeInterval(20.0, 40.0)]  # 200px - 400px on a 1000px bar
    assert hit_test(203, 1000, DURATION, exclusions) == HitStartHandle(0)
    assert hit_test(397, 1000, DURATION, exclusions) == HitEndHandle(0)
    # inside the interval but away from both edges starts a new drag
    assert hit_test(300, 1000, DURATION, exclusions) == HitBody()
    assert hit_test(700, 1000, DURATION, exclusions) == HitBody()


def test_hit_test_prefers_topmost_interval():
    exclusions = [TimeInterval(20.0, 40.0), TimeInterval(40.0, 60.0)]
    # x=400 is both the end of #0 and the start of #1; #1 is drawn on top
    assert hit_test(400, 1000, DURATION, exclusions) == HitStartHandle(1)


def test_create_drag_commits_normalized_interval():
    editor = ExclusionEditor()
    assert editor.press(60.0, HitBody())
    assert editor.move(30.0) is None
    assert preview_interval(editor.drag, []) == TimeInterval(30.0, 60.0)
    result, changed = editor.release([], DURATION)
    assert changed
    assert result == [TimeInterval(30.0, 60.0)]
    assert not editor.is_dragging


def test_short_drag_is_discarded():
    editor = ExclusionEditor()
    editor.press(10.0, HitBody())
    editor.move(10.4)  # 0.4s < 0.5% of 100s
    result, changed = editor.release([], DURATION)
    assert not changed
    assert result == []


def test_drag_just_over_minimum_is_kept():
    result, changed = commit_drag(CreateDrag(10.0, 10.6), [], DURATION)
    assert changed
    assert result == [TimeInterval(10.0, 10.6)]


def test_resize_start_and_end():
    exclusions = [TimeInterval(20.0, 40.0), TimeInterval(70.0, 80.0)]
    editor = ExclusionEditor()
    editor.press(20.0, HitStartHandle(0))
    assert editor.move(15.0) == 15.0  # resize drags report a seek time
    result, changed = editor.release(exclusions, DURATION)
    assert changed
    assert result == [TimeInterval(15.0, 40.0), TimeInterval(70.0, 80.0)]
    assert exclusions[0] == TimeInterval(20.0, 40.0)  # input untouched

    editor.press(80.0, HitEndHandle(1))
    editor.move(90.0)
    result, changed = editor.release(result, DURATION)
    assert result[1] == TimeInterval(70.0, 90.0)


def test_resize_past_other_edge_swaps():
    exclusions = [TimeInterval(20.0, 40.0)]
    result, changed = commit_drag(ResizeStartDrag(0, 55.0), exclusions, DURATION)
    assert changed
    assert result == [TimeInterval(40.0, 55.0)]
    result, changed = commit_drag(ResizeEndDrag(0, 5.0), exclusions, DURATION)
    assert result == [TimeInterval(5.0, 20.0)]


def test_resize_too_short_leaves_original():
    exclusions = [TimeInterval(20.0, 40.0)]
    result, changed = commit_drag(ResizeEndDrag(0, 20.2), exclusions, DURATION)
    assert not changed
    assert result == exclusions


def test_stale_index_is_discarded():
    exclusions = [TimeInterval(20.0, 40.0)]
    assert preview_interval(ResizeEndDrag(3, 50.0), exclusions) is None
    result, changed = commit_drag(ResizeEndDrag(3, 50.0), exclusions, DURATION)
    assert not changed
    assert result == exclusions


def test_press_ignored_while_dragging():
    editor = ExclusionEditor()
    assert editor.press(10.0, HitBody())
    assert not editor.press(50.0, HitStartHandle(0))
    assert editor.drag == CreateDrag(10.0, 10.0)


def test_release_without_drag_is_noop():
    editor = ExclusionEditor()
    exclusions = [TimeInterval(1.0, 2.0)]
    result, changed = editor.release(exclusions, DURATION)
    assert not changed
    assert result == exclusions
    assert editor.move(5.0) is None


def test_cancel_drops_drag():
    editor = ExclusionEditor()
    editor.press(10.0, HitBody())
    editor.cancel()
    assert editor.drag is None


def test_handle_click_without_move_keeps_interval():
    exclusions = [TimeInterval(20.0, 40.0)]
    editor = ExclusionEditor()
    editor.press(39.5, HitEndHandle(0), exclusions)
    assert editor.drag == ResizeEndDrag(0, 40.0)
    result, changed = editor.release(exclusions, DURATION)
    assert not changed
    assert result == exclusions

    editor.press(20.4, HitStartHandle(0), exclusions)
    assert editor.drag == ResizeStartDrag(0, 20.0)
    result, changed = editor.release(exclusions, DURATION)
    assert not changed
