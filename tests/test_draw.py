import numpy as np
import pytest

from movenet_pose.pose.types import JOINT_LINES, validate_joint_lines
from movenet_pose.viz.draw import draw_fps, draw_skeleton, draw_text, format_fps_text


def _keypoints_px():
    idx = np.arange(17)
    return np.stack([20 + idx * 15, 10 + idx * 10], axis=1).astype(np.int32)


def test_joint_lines_topology():
    assert len(JOINT_LINES) == 16
    assert (6, 5) in JOINT_LINES and (13, 15) in JOINT_LINES
    validate_joint_lines(JOINT_LINES, 17)


def test_joint_lines_validated_against_keypoint_count():
    with pytest.raises(ValueError):
        validate_joint_lines(JOINT_LINES, 13)


def test_nothing_drawn_below_threshold(gray_frame):
    before = gray_frame.copy()
    counts = draw_skeleton(gray_frame, _keypoints_px(), np.full(17, 0.19))
    assert counts == (0, 0)
    assert np.array_equal(gray_frame, before)


def test_adjacent_pair_draws_one_line_two_markers(gray_frame):
    scores = np.full(17, 0.1)
    scores[5] = scores[6] = 0.2
    before = gray_frame.copy()
    counts = draw_skeleton(gray_frame, _keypoints_px(), scores)
    assert counts == (1, 2)
    assert not np.array_equal(gray_frame, before)


def test_markers_and_lines_are_gated_independently(gray_frame):
    scores = np.full(17, 0.1)
    scores[0] = 0.9  # nessun vicino sopra soglia
    assert draw_skeleton(gray_frame, _keypoints_px(), scores) == (0, 1)


def test_all_above_threshold_draws_full_skeleton(gray_frame):
    assert draw_skeleton(gray_frame, _keypoints_px(), np.full(17, 0.9)) == (16, 17)


def test_marker_color_at_keypoint(gray_frame):
    kps = _keypoints_px()
    scores = np.zeros(17)
    scores[4] = 1.0
    draw_skeleton(gray_frame, kps, scores, keypoint_color=(0, 255, 0))
    x, y = kps[4]
    assert tuple(gray_frame[y, x]) == (0, 255, 0)


def test_draw_text_on_rect_fills_background(gray_frame):
    x1, y1, x2, y2 = draw_text(gray_frame, "hello", (0, 0), color_back=(180, 180, 180))
    assert x1 == 0 and y1 == 0 and x2 > 0 and y2 > 0
    region = gray_frame[y1:y2, x1:x2]
    assert (region == 180).all(axis=2).any()
    assert np.array_equal(gray_frame[y2 + 5:], np.full_like(gray_frame[y2 + 5:], 50))


def test_draw_text_outline_mode(gray_frame):
    before = gray_frame.copy()
    draw_text(gray_frame, "hello", (10, 10), is_text_on_rect=False)
    assert not np.array_equal(gray_frame, before)


def test_fps_text_format():
    assert format_fps_text(29.97, 12.345) == "FPS: 30.0, Inference: 12.3 [ms]"


def test_draw_fps_top_left(gray_frame):
    box = draw_fps(gray_frame, 30.0, 5.0)
    assert box[0] == 0 and box[1] == 0


def test_nan_scores_draw_nothing(gray_frame):
    before = gray_frame.copy()
    assert draw_skeleton(gray_frame, _keypoints_px(), np.full(17, np.nan)) == (0, 0)
    assert np.array_equal(gray_frame, before)
