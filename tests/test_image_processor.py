import cv2
import numpy as np
import pytest

from movenet_pose.config import AppConfig, OverlayConfig
from movenet_pose.errors import (
    AlreadyInitializedError,
    InferenceError,
    InvalidInputError,
    ModelLoadError,
    NotInitializedError,
    UnsupportedCommandError,
)
from movenet_pose.pipeline.image_processor import ImageProcessor, InputParam

from conftest import make_pose_output


NO_FPS = AppConfig(overlay=OverlayConfig(show_fps=False))


@pytest.fixture
def sessions():
    """Crea ImageProcessor e li finalizza a fine test."""
    created = []

    def _make(*args, **kwargs):
        processor = ImageProcessor(*args, **kwargs)
        created.append(processor)
        return processor

    yield _make
    for processor in created:
        if processor.is_initialized:
            processor.finalize()


@pytest.fixture
def draw_calls(monkeypatch):
    """Registra le chiamate a cv2.line e cv2.circle."""
    calls = {"line": [], "circle": []}
    monkeypatch.setattr(cv2, "line", lambda img, p1, p2, *a, **k: calls["line"].append((p1, p2)))
    monkeypatch.setattr(cv2, "circle", lambda img, c, *a, **k: calls["circle"].append(c))
    return calls


def test_process_before_initialize_leaves_frame_untouched(sessions, gray_frame):
    processor = sessions()
    before = gray_frame.copy()
    with pytest.raises(NotInitializedError):
        processor.process(gray_frame)
    assert np.array_equal(gray_frame, before)


def test_process_after_finalize_leaves_frame_untouched(sessions, high_score_work_dir, gray_frame):
    processor = sessions()
    processor.initialize(InputParam(high_score_work_dir, 1))
    processor.finalize()
    before = gray_frame.copy()
    with pytest.raises(NotInitializedError):
        processor.process(gray_frame)
    assert np.array_equal(gray_frame, before)


def test_timings_are_engine_timings_and_non_negative(sessions, high_score_work_dir, gray_frame):
    processor = sessions()
    processor.initialize(InputParam(high_score_work_dir, 1))
    for _ in range(3):
        result = processor.process(gray_frame)
        assert result.time_pre_process >= 0.0
        assert result.time_inference >= 0.0
        assert result.time_post_process >= 0.0
        assert result.time_inference == result.pose.time_inference
        assert result.time_pre_process == result.pose.time_pre_process
        assert result.time_post_process == result.pose.time_post_process


def test_all_scores_below_threshold_draws_nothing(sessions, model_factory, gray_frame):
    work_dir = model_factory(make_pose_output(np.full(17, 0.19)))
    processor = sessions(NO_FPS)
    processor.initialize(InputParam(work_dir, 1))
    before = gray_frame.copy()
    processor.process(gray_frame)
    assert np.array_equal(gray_frame, before)


def test_all_scores_below_threshold_only_text_changes(sessions, model_factory, gray_frame):
    work_dir = model_factory(make_pose_output(np.full(17, 0.1)))
    processor = sessions()
    processor.initialize(InputParam(work_dir, 1))
    before = gray_frame.copy()
    processor.process(gray_frame)
    assert not np.array_equal(gray_frame[:20], before[:20])
    assert np.array_equal(gray_frame[40:], before[40:])


def test_two_adjacent_joints_one_line_two_markers(sessions, model_factory, gray_frame, draw_calls):
    scores = np.full(17, 0.05)
    scores[7] = 0.2   # left_elbow
    scores[9] = 0.8   # left_wrist
    output = make_pose_output(scores)
    work_dir = model_factory(output)
    processor = sessions(NO_FPS)
    processor.initialize(InputParam(work_dir, 1))

    processor.process(gray_frame)

    assert len(draw_calls["line"]) == 1
    assert len(draw_calls["circle"]) == 2
    # output come (y, x, score), pixel troncati
    y7, x7 = float(output[0, 0, 7, 0]), float(output[0, 0, 7, 1])
    expected_7 = (int(x7 * 320), int(y7 * 240))
    assert draw_calls["circle"][0] == expected_7


def test_center_keypoint_drawn_at_frame_center(sessions, model_factory):
    coords = np.full((17, 2), 0.5, dtype=np.float32)
    scores = np.zeros(17)
    scores[0] = 0.9
    work_dir = model_factory(make_pose_output(scores, coords))
    processor = sessions(NO_FPS)
    processor.initialize(InputParam(work_dir, 1))

    frame = np.zeros((101, 201, 3), dtype=np.uint8)
    processor.process(frame)

    assert tuple(frame[50, 100]) == (0, 255, 0)


def test_threshold_is_configurable(sessions, model_factory, gray_frame):
    work_dir = model_factory(make_pose_output(np.full(17, 0.3)))
    config = AppConfig(overlay=OverlayConfig(keypoint_threshold=0.5, show_fps=False))
    processor = sessions(config)
    processor.initialize(InputParam(work_dir, 1))
    before = gray_frame.copy()
    processor.process(gray_frame)
    assert np.array_equal(gray_frame, before)


def test_double_initialize_keeps_first_session(sessions, high_score_work_dir, gray_frame):
    processor = sessions()
    processor.initialize(InputParam(high_score_work_dir, 1))
    with pytest.raises(AlreadyInitializedError):
        processor.initialize(InputParam(high_score_work_dir, 1))
    result = processor.process(gray_frame)
    assert len(result.pose.bodies) == 1


def test_only_one_exclusive_session_at_a_time(sessions, high_score_work_dir):
    first = sessions()
    second = sessions()
    first.initialize(InputParam(high_score_work_dir, 1))
    with pytest.raises(AlreadyInitializedError):
        second.initialize(InputParam(high_score_work_dir, 1))
    assert not second.is_initialized

    first.finalize()
    second.initialize(InputParam(high_score_work_dir, 1))
    assert second.is_initialized


def test_non_exclusive_sessions(sessions, high_score_work_dir):
    first = sessions(exclusive=False)
    second = sessions(exclusive=False)
    first.initialize(InputParam(high_score_work_dir, 1))
    second.initialize(InputParam(high_score_work_dir, 1))
    assert first.is_initialized and second.is_initialized


@pytest.mark.parametrize("cmd", [0, 1, -1, 42])
def test_every_command_is_unsupported(sessions, high_score_work_dir, cmd):
    processor = sessions()
    processor.initialize(InputParam(high_score_work_dir, 1))
    with pytest.raises(UnsupportedCommandError) as exc_info:
        processor.command(cmd)
    assert exc_info.value.cmd == cmd
    assert processor.is_initialized


def test_command_before_initialize(sessions):
    with pytest.raises(NotInitializedError):
        sessions().command(0)


def test_finalize_errors(sessions, high_score_work_dir):
    processor = sessions()
    with pytest.raises(NotInitializedError):
        processor.finalize()
    processor.initialize(InputParam(high_score_work_dir, 1))
    processor.finalize()
    with pytest.raises(NotInitializedError):
        processor.finalize()


def test_failed_initialize_leaves_session_uninitialized(sessions, tmp_path, high_score_work_dir):
    processor = sessions()
    with pytest.raises(ModelLoadError):
        processor.initialize(InputParam(tmp_path / "empty", 1))
    assert not processor.is_initialized
    assert ImageProcessor._active is None
    # retry is allowed
    processor.initialize(InputParam(high_score_work_dir, 1))
    assert processor.is_initialized


def test_frame_errors_leave_session_ready(sessions, model_factory):
    work_dir = model_factory(make_pose_output(np.full(17, 0.9)), fail_threshold=0.5)
    processor = sessions()
    processor.initialize(InputParam(work_dir, 1))

    white = np.full((60, 80, 3), 255, dtype=np.uint8)
    before = white.copy()
    with pytest.raises(InferenceError):
        processor.process(white)
    assert np.array_equal(white, before)

    with pytest.raises(InvalidInputError):
        processor.process(np.zeros((0, 80, 3), dtype=np.uint8))

    result = processor.process(np.zeros((60, 80, 3), dtype=np.uint8))
    assert len(result.pose.bodies) == 1
