"""
JSONL output utilities.

Un record JSON per frame con keypoints e tempi della pipeline.
"""

import json
from pathlib import Path
from typing import Any

import numpy as np

from ..pose.types import KEYPOINT_NAMES, Body


class JsonlWriter:
    """
    Context manager per la scrittura di file JSONL.

    Example:
        with JsonlWriter("output.jsonl") as writer:
            writer.write({"frame": 0, "keypoints17": [...]})
    """

    def __init__(self, filepath: str | Path):
        self.filepath = Path(filepath)
        self.filepath.parent.mkdir(parents=True, exist_ok=True)
        self._file = None

    def __enter__(self):
        self._file = self.filepath.open("w", encoding="utf-8")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self._file:
            self._file.close()
        return False

    def write(self, record: dict[str, Any]) -> None:
        """Write a single record as a JSON line."""
        if self._file is None:
            raise RuntimeError("JsonlWriter must be used as context manager")
        self._file.write(json.dumps(record) + "\n")


def keypoints_to_list(
    body: Body,
    keypoints_px: np.ndarray | None = None,
) -> list[dict[str, Any]]:
    """
    Convert a body to a JSON-serializable list, one entry per keypoint.

    Args:
        body: Decoded body with normalized coordinates
        keypoints_px: Optional (K, 2) pixel coordinates for the same body

    Returns:
        List of {"name", "x", "y", "score"[, "x_px", "y_px"]}
    """
    out = []
    for i, kp in enumerate(body.keypoints):
        name = KEYPOINT_NAMES[i] if i < len(KEYPOINT_NAMES) else str(i)
        entry = {"name": name, "x": kp.x, "y": kp.y, "score": kp.score}
        if keypoints_px is not None:
            entry["x_px"] = int(keypoints_px[i, 0])
            entry["y_px"] = int(keypoints_px[i, 1])
        out.append(entry)
    return out


def create_pose_record(
    frame_idx: int,
    fps: float,
    keypoints: list[dict[str, Any]] | None = None,
    body_score: float | None = None,
    timings: dict[str, float] | None = None,
    status: str = "ok",
    error: str | None = None,
) -> dict[str, Any]:
    """
    Create a standardized pose record for JSONL output.

    Args:
        frame_idx: Frame index in the video
        fps: Video frame rate
        keypoints: Output of keypoints_to_list, or None
        body_score: Overall body confidence
        timings: time_pre_process / time_inference / time_post_process in ms
        status: Status string ("ok", "error")
        error: Error message when status is "error"

    Returns:
        Dictionary ready for JSON serialization
    """
    record = {
        "frame": frame_idx,
        "time_sec": float(frame_idx / fps),
        "status": status,
    }

    if keypoints is not None:
        record["keypoints17"] = keypoints

    if body_score is not None:
        record["body_score"] = float(body_score)

    if timings is not None:
        record["timings_ms"] = {k: float(v) for k, v in timings.items()}

    if error is not None:
        record["error"] = error

    return record
