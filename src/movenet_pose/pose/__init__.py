"""
Pose estimation utilities.

Esegue preprocessing, decoding, e operazioni correlate alla stima della posa.
"""

from .types import (
    KEYPOINT_NAMES,
    NUM_KEYPOINTS,
    JOINT_LINES,
    validate_joint_lines,
    Keypoint,
    Body,
    PoseResult,
)

from .preprocess import (
    preprocess_bgr_to_tensor,
    validate_frame,
)

from .decode import (
    decode_pose_output,
    denormalize_keypoints,
)

__all__ = [
    # Types
    "KEYPOINT_NAMES",
    "NUM_KEYPOINTS",
    "JOINT_LINES",
    "validate_joint_lines",
    "Keypoint",
    "Body",
    "PoseResult",
    # Preprocessing
    "preprocess_bgr_to_tensor",
    "validate_frame",
    # Decoding
    "decode_pose_output",
    "denormalize_keypoints",
]
