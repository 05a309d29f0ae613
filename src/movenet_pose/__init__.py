"""
MoveNet pose estimation.

Preprocessing, inferenza TorchScript, decoding dei keypoints e overlay dello scheletro.
"""

from .config import AppConfig, ModelConfig, OverlayConfig, RuntimeConfig, load_config
from .errors import (
    PoseEstimationError,
    NotInitializedError,
    AlreadyInitializedError,
    ModelLoadError,
    InvalidInputError,
    InferenceError,
    UnsupportedCommandError,
)
from .loaders.pose_engine import PoseEngine
from .pipeline.image_processor import ImageProcessor, InputParam, Result

__version__ = "0.1.0"

__all__ = [
    "AppConfig",
    "ModelConfig",
    "OverlayConfig",
    "RuntimeConfig",
    "load_config",
    "PoseEstimationError",
    "NotInitializedError",
    "AlreadyInitializedError",
    "ModelLoadError",
    "InvalidInputError",
    "InferenceError",
    "UnsupportedCommandError",
    "PoseEngine",
    "ImageProcessor",
    "InputParam",
    "Result",
]
