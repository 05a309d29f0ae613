"""
Model loaders.

Runtime TorchScript e PoseEngine MoveNet single-pose (17 keypoints COCO).
"""

from .inference_helper import TorchScriptRuntime, get_device
from .pose_engine import PoseEngine

__all__ = [
    "TorchScriptRuntime",
    "get_device",
    "PoseEngine",
]
