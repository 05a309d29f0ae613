"""
Pipeline di stima della posa.

Sessione ImageProcessor e driver per video e camera.
"""

from .image_processor import ImageProcessor, InputParam, Result
from .pipeline_video import run_pose_pipeline, run_live_loop

__all__ = [
    "ImageProcessor",
    "InputParam",
    "Result",
    "run_pose_pipeline",
    "run_live_loop",
]
