"""
Video writing utilities.

Scrittura dei frame annotati su file video.
"""

from pathlib import Path

import cv2
import numpy as np


class VideoWriter:
    """
    Scrittore di file video con supporto per context manager.

    Il file viene aperto al primo frame, usandone le dimensioni. Con
    output_path None il writer è disabilitato e write() non fa nulla.

    Args:
        output_path: Percorso per il file video di output (None = disabilitato)
        fps: Frame rate
        fourcc: Video codec (default: "mp4v")

    Example:
        with VideoWriter("output.mp4", 30.0) as writer:
            writer.write(frame)
    """

    def __init__(
        self,
        output_path: str | Path | None,
        fps: float,
        fourcc: str = "mp4v",
    ):
        self.output_path = Path(output_path) if output_path is not None else None
        self.fps = fps
        self.fourcc = fourcc
        self._writer = None
        self._entered = False
        self._frame_count = 0

    @property
    def enabled(self) -> bool:
        return self.output_path is not None

    def __enter__(self):
        self._entered = True
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self._writer:
            self._writer.release()
            self._writer = None
        self._entered = False
        return False

    @property
    def frame_count(self) -> int:
        """Numero di frame scritti."""
        return self._frame_count

    def _open(self, width: int, height: int) -> None:
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        fourcc = cv2.VideoWriter_fourcc(*self.fourcc)
        self._writer = cv2.VideoWriter(
            str(self.output_path),
            fourcc,
            self.fps,
            (width, height),
        )
        if not self._writer.isOpened():
            raise RuntimeError(f"Cannot create video writer: {self.output_path}")

    def write(self, frame: np.ndarray) -> None:
        """Scrive un singolo frame."""
        if not self._entered:
            raise RuntimeError("VideoWriter deve essere usato come context manager")
        if not self.enabled:
            return
        if self._writer is None:
            height, width = frame.shape[:2]
            self._open(width, height)
        self._writer.write(frame)
        self._frame_count += 1
