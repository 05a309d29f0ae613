"""
Video reading utilities.

Lettura di frame da file video o da camera (indice del device).
"""

from pathlib import Path
from typing import Iterator

import cv2
import numpy as np


class VideoReader:
    """
    Lettore di frame da file video o camera, con accesso ai metadati.

    Args:
        source: Percorso al file video oppure indice della camera (int)

    Esempio:
        with VideoReader("video.mp4") as reader:
            print(f"Video: {reader.width}x{reader.height}, {reader.fps} fps")
            for frame_idx, frame in reader.iter_frames(stride=2):
                process(frame)
    """

    def __init__(self, source: str | Path | int):
        if isinstance(source, int):
            self.source = source
        else:
            self.source = Path(source)
            if not self.source.exists():
                raise FileNotFoundError(f"Video not found: {self.source}")
        self._cap = None

    @property
    def is_camera(self) -> bool:
        return isinstance(self.source, int)

    def __enter__(self):
        src = self.source if self.is_camera else str(self.source)
        self._cap = cv2.VideoCapture(src)
        if not self._cap.isOpened():
            raise RuntimeError(f"Cannot open video source: {self.source}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self._cap:
            self._cap.release()
        return False

    @property
    def fps(self) -> float:
        """Frame rate (30 se il backend non lo riporta)."""
        return self._cap.get(cv2.CAP_PROP_FPS) or 30.0

    @property
    def width(self) -> int:
        return int(self._cap.get(cv2.CAP_PROP_FRAME_WIDTH))

    @property
    def height(self) -> int:
        return int(self._cap.get(cv2.CAP_PROP_FRAME_HEIGHT))

    @property
    def frame_count(self) -> int:
        """Numero di frame totali (0 per le camere)."""
        return max(0, int(self._cap.get(cv2.CAP_PROP_FRAME_COUNT)))

    def read_frame(self) -> tuple[bool, np.ndarray | None]:
        """Legge un singolo frame."""
        return self._cap.read()

    def iter_frames(self, stride: int = 1) -> Iterator[tuple[int, np.ndarray]]:
        """
        Itera sui frame con stride opzionale fino alla fine dello stream.

        Yields:
            Tuple of (frame_index, frame_bgr)
        """
        if stride < 1:
            raise ValueError(f"stride must be >= 1, got {stride}")
        frame_idx = 0
        while True:
            ret, frame = self._cap.read()
            if not ret or frame is None:
                break
            if frame_idx % stride == 0:
                yield frame_idx, frame
            frame_idx += 1
