"""
Image processor: sessione che avvolge il PoseEngine e disegna l'overlay.

Al massimo una sessione attiva per processo. Ciclo di vita:
Uninitialized -> initialize() -> Ready -> finalize() -> Uninitialized.
process() e command() sono leciti solo in Ready; in ogni altro stato
sollevano un'eccezione senza effetti collaterali.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import numpy as np

from ..config import AppConfig, OverlayConfig
from ..errors import AlreadyInitializedError, NotInitializedError, UnsupportedCommandError
from ..loaders.pose_engine import PoseEngine
from ..pose.decode import denormalize_keypoints
from ..pose.types import JOINT_LINES, PoseResult
from ..timing import FpsCounter
from ..viz.draw import draw_fps, draw_skeleton

logger = logging.getLogger(__name__)


@dataclass
class InputParam:
    work_dir: str | Path
    num_threads: int = 4


@dataclass
class Result:
    """Tempi del PoseEngine (ms, invariati) e posa decodificata."""

    time_pre_process: float = 0.0
    time_inference: float = 0.0
    time_post_process: float = 0.0
    pose: PoseResult = field(default_factory=PoseResult)


class ImageProcessor:
    """
    Sessione di stima della posa con overlay sul frame.

    Args:
        config: Configurazione completa (modello, runtime, overlay)
        exclusive: Se True, impedisce più sessioni attive contemporaneamente

    Example:
        processor = ImageProcessor()
        processor.initialize(InputParam("resource", num_threads=4))
        result = processor.process(frame)   # frame modificato in place
        processor.finalize()
    """

    _active: ImageProcessor | None = None

    def __init__(self, config: AppConfig | None = None, exclusive: bool = True):
        self.config = config or AppConfig()
        self.exclusive = exclusive
        self._engine: PoseEngine | None = None
        self._fps = FpsCounter()

    @property
    def overlay(self) -> OverlayConfig:
        return self.config.overlay

    @property
    def is_initialized(self) -> bool:
        return self._engine is not None

    def initialize(self, input_param: InputParam) -> None:
        """
        Crea e inizializza il PoseEngine.

        Raises:
            AlreadyInitializedError: Se questa o un'altra sessione è già attiva
            ModelLoadError: Se il caricamento del modello fallisce
        """
        if self._engine is not None or (self.exclusive and ImageProcessor._active is not None):
            logger.error("Already initialized")
            raise AlreadyInitializedError("ImageProcessor is already initialized")

        engine = PoseEngine(self.config.model, device=self.config.runtime.device)
        engine.initialize(input_param.work_dir, input_param.num_threads)

        self._engine = engine
        self._fps.reset()
        if self.exclusive:
            ImageProcessor._active = self

    def finalize(self) -> None:
        """
        Rilascia il PoseEngine e torna allo stato Uninitialized.

        Raises:
            NotInitializedError: Se la sessione non è attiva
        """
        if self._engine is None:
            logger.error("Not initialized")
            raise NotInitializedError("ImageProcessor is not initialized")

        engine, self._engine = self._engine, None
        if ImageProcessor._active is self:
            ImageProcessor._active = None
        engine.finalize()

    def command(self, cmd: int) -> None:
        """
        Punto di estensione per comandi a runtime. Nessun comando è supportato.

        Raises:
            NotInitializedError: Se la sessione non è attiva
            UnsupportedCommandError: Per qualsiasi codice comando
        """
        if self._engine is None:
            logger.error("Not initialized")
            raise NotInitializedError("ImageProcessor is not initialized")
        logger.error("command(%d) is not supported", cmd)
        raise UnsupportedCommandError(cmd)

    def process(self, frame_bgr: np.ndarray) -> Result:
        """
        Stima la posa e disegna scheletro e FPS sul frame (in place).

        Args:
            frame_bgr: Immagine BGR (H, W, 3)

        Returns:
            Result con i tempi del PoseEngine e la posa in coordinate normalizzate

        Raises:
            NotInitializedError: Se la sessione non è attiva
            InvalidInputError: Frame vuoto o malformato
            InferenceError: Errore del runtime
        """
        if self._engine is None:
            logger.error("Not initialized")
            raise NotInitializedError("ImageProcessor is not initialized")

        pose_result = self._engine.process(frame_bgr)

        # Un solo corpo con questo modello
        if pose_result.bodies:
            body = pose_result.bodies[0]
            height, width = frame_bgr.shape[:2]
            keypoints_px = denormalize_keypoints(body.keypoint_coords(), width, height)
            draw_skeleton(
                frame_bgr,
                keypoints_px,
                body.keypoint_scores(),
                keypoint_threshold=self.overlay.keypoint_threshold,
                keypoint_radius=self.overlay.keypoint_radius,
                skeleton_thickness=self.overlay.skeleton_thickness,
                keypoint_color=self.overlay.keypoint_color,
                skeleton_color=self.overlay.skeleton_color,
                edges=JOINT_LINES,
            )

        fps = self._fps.tick()
        if self.overlay.show_fps:
            draw_fps(
                frame_bgr,
                fps,
                pose_result.time_inference,
                font_scale=self.overlay.font_scale,
                thickness=self.overlay.text_thickness,
                color_front=self.overlay.text_color,
                color_back=self.overlay.text_background,
            )

        return Result(
            time_pre_process=pose_result.time_pre_process,
            time_inference=pose_result.time_inference,
            time_post_process=pose_result.time_post_process,
            pose=pose_result,
        )
