"""
MoveNet pose engine.

Incapsula caricamento del modello, preprocessing, inferenza e decoding.
"""

import logging
from pathlib import Path

import numpy as np

from ..config import ModelConfig
from ..errors import AlreadyInitializedError, ModelLoadError, NotInitializedError
from ..tensor_info import InputTensorInfo, OutputTensorInfo, build_tensor_info
from ..timing import Timer
from ..pose.decode import decode_pose_output
from ..pose.preprocess import preprocess_bgr_to_tensor
from ..pose.types import JOINT_LINES, PoseResult, validate_joint_lines
from .inference_helper import TorchScriptRuntime

logger = logging.getLogger(__name__)


class PoseEngine:
    """
    Stimatore di posa MoveNet single-pose.

    Possiede in esclusiva il runtime e i descrittori dei tensori.
    Ciclo di vita: initialize() -> process()* -> finalize().

    Args:
        model_config: Architettura e normalizzazione del modello
        device: Device su cui eseguire il modello ("cpu", "cuda", "auto")

    Example:
        engine = PoseEngine()
        engine.initialize("resource", num_threads=4)
        result = engine.process(frame_bgr)
        coords = result.bodies[0].keypoint_coords()  # (17, 2) in [0, 1]
        engine.finalize()
    """

    def __init__(
        self,
        model_config: ModelConfig | None = None,
        device: str = "cpu",
    ):
        self.model_config = model_config or ModelConfig()
        self.device = device
        self._runtime: TorchScriptRuntime | None = None
        self._input_infos: list[InputTensorInfo] = []
        self._output_infos: list[OutputTensorInfo] = []

    @property
    def is_initialized(self) -> bool:
        return self._runtime is not None

    def model_path(self, work_dir: str | Path) -> Path:
        return Path(work_dir) / "model" / self.model_config.model_filename

    def initialize(self, work_dir: str | Path, num_threads: int) -> None:
        """
        Carica il modello da <work_dir>/model/ e crea i descrittori dei tensori.

        Raises:
            AlreadyInitializedError: Se il motore è già inizializzato
            ModelLoadError: Modello mancante, illeggibile o incompatibile
                (anche con la topologia dello scheletro)
            ValueError: num_threads < 1
        """
        if self._runtime is not None:
            logger.error("Already initialized")
            raise AlreadyInitializedError("PoseEngine is already initialized")
        if num_threads < 1:
            raise ValueError(f"num_threads must be >= 1, got {num_threads}")

        try:
            validate_joint_lines(JOINT_LINES, self.model_config.num_keypoints)
        except ValueError as e:
            raise ModelLoadError(f"Skeleton topology does not fit the model: {e}") from e
        input_infos, output_infos = build_tensor_info(self.model_config)

        runtime = TorchScriptRuntime(device=self.device)
        runtime.load(self.model_path(work_dir), num_threads, input_infos, output_infos)

        self._runtime = runtime
        self._input_infos = input_infos
        self._output_infos = output_infos

    def finalize(self) -> None:
        """
        Rilascia runtime e descrittori.

        Raises:
            NotInitializedError: Se chiamato prima di initialize()
        """
        if self._runtime is None:
            logger.error("Not initialized")
            raise NotInitializedError("PoseEngine is not initialized")
        self._runtime.release()
        self._runtime = None
        self._input_infos = []
        self._output_infos = []

    def process(self, frame_bgr: np.ndarray) -> PoseResult:
        """
        Esegue la pipeline completa su un frame: preprocess, inferenza, decoding.

        Args:
            frame_bgr: Immagine BGR (H, W, 3) di dimensione arbitraria

        Returns:
            PoseResult con coordinate normalizzate e tempi delle tre fasi

        Raises:
            NotInitializedError: Se il motore non è inizializzato
            InvalidInputError: Frame vuoto o malformato
            InferenceError: Errore del runtime
        """
        if self._runtime is None:
            raise NotInitializedError("PoseEngine is not initialized")

        result = PoseResult()

        # Preprocess
        with Timer() as t:
            x = preprocess_bgr_to_tensor(
                frame_bgr, self._input_infos[0], device=self._runtime.device
            )
        result.time_pre_process = t.elapsed_ms

        # Inference
        with Timer() as t:
            outputs = self._runtime.run([x])
        result.time_inference = t.elapsed_ms

        # Postprocess
        with Timer() as t:
            result.bodies = decode_pose_output(outputs[0])
        result.time_post_process = t.elapsed_ms

        logger.debug(
            "pre=%.2fms inference=%.2fms post=%.2fms",
            result.time_pre_process, result.time_inference, result.time_post_process,
        )
        return result
