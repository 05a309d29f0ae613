"""
Inference runtime adapter.

Carica un modello TorchScript e lo esegue in modo sincrono su tensori descritti
da InputTensorInfo/OutputTensorInfo.
"""

import logging
from pathlib import Path

import numpy as np
import torch

from ..errors import InferenceError, ModelLoadError
from ..tensor_info import InputTensorInfo, OutputTensorInfo

logger = logging.getLogger(__name__)


def get_device(device: str = "auto") -> torch.device:
    """
    Get the appropriate torch device.

    Args:
        device: Device specification - "auto", "cuda", "cpu", or "mps"

    Returns:
        torch.device object
    """
    if device == "auto":
        if torch.cuda.is_available():
            return torch.device("cuda")
        elif hasattr(torch.backends, "mps") and torch.backends.mps.is_available():
            return torch.device("mps")
        else:
            return torch.device("cpu")
    return torch.device(device)


class TorchScriptRuntime:
    """
    Adapter sincrono attorno a un modulo TorchScript.

    Il ciclo di vita è load() -> run()* -> release(). run() è bloccante e non
    prevede timeout: il parallelismo interno è governato da num_threads.

    Example:
        runtime = TorchScriptRuntime(device="cpu")
        runtime.load("model/movenet.pt", 4, input_infos, output_infos)
        outputs = runtime.run([tensor])
    """

    def __init__(self, device: str | torch.device = "cpu"):
        self.device = get_device(device) if isinstance(device, str) else device
        self.model = None
        self.input_infos: list[InputTensorInfo] = []
        self.output_infos: list[OutputTensorInfo] = []

    @property
    def is_loaded(self) -> bool:
        return self.model is not None

    def load(
        self,
        model_path: str | Path,
        num_threads: int,
        input_infos: list[InputTensorInfo],
        output_infos: list[OutputTensorInfo],
    ) -> None:
        """
        Carica il modello e verifica la compatibilità con i descrittori.

        Esegue una inferenza di prova su un tensore nullo per controllare
        che le shape di output corrispondano a quelle dichiarate.

        Raises:
            ModelLoadError: file mancante, illeggibile o architettura incompatibile
        """
        model_path = Path(model_path)
        if not model_path.is_file():
            raise ModelLoadError(f"Model file not found: {model_path}")

        torch.set_num_threads(num_threads)

        try:
            model = torch.jit.load(str(model_path), map_location=self.device)
        except (RuntimeError, ValueError, OSError) as e:
            raise ModelLoadError(f"Cannot load model {model_path}: {e}") from e
        model.eval()

        self.model = model
        self.input_infos = list(input_infos)
        self.output_infos = list(output_infos)

        dummy = [
            torch.zeros(info.shape, dtype=torch.float32, device=self.device)
            for info in self.input_infos
        ]
        try:
            self.run(dummy)
        except InferenceError as e:
            self.release()
            raise ModelLoadError(f"Model {model_path.name} is not compatible: {e}") from e

        logger.info(
            "Loaded %s (threads=%d, device=%s)", model_path.name, num_threads, self.device
        )

    def run(self, inputs: list[torch.Tensor]) -> list[np.ndarray]:
        """
        Esegue il modello e restituisce gli output come array numpy.

        Raises:
            InferenceError: shape non conformi ai descrittori o errore del backend
        """
        if self.model is None:
            raise InferenceError("Runtime is not loaded")
        if len(inputs) != len(self.input_infos):
            raise InferenceError(
                f"Expected {len(self.input_infos)} input tensors, got {len(inputs)}"
            )
        for tensor, info in zip(inputs, self.input_infos):
            if tuple(tensor.shape) != tuple(info.shape):
                raise InferenceError(
                    f"Input '{info.name}' shape mismatch: {tuple(tensor.shape)} != {info.shape}"
                )

        try:
            with torch.no_grad():
                y = self.model(*inputs)
        except (RuntimeError, torch.jit.Error) as e:
            raise InferenceError(f"Model execution failed: {e}") from e

        outputs = list(y) if isinstance(y, (tuple, list)) else [y]
        if len(outputs) != len(self.output_infos):
            raise InferenceError(
                f"Expected {len(self.output_infos)} output tensors, got {len(outputs)}"
            )

        results = []
        for out, info in zip(outputs, self.output_infos):
            if not torch.is_tensor(out):
                raise InferenceError(f"Output '{info.name}' is not a tensor: {type(out)}")
            if tuple(out.shape) != tuple(info.shape):
                raise InferenceError(
                    f"Output '{info.name}' shape mismatch: {tuple(out.shape)} != {info.shape}"
                )
            results.append(out.detach().cpu().numpy())
        return results

    def release(self) -> None:
        self.model = None
        self.input_infos = []
        self.output_infos = []
