"""
Preprocessing utilities for pose estimation.

Funzioni stateless per preparare i frame per il modello di posa.
"""

import cv2
import numpy as np
import torch

from ..errors import InvalidInputError
from ..tensor_info import InputTensorInfo


def validate_frame(frame_bgr: np.ndarray) -> None:
    """
    Verifica che il frame sia un'immagine a colori non vuota.

    Raises:
        InvalidInputError: frame None, area nulla, canali diversi da 3 o dtype non uint8
    """
    if frame_bgr is None or not isinstance(frame_bgr, np.ndarray):
        raise InvalidInputError("Frame is empty")
    if frame_bgr.ndim != 3 or frame_bgr.shape[2] != 3:
        raise InvalidInputError(f"Expected HxWx3 image, got shape {frame_bgr.shape}")
    if frame_bgr.shape[0] == 0 or frame_bgr.shape[1] == 0:
        raise InvalidInputError(f"Frame has zero area: {frame_bgr.shape}")
    if frame_bgr.dtype != np.uint8:
        raise InvalidInputError(f"Expected uint8 image, got dtype {frame_bgr.dtype}")


def preprocess_bgr_to_tensor(
    frame_bgr: np.ndarray,
    input_info: InputTensorInfo,
    device: torch.device | str = "cpu",
) -> torch.Tensor:
    """
    Preprocessa un frame BGR per il modello di posa.

    Esegue:
    1. Ridimensionamento (non uniforme) alla risoluzione del modello
    2. Conversione BGR -> RGB
    3. Normalizzazione a [0, 1]
    4. Applicazione della normalizzazione mean/std del descrittore
    5. Layout NHWC o NCHW con dimensione batch
    6. Spostamento sul device specificato

    Args:
        frame_bgr: Immagine BGR di input come array numpy (H, W, 3) uint8
        input_info: Descrittore del tensore di input
        device: Device PyTorch su cui posizionare il tensor

    Returns:
        Tensor float32 con shape uguale a input_info.shape

    Raises:
        InvalidInputError: Se il frame è vuoto o malformato
    """
    validate_frame(frame_bgr)

    # Ridimensiona alle dimensioni del modello
    resized = cv2.resize(
        frame_bgr,
        (input_info.width, input_info.height),
        interpolation=cv2.INTER_LINEAR,
    )

    # BGR -> RGB e normalizza a [0, 1]
    rgb = cv2.cvtColor(resized, cv2.COLOR_BGR2RGB).astype(np.float32) / 255.0

    # Applica la normalizzazione mean/std
    mean = np.asarray(input_info.mean, dtype=np.float32)
    std = np.asarray(input_info.std, dtype=np.float32)
    rgb = (rgb - mean) / std

    if input_info.layout == "nchw":
        rgb = np.transpose(rgb, (2, 0, 1))
    tensor = torch.from_numpy(np.ascontiguousarray(rgb)).unsqueeze(0).float()

    # Sposta sul device
    return tensor.to(device)
