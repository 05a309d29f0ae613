"""
Descrittori dei tensori di input/output del modello.

Creati una sola volta dal PoseEngine in initialize() e in sola lettura in seguito.
"""

from __future__ import annotations

from dataclasses import dataclass

from .config import ModelConfig


@dataclass(frozen=True)
class InputTensorInfo:
    """
    Descrittore del tensore immagine.

    Args:
        name: Nome del tensore
        shape: Shape completa con dimensione batch, es. (1, 192, 192, 3)
        layout: "nhwc" o "nchw"
        mean: Media per canale (RGB) applicata dopo la scala a [0, 1]
        std: Deviazione standard per canale (RGB)
    """

    name: str
    shape: tuple[int, ...]
    layout: str = "nhwc"
    mean: tuple[float, float, float] = (0.0, 0.0, 0.0)
    std: tuple[float, float, float] = (1.0, 1.0, 1.0)

    def __post_init__(self):
        if self.layout not in ("nhwc", "nchw"):
            raise ValueError(f"Unsupported tensor layout: {self.layout}")
        if len(self.shape) != 4:
            raise ValueError(f"Image tensor must be 4D, got shape {self.shape}")

    @property
    def width(self) -> int:
        return self.shape[2] if self.layout == "nhwc" else self.shape[3]

    @property
    def height(self) -> int:
        return self.shape[1] if self.layout == "nhwc" else self.shape[2]

    @property
    def channels(self) -> int:
        return self.shape[3] if self.layout == "nhwc" else self.shape[1]


@dataclass(frozen=True)
class OutputTensorInfo:
    """Descrittore di un tensore di output: nome e shape attesa."""

    name: str
    shape: tuple[int, ...]


def build_tensor_info(
    model_config: ModelConfig,
) -> tuple[list[InputTensorInfo], list[OutputTensorInfo]]:
    """
    Costruisce i descrittori per l'architettura MoveNet single-pose.

    Un solo input immagine e un solo output (1, 1, K, 3) con (y, x, score).
    """
    if model_config.layout == "nhwc":
        input_shape = (1, model_config.input_height, model_config.input_width, 3)
    else:
        input_shape = (1, 3, model_config.input_height, model_config.input_width)

    input_info = InputTensorInfo(
        name=model_config.input_name,
        shape=input_shape,
        layout=model_config.layout,
        mean=tuple(model_config.mean),
        std=tuple(model_config.std),
    )
    output_info = OutputTensorInfo(
        name=model_config.output_name,
        shape=(1, 1, model_config.num_keypoints, 3),
    )
    return [input_info], [output_info]
