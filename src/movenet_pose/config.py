"""
Configurazione della pipeline.

I valori di default corrispondono al modello MoveNet single-pose lightning;
il file YAML (config/default.yaml) può sovrascriverli sezione per sezione.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml


@dataclass(frozen=True)
class ModelConfig:
    # File del modello TorchScript, cercato in <work_dir>/model/
    model_filename: str = "movenet_singlepose_lightning.pt"
    input_name: str = "input"
    input_width: int = 192
    input_height: int = 192
    # "nhwc" per i modelli MoveNet convertiti, "nchw" per i modelli PyTorch nativi
    layout: str = "nhwc"
    # Normalizzazione per canale: (x / 255 - mean) / std  ->  [0, 1] con i default
    mean: tuple[float, float, float] = (0.0, 0.0, 0.0)
    std: tuple[float, float, float] = (1.0, 1.0, 1.0)
    output_name: str = "output_0"
    num_keypoints: int = 17


@dataclass(frozen=True)
class RuntimeConfig:
    num_threads: int = 4
    device: str = "cpu"


@dataclass(frozen=True)
class OverlayConfig:
    keypoint_threshold: float = 0.2
    keypoint_radius: int = 5
    skeleton_thickness: int = 2
    # Colori BGR
    keypoint_color: tuple[int, int, int] = (0, 255, 0)
    skeleton_color: tuple[int, int, int] = (200, 200, 200)
    show_fps: bool = True
    font_scale: float = 0.5
    text_thickness: int = 2
    text_color: tuple[int, int, int] = (0, 0, 0)
    text_background: tuple[int, int, int] = (180, 180, 180)


@dataclass(frozen=True)
class AppConfig:
    model: ModelConfig = field(default_factory=ModelConfig)
    runtime: RuntimeConfig = field(default_factory=RuntimeConfig)
    overlay: OverlayConfig = field(default_factory=OverlayConfig)


def _section(cls, raw: dict[str, Any] | None):
    """Costruisce una dataclass di sezione ignorando le chiavi sconosciute."""
    if not raw:
        return cls()
    known = {f.name: f for f in fields(cls)}
    kwargs = {}
    for key, value in raw.items():
        if key not in known:
            continue
        # Le liste YAML diventano tuple (colori, mean/std)
        if isinstance(value, list):
            value = tuple(value)
        kwargs[key] = value
    return cls(**kwargs)


def config_from_dict(raw: dict[str, Any] | None) -> AppConfig:
    raw = raw or {}
    return AppConfig(
        model=_section(ModelConfig, raw.get("model")),
        runtime=_section(RuntimeConfig, raw.get("runtime")),
        overlay=_section(OverlayConfig, raw.get("overlay")),
    )


def load_config(config_path: str | Path) -> AppConfig:
    """
    Carica il file di configurazione YAML.

    Args:
        config_path: Percorso del file YAML

    Returns:
        AppConfig con i default applicati alle chiavi mancanti

    Raises:
        FileNotFoundError: Se il file non esiste
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")
    with open(config_path, "r", encoding="utf-8") as f:
        return config_from_dict(yaml.safe_load(f))
