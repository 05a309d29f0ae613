"""
Fixture condivise: modelli TorchScript finti salvati su disco.

I modelli restituiscono un output fisso (1, 1, 17, 3) con (y, x, score),
così i test esercitano il vero runtime TorchScript senza pesi MoveNet.
"""

from pathlib import Path

import numpy as np
import pytest
import torch

from movenet_pose.config import ModelConfig
from movenet_pose.pipeline.image_processor import ImageProcessor


class FixedOutputModel(torch.nn.Module):
    """Restituisce sempre lo stesso tensore; fallisce se la media dell'input supera fail_threshold."""

    def __init__(self, output: torch.Tensor, fail_threshold: float = 2.0):
        super().__init__()
        self.register_buffer("output", output)
        self.fail_threshold = fail_threshold

    def forward(self, x: torch.Tensor) -> torch.Tensor:
        if bool(x.mean() > self.fail_threshold):
            raise RuntimeError("simulated backend fault")
        return self.output + 0.0 * x.mean()


def make_pose_output(scores, coords=None) -> np.ndarray:
    """
    Costruisce un output MoveNet (1, 1, 17, 3).

    Args:
        scores: 17 punteggi
        coords: (17, 2) coordinate (x, y) normalizzate; default: posizioni distinte
    """
    scores = np.asarray(scores, dtype=np.float32)
    if coords is None:
        idx = np.arange(17, dtype=np.float32)
        coords = np.stack([0.10 + 0.04 * idx, 0.05 + 0.05 * idx], axis=1)
    coords = np.asarray(coords, dtype=np.float32)
    out = np.zeros((1, 1, 17, 3), dtype=np.float32)
    out[0, 0, :, 0] = coords[:, 1]  # y
    out[0, 0, :, 1] = coords[:, 0]  # x
    out[0, 0, :, 2] = scores
    return out


def write_model(
    work_dir: Path,
    output: np.ndarray,
    fail_threshold: float = 2.0,
    filename: str = ModelConfig.model_filename,
) -> Path:
    """Salva un FixedOutputModel in <work_dir>/model/<filename>."""
    model_dir = Path(work_dir) / "model"
    model_dir.mkdir(parents=True, exist_ok=True)
    scripted = torch.jit.script(
        FixedOutputModel(torch.from_numpy(np.ascontiguousarray(output)), fail_threshold)
    )
    path = model_dir / filename
    torch.jit.save(scripted, str(path))
    return path


@pytest.fixture
def model_factory(tmp_path):
    """Crea una work dir con un modello che produce l'output richiesto."""

    counter = {"n": 0}

    def _make(output: np.ndarray, fail_threshold: float = 2.0) -> Path:
        counter["n"] += 1
        work_dir = tmp_path / f"work{counter['n']}"
        write_model(work_dir, output, fail_threshold=fail_threshold)
        return work_dir

    return _make


@pytest.fixture
def high_score_work_dir(model_factory):
    return model_factory(make_pose_output(np.full(17, 0.9)))


@pytest.fixture(autouse=True)
def reset_active_session():
    """Nessuna sessione ImageProcessor deve sopravvivere a un test."""
    ImageProcessor._active = None
    yield
    ImageProcessor._active = None


@pytest.fixture
def gray_frame():
    return np.full((240, 320, 3), 50, dtype=np.uint8)
