"""
Strutture dati dei risultati di posa.

Le coordinate dei keypoints sono normalizzate [0, 1] rispetto alla risoluzione
di input del modello; la conversione in pixel spetta a chi conosce la
dimensione del frame originale (vedi decode.denormalize_keypoints).
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np


# Indici COCO-17 (ordine di output di MoveNet)
KEYPOINT_NAMES = [
    "nose", "left_eye", "right_eye", "left_ear", "right_ear",
    "left_shoulder", "right_shoulder", "left_elbow", "right_elbow",
    "left_wrist", "right_wrist", "left_hip", "right_hip",
    "left_knee", "right_knee", "left_ankle", "right_ankle",
]

NUM_KEYPOINTS = len(KEYPOINT_NAMES)

# Topologia dello scheletro COCO 17 (coppie di indici di keypoint)
JOINT_LINES = [
    # Faccia
    (0, 2), (2, 4),     # naso, occhio destro, orecchio destro
    (0, 1), (1, 3),     # naso, occhio sinistro, orecchio sinistro
    # Torso
    (6, 5),             # spalle
    (5, 11),            # spalla sinistra a anca sinistra
    (11, 12),           # anche
    (12, 6),            # anca destra a spalla destra
    # Braccia
    (6, 8), (8, 10),    # braccio destro
    (5, 7), (7, 9),     # braccio sinistro
    # Gambe
    (12, 14), (14, 16), # gamba destra
    (11, 13), (13, 15), # gamba sinistra
]


def validate_joint_lines(
    edges: list[tuple[int, int]],
    num_keypoints: int,
) -> None:
    """
    Verifica che tutti gli indici degli edges siano validi per il numero di keypoints.

    Raises:
        ValueError: Se un indice è fuori range
    """
    for a, b in edges:
        if not (0 <= a < num_keypoints and 0 <= b < num_keypoints):
            raise ValueError(
                f"Joint line ({a}, {b}) out of range for {num_keypoints} keypoints"
            )


@dataclass(frozen=True)
class Keypoint:
    """Un singolo keypoint 2D con punteggio di confidenza."""

    x: float
    y: float
    score: float


@dataclass(frozen=True)
class Body:
    """
    Keypoints di una persona, nell'ordine fisso del modello.

    score è la confidenza complessiva del corpo.
    """

    keypoints: tuple[Keypoint, ...]
    score: float = 0.0

    def __len__(self) -> int:
        return len(self.keypoints)

    def keypoint_scores(self) -> np.ndarray:
        """Array (K,) dei punteggi."""
        return np.array([kp.score for kp in self.keypoints], dtype=np.float32)

    def keypoint_coords(self) -> np.ndarray:
        """Array (K, 2) delle coordinate (x, y)."""
        return np.array(
            [[kp.x, kp.y] for kp in self.keypoints], dtype=np.float32
        ).reshape(-1, 2)


@dataclass
class PoseResult:
    """
    Risultato per frame: corpi rilevati e tempi delle tre fasi in millisecondi.
    """

    bodies: list[Body] = field(default_factory=list)
    time_pre_process: float = 0.0
    time_inference: float = 0.0
    time_post_process: float = 0.0

    @property
    def pose_scores(self) -> list[float]:
        return [body.score for body in self.bodies]

    @property
    def pose_keypoint_scores(self) -> list[np.ndarray]:
        return [body.keypoint_scores() for body in self.bodies]

    @property
    def pose_keypoint_coords(self) -> list[np.ndarray]:
        return [body.keypoint_coords() for body in self.bodies]
