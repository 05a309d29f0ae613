"""
Decoding utilities per la stima della posa dall'output di MoveNet.

Funzioni stateless per convertire le uscite del modello in keypoints.
"""

import numpy as np

from .types import Body, Keypoint


def decode_pose_output(output: np.ndarray) -> list[Body]:
    """
    Decodifica l'output a regressione diretta di MoveNet in una lista di corpi.

    L'output ha shape (1, N, K, 3) dove N è il numero di slot corpo (1 per i
    modelli single-pose), K il numero di keypoints e l'ultimo asse contiene
    (y, x, score) in coordinate normalizzate rispetto all'input del modello.

    Args:
        output: Tensore di output del modello come array numpy

    Returns:
        Lista di Body, uno per slot, con coordinate (x, y) in [0, 1]

    Note:
        Nessuna soglia viene applicata: il filtraggio per confidenza è una
        decisione di visualizzazione. Le coordinate NON vengono scalate alle
        dimensioni del frame originale.
    """
    if output.ndim != 4 or output.shape[0] != 1 or output.shape[-1] != 3:
        raise ValueError(f"Unexpected pose output shape: {output.shape}")

    bodies = []
    for slot in output[0]:
        # NaN -> 0, poi clip in [0, 1]
        slot = np.nan_to_num(slot, nan=0.0, posinf=1.0, neginf=0.0)
        ys = np.clip(slot[:, 0], 0.0, 1.0)
        xs = np.clip(slot[:, 1], 0.0, 1.0)
        scores = np.clip(slot[:, 2], 0.0, 1.0)
        keypoints = tuple(
            Keypoint(x=float(x), y=float(y), score=float(s))
            for x, y, s in zip(xs, ys, scores)
        )
        body_score = float(scores.mean()) if len(scores) else 0.0
        bodies.append(Body(keypoints=keypoints, score=body_score))
    return bodies


def denormalize_keypoints(
    coords: np.ndarray,
    frame_width: int,
    frame_height: int,
) -> np.ndarray:
    """
    Trasforma i keypoints dallo spazio normalizzato [0, 1] allo spazio pixel del frame.

    Args:
        coords: Coordinate normalizzate di shape (K, 2) come (x, y)
        frame_width: Larghezza del frame
        frame_height: Altezza del frame

    Returns:
        Array int32 di shape (K, 2) in pixel

    Note:
        x * W e y * H vengono troncati verso zero (astype), quindi per
        coordinate non negative il risultato è il floor: (0.5, 0.5) su un
        frame W x H diventa (W // 2, H // 2).
    """
    kpts = np.asarray(coords, dtype=np.float64).reshape(-1, 2).copy()
    kpts[:, 0] = kpts[:, 0] * frame_width
    kpts[:, 1] = kpts[:, 1] * frame_height
    return kpts.astype(np.int32)
