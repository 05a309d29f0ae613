"""
Visualization utilities for pose estimation.

Funzioni per disegnare "scheletri", keypoints e testo diagnostico sui frame.
Tutte le funzioni disegnano in place sul frame passato.
"""

import cv2
import numpy as np

from ..pose.types import JOINT_LINES


def draw_skeleton(
    frame_bgr: np.ndarray,
    keypoints_xy: np.ndarray,
    scores: np.ndarray,
    keypoint_threshold: float = 0.2,
    keypoint_radius: int = 5,
    skeleton_thickness: int = 2,
    keypoint_color: tuple[int, int, int] = (0, 255, 0),
    skeleton_color: tuple[int, int, int] = (200, 200, 200),
    edges: list[tuple[int, int]] | None = None,
) -> tuple[int, int]:
    """
    Disegna lo scheletro su un'immagine, in place.

    Due passate indipendenti: prima le linee (entrambi gli estremi sopra
    soglia), poi i cerchi dei keypoint sopra soglia.

    Args:
        frame_bgr: Immagine BGR su cui disegnare
        keypoints_xy: Coordinate pixel dei keypoint di shape (K, 2)
        scores: Punteggi di confidenza dei keypoint di shape (K,)
        keypoint_threshold: Confidenza minima per disegnare
        keypoint_radius: Raggio dei cerchi dei keypoint
        skeleton_thickness: Spessore delle linee dello scheletro
        keypoint_color: Colore BGR per i keypoint
        skeleton_color: Colore BGR per gli edges dello scheletro
        edges: Edges personalizzati dello scheletro (default: JOINT_LINES)

    Returns:
        (linee disegnate, keypoint disegnati)
    """
    edges = edges if edges is not None else JOINT_LINES
    num_lines = 0
    num_points = 0

    # Linee dello scheletro
    for a, b in edges:
        if not (float(scores[a]) >= keypoint_threshold and float(scores[b]) >= keypoint_threshold):
            continue
        ax, ay = int(keypoints_xy[a, 0]), int(keypoints_xy[a, 1])
        bx, by = int(keypoints_xy[b, 0]), int(keypoints_xy[b, 1])
        cv2.line(frame_bgr, (ax, ay), (bx, by), skeleton_color, skeleton_thickness)
        num_lines += 1

    # Keypoint
    for i in range(len(scores)):
        if not float(scores[i]) >= keypoint_threshold:
            continue
        x, y = int(keypoints_xy[i, 0]), int(keypoints_xy[i, 1])
        cv2.circle(frame_bgr, (x, y), keypoint_radius, keypoint_color, -1)
        num_points += 1

    return num_lines, num_points


def draw_text(
    frame_bgr: np.ndarray,
    text: str,
    pos: tuple[int, int] = (0, 0),
    font_scale: float = 0.5,
    thickness: int = 2,
    color_front: tuple[int, int, int] = (0, 0, 0),
    color_back: tuple[int, int, int] = (180, 180, 180),
    is_text_on_rect: bool = True,
) -> list[int]:
    """
    Draw text with its top-left corner at pos.

    With is_text_on_rect the text sits on a filled rectangle of color_back,
    otherwise color_back is used as a thick outline.

    Returns:
        Box [x1, y1, x2, y2] covering the drawn area
    """
    (text_w, text_h), baseline = cv2.getTextSize(
        text, cv2.FONT_HERSHEY_SIMPLEX, font_scale, thickness
    )
    baseline += thickness
    x, y = pos[0], pos[1] + text_h

    if is_text_on_rect:
        cv2.rectangle(
            frame_bgr, (x, y + baseline), (x + text_w, y - text_h), color_back, -1
        )
        cv2.putText(
            frame_bgr, text, (x, y), cv2.FONT_HERSHEY_SIMPLEX,
            font_scale, color_front, thickness,
        )
    else:
        cv2.putText(
            frame_bgr, text, (x, y), cv2.FONT_HERSHEY_SIMPLEX,
            font_scale, color_back, thickness * 3,
        )
        cv2.putText(
            frame_bgr, text, (x, y), cv2.FONT_HERSHEY_SIMPLEX,
            font_scale, color_front, thickness,
        )

    return [x, y - text_h, x + text_w, y + baseline]


def format_fps_text(fps: float, time_inference: float) -> str:
    return f"FPS: {fps:.1f}, Inference: {time_inference:.1f} [ms]"


def draw_fps(
    frame_bgr: np.ndarray,
    fps: float,
    time_inference: float,
    font_scale: float = 0.5,
    thickness: int = 2,
    color_front: tuple[int, int, int] = (0, 0, 0),
    color_back: tuple[int, int, int] = (180, 180, 180),
) -> list[int]:
    """Disegna FPS e latenza di inferenza nell'angolo in alto a sinistra."""
    return draw_text(
        frame_bgr,
        format_fps_text(fps, time_inference),
        (0, 0),
        font_scale=font_scale,
        thickness=thickness,
        color_front=color_front,
        color_back=color_back,
        is_text_on_rect=True,
    )
