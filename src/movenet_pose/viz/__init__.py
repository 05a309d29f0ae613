"""
Visualization utilities.

Contiene funzioni di disegno per scheletri, pose e testo diagnostico.
"""

from .draw import (
    draw_skeleton,
    draw_text,
    draw_fps,
)

__all__ = [
    "draw_skeleton",
    "draw_text",
    "draw_fps",
]
