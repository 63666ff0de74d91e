"""Neon glow: heavy tone boost plus a faint blue screen-blended wash."""
from __future__ import annotations

import numpy as np

from ..compositing import SCREEN, Canvas
from .tone import NEON_CHAIN, apply_chain

Array = np.ndarray

NEON_OVERLAY = (0, 150, 255)
NEON_OPACITY = 0.1


def neon_glow(canvas: Canvas) -> Canvas:
    """Screen a translucent blue fill over ``canvas`` in place.

    The canvas goes back to its previous composite operation afterwards.
    """
    with canvas.compositing(SCREEN):
        canvas.fill(NEON_OVERLAY, opacity=NEON_OPACITY)
    return canvas


def neon(arr: Array) -> Array:
    canvas = Canvas(apply_chain(arr, NEON_CHAIN))
    return neon_glow(canvas).to_bitmap()
