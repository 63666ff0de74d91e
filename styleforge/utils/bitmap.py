"""RGBA bitmap helpers.

A bitmap is a NumPy ``uint8`` array of shape (H, W, 4) holding RGBA pixels
in row-major order. Every effect consumes and returns this layout.
"""
from __future__ import annotations

from typing import Sequence

import numpy as np

Array = np.ndarray


def check_bitmap(arr: Array, name: str = "bitmap") -> Array:
    """Validate that ``arr`` is a non-empty RGBA ``uint8`` bitmap.

    Returns the array unchanged so the call can be used inline.
    """
    if not isinstance(arr, np.ndarray):
        raise TypeError(f"{name} must be a NumPy array")
    if arr.dtype != np.uint8:
        raise TypeError(f"{name} must have dtype=uint8")
    if arr.ndim != 3 or arr.shape[2] != 4:
        raise ValueError(f"{name} must be an RGBA image with shape (H, W, 4)")
    if arr.shape[0] < 1 or arr.shape[1] < 1:
        raise ValueError(f"{name} must be at least 1x1")
    return arr


def new_bitmap(width: int, height: int, color: Sequence[int] = (0, 0, 0, 255)) -> Array:
    """Create a bitmap filled with a single RGBA (or RGB, opaque) color."""
    if width < 1 or height < 1:
        raise ValueError("width and height must be >= 1")
    rgba = tuple(int(c) for c in color)
    if len(rgba) == 3:
        rgba = rgba + (255,)
    if len(rgba) != 4 or any(c < 0 or c > 255 for c in rgba):
        raise ValueError("color must be 3 or 4 channel values in [0, 255]")
    out = np.empty((height, width, 4), dtype=np.uint8)
    out[:, :] = rgba
    return out


def dimensions(arr: Array) -> tuple[int, int]:
    """Return (width, height) of a bitmap."""
    h, w = arr.shape[:2]
    return w, h
