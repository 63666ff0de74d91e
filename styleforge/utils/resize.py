"""Smooth resizing helpers for the upload preprocessor."""
from __future__ import annotations

import numpy as np
from PIL import Image

from .bitmap import check_bitmap

Array = np.ndarray


def fit_to_width(width: int, height: int, max_width: int) -> tuple[int, int]:
    """Return (new_w, new_h) bounding ``width`` to ``max_width``.

    The height follows ``floor(height * max_width / width)`` and never drops
    below one pixel. Images already narrow enough keep their size.
    """
    if width < 1 or height < 1:
        raise ValueError("width and height must be >= 1")
    if max_width < 1:
        raise ValueError("max_width must be >= 1")
    if width <= max_width:
        return width, height
    new_h = max(1, (height * max_width) // width)
    return max_width, new_h


def resize_smooth(arr: Array, new_w: int, new_h: int) -> Array:
    """Resize an RGBA bitmap to (new_w, new_h) with Lanczos resampling.

    Pillow resamples RGBA in premultiplied space, so transparent pixels do
    not bleed their color into neighbors.
    """
    check_bitmap(arr, "arr")
    if new_h < 1 or new_w < 1:
        raise ValueError("new_w and new_h must be >= 1")

    H, W, _ = arr.shape
    if H == new_h and W == new_w:
        return arr.copy()

    im = Image.fromarray(arr)
    out = im.resize((new_w, new_h), resample=Image.Resampling.LANCZOS)
    return np.array(out, dtype=np.uint8)
