"""Anime look: punchy tone boost followed by a binary luminance threshold.

Despite the name this is not edge detection. After the tone chain every
pixel becomes pure white or pure black depending on its channel mean.
"""
from __future__ import annotations

import numpy as np

from ..utils.bitmap import check_bitmap
from .tone import ANIME_CHAIN, apply_chain

Array = np.ndarray

ANIME_THRESHOLD = 127


def luminance_threshold(arr: Array, threshold: int = ANIME_THRESHOLD) -> Array:
    """Set R=G=B=255 where (R+G+B)/3 > threshold, else 0. Alpha is kept."""
    check_bitmap(arr, "arr")
    total = arr[:, :, :3].astype(np.int32).sum(axis=2)
    # (R+G+B)/3 > t  <=>  R+G+B > 3t
    mask = total > 3 * threshold
    out = arr.copy()
    out[:, :, :3] = np.where(mask, 255, 0).astype(np.uint8)[:, :, None]
    return out


def anime(arr: Array) -> Array:
    return luminance_threshold(apply_chain(arr, ANIME_CHAIN))
