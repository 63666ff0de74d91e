"""Pixelation utilities operating on NumPy arrays.

Pixelation is implemented by averaging the image over source-aligned tiles
of size `factor x factor`, then repeating each block mean over exactly the
pixels its tile covers. Every output tile is a single flat color.
"""
from __future__ import annotations

import numpy as np

from .bitmap import check_bitmap

Array = np.ndarray


def _tiles(n: int, factor: int) -> tuple[Array, Array]:
    """Start offsets and lengths of `factor`-sized tiles along an axis of `n`."""
    starts = np.arange(0, n, factor)
    return starts, np.diff(np.append(starts, n))


def downscale_block_average(arr: Array, factor: int) -> Array:
    """Downscale an RGBA bitmap by averaging `factor x factor` blocks.

    The result has shape (ceil(H/f), ceil(W/f), 4). Blocks that overhang the
    right or bottom edge average only the pixels that exist, so partial tiles
    keep their true mean instead of being biased by padding.

    Parameters
    ----------
    arr : np.ndarray
        Input array of shape (H, W, 4), dtype=uint8.
    factor : int
        Block size (>=1).

    Returns
    -------
    np.ndarray
        Downscaled image array (uint8).
    """
    check_bitmap(arr, "arr")
    if factor < 1:
        raise ValueError("factor must be >= 1")
    if factor == 1:
        return arr.copy()

    H, W, _ = arr.shape
    ys, rows = _tiles(H, factor)
    xs, cols = _tiles(W, factor)
    sums = np.add.reduceat(np.add.reduceat(arr.astype(np.float64), ys, axis=0), xs, axis=1)

    counts = (rows[:, None] * cols[None, :]).astype(np.float64)

    small = sums / counts[:, :, None]
    return np.clip(np.rint(small), 0, 255).astype(np.uint8)


def pixelate(arr: Array, factor: int) -> Array:
    """Pixelate an RGBA bitmap by a given integer block size.

    Parameters
    ----------
    arr : np.ndarray
        Input array of shape (H, W, 4), dtype=uint8.
    factor : int
        Block size (>=1). Images smaller than one block collapse to a single
        averaged color.

    Returns
    -------
    np.ndarray
        Pixelated image of the same shape and dtype as the input.
    """
    check_bitmap(arr, "arr")
    if factor < 1:
        raise ValueError("factor must be >= 1")
    if factor == 1:
        return arr.copy()

    H, W, _ = arr.shape
    small = downscale_block_average(arr, factor)
    _, rows = _tiles(H, factor)
    _, cols = _tiles(W, factor)
    # Edge tiles repeat only as far as the image extends
    return np.repeat(np.repeat(small, rows, axis=0), cols, axis=1)
