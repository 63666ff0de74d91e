"""Oil-painting filter via the local mode of intensity buckets.

For every pixel the (2r+1)^2 neighborhood (clipped at the image bounds) is
split into ``levels`` intensity buckets by ``floor(mean(R, G, B) * levels /
256)``. The most populated bucket wins, lowest index first on ties, and the
pixel becomes that bucket's per-channel mean rounded down. Alpha is kept.

The scan is O(W * H * (2r+1)^2), by far the most expensive operation in the
engine, so the kernel is compiled with Numba.
"""
from __future__ import annotations

import numpy as np
from numba import njit

from ..utils.bitmap import check_bitmap

Array = np.ndarray

OIL_RADIUS = 4
OIL_LEVELS = 30


@njit(cache=True)
def _oil_impl(src: np.ndarray, out: np.ndarray, radius: int, levels: int) -> None:
    H, W, _ = src.shape
    counts = np.zeros(levels, dtype=np.int64)
    sum_r = np.zeros(levels, dtype=np.int64)
    sum_g = np.zeros(levels, dtype=np.int64)
    sum_b = np.zeros(levels, dtype=np.int64)
    for y in range(H):
        y0 = max(0, y - radius)
        y1 = min(H - 1, y + radius)
        for x in range(W):
            x0 = max(0, x - radius)
            x1 = min(W - 1, x + radius)
            counts[:] = 0
            sum_r[:] = 0
            sum_g[:] = 0
            sum_b[:] = 0
            for ny in range(y0, y1 + 1):
                for nx in range(x0, x1 + 1):
                    r = np.int64(src[ny, nx, 0])
                    g = np.int64(src[ny, nx, 1])
                    b = np.int64(src[ny, nx, 2])
                    # floor((r + g + b) / 3 * levels / 256) in integers
                    bucket = (r + g + b) * levels // 768
                    counts[bucket] += 1
                    sum_r[bucket] += r
                    sum_g[bucket] += g
                    sum_b[bucket] += b

            best = -1
            best_count = 0
            for i in range(levels):
                if counts[i] > best_count:
                    best_count = counts[i]
                    best = i
            # The window always holds the pixel itself, so best >= 0.
            out[y, x, 0] = np.uint8(sum_r[best] // best_count)
            out[y, x, 1] = np.uint8(sum_g[best] // best_count)
            out[y, x, 2] = np.uint8(sum_b[best] // best_count)


def oil_paint(arr: Array, radius: int = OIL_RADIUS, levels: int = OIL_LEVELS) -> Array:
    """Apply the oil-painting filter to an RGBA bitmap.

    Parameters
    ----------
    arr : np.ndarray
        Input bitmap (H, W, 4), dtype=uint8. Not modified.
    radius : int
        Neighborhood radius (>=0). ``0`` returns a copy.
    levels : int
        Number of intensity buckets (>=1).

    Returns
    -------
    np.ndarray
        Filtered bitmap (uint8) with the input's alpha channel.
    """
    check_bitmap(arr, "arr")
    if radius < 0:
        raise ValueError("radius must be >= 0")
    if levels < 1:
        raise ValueError("levels must be >= 1")

    src = np.ascontiguousarray(arr)
    out = src.copy()
    if radius == 0:
        return out
    _oil_impl(src, out, int(radius), int(levels))
    return out
