from __future__ import annotations

import io

import numpy as np
import pytest
from PIL import Image


@pytest.fixture
def rgba_image() -> np.ndarray:
    """A small opaque image with smooth gradients and some noise."""
    rng = np.random.default_rng(1234)
    h, w = 21, 34
    yy, xx = np.mgrid[0:h, 0:w]
    arr = np.empty((h, w, 4), dtype=np.uint8)
    arr[:, :, 0] = (xx * 255 // (w - 1)).astype(np.uint8)
    arr[:, :, 1] = (yy * 255 // (h - 1)).astype(np.uint8)
    arr[:, :, 2] = rng.integers(0, 256, size=(h, w), dtype=np.uint8)
    arr[:, :, 3] = 255
    return arr


@pytest.fixture
def make_encoded():
    """Build encoded image bytes of a given size and format."""

    def _make(width: int, height: int, fmt: str = "PNG", color=(120, 60, 200)) -> bytes:
        im = Image.new("RGB", (width, height), color)
        buf = io.BytesIO()
        im.save(buf, format=fmt)
        return buf.getvalue()

    return _make
