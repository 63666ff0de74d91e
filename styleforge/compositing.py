"""A tiny compositing surface with canvas-style blend modes.

:class:`Canvas` owns a private copy of an RGBA bitmap and a current
composite operation. Blend modes are switched with the
:meth:`Canvas.compositing` context manager, which always puts the previous
operation back on exit so later draws are not affected by a leftover mode.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Callable, Iterator, Sequence

import numpy as np

from .utils.bitmap import check_bitmap

Array = np.ndarray

SOURCE_OVER = "source-over"
SCREEN = "screen"

_LOGGER = logging.getLogger(__name__)


def _blend_normal(cb: Array, cs: Array) -> Array:
    return np.broadcast_to(cs, cb.shape)


def _blend_screen(cb: Array, cs: Array) -> Array:
    return 255.0 - (255.0 - cb) * (255.0 - cs) / 255.0


_BLEND_MODES: dict[str, Callable[[Array, Array], Array]] = {
    SOURCE_OVER: _blend_normal,
    SCREEN: _blend_screen,
}

COMPOSITE_OPERATIONS = tuple(_BLEND_MODES)


class Canvas:
    """Mutable RGBA drawing surface backed by a NumPy bitmap."""

    def __init__(self, bitmap: Array) -> None:
        check_bitmap(bitmap)
        self._pixels = bitmap.copy()
        self._operation = SOURCE_OVER

    @property
    def width(self) -> int:
        return self._pixels.shape[1]

    @property
    def height(self) -> int:
        return self._pixels.shape[0]

    @property
    def composite_operation(self) -> str:
        return self._operation

    @composite_operation.setter
    def composite_operation(self, operation: str) -> None:
        if operation not in _BLEND_MODES:
            raise ValueError(f"Unsupported composite operation: {operation}")
        self._operation = operation

    @contextmanager
    def compositing(self, operation: str) -> Iterator["Canvas"]:
        """Temporarily switch the composite operation."""
        previous = self._operation
        self.composite_operation = operation
        try:
            yield self
        finally:
            self._operation = previous

    def fill(self, color: Sequence[int], opacity: float = 1.0) -> None:
        """Fill the whole surface with ``color`` using the current operation.

        Uses source-over with blending: with source alpha ``as`` and backdrop
        alpha ``ab``, ``co = as*(1-ab)*cs + as*ab*B(cb, cs) + (1-as)*ab*cb``
        and ``ao = as + ab*(1-as)``.
        """
        if len(color) != 3:
            raise ValueError("color must be an RGB triple")
        a_s = float(opacity)
        if not 0.0 <= a_s <= 1.0:
            raise ValueError("opacity must be in [0, 1]")
        if a_s == 0.0:
            return

        cs = np.asarray(color, dtype=np.float32).reshape(1, 1, 3)
        cb = self._pixels[:, :, :3].astype(np.float32)
        a_b = self._pixels[:, :, 3:].astype(np.float32) / 255.0

        mixed = _BLEND_MODES[self._operation](cb, cs)
        co = a_s * (1.0 - a_b) * cs + a_s * a_b * mixed + (1.0 - a_s) * a_b * cb
        a_o = a_s + a_b * (1.0 - a_s)

        self._pixels[:, :, :3] = np.clip(np.rint(co / a_o), 0, 255).astype(np.uint8)
        self._pixels[:, :, 3] = np.clip(np.rint(a_o[:, :, 0] * 255.0), 0, 255).astype(np.uint8)
        _LOGGER.debug("filled %dx%d canvas with %s at %.2f (%s)", self.width, self.height, tuple(color), a_s, self._operation)

    def to_bitmap(self) -> Array:
        """Return a copy of the current pixels."""
        return self._pixels.copy()
