"""Stylization effects and a unified entry-point for application.

Exported API
------------
- apply(bitmap, effect)

Supported effects
-----------------
- "ghibli"  : soft pastel tone chain (saturate, brighten, soften contrast)
- "hd"      : crisp tone chain (contrast, saturate, brighten)
- "anime"   : tone boost followed by a black/white luminance threshold
- "pixel"   : 8x8 block mosaic
- "vintage" : sepia tone chain with a slight gaussian blur
- "neon"    : strong tone boost with a blue screen-blended wash
- "oil"     : oil-painting filter (local mode of intensity buckets)

Implementation notes
--------------------
All effects operate on RGBA ``uint8`` NumPy arrays, never modify their
input and always return an array of the input's shape. Any selector outside
the set above is passed through unchanged.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Optional, Union

import numpy as np

from ..utils.bitmap import check_bitmap
from ..utils.pixelate import pixelate
from . import anime as _anime
from . import neon as _neon
from . import oil as _oil
from .tone import GHIBLI_CHAIN, HD_CHAIN, VINTAGE_CHAIN, apply_chain

Array = np.ndarray

PIXEL_BLOCK = 8

_LOGGER = logging.getLogger(__name__)


class Effect(str, Enum):
    GHIBLI = "ghibli"
    HD = "hd"
    ANIME = "anime"
    PIXEL = "pixel"
    VINTAGE = "vintage"
    NEON = "neon"
    OIL = "oil"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: Union["Effect", str, None]) -> Optional["Effect"]:
        """Return the matching member, or None for unknown selectors."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value)
        except ValueError:
            return None


EFFECTS = tuple(e.value for e in Effect)


def apply(bitmap: Array, effect: Union[Effect, str, None]) -> Array:
    """Apply the selected effect to an RGBA bitmap.

    Parameters
    ----------
    bitmap : np.ndarray
        RGBA image array of shape (H, W, 4), dtype=uint8, at least 1x1.
    effect : Effect | str
        Effect selector. Unknown values return an unmodified copy.

    Returns
    -------
    np.ndarray
        New bitmap with the same shape and dtype.
    """
    check_bitmap(bitmap)
    e = Effect.parse(effect)

    if e is Effect.GHIBLI:
        return apply_chain(bitmap, GHIBLI_CHAIN)
    if e is Effect.HD:
        return apply_chain(bitmap, HD_CHAIN)
    if e is Effect.ANIME:
        return _anime.anime(bitmap)
    if e is Effect.PIXEL:
        return pixelate(bitmap, PIXEL_BLOCK)
    if e is Effect.VINTAGE:
        return apply_chain(bitmap, VINTAGE_CHAIN)
    if e is Effect.NEON:
        return _neon.neon(bitmap)
    if e is Effect.OIL:
        return _oil.oil_paint(bitmap)

    _LOGGER.debug("Unknown effect %r, passing image through", effect)
    return bitmap.copy()


__all__ = ["Effect", "EFFECTS", "PIXEL_BLOCK", "apply"]
