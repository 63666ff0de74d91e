"""One-shot pipeline: normalized upload -> effect -> JPEG for download."""
from __future__ import annotations

import logging
import re
import time
from typing import Union

from .config import DEFAULT_OUTPUT_QUALITY
from .effects import Effect, apply
from .preprocess import normalize
from .utils.loader import EncodedImage, ImageSource, decode_image, encode_image

_LOGGER = logging.getLogger(__name__)

_UNSAFE_NAME = re.compile(r"[\\/\x00]")


def transform(
    source: ImageSource,
    effect: Union[Effect, str],
    quality: float = DEFAULT_OUTPUT_QUALITY,
) -> EncodedImage:
    """Decode ``source``, apply ``effect`` and encode the result as JPEG.

    Unknown effects still yield a valid JPEG of the unmodified image.
    """
    arr = decode_image(source)
    t0 = time.perf_counter()
    out = apply(arr, effect)
    _LOGGER.debug(
        "applied %s to %dx%d image in %.3fs",
        effect,
        arr.shape[1],
        arr.shape[0],
        time.perf_counter() - t0,
    )
    return encode_image(out, quality)


def output_filename(effect: Union[Effect, str]) -> str:
    """Download name for a transformed image: ``transformed-<effect>.jpg``."""
    name = str(effect)
    return f"transformed-{_UNSAFE_NAME.sub('', name)}.jpg"


__all__ = ["normalize", "apply", "transform", "output_filename"]
