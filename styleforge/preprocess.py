"""Upload preprocessing: bound the width, then re-encode as JPEG."""
from __future__ import annotations

import logging

from .config import DEFAULT_MAX_WIDTH, DEFAULT_PREVIEW_QUALITY, check_quality
from .utils.loader import EncodedImage, ImageSource, decode_image, encode_image
from .utils.resize import fit_to_width, resize_smooth

_LOGGER = logging.getLogger(__name__)


def normalize(
    source: ImageSource,
    max_width: int = DEFAULT_MAX_WIDTH,
    quality: float = DEFAULT_PREVIEW_QUALITY,
) -> EncodedImage:
    """Decode an upload, downscale it to ``max_width`` if wider, re-encode.

    Parameters
    ----------
    source : EncodedImage | bytes
        Encoded input (JPEG, PNG, WebP, anything Pillow reads).
    max_width : int
        Maximum output width (>=1). Height follows the aspect ratio,
        ``floor(height * max_width / width)``.
    quality : float
        JPEG quality factor in (0, 1].

    Returns
    -------
    EncodedImage
        JPEG bytes with their quality and dimensions.

    Raises
    ------
    DecodeFailure
        If the input cannot be decoded.
    """
    if max_width < 1:
        raise ValueError("max_width must be >= 1")
    check_quality(quality)

    arr = decode_image(source)
    h, w = arr.shape[:2]
    new_w, new_h = fit_to_width(w, h, max_width)
    if (new_w, new_h) != (w, h):
        _LOGGER.debug("resizing upload %dx%d -> %dx%d", w, h, new_w, new_h)
        arr = resize_smooth(arr, new_w, new_h)
    return encode_image(arr, quality)
