"""Image decoding and encoding using Pillow, with NumPy arrays.

All processing in this project occurs on NumPy RGBA arrays. These helpers
only convert between encoded bytes (JPEG/PNG/WebP in, JPEG out) and
``uint8`` bitmaps, plus plain file IO for the front-ends.
"""
from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

import numpy as np
from PIL import Image, ImageOps, UnidentifiedImageError

from ..config import check_quality
from ..errors import DecodeFailure
from .bitmap import check_bitmap

Array = np.ndarray

JPEG_MIME = "image/jpeg"

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class EncodedImage:
    """An encoded image byte stream.

    ``quality`` is the JPEG quality factor in (0, 1] for encoder output and
    ``None`` for raw uploads whose encoding is unknown.
    """

    data: bytes
    quality: Optional[float] = None
    width: Optional[int] = None
    height: Optional[int] = None
    mime: Optional[str] = None

    def __len__(self) -> int:
        return len(self.data)


ImageSource = Union[EncodedImage, bytes, bytearray, memoryview]


def _as_bytes(source: ImageSource) -> bytes:
    if isinstance(source, EncodedImage):
        return source.data
    if isinstance(source, (bytes, bytearray, memoryview)):
        return bytes(source)
    raise TypeError("image source must be EncodedImage or bytes")


def decode_image(source: ImageSource) -> Array:
    """Decode an encoded image into an RGBA NumPy array (uint8).

    EXIF orientation is applied, so the bitmap is upright as displayed.
    Multi-frame formats contribute their first frame only.

    Raises
    ------
    DecodeFailure
        If Pillow cannot identify or read the data, or the image exceeds
        Pillow's decompression-bomb pixel limit.
    """
    data = _as_bytes(source)
    try:
        with Image.open(io.BytesIO(data)) as im:
            upright = ImageOps.exif_transpose(im)
            arr = np.array(upright.convert("RGBA"), dtype=np.uint8)
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as exc:
        raise DecodeFailure(f"cannot decode image ({len(data)} bytes): {exc}") from exc
    _LOGGER.debug("decoded %dx%d image", arr.shape[1], arr.shape[0])
    return arr


def flatten_alpha(arr: Array) -> Array:
    """Composite an RGBA bitmap over black and return an RGB array.

    Matches what a canvas JPEG export does with transparent pixels.
    """
    check_bitmap(arr)
    alpha = arr[:, :, 3]
    if np.all(alpha == 255):
        return np.ascontiguousarray(arr[:, :, :3])
    rgb = arr[:, :, :3].astype(np.float32) * (alpha[:, :, None].astype(np.float32) / 255.0)
    return np.clip(np.rint(rgb), 0, 255).astype(np.uint8)


def encode_image(arr: Array, quality: float) -> EncodedImage:
    """Encode an RGBA bitmap as JPEG.

    Parameters
    ----------
    arr : np.ndarray
        Bitmap of shape (H, W, 4), dtype=uint8.
    quality : float
        Quality factor in (0, 1]; mapped onto Pillow's 1..100 scale.
    """
    q = check_quality(quality)
    rgb = flatten_alpha(arr)
    buf = io.BytesIO()
    Image.fromarray(rgb).save(buf, format="JPEG", quality=max(1, int(round(q * 100))))
    h, w = rgb.shape[:2]
    return EncodedImage(data=buf.getvalue(), quality=q, width=w, height=h, mime=JPEG_MIME)


def load_image(path: Union[str, Path]) -> EncodedImage:
    """Read an image file as raw bytes without decoding it."""
    p = Path(path)
    return EncodedImage(data=p.read_bytes())


def save_image(image: EncodedImage, path: Union[str, Path]) -> Path:
    """Write encoded image bytes to ``path`` and return the path."""
    p = Path(path)
    p.write_bytes(image.data)
    return p
