"""Utility functions for StyleForge.

Modules:
- bitmap: RGBA bitmap validation and construction.
- loader: Pillow <-> NumPy decoding/encoding and file IO.
- pixelate: Block mosaic via block averaging, one flat color per tile.
- resize: Width bounding and smooth resampling.
"""
from .bitmap import check_bitmap, dimensions, new_bitmap
from .loader import EncodedImage, decode_image, encode_image, load_image, save_image
from .pixelate import pixelate, downscale_block_average
from .resize import fit_to_width, resize_smooth

__all__ = [
    "check_bitmap",
    "dimensions",
    "new_bitmap",
    "EncodedImage",
    "decode_image",
    "encode_image",
    "load_image",
    "save_image",
    "pixelate",
    "downscale_block_average",
    "fit_to_width",
    "resize_smooth",
]
