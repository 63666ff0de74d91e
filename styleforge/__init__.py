"""StyleForge: stylize images with a small set of pixel effects.

The public surface is two in-process calls, :func:`normalize` for uploads
and :func:`apply` for effects, plus the :func:`transform` convenience that
chains decode, effect and JPEG encode.
"""
from __future__ import annotations

from .config import EditorConfig
from .effects import EFFECTS, Effect, apply
from .errors import DecodeFailure, StyleForgeError
from .pipeline import normalize, output_filename, transform
from .session import TransformResult, TransformSession
from .utils.loader import EncodedImage, decode_image, encode_image

__all__ = [
    "EditorConfig",
    "EFFECTS",
    "Effect",
    "apply",
    "DecodeFailure",
    "StyleForgeError",
    "normalize",
    "output_filename",
    "transform",
    "TransformResult",
    "TransformSession",
    "EncodedImage",
    "decode_image",
    "encode_image",
]
