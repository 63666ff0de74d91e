"""Exception types raised by StyleForge."""
from __future__ import annotations


class StyleForgeError(Exception):
    """Base class for StyleForge errors."""


class DecodeFailure(StyleForgeError, ValueError):
    """Input bytes could not be decoded as an image.

    Fatal for the current request. The original decoder error is kept as
    ``__cause__``.
    """
