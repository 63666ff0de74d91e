"""Pipeline settings shared by the CLI, the desktop preview and sessions."""
from __future__ import annotations

from dataclasses import dataclass


DEFAULT_MAX_WIDTH = 1200
DEFAULT_PREVIEW_QUALITY = 0.8
DEFAULT_OUTPUT_QUALITY = 0.9


def check_quality(quality: float) -> float:
    """Validate a JPEG quality factor in (0, 1] and return it as float."""
    q = float(quality)
    if not 0.0 < q <= 1.0:
        raise ValueError(f"quality must be in (0, 1], got {quality!r}")
    return q


@dataclass(frozen=True)
class EditorConfig:
    """Knobs of the upload -> normalize -> transform pipeline.

    Parameters
    ----------
    max_width : int
        Uploads wider than this are downscaled (aspect preserved).
    preview_quality : float
        JPEG quality of the normalized upload.
    output_quality : float
        JPEG quality of the transformed result.
    """

    max_width: int = DEFAULT_MAX_WIDTH
    preview_quality: float = DEFAULT_PREVIEW_QUALITY
    output_quality: float = DEFAULT_OUTPUT_QUALITY

    def validate(self) -> "EditorConfig":
        if self.max_width < 1:
            raise ValueError("max_width must be >= 1")
        check_quality(self.preview_quality)
        check_quality(self.output_quality)
        return self
