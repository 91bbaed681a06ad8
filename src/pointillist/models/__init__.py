"""
Data Models
===========

Frame models passed between the pipeline stages.

Models:
    - RawFrame: Decoded RGBA source frame
    - IntensityFrame: Grid of per-block key values
    - CanvasFrame: Rendered palette-index buffer
"""

from pointillist.models.frames import (
    BACKGROUND,
    DOT,
    TRANSPARENT,
    CanvasFrame,
    IntensityFrame,
    RawFrame,
)

__all__ = [
    "BACKGROUND",
    "DOT",
    "TRANSPARENT",
    "RawFrame",
    "IntensityFrame",
    "CanvasFrame",
]
