"""
Codec Module
============

GIF input and output for the pointillist pipeline.

    - read_frames: GIF file -> list of RawFrame
    - write_animation: list of CanvasFrame -> GIF file

Example:
    from pointillist.codec import read_frames, write_animation

    frames = read_frames("in.gif")
    ...
    write_animation("out.gif", canvases, delay=5)
"""

from pointillist.codec.errors import (
    DecodeError,
    EncodeError,
    PointillistError,
    UsagePreconditionError,
)
from pointillist.codec.decoder import read_frames
from pointillist.codec.encoder import PALETTE, write_animation


__all__ = [
    "PointillistError",
    "DecodeError",
    "EncodeError",
    "UsagePreconditionError",
    "read_frames",
    "write_animation",
    "PALETTE",
]
