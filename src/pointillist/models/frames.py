"""
Frame Models
============

Data models for the frames passed between pipeline stages.

    RawFrame        Decoder    -> Aggregator
    IntensityFrame  Aggregator -> Rasterizer
    CanvasFrame     Rasterizer -> Encoder

Design Rules:
    - Frames are immutable (frozen dataclass, read-only arrays)
    - Each frame is owned by the stage processing it and handed off
    - Shapes are validated on construction, never downstream
"""

from dataclasses import dataclass

import numpy as np


# Palette indices of the output animation
BACKGROUND = 0
DOT = 1
TRANSPARENT = 2

PALETTE_INDICES = (BACKGROUND, DOT, TRANSPARENT)

MAX_DIMENSION = 0xFFFF


def _freeze(array: np.ndarray) -> None:
    array.flags.writeable = False


def _check_dimensions(width: int, height: int) -> None:
    if not 1 <= width <= MAX_DIMENSION or not 1 <= height <= MAX_DIMENSION:
        raise ValueError(
            f"dimensions must be in 1..{MAX_DIMENSION}, got {width}x{height}"
        )


@dataclass(frozen=True, slots=True)
class RawFrame:
    """
    One decoded source frame.

    Attributes:
        width: Frame width in pixels
        height: Frame height in pixels
        pixels: RGBA pixels as np.ndarray (height, width, 4), dtype=uint8
    """

    width: int
    height: int
    pixels: np.ndarray

    def __post_init__(self) -> None:
        """Validate invariants."""
        _check_dimensions(self.width, self.height)
        if self.pixels.shape != (self.height, self.width, 4):
            raise ValueError(
                f"pixels shape {self.pixels.shape} does not match "
                f"{self.width}x{self.height} RGBA"
            )
        if self.pixels.dtype != np.uint8:
            raise ValueError(f"pixels must be uint8, got {self.pixels.dtype}")
        _freeze(self.pixels)

    @classmethod
    def from_bytes(cls, width: int, height: int, data: bytes) -> "RawFrame":
        """
        Group a flat RGBA byte buffer into a frame.

        Args:
            width: Frame width in pixels
            height: Frame height in pixels
            data: Exactly width * height * 4 bytes, row-major RGBA

        Raises:
            ValueError: If the buffer length is not width * height * 4
        """
        expected = width * height * 4
        if len(data) != expected:
            raise ValueError(
                f"RGBA buffer length mismatch: expected {expected}, got {len(data)}"
            )
        pixels = np.frombuffer(data, dtype=np.uint8).reshape(height, width, 4)
        return cls(width=width, height=height, pixels=pixels)

    def __repr__(self) -> str:
        """Compact repr that doesn't dump the pixels."""
        return f"RawFrame(width={self.width}, height={self.height})"


@dataclass(frozen=True, slots=True)
class IntensityFrame:
    """
    One downsampled frame of per-block key values.

    Attributes:
        grid_width: Number of block columns
        grid_height: Number of block rows
        cells: Integer intensities as np.ndarray (grid_height, grid_width)
    """

    grid_width: int
    grid_height: int
    cells: np.ndarray

    def __post_init__(self) -> None:
        """Validate invariants."""
        _check_dimensions(self.grid_width, self.grid_height)
        if self.cells.shape != (self.grid_height, self.grid_width):
            raise ValueError(
                f"cells shape {self.cells.shape} does not match "
                f"{self.grid_width}x{self.grid_height} grid"
            )
        if not np.issubdtype(self.cells.dtype, np.integer):
            raise ValueError(f"cells must be integers, got {self.cells.dtype}")
        if self.cells.size and self.cells.min() < 0:
            raise ValueError("cells must be non-negative")
        _freeze(self.cells)

    @property
    def max_value(self) -> int:
        """Largest cell value in this frame."""
        return int(self.cells.max())

    def __repr__(self) -> str:
        return (
            f"IntensityFrame(grid={self.grid_width}x{self.grid_height}, "
            f"max={self.max_value})"
        )


@dataclass(frozen=True, slots=True)
class CanvasFrame:
    """
    One rendered output frame of palette indices.

    Attributes:
        width: Canvas width in pixels
        height: Canvas height in pixels
        pixels: Palette indices as np.ndarray (height, width), dtype=uint8
    """

    width: int
    height: int
    pixels: np.ndarray

    def __post_init__(self) -> None:
        """Validate invariants."""
        _check_dimensions(self.width, self.height)
        if self.pixels.shape != (self.height, self.width):
            raise ValueError(
                f"pixels shape {self.pixels.shape} does not match "
                f"{self.width}x{self.height} canvas"
            )
        if self.pixels.dtype != np.uint8:
            raise ValueError(f"pixels must be uint8, got {self.pixels.dtype}")
        if not np.isin(self.pixels, PALETTE_INDICES).all():
            raise ValueError(f"pixels must only hold palette indices {PALETTE_INDICES}")
        _freeze(self.pixels)

    @property
    def dot_count(self) -> int:
        """Number of pixels covered by dots."""
        return int(np.count_nonzero(self.pixels == DOT))

    def __repr__(self) -> str:
        return f"CanvasFrame(width={self.width}, height={self.height})"
