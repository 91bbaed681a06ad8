"""
Circle Rasterizer
=================

Renders intensity grids as filled circles on a palette-index canvas.

Layout (per grid cell, R = max radius, p = padding):

    canvas_width  = grid_width  * (2R + p) + p
    canvas_height = grid_height * (2R + p) + p
    center        = (p + col * (2R + p) + R,  p + row * (2R + p) + R)

Radius scales linearly with intensity against the animation-wide maximum:

    r = value / max(max_value, 1) * R

Every canvas starts as TRANSPARENT and pixels within r of a center become
DOT. BACKGROUND is reserved in the palette but never written here, so
uncovered pixels stay transparent under background-restore disposal.
A zero radius still covers the center pixel.
"""

import logging
import math
from typing import Iterable, List, Sequence, Tuple

import numpy as np

from pointillist.models.frames import (
    DOT,
    MAX_DIMENSION,
    TRANSPARENT,
    CanvasFrame,
    IntensityFrame,
)


logger = logging.getLogger(__name__)


def compute_canvas_size(
    grid_width: int,
    grid_height: int,
    padding: int,
    max_radius: int,
) -> Tuple[int, int]:
    """Return (canvas_width, canvas_height) for a grid."""
    pitch = 2 * max_radius + padding
    return grid_width * pitch + padding, grid_height * pitch + padding


def circle_radius(value: float, max_value: float, max_radius: float) -> float:
    """Linear radius for a cell value; 0 -> 0, max_value -> max_radius."""
    return (value / max(max_value, 1)) * max_radius


class CircleRasterizer:
    """
    Renders IntensityFrames with a fixed canvas and normalization.

    The canvas is sized once from the grid dimensions; every frame
    rendered by one rasterizer must share that grid.

    Attributes:
        grid_width: Block columns per frame
        grid_height: Block rows per frame
        padding: Pixels between circles and around the canvas edge
        max_radius: Radius of a cell at max_value
        max_value: Animation-wide maximum intensity
        canvas_width: Output width in pixels
        canvas_height: Output height in pixels

    Example:
        rasterizer = CircleRasterizer.for_frames(frames, padding=2, max_radius=8, max_value=255)
        canvases = rasterizer.render_all(frames)
    """

    def __init__(
        self,
        grid_width: int,
        grid_height: int,
        padding: int = 2,
        max_radius: int = 8,
        max_value: int = 1,
    ) -> None:
        """
        Initialize circle rasterizer.

        Args:
            grid_width: Block columns per frame
            grid_height: Block rows per frame
            padding: Padding in pixels (>= 0)
            max_radius: Maximum circle radius in pixels (>= 0)
            max_value: Animation-wide maximum intensity (>= 0)
        """
        if grid_width < 1 or grid_height < 1:
            raise ValueError("grid dimensions must be positive")
        if padding < 0:
            raise ValueError("padding must be non-negative")
        if max_radius < 0:
            raise ValueError("max_radius must be non-negative")
        if max_value < 0:
            raise ValueError("max_value must be non-negative")

        self.grid_width = grid_width
        self.grid_height = grid_height
        self.padding = padding
        self.max_radius = max_radius
        self.max_value = max_value

        self.canvas_width, self.canvas_height = compute_canvas_size(
            grid_width, grid_height, padding, max_radius
        )
        if not 1 <= self.canvas_width <= MAX_DIMENSION or not 1 <= self.canvas_height <= MAX_DIMENSION:
            raise ValueError(
                f"Canvas {self.canvas_width}x{self.canvas_height} is outside 1..{MAX_DIMENSION}"
            )

        logger.info(
            f"CircleRasterizer initialized: "
            f"grid={grid_width}x{grid_height}, "
            f"canvas={self.canvas_width}x{self.canvas_height}, "
            f"max_value={max_value}"
        )

    @classmethod
    def for_frames(
        cls,
        frames: Sequence[IntensityFrame],
        padding: int = 2,
        max_radius: int = 8,
        max_value: int = 1,
    ) -> "CircleRasterizer":
        """Create a rasterizer sized from the first frame's grid."""
        if not frames:
            raise ValueError("Need at least one frame to size the canvas")
        first = frames[0]
        return cls(first.grid_width, first.grid_height, padding, max_radius, max_value)

    def center(self, row: int, col: int) -> Tuple[float, float]:
        """Return the (cx, cy) circle center of a grid cell."""
        pitch = 2 * self.max_radius + self.padding
        cx = self.padding + col * pitch + self.max_radius
        cy = self.padding + row * pitch + self.max_radius
        return float(cx), float(cy)

    def render(self, frame: IntensityFrame) -> CanvasFrame:
        """
        Render one intensity frame.

        Args:
            frame: IntensityFrame with this rasterizer's grid dimensions

        Returns:
            CanvasFrame of palette indices

        Raises:
            ValueError: If the frame's grid differs from the rasterizer's
        """
        if (frame.grid_width, frame.grid_height) != (self.grid_width, self.grid_height):
            raise ValueError(
                f"Frame grid {frame.grid_width}x{frame.grid_height} does not match "
                f"rasterizer grid {self.grid_width}x{self.grid_height}"
            )

        pixels = np.full((self.canvas_height, self.canvas_width), TRANSPARENT, dtype=np.uint8)
        last_x = self.canvas_width - 1
        last_y = self.canvas_height - 1

        for row in range(self.grid_height):
            for col in range(self.grid_width):
                r = circle_radius(int(frame.cells[row, col]), self.max_value, self.max_radius)
                cx, cy = self.center(row, col)

                # Bounding box clipped to the canvas
                x0 = math.floor(max(cx - r, 0.0))
                x1 = math.ceil(min(cx + r, float(last_x)))
                y0 = math.floor(max(cy - r, 0.0))
                y1 = math.ceil(min(cy + r, float(last_y)))
                if x0 > x1 or y0 > y1:
                    continue

                ys = np.arange(y0, y1 + 1, dtype=np.float64)[:, None] - cy
                xs = np.arange(x0, x1 + 1, dtype=np.float64)[None, :] - cx
                inside = xs * xs + ys * ys <= r * r

                region = pixels[y0:y1 + 1, x0:x1 + 1]
                region[inside] = DOT

        return CanvasFrame(width=self.canvas_width, height=self.canvas_height, pixels=pixels)

    def render_all(self, frames: Iterable[IntensityFrame]) -> List[CanvasFrame]:
        """Render every frame, preserving order."""
        canvases = []
        for index, frame in enumerate(frames):
            canvas = self.render(frame)
            logger.debug(f"Frame {index}: {canvas.dot_count} dot pixels")
            canvases.append(canvas)
        return canvases
