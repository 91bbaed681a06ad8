"""
Pipeline Runner
===============

Two-pass orchestration of the pointillist transform:

    1. Decode every frame                      (codec.decoder)
    2. Aggregate every frame into a grid       (pipeline.aggregator)
    3. Compute the animation-wide maximum
    4. Rasterize every grid with that maximum  (pipeline.rasterizer)
    5. Encode                                  (codec.encoder)

Normalization needs the maximum over ALL frames, so rasterization cannot
start until aggregation of every frame has finished.
"""

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

from pointillist.codec import EncodeError, read_frames, write_animation
from pointillist.config import PipelineConfig
from pointillist.models.frames import MAX_DIMENSION, CanvasFrame, IntensityFrame, RawFrame
from pointillist.pipeline import (
    CircleRasterizer,
    KeyFunction,
    aggregate_frames,
    compute_canvas_size,
    get_key_function,
)


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PipelineResult:
    """
    Summary of one conversion run.

    Attributes:
        frame_count: Frames decoded and written
        grid_size: (grid_width, grid_height) of the first frame
        canvas_size: (width, height) of the output animation
        max_value: Animation-wide maximum intensity
        elapsed_ms: Wall-clock duration of the run
    """

    frame_count: int
    grid_size: Tuple[int, int]
    canvas_size: Tuple[int, int]
    max_value: int
    elapsed_ms: float

    def to_dict(self) -> dict:
        """Export as dictionary for logging/serialization."""
        return {
            "frame_count": self.frame_count,
            "grid_size": list(self.grid_size),
            "canvas_size": list(self.canvas_size),
            "max_value": self.max_value,
            "elapsed_ms": round(self.elapsed_ms, 1),
        }


def compute_max_value(frames: Sequence[IntensityFrame]) -> int:
    """
    Maximum cell value across every frame.

    Falls back to 1 only when there are no cells at all. An animation
    whose cells are all zero returns 0.
    """
    values = [frame.max_value for frame in frames if frame.cells.size]
    if not values:
        return 1
    return max(values)


def _resolve_key(config: PipelineConfig, key_func: Optional[KeyFunction]) -> KeyFunction:
    if key_func is not None:
        return key_func
    return get_key_function(config.key)


def render_animation(
    raw_frames: Sequence[RawFrame],
    config: PipelineConfig,
    key_func: Optional[KeyFunction] = None,
) -> List[CanvasFrame]:
    """
    Transform decoded frames into rendered canvases, in memory.

    Args:
        raw_frames: Non-empty sequence of decoded frames
        config: Pipeline parameters
        key_func: Overrides config.key when given

    Returns:
        One CanvasFrame per input frame, same order

    Raises:
        EncodeError: If the canvas for this grid is too large for a GIF
    """
    canvases, _, _ = _render(raw_frames, config, _resolve_key(config, key_func))
    return canvases


def _render(
    raw_frames: Sequence[RawFrame],
    config: PipelineConfig,
    key_func: KeyFunction,
) -> Tuple[List[CanvasFrame], CircleRasterizer, int]:
    if not raw_frames:
        raise ValueError("Need at least one frame")

    intensity_frames = aggregate_frames(raw_frames, config.block_size, key_func)
    first = intensity_frames[0]
    width, height = compute_canvas_size(
        first.grid_width, first.grid_height, config.padding, config.radius
    )
    if not 1 <= width <= MAX_DIMENSION or not 1 <= height <= MAX_DIMENSION:
        raise EncodeError(
            f"Output canvas {width}x{height} does not fit a GIF (1..{MAX_DIMENSION} per side); "
            f"use a larger block size or a smaller radius or padding"
        )

    max_value = compute_max_value(intensity_frames)

    rasterizer = CircleRasterizer.for_frames(
        intensity_frames,
        padding=config.padding,
        max_radius=config.radius,
        max_value=max_value,
    )
    return rasterizer.render_all(intensity_frames), rasterizer, max_value


def run_pipeline(
    in_path: Union[str, Path],
    out_path: Union[str, Path],
    config: Optional[PipelineConfig] = None,
    key_func: Optional[KeyFunction] = None,
) -> PipelineResult:
    """
    Convert a GIF file into a pointillist GIF file.

    Args:
        in_path: Input GIF path
        out_path: Output GIF path
        config: Pipeline parameters (defaults when None)
        key_func: Overrides config.key when given

    Returns:
        PipelineResult describing the run

    Raises:
        OSError: If a file cannot be opened or created
        DecodeError: If the input is malformed
        EncodeError: If the output canvas is too large for a GIF or the
            writer rejects the frames
    """
    if config is None:
        config = PipelineConfig()
    key = _resolve_key(config, key_func)

    start_time = time.time()

    raw_frames = read_frames(in_path)
    canvases, rasterizer, max_value = _render(raw_frames, config, key)
    written = write_animation(out_path, canvases, delay=config.delay)

    elapsed_ms = (time.time() - start_time) * 1000

    result = PipelineResult(
        frame_count=written,
        grid_size=(rasterizer.grid_width, rasterizer.grid_height),
        canvas_size=(rasterizer.canvas_width, rasterizer.canvas_height),
        max_value=max_value,
        elapsed_ms=elapsed_ms,
    )
    logger.info(f"Pipeline finished in {elapsed_ms:.1f}ms: {result.to_dict()}")
    return result
