"""
Block Aggregator
================

Reduces RGBA frames to a grid of per-block intensities.

Each frame is partitioned into non-overlapping block_size x block_size
blocks, scanned top-to-bottom and left-to-right. Blocks on the right and
bottom edges may be partial; they are clipped to the frame and still
produce one cell. A cell holds the truncated mean key value over the
in-bounds pixels of its block.

    grid_width  = ceil(width / block_size)
    grid_height = ceil(height / block_size)

The key function is injected (see pointillist.pipeline.keys), so the
aggregation never depends on what the key measures.
"""

import logging
from typing import Iterable, List, Optional

import numpy as np

from pointillist.models.frames import IntensityFrame, RawFrame
from pointillist.pipeline.keys import KeyFunction, brightness_key


logger = logging.getLogger(__name__)


def grid_dimensions(width: int, height: int, block_size: int) -> tuple:
    """Return (grid_width, grid_height) for a frame and block size."""
    return -(-width // block_size), -(-height // block_size)


def _block_sums(values: np.ndarray, block_size: int, grid_w: int, grid_h: int) -> np.ndarray:
    """Sum a (H, W) array over blocks, zero-padding the partial edge blocks."""
    height, width = values.shape
    padded = np.zeros((grid_h * block_size, grid_w * block_size), dtype=np.int64)
    padded[:height, :width] = values
    return padded.reshape(grid_h, block_size, grid_w, block_size).sum(axis=(1, 3))


def aggregate_frame(
    frame: RawFrame,
    block_size: int,
    key_func: Optional[KeyFunction] = None,
) -> IntensityFrame:
    """
    Aggregate one frame into an IntensityFrame.

    Args:
        frame: Decoded RGBA frame
        block_size: Block edge length in source pixels (>= 1)
        key_func: Per-pixel key strategy (default: brightness_key)

    Returns:
        IntensityFrame with ceil(W/b) x ceil(H/b) cells

    Raises:
        ValueError: If block_size < 1 or the key function returns
            negative values or the wrong shape
    """
    if block_size < 1:
        raise ValueError(f"block_size must be >= 1, got {block_size}")
    if key_func is None:
        key_func = brightness_key

    keys = np.asarray(key_func(frame.pixels))
    if keys.shape != (frame.height, frame.width):
        raise ValueError(
            f"Key function returned shape {keys.shape}, "
            f"expected {(frame.height, frame.width)}"
        )
    if keys.size and keys.min() < 0:
        raise ValueError("Key function returned negative values")

    grid_w, grid_h = grid_dimensions(frame.width, frame.height, block_size)

    totals = _block_sums(keys.astype(np.int64), block_size, grid_w, grid_h)
    counts = _block_sums(np.ones_like(keys, dtype=np.int64), block_size, grid_w, grid_h)

    cells = np.where(counts > 0, totals // np.maximum(counts, 1), 0)

    assert cells.size == grid_w * grid_h, (
        f"Expected: {grid_w * grid_h}, but got: {cells.size}"
    )

    return IntensityFrame(grid_width=grid_w, grid_height=grid_h, cells=cells)


def aggregate_frames(
    frames: Iterable[RawFrame],
    block_size: int,
    key_func: Optional[KeyFunction] = None,
) -> List[IntensityFrame]:
    """
    Aggregate every frame, preserving order.

    Args:
        frames: Decoded RGBA frames
        block_size: Block edge length in source pixels (>= 1)
        key_func: Per-pixel key strategy (default: brightness_key)

    Returns:
        One IntensityFrame per input frame
    """
    if block_size < 1:
        raise ValueError(f"block_size must be >= 1, got {block_size}")

    intensity_frames = []
    for index, frame in enumerate(frames):
        intensity = aggregate_frame(frame, block_size, key_func)
        logger.debug(f"Frame {index}: {frame!r} -> {intensity!r}")
        intensity_frames.append(intensity)

    return intensity_frames
