"""
Pipeline Module
===============

Pixel transforms between decoding and encoding.

This module provides:
    - Key functions (RGBA -> intensity strategies)
    - Block aggregation (RawFrame -> IntensityFrame)
    - Circle rasterization (IntensityFrame -> CanvasFrame)
"""

from pointillist.pipeline.keys import (
    KEY_FUNCTIONS,
    KeyFunction,
    brightness_key,
    darkness_key,
    get_key_function,
    perceived_brightness,
    saturation_key,
)
from pointillist.pipeline.aggregator import (
    aggregate_frame,
    aggregate_frames,
    grid_dimensions,
)
from pointillist.pipeline.rasterizer import (
    CircleRasterizer,
    circle_radius,
    compute_canvas_size,
)

__all__ = [
    # Keys
    "KeyFunction",
    "KEY_FUNCTIONS",
    "get_key_function",
    "perceived_brightness",
    "brightness_key",
    "darkness_key",
    "saturation_key",
    # Aggregation
    "aggregate_frame",
    "aggregate_frames",
    "grid_dimensions",
    # Rasterization
    "CircleRasterizer",
    "circle_radius",
    "compute_canvas_size",
]
