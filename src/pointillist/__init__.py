"""
Pointillist
===========

Turns an animated GIF into a pointillist animation.

Each frame is downsampled into a grid of blocks; each block's average
perceived brightness sets the radius of a white circle drawn at the
block's position. The result is a two-tone (plus transparency) GIF with
a uniform frame delay that loops forever.

Components:
    - codec: GIF decoding and encoding (Pillow)
    - pipeline: key functions, block aggregation, circle rasterization
    - models: frame data models
    - runner: two-pass orchestration
    - config: pydantic settings from YAML and environment

Example:
    from pointillist.config import PipelineConfig
    from pointillist.runner import run_pipeline

    run_pipeline("in.gif", "out.gif", PipelineConfig(block_size=6))
"""

__version__ = "0.1.0"

__all__ = [
    "__version__",
]
