"""
Test Configuration
==================

Pytest fixtures and test configuration for pointillist.

GIF fixtures are built with Pillow from palette-mode images so the
pixel values read back are exact.
"""

import numpy as np
import pytest
from PIL import Image

from pointillist.models.frames import RawFrame


BLACK_WHITE = [0, 0, 0, 255, 255, 255]


def make_raw_frame(width: int, height: int, rgba=(255, 255, 255, 255)) -> RawFrame:
    """Build a uniform RawFrame."""
    pixels = np.empty((height, width, 4), dtype=np.uint8)
    pixels[...] = rgba
    return RawFrame(width=width, height=height, pixels=pixels)


def save_gif(path, images, **kwargs) -> None:
    """Save palette images as a (possibly animated) GIF."""
    images[0].save(
        path,
        save_all=True,
        append_images=images[1:],
        optimize=False,
        **kwargs,
    )


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep POINTILLIST_* variables from the host out of the tests."""
    for name in (
        "POINTILLIST_BLOCK_SIZE",
        "POINTILLIST_PADDING",
        "POINTILLIST_RADIUS",
        "POINTILLIST_DELAY",
        "POINTILLIST_KEY",
        "POINTILLIST_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def white_gif(tmp_path):
    """Single-frame 16x16 fully opaque white GIF."""
    image = Image.new("P", (16, 16), 1)
    image.putpalette(BLACK_WHITE)
    path = tmp_path / "white.gif"
    save_gif(path, [image])
    return path


@pytest.fixture
def transparent_gif(tmp_path):
    """Single-frame 16x16 GIF where every pixel is transparent."""
    image = Image.new("P", (16, 16), 0)
    image.putpalette([255, 255, 255, 0, 0, 0])
    path = tmp_path / "transparent.gif"
    save_gif(path, [image], transparency=0)
    return path


@pytest.fixture
def sweep_gif(tmp_path):
    """
    Four-frame 16x16 GIF: frame k has its leftmost 4*k columns white.

    Every frame differs from its predecessor.
    """
    images = []
    for k in range(4):
        image = Image.new("P", (16, 16), 0)
        image.putpalette(BLACK_WHITE)
        if k:
            image.paste(1, (0, 0, 4 * k, 16))
        images.append(image)

    path = tmp_path / "sweep.gif"
    save_gif(path, images, duration=100, loop=0)
    return path


@pytest.fixture
def make_frame():
    """Factory for uniform RawFrames: make_frame(width, height, rgba)."""
    return make_raw_frame


@pytest.fixture
def repeat_gif(tmp_path):
    """
    Three-frame 16x16 GIF: black, near-black (0, 0, 1), white.

    The first two input frames differ but both key to zero brightness,
    so they render to identical canvases.
    """
    images = []
    for index in range(3):
        image = Image.new("P", (16, 16), index)
        image.putpalette([0, 0, 0, 0, 0, 1, 255, 255, 255])
        images.append(image)

    path = tmp_path / "repeat.gif"
    save_gif(path, images, duration=100, loop=0)
    return path


@pytest.fixture
def wide_gif(tmp_path):
    """Single-frame 4000x1 white GIF, too wide to render at block size 1."""
    image = Image.new("P", (4000, 1), 1)
    image.putpalette(BLACK_WHITE)
    path = tmp_path / "wide.gif"
    save_gif(path, [image])
    return path
