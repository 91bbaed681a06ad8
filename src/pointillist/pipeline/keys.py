"""
Key Functions
=============

Per-pixel key strategies that turn RGBA pixels into integer intensities.

A key function accepts an array-like of shape (..., 4) holding 8-bit RGBA
values (a single pixel tuple or a whole frame) and returns an integer
array of shape (...). The block aggregator only relies on the result
being non-negative.

All built-in keys share the same alpha policy:
    - alpha < 128 -> 0 (transparent regions contribute nothing)
    - otherwise the key is raw * alpha // 255, in integer arithmetic

Example:
    from pointillist.pipeline.keys import brightness_key

    brightness_key((255, 255, 255, 255))  # -> 255
    brightness_key((255, 255, 255, 0))    # -> 0
"""

import logging
from typing import Callable, Dict

import numpy as np


logger = logging.getLogger(__name__)


KeyFunction = Callable[[np.ndarray], np.ndarray]

ALPHA_THRESHOLD = 128

# Perceptual channel weights (green dominates, blue contributes least)
RED_WEIGHT = 0.299
GREEN_WEIGHT = 0.587
BLUE_WEIGHT = 0.114


def _split_channels(rgba) -> tuple:
    pixels = np.asarray(rgba, dtype=np.float64)
    if pixels.shape[-1] != 4:
        raise ValueError(f"Expected RGBA values in the last axis, got shape {pixels.shape}")
    return pixels[..., 0], pixels[..., 1], pixels[..., 2], pixels[..., 3]


def _apply_alpha(raw: np.ndarray, alpha: np.ndarray) -> np.ndarray:
    """Scale a raw 0..255 key by alpha and zero out translucent pixels."""
    # floor(raw * alpha / 255), exact in integers
    scaled = (np.asarray(raw).astype(np.int64) * alpha.astype(np.int64)) // 255
    return np.where(alpha < ALPHA_THRESHOLD, 0, scaled)


def perceived_brightness(r, g, b) -> np.ndarray:
    """
    Perceived brightness of an RGB color.

    Computes round(sqrt(0.299*R² + 0.587*G² + 0.114*B²)), rounding half
    away from zero and saturating to 8 bits.

    Args:
        r, g, b: Channel values (scalars or arrays) in 0..255

    Returns:
        Brightness as np.ndarray, dtype=uint8
    """
    r = np.asarray(r, dtype=np.float64)
    g = np.asarray(g, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)

    value = np.sqrt(RED_WEIGHT * r ** 2 + GREEN_WEIGHT * g ** 2 + BLUE_WEIGHT * b ** 2)
    return np.clip(np.floor(value + 0.5), 0, 255).astype(np.uint8)


def brightness_key(rgba) -> np.ndarray:
    """Perceived brightness scaled by alpha. Default key."""
    r, g, b, a = _split_channels(rgba)
    return _apply_alpha(perceived_brightness(r, g, b), a)


def darkness_key(rgba) -> np.ndarray:
    """Inverse of brightness_key: dots grow in dark regions."""
    r, g, b, a = _split_channels(rgba)
    return _apply_alpha(255 - perceived_brightness(r, g, b).astype(np.int64), a)


def saturation_key(rgba) -> np.ndarray:
    """HSV saturation mapped to 0..255, scaled by alpha."""
    r, g, b, a = _split_channels(rgba)
    high = np.maximum(np.maximum(r, g), b)
    low = np.minimum(np.minimum(r, g), b)

    # Black has no saturation
    saturation = np.where(high > 0, np.floor((high - low) * 255.0 / np.maximum(high, 1.0)), 0.0)

    return _apply_alpha(saturation, a)


KEY_FUNCTIONS: Dict[str, KeyFunction] = {
    "brightness": brightness_key,
    "darkness": darkness_key,
    "saturation": saturation_key,
}


def get_key_function(name: str) -> KeyFunction:
    """
    Look up a built-in key function by name.

    Raises:
        KeyError: If no key function is registered under that name
    """
    try:
        return KEY_FUNCTIONS[name]
    except KeyError:
        raise KeyError(
            f"Unknown key function '{name}'. "
            f"Valid keys: {', '.join(sorted(KEY_FUNCTIONS))}"
        ) from None
