"""
GIF Decoder
===========

Reads an animated GIF into RGBA RawFrames.

Design Rules:
    - This is the ONLY place in the codebase that decodes images
    - Every frame is composited onto the logical screen and converted
      to 8-bit RGBA, whatever the source color mode
    - Fails fast on corrupt files
"""

import logging
from pathlib import Path
from typing import List, Union

from PIL import Image, ImageSequence, UnidentifiedImageError

from pointillist.codec.errors import DecodeError
from pointillist.models.frames import RawFrame


logger = logging.getLogger(__name__)


def read_frames(path: Union[str, Path]) -> List[RawFrame]:
    """
    Decode every frame of an animated GIF.

    Args:
        path: Path to the input GIF file

    Returns:
        RawFrames in source order

    Raises:
        OSError: If the file cannot be opened
        DecodeError: If the file is not a GIF or its data is malformed
    """
    frames = []

    with open(path, "rb") as fh:
        try:
            with Image.open(fh) as image:
                if image.format != "GIF":
                    raise DecodeError(f"{path}: expected a GIF, got {image.format}")

                for index, source in enumerate(ImageSequence.Iterator(image)):
                    rgba = source.convert("RGBA")
                    width, height = rgba.size
                    try:
                        frame = RawFrame.from_bytes(width, height, rgba.tobytes())
                    except ValueError as e:
                        raise DecodeError(f"{path}: frame {index}: {e}") from e
                    frames.append(frame)

        except UnidentifiedImageError as e:
            raise DecodeError(f"Failed to read GIF info: {e}") from e
        except (OSError, SyntaxError, EOFError, ValueError) as e:
            raise DecodeError(f"Failed to read frame {len(frames)} of {path}: {e}") from e

    if not frames:
        raise DecodeError(f"{path}: no frames found")

    logger.info(
        f"Decoded {len(frames)} frame(s) from {path}: "
        f"{frames[0].width}x{frames[0].height}"
    )
    return frames
