"""
GIF Encoder
===========

Writes rendered CanvasFrames as an animated GIF.

Output contract:
    - Global palette: 0 = black, 1 = white, 2 = transparency slot
    - Transparency index 2 on every frame
    - Disposal 2 (restore to background) on every frame
    - Uniform delay, in hundredths of a second
    - Infinite loop

Frames are written one graphic block each through GifImagePlugin's
getheader/getdata helpers. Image.save(save_all=True) folds a frame that
matches its predecessor into the previous delay, which would break both
the frame count and the uniform delay.
"""

import logging
from pathlib import Path
from typing import BinaryIO, List, Sequence, Union

from PIL import GifImagePlugin, Image

from pointillist.codec.errors import EncodeError, UsagePreconditionError
from pointillist.models.frames import TRANSPARENT, CanvasFrame


logger = logging.getLogger(__name__)


# RGB triples, ordered by palette index
PALETTE: List[int] = [
    0, 0, 0,        # BACKGROUND == black
    255, 255, 255,  # DOT == white
    0, 0, 0,        # TRANSPARENT
]

TRANSPARENCY_INDEX = TRANSPARENT
DISPOSAL_RESTORE_BACKGROUND = 2
LOOP_FOREVER = 0
MAX_DELAY = 0xFFFF


def _to_image(frame: CanvasFrame) -> Image.Image:
    image = Image.frombytes("P", (frame.width, frame.height), frame.pixels.tobytes())
    image.putpalette(PALETTE)
    image.info["transparency"] = TRANSPARENCY_INDEX
    return image


def _write_frames(fh: BinaryIO, images: List[Image.Image], delay: int) -> None:
    """Write header, one graphic block per image, then the trailer."""
    header, _ = GifImagePlugin.getheader(images[0], info={"loop": LOOP_FOREVER})
    for chunk in header:
        fh.write(chunk)

    for image in images:
        blocks = GifImagePlugin.getdata(
            image,
            transparency=TRANSPARENCY_INDEX,
            duration=delay * 10,  # Pillow takes milliseconds
            disposal=DISPOSAL_RESTORE_BACKGROUND,
        )
        for chunk in blocks:
            fh.write(chunk)

    fh.write(b";")


def write_animation(
    path: Union[str, Path],
    frames: Sequence[CanvasFrame],
    delay: int = 5,
) -> int:
    """
    Encode frames into an animated GIF.

    Args:
        path: Output file path
        frames: Non-empty sequence of same-sized canvases
        delay: Per-frame delay in hundredths of a second

    Returns:
        Number of frames handed to the writer

    Raises:
        UsagePreconditionError: If frames is empty
        EncodeError: If frame sizes disagree, the delay is out of range,
            or the writer rejects the data
        OSError: If the output file cannot be created
    """
    if not frames:
        raise UsagePreconditionError("Need at least one frame")

    width, height = frames[0].width, frames[0].height
    for index, frame in enumerate(frames):
        if (frame.width, frame.height) != (width, height):
            raise EncodeError(
                f"Frame {index} is {frame.width}x{frame.height}, "
                f"expected {width}x{height}"
            )

    if not 0 <= delay <= MAX_DELAY:
        raise EncodeError(f"delay must be in 0..{MAX_DELAY}, got {delay}")

    images = [_to_image(frame) for frame in frames]

    with open(path, "wb") as fh:
        try:
            _write_frames(fh, images, delay)
        except (ValueError, TypeError, KeyError) as e:
            fh.close()
            Path(path).unlink(missing_ok=True)
            raise EncodeError(f"Failed to write GIF {path}: {e}") from e

    logger.info(
        f"Wrote {len(images)} frame(s) to {path}: "
        f"{width}x{height}, delay={delay}cs"
    )
    return len(images)
