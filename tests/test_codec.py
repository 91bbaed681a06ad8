"""
Codec Tests
===========

GIF decoding and encoding through Pillow.
"""

import numpy as np
import pytest
from PIL import GifImagePlugin, Image

from pointillist.codec import (
    PALETTE,
    DecodeError,
    EncodeError,
    UsagePreconditionError,
    read_frames,
    write_animation,
)
from pointillist.models.frames import DOT, TRANSPARENT, CanvasFrame


def canvas(width: int, height: int, dot_columns: int = 0) -> CanvasFrame:
    pixels = np.full((height, width), TRANSPARENT, dtype=np.uint8)
    pixels[:, :dot_columns] = DOT
    return CanvasFrame(width=width, height=height, pixels=pixels)


class TestDecoder:
    """Tests for read_frames."""

    def test_single_white_frame(self, white_gif):
        """Palette GIFs are decoded as opaque RGBA."""
        frames = read_frames(white_gif)

        assert len(frames) == 1
        assert (frames[0].width, frames[0].height) == (16, 16)
        assert (frames[0].pixels == 255).all()

    def test_transparency_decoded_as_alpha(self, transparent_gif):
        """The transparency index becomes alpha 0."""
        frames = read_frames(transparent_gif)

        assert (frames[0].pixels[..., 3] == 0).all()

    def test_frames_in_order(self, sweep_gif):
        """Every frame is decoded, in source order."""
        frames = read_frames(sweep_gif)

        assert len(frames) == 4
        white_columns = [int((f.pixels[0, :, 0] == 255).sum()) for f in frames]
        assert white_columns == [0, 4, 8, 12]

    def test_missing_file(self, tmp_path):
        """Open failures surface as OSError."""
        with pytest.raises(OSError):
            read_frames(tmp_path / "missing.gif")

    def test_garbage_file(self, tmp_path):
        """Unparseable data is a DecodeError."""
        path = tmp_path / "garbage.gif"
        path.write_bytes(b"this is not an image")

        with pytest.raises(DecodeError):
            read_frames(path)

    def test_truncated_gif(self, white_gif, tmp_path):
        """A GIF cut short is a DecodeError."""
        path = tmp_path / "truncated.gif"
        path.write_bytes(white_gif.read_bytes()[:20])

        with pytest.raises(DecodeError):
            read_frames(path)

    def test_non_gif_rejected(self, tmp_path):
        """Other image formats are not accepted."""
        path = tmp_path / "image.png"
        Image.new("RGBA", (4, 4)).save(path)

        with pytest.raises(DecodeError, match="expected a GIF"):
            read_frames(path)


class TestEncoder:
    """Tests for write_animation."""

    def test_output_contract(self, tmp_path):
        """Palette, transparency, disposal, delay and looping are set."""
        path = tmp_path / "out.gif"

        written = write_animation(path, [canvas(8, 6, 2), canvas(8, 6, 4)], delay=7)

        assert written == 2
        with Image.open(path) as image:
            assert image.size == (8, 6)
            assert image.n_frames == 2
            assert image.info["loop"] == 0
            assert image.info["duration"] == 70
            assert image.info["transparency"] == 2
            assert image.disposal_method == 2
            assert image.getpalette()[:6] == PALETTE[:6]

    def test_pixels_round_trip(self, tmp_path):
        """DOT is opaque white and TRANSPARENT has zero alpha."""
        path = tmp_path / "out.gif"
        write_animation(path, [canvas(4, 4, 2)])

        with Image.open(path) as image:
            rgba = image.convert("RGBA")
            assert rgba.getpixel((0, 0)) == (255, 255, 255, 255)
            assert rgba.getpixel((3, 3))[3] == 0

    def test_empty_sequence(self, tmp_path):
        """An empty frame list is a usage error."""
        with pytest.raises(UsagePreconditionError):
            write_animation(tmp_path / "out.gif", [])

    def test_size_mismatch(self, tmp_path):
        """All frames must match the first frame's size."""
        with pytest.raises(EncodeError, match="expected 4x4"):
            write_animation(tmp_path / "out.gif", [canvas(4, 4), canvas(5, 4)])

    def test_delay_out_of_range(self, tmp_path):
        """Delays must fit the 16-bit GIF field."""
        with pytest.raises(EncodeError):
            write_animation(tmp_path / "out.gif", [canvas(4, 4)], delay=70000)

    def test_uncreatable_path(self, tmp_path):
        """Create failures surface as OSError."""
        with pytest.raises(OSError):
            write_animation(tmp_path / "missing-dir" / "out.gif", [canvas(4, 4)])

    def test_identical_frames_kept(self, tmp_path):
        """Repeated canvases are written as separate frames with the same delay."""
        path = tmp_path / "out.gif"

        written = write_animation(path, [canvas(8, 6, 2), canvas(8, 6, 2), canvas(8, 6, 4)], delay=9)

        assert written == 3
        with Image.open(path) as image:
            assert image.n_frames == 3
            for index in range(3):
                image.seek(index)
                assert image.info["duration"] == 90
                assert image.disposal_method == 2

    def test_writer_failure_removes_partial_file(self, tmp_path, monkeypatch):
        """A writer error is an EncodeError and leaves no output behind."""
        path = tmp_path / "out.gif"

        def fail(*args, **kwargs):
            raise ValueError("encoder broke")

        monkeypatch.setattr(GifImagePlugin, "getdata", fail)

        with pytest.raises(EncodeError, match="encoder broke"):
            write_animation(path, [canvas(4, 4)])
        assert not path.exists()
