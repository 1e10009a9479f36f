"""
Frame Assembler Tests
=====================
"""

import numpy as np
import pytest

from rle_player.codec.assembler import assemble_frame, read_interleaved_frame
from rle_player.errors import DimensionError, TruncatedPacketError
from rle_player.models.header import Header
from rle_player.stream.cursor import ByteCursor


def planes(*values):
    return [np.array(v, dtype=np.uint8) for v in values]


class TestAssembleFrame:
    """Tests for interleaving decoded planes."""

    def test_interleaves_rgb(self):
        """Verify pixel i takes sample i from each plane, in r, g, b order."""
        red, green, blue = planes([1, 2], [3, 4], [5, 6])
        frame = assemble_frame(red, green, blue, Header(2, 1), index=1)

        assert frame.pixels.shape == (1, 2, 3)
        assert frame.pixels[0, 0].tolist() == [1, 3, 5]
        assert frame.pixels[0, 1].tolist() == [2, 4, 6]
        assert frame.to_bytes() == bytes([1, 3, 5, 2, 4, 6])

    def test_row_major_layout(self):
        """Verify samples fill rows left to right, top to bottom."""
        red = np.arange(6, dtype=np.uint8)
        zeros = np.zeros(6, dtype=np.uint8)
        frame = assemble_frame(red, zeros, zeros, Header(3, 2), index=1)

        assert frame.pixels[:, :, 0].tolist() == [[0, 1, 2], [3, 4, 5]]

    def test_plane_size_mismatch(self):
        """Verify planes of the wrong length are rejected."""
        red, green, blue = planes([1, 2], [3], [5, 6])

        with pytest.raises(DimensionError):
            assemble_frame(red, green, blue, Header(2, 1), index=1)

    def test_planes_extract_copies(self):
        """Verify Frame.planes reverses the interleave."""
        red, green, blue = planes([1, 2], [3, 4], [5, 6])
        frame = assemble_frame(red, green, blue, Header(2, 1), index=1)

        out = frame.planes()
        assert [p.tolist() for p in out] == [[1, 2], [3, 4], [5, 6]]


class TestReadInterleavedFrame:
    """Tests for reading raw frames from a decoded stream."""

    def test_reads_exact_payload(self):
        """Verify exactly width * height * 3 bytes are consumed."""
        cursor = ByteCursor.from_bytes(bytes(range(6)) + b"P6")
        frame = read_interleaved_frame(cursor, Header(2, 1), index=4)

        assert frame.index == 4
        assert frame.to_bytes() == bytes(range(6))
        assert cursor.peek() == ord("P")

    def test_skips_leading_comments(self):
        """Verify comment lines before the first pixel byte are skipped."""
        cursor = ByteCursor.from_bytes(b"# one\n# two\n" + bytes(range(6)))
        frame = read_interleaved_frame(cursor, Header(2, 1), index=1)

        assert frame.to_bytes() == bytes(range(6))

    def test_hash_inside_payload_is_data(self):
        """Verify '#' after the first pixel byte is pixel data."""
        payload = bytes([1, ord("#"), 3, 4, 5, 6])
        cursor = ByteCursor.from_bytes(payload)
        frame = read_interleaved_frame(cursor, Header(2, 1), index=1)

        assert frame.to_bytes() == payload

    def test_truncated_payload(self):
        """Verify a short payload raises TruncatedPacketError."""
        cursor = ByteCursor.from_bytes(bytes(5))

        with pytest.raises(TruncatedPacketError):
            read_interleaved_frame(cursor, Header(2, 1), index=1)

    def test_pixels_are_writable(self):
        """Verify grading can mutate the returned buffer."""
        cursor = ByteCursor.from_bytes(bytes(6))
        frame = read_interleaved_frame(cursor, Header(2, 1), index=1)

        frame.pixels[0, 0, 0] = 9
        assert frame.pixels.flags.writeable
