"""
RLE Codec Tests
===============

Packet decoding, stream alignment between planes and the reference encoder.
"""

import numpy as np
import pytest

from rle_player.codec.rle import MAX_REPEAT_RUN, decode_plane, encode_plane
from rle_player.errors import FormatError, PacketOverrunError, TruncatedPacketError
from rle_player.stream.cursor import ByteCursor


def decode(data: bytes, count: int):
    cursor = ByteCursor.from_bytes(data)
    return decode_plane(cursor, count), cursor


class TestDecodePlane:
    """Tests for decode_plane."""

    def test_literal_run(self):
        """Verify n >= 0 copies n + 1 bytes verbatim."""
        plane, _ = decode(bytes([2, 10, 20, 30]), 3)

        assert plane.tolist() == [10, 20, 30]
        assert plane.dtype == np.uint8

    def test_repeat_run(self):
        """Verify n = -1 produces three copies."""
        plane, _ = decode(bytes([0xFF, 7]), 3)

        assert plane.tolist() == [7, 7, 7]

    def test_longest_repeat_run(self):
        """Verify n = -128 produces 130 copies."""
        plane, _ = decode(bytes([0x80, 9]), 130)

        assert plane.tolist() == [9] * 130

    def test_longest_literal_run(self):
        """Verify n = 127 copies 128 bytes."""
        plane, _ = decode(bytes([127]) + bytes(range(128)), 128)

        assert plane.tolist() == list(range(128))

    def test_mixed_packets(self):
        """Verify literal and repeat packets concatenate in order."""
        plane, _ = decode(bytes([1, 5, 6, 0xFE, 8, 0, 9]), 7)

        assert plane.tolist() == [5, 6, 8, 8, 8, 8, 9]

    def test_stops_on_packet_boundary(self):
        """Verify the cursor is left on the next plane's first packet."""
        data = bytes([0xFF, 1]) + bytes([0, 2]) + b"Z"
        cursor = ByteCursor.from_bytes(data)

        first = decode_plane(cursor, 3)
        assert cursor.peek() == 0x00

        second = decode_plane(cursor, 1)
        assert first.tolist() == [1, 1, 1]
        assert second.tolist() == [2]
        assert cursor.peek() == ord("Z")

    def test_repeat_run_clipped_at_plane_end(self):
        """Verify a repeat run longer than the plane stops at the sample count."""
        plane, cursor = decode(bytes([0xFF, 255]) + b"K", 2)

        assert plane.tolist() == [255, 255]
        assert cursor.peek() == ord("K")

    def test_literal_overrun(self):
        """Verify a literal run past the plane end is rejected before its payload."""
        with pytest.raises(PacketOverrunError) as exc_info:
            decode(bytes([2, 1, 2, 3]), 2)

        assert isinstance(exc_info.value, FormatError)

    def test_overrun_does_not_consume_payload(self):
        """Verify only the length byte is consumed on overrun."""
        cursor = ByteCursor.from_bytes(bytes([3, 1, 2, 3, 4]))

        with pytest.raises(PacketOverrunError):
            decode_plane(cursor, 2)
        assert cursor.offset == 1

    def test_missing_packet(self):
        """Verify end of stream before the plane is full is a truncation."""
        with pytest.raises(TruncatedPacketError):
            decode(bytes([0xFF, 4]), 5)

    def test_truncated_literal_payload(self):
        """Verify end of stream inside a literal payload is a truncation."""
        with pytest.raises(TruncatedPacketError):
            decode(bytes([3, 1, 2]), 4)

    def test_truncated_repeat_value(self):
        """Verify a repeat run without its value byte is a truncation."""
        with pytest.raises(TruncatedPacketError):
            decode(bytes([0xFE]), 4)

    def test_huge_count_with_short_stream(self):
        """Verify a plane larger than memory fails as a truncation, not on allocation."""
        count = 0xFFFFFFFF * 0xFFFFFFFF

        with pytest.raises(TruncatedPacketError):
            decode(bytes([0x00, 0x01, 0xFF, 0x02]), count)

    def test_small_chunks(self):
        """Verify decoding across refill boundaries."""
        samples = (np.arange(300) % 256).astype(np.uint8)
        cursor = ByteCursor.from_bytes(encode_plane(samples), chunk_size=3)

        assert decode_plane(cursor, 300).tolist() == samples.tolist()


class TestEncodePlane:
    """Tests for the reference encoder."""

    def test_short_repeat_becomes_literal(self):
        """Verify runs shorter than three stay literal."""
        assert encode_plane(bytes([1, 2])) == bytes([1, 1, 2])
        assert encode_plane(bytes([4, 4])) == bytes([1, 4, 4])

    def test_repeat_packet(self):
        """Verify three equal samples become one repeat packet."""
        assert encode_plane(bytes([5, 5, 5])) == bytes([0xFF, 5])

    def test_repeat_split_at_maximum(self):
        """Verify runs longer than 130 are split."""
        assert encode_plane(bytes([5] * 130)) == bytes([0x80, 5])
        assert encode_plane(bytes([5] * 131)) == bytes([0x80, 5, 0, 5])

    def test_literal_split_at_maximum(self):
        """Verify literal runs longer than 128 are split."""
        samples = (np.arange(200) % 2).astype(np.uint8)
        encoded = encode_plane(samples)

        assert encoded[0] == 127
        assert encoded[129] == 200 - 128 - 1

    def test_round_trip_all_run_lengths(self):
        """Verify runs of every length up to the maximum survive a round trip."""
        runs = [
            np.full(length, length % 251, dtype=np.uint8)
            for length in range(1, MAX_REPEAT_RUN + 1)
        ]
        samples = np.concatenate(runs)

        plane, cursor = decode(encode_plane(samples), samples.size)

        np.testing.assert_array_equal(plane, samples)
        assert cursor.at_eof()

    def test_round_trip_random(self):
        """Verify noisy data survives a round trip."""
        rng = np.random.default_rng(7)
        samples = rng.integers(0, 4, size=5000, dtype=np.uint8)

        plane, _ = decode(encode_plane(samples), samples.size)

        np.testing.assert_array_equal(plane, samples)
