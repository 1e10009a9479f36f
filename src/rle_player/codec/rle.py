"""
RLE Plane Codec
===============

PackBits-style run-length coding of one colour plane.

Packet Format:
    One signed length byte n, then payload:
        n >= 0  literal run: the next n + 1 bytes are copied verbatim
        n <  0  repeat run:  the next byte is replicated 2 - n times

    Literal runs carry 1..128 samples, repeat runs 3..130 samples.

Decoder Rules:
    - The loop is driven by the remaining sample count, not packet count
    - A literal run's declared size is checked BEFORE its payload is read,
      so an overrun never consumes bytes belonging to the next plane
    - A repeat run that declares more samples than remain is cut short at
      the plane boundary; its single value byte is still consumed
    - End of stream anywhere inside a packet is a TruncatedPacketError;
      a partially filled plane is never returned
    - The sample buffer grows with the packets actually read, so a header
      declaring a huge plane fails on truncation, not on allocation
"""

import logging
from typing import Union

import numpy as np

from rle_player.errors import PacketOverrunError, TruncatedPacketError
from rle_player.models.frame import Plane
from rle_player.stream.cursor import ByteCursor


logger = logging.getLogger(__name__)


MAX_LITERAL_RUN = 128
MAX_REPEAT_RUN = 130
MIN_REPEAT_RUN = 3


def _signed(value: int) -> int:
    return value - 0x100 if value >= 0x80 else value


def decode_plane(cursor: ByteCursor, count: int) -> Plane:
    """
    Decode exactly `count` samples of one plane.

    Args:
        cursor: Cursor positioned on the plane's first packet
        count: Samples to produce (width * height)

    Returns:
        1-D uint8 array of length `count`. The cursor is left on the byte
        immediately after the last packet.

    Raises:
        TruncatedPacketError: If the stream ends inside a packet
        PacketOverrunError: If a literal run would produce more than `count` samples
    """
    samples = bytearray()
    filled = 0

    while filled < count:
        packet_offset = cursor.offset
        length_byte = cursor.read_byte()
        if length_byte is None:
            raise TruncatedPacketError(
                f"Stream ended before packet at offset {packet_offset} "
                f"({filled}/{count} samples decoded)"
            )

        n = _signed(length_byte)
        run = n + 1 if n >= 0 else 2 - n

        remaining = count - filled

        if n >= 0:
            if run > remaining:
                raise PacketOverrunError(
                    f"Literal run at offset {packet_offset} declares {run} samples "
                    f"but only {remaining} remain in the plane"
                )
            payload = cursor.read(run)
            if len(payload) < run:
                raise TruncatedPacketError(
                    f"Literal run at offset {packet_offset} truncated: "
                    f"{len(payload)}/{run} bytes"
                )
            samples += payload
        else:
            value = cursor.read_byte()
            if value is None:
                raise TruncatedPacketError(
                    f"Repeat run at offset {packet_offset} missing its value byte"
                )
            if run > remaining:
                logger.debug(
                    f"Repeat run at offset {packet_offset} clipped from {run} "
                    f"to {remaining} samples"
                )
                run = remaining
            samples += bytes((value,)) * run

        filled += run

    return np.frombuffer(samples, dtype=np.uint8)


def _flush_literal(out: bytearray, literal: bytearray) -> None:
    while literal:
        chunk = literal[:MAX_LITERAL_RUN]
        out.append(len(chunk) - 1)
        out.extend(chunk)
        del literal[:MAX_LITERAL_RUN]


def encode_plane(samples: Union[bytes, bytearray, np.ndarray]) -> bytes:
    """
    Encode one plane with greedy run detection.

    Runs of MIN_REPEAT_RUN or more equal samples become repeat packets
    (split at MAX_REPEAT_RUN); everything else is gathered into literal
    packets (split at MAX_LITERAL_RUN).

    Args:
        samples: Flat sequence of 8-bit samples

    Returns:
        Encoded packet stream
    """
    data = np.asarray(samples, dtype=np.uint8).reshape(-1).tobytes()
    total = len(data)

    out = bytearray()
    literal = bytearray()
    i = 0

    while i < total:
        value = data[i]
        run = 1
        while i + run < total and run < MAX_REPEAT_RUN and data[i + run] == value:
            run += 1

        if run >= MIN_REPEAT_RUN:
            _flush_literal(out, literal)
            out.append((2 - run) & 0xFF)
            out.append(value)
        else:
            literal.extend(data[i:i + run])
        i += run

    _flush_literal(out, literal)
    return bytes(out)
