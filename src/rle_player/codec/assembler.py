"""
Frame Assembler
===============

Builds Frames from three decoded planes, or directly from a live stream of
interleaved RGB bytes.

Design Rules:
    - Output is (height, width, 3) uint8, row-major, (x=0, y=0) first
    - On the live-stream path, comment lines are skipped ONLY before the
      first red byte of a frame; the rest of the payload is binary and is
      never scanned for '#'
    - The returned pixel buffer is always writable, since grading mutates
      it in place
"""

import logging

import numpy as np

from rle_player.errors import DimensionError, TruncatedPacketError
from rle_player.models.frame import Frame, Plane
from rle_player.models.header import Header
from rle_player.stream.cursor import ByteCursor
from rle_player.stream.header import COMMENT, skip_comment


logger = logging.getLogger(__name__)


def assemble_frame(
    red: Plane,
    green: Plane,
    blue: Plane,
    header: Header,
    index: int,
) -> Frame:
    """
    Interleave three planes into one RGB frame.

    Args:
        red, green, blue: Flat uint8 planes of header.pixel_count samples
        header: Dimensions of the frame
        index: 1-based frame index

    Raises:
        DimensionError: If any plane has the wrong number of samples
    """
    expected = header.pixel_count
    for name, plane in (("red", red), ("green", green), ("blue", blue)):
        if plane.size != expected:
            raise DimensionError(
                f"{name} plane has {plane.size} samples, expected {expected} "
                f"for {header.width}x{header.height}"
            )

    pixels = np.stack((red, green, blue), axis=-1).reshape(header.height, header.width, 3)
    return Frame(index=index, header=header, pixels=pixels)


def read_interleaved_frame(cursor: ByteCursor, header: Header, index: int) -> Frame:
    """
    Read one raw RGB frame from a decoded stream.

    Args:
        cursor: Cursor positioned just after the frame's header
        header: Header parsed for this frame
        index: 1-based frame index

    Raises:
        TruncatedPacketError: If fewer than width * height * 3 bytes remain
    """
    skipped = 0
    while cursor.peek() == COMMENT:
        skip_comment(cursor)
        skipped += 1
    if skipped:
        logger.debug(f"Skipped {skipped} comment line(s) before frame {index}")

    size = header.frame_size
    data = cursor.read(size)
    if len(data) < size:
        raise TruncatedPacketError(
            f"Frame {index} truncated: {len(data)}/{size} pixel bytes"
        )

    pixels = np.frombuffer(bytearray(data), dtype=np.uint8).reshape(
        header.height, header.width, 3
    )
    return Frame(index=index, header=header, pixels=pixels)
