"""
Decoded Stream Source
=====================

Reads the decoded stream (``P6`` header + raw RGB bytes, repeated) that
feeds playback.

Header parsing and pixel reading are separate calls, so the playback driver
can parse the first header at startup and re-parse before every later
frame.
"""

import logging
from typing import Iterator

from rle_player.codec.assembler import read_interleaved_frame
from rle_player.errors import EndOfStream
from rle_player.models.frame import Frame
from rle_player.models.header import Header
from rle_player.stream.cursor import ByteCursor
from rle_player.stream.header import read_header


logger = logging.getLogger(__name__)


class DecodedStreamReader:
    """
    Pull reader for the decoded frame stream.

    Attributes:
        cursor: Byte cursor over the stream
        allow_frame_separator: Skip FF FF FF FF between frames when present
        frames_read: Frames read so far
    """

    def __init__(self, cursor: ByteCursor, allow_frame_separator: bool = True) -> None:
        self.cursor = cursor
        self.allow_frame_separator = allow_frame_separator
        self.frames_read: int = 0

    def read_header(self) -> Header:
        """
        Parse the next frame's header.

        Raises:
            EndOfStream: At a clean frame boundary with nothing left
            FormatError, DimensionError: On a malformed header
        """
        return read_header(self.cursor, allow_frame_separator=self.allow_frame_separator)

    def read_frame(self, header: Header) -> Frame:
        """
        Read the pixel payload that follows `header`.

        Raises:
            TruncatedPacketError: If the payload is short
        """
        frame = read_interleaved_frame(self.cursor, header, self.frames_read + 1)
        self.frames_read += 1
        return frame

    def frames(self) -> Iterator[Frame]:
        """Iterate (header, payload) units until the stream is exhausted."""
        while True:
            try:
                header = self.read_header()
            except EndOfStream:
                return
            yield self.read_frame(header)
