"""
RLE Container
=============

Reader and writer for the run-length-encoded video container.

Container Layout:
    <header> <frame>* 'E'
    header := "P6\\n<width> <height>\\n255\\n"   (comments allowed as whitespace)
    frame  := 'K' <red plane RLE> <green plane RLE> <blue plane RLE>

    All frames share the container header's dimensions.

Example:
    with open("video.rle", "rb") as f:
        reader = ContainerReader(ByteCursor(f))
        header = reader.read_header()
        for frame in reader.frames():
            print(frame)
"""

import logging
from typing import BinaryIO, Iterator, Optional

from rle_player.codec.assembler import assemble_frame
from rle_player.codec.rle import decode_plane, encode_plane
from rle_player.errors import DimensionError, EndOfStream, FormatError, TruncatedPacketError
from rle_player.models.frame import Frame
from rle_player.models.header import Header
from rle_player.stream.cursor import ByteCursor
from rle_player.stream.header import HeaderLexer, read_header


logger = logging.getLogger(__name__)


FRAME_MARKER = ord("K")
END_MARKER = ord("E")


class ContainerReader:
    """
    Sequential frame reader for an RLE container.

    Attributes:
        cursor: Byte cursor over the container
        header: Container header, set by read_header()
        frames_read: Number of frames decoded so far
    """

    def __init__(self, cursor: ByteCursor) -> None:
        self.cursor = cursor
        self.header: Optional[Header] = None
        self.frames_read: int = 0

    def read_header(self) -> Header:
        """
        Parse the container header.

        Separators between the header and the first frame marker are
        skipped, since no binary data precedes the first marker.

        Raises:
            FormatError: If the container is empty or the header is malformed
            DimensionError: On invalid dimensions
        """
        try:
            header = read_header(self.cursor, allow_frame_separator=False)
        except EndOfStream:
            raise FormatError("RLE container is empty")

        HeaderLexer(self.cursor).skip_whitespace_and_comments()

        self.header = header
        logger.info(f"Opened RLE container: {header.width}x{header.height}")
        return header

    def read_frame(self) -> Optional[Frame]:
        """
        Decode the next frame.

        Returns:
            The next Frame, or None once the end marker is reached.

        Raises:
            TruncatedPacketError: If the stream ends before the end marker
            FormatError: On an unknown frame marker or bad packet
        """
        if self.header is None:
            self.read_header()

        marker_offset = self.cursor.offset
        marker = self.cursor.read_byte()
        if marker is None:
            raise TruncatedPacketError(
                f"Reading the container stopped prematurely after "
                f"{self.frames_read} frame(s): missing end marker"
            )
        if marker == END_MARKER:
            logger.debug(f"End marker at offset {marker_offset}")
            return None
        if marker != FRAME_MARKER:
            raise FormatError(
                f"Unexpected frame marker {marker:#04x} at offset {marker_offset}"
            )

        count = self.header.pixel_count
        red = decode_plane(self.cursor, count)
        green = decode_plane(self.cursor, count)
        blue = decode_plane(self.cursor, count)

        self.frames_read += 1
        return assemble_frame(red, green, blue, self.header, self.frames_read)

    def frames(self) -> Iterator[Frame]:
        """Iterate frames until the end marker."""
        while True:
            frame = self.read_frame()
            if frame is None:
                return
            yield frame


class ContainerWriter:
    """
    Encodes frames into an RLE container.

    The header is written on construction; the end marker is written by
    close(), or on a clean exit from the context manager.

    Example:
        with ContainerWriter(out, header) as writer:
            for frame in frames:
                writer.write(frame)
    """

    def __init__(self, out: BinaryIO, header: Header) -> None:
        self.out = out
        self.header = header
        self.frames_written: int = 0
        self._closed = False

        self.out.write(header.encode())

    def write(self, frame: Frame) -> None:
        """
        Append one frame.

        Raises:
            DimensionError: If the frame does not match the container header
        """
        if (frame.width, frame.height) != (self.header.width, self.header.height):
            raise DimensionError(
                f"Frame {frame.index} is {frame.width}x{frame.height}, "
                f"container is {self.header.width}x{self.header.height}"
            )

        self.out.write(bytes((FRAME_MARKER,)))
        for plane in frame.planes():
            self.out.write(encode_plane(plane))
        self.frames_written += 1

    def close(self) -> None:
        """Write the end marker."""
        if self._closed:
            return
        self.out.write(bytes((END_MARKER,)))
        self._closed = True
        logger.info(f"Wrote {self.frames_written} frame(s) to RLE container")

    def __enter__(self) -> "ContainerWriter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.close()
