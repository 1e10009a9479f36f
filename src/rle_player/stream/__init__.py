"""
Stream Module
=============

Byte-level input and output shared by the decode and playback stages.

This module provides:
    - ByteCursor: Buffered pull reader with one-byte lookahead
    - HeaderLexer / read_header: P6 header tokenizer with comment skipping
    - FrameStreamWriter / FrameFileWriter: Decoded-stream output

Example:
    from rle_player.stream import ByteCursor, read_header

    cursor = ByteCursor(sys.stdin.buffer)
    header = read_header(cursor)
"""

from rle_player.stream.cursor import ByteCursor
from rle_player.stream.header import (
    FRAME_SEPARATOR,
    HeaderLexer,
    read_header,
    skip_comment,
)
from rle_player.stream.writer import FrameFileWriter, FrameStreamWriter, write_frame


__all__ = [
    "ByteCursor",
    "FRAME_SEPARATOR",
    "HeaderLexer",
    "read_header",
    "skip_comment",
    "FrameFileWriter",
    "FrameStreamWriter",
    "write_frame",
]
