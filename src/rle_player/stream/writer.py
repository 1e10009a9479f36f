"""
Decoded Stream Writers
======================

Emit decoded frames as standalone ``P6`` units.

Two destinations:
    - FrameStreamWriter: concatenates units on one binary stream (stdout)
    - FrameFileWriter: one file per frame, named <prefix>-NNNNN from 1

The optional FF FF FF FF frame separator is written only when asked for;
readers accept streams with or without it.
"""

import logging
from pathlib import Path
from typing import BinaryIO

from rle_player.models.frame import Frame
from rle_player.stream.header import FRAME_SEPARATOR


logger = logging.getLogger(__name__)


def write_frame(out: BinaryIO, frame: Frame, frame_separator: bool = False) -> int:
    """
    Write one header + raw RGB unit.

    Returns:
        Number of bytes written
    """
    header = frame.header.encode()
    payload = frame.to_bytes()
    out.write(header)
    out.write(payload)
    written = len(header) + len(payload)

    if frame_separator:
        out.write(FRAME_SEPARATOR)
        written += len(FRAME_SEPARATOR)
    return written


class FrameStreamWriter:
    """Writes every frame to one binary stream."""

    def __init__(self, out: BinaryIO, frame_separator: bool = False) -> None:
        self.out = out
        self.frame_separator = frame_separator
        self.frames_written: int = 0

    def write(self, frame: Frame) -> None:
        write_frame(self.out, frame, self.frame_separator)
        self.frames_written += 1

    def close(self) -> None:
        self.out.flush()
        logger.info(f"Streamed {self.frames_written} frame(s)")


class FrameFileWriter:
    """
    Writes each frame to its own file.

    Attributes:
        prefix: Path prefix; frame n goes to f"{prefix}-{n:05d}"
        suffix_digits: Zero-padding width of the sequence number
    """

    def __init__(self, prefix: str, suffix_digits: int = 5) -> None:
        if suffix_digits < 1:
            raise ValueError("suffix_digits must be >= 1")

        self.prefix = prefix
        self.suffix_digits = suffix_digits
        self.frames_written: int = 0

    def path_for(self, sequence: int) -> Path:
        """Output path for the 1-based frame sequence number."""
        return Path(f"{self.prefix}-{sequence:0{self.suffix_digits}d}")

    def write(self, frame: Frame) -> Path:
        path = self.path_for(self.frames_written + 1)
        with open(path, "wb") as f:
            write_frame(f, frame)
        self.frames_written += 1
        logger.debug(f"Wrote {frame} to {path}")
        return path

    def close(self) -> None:
        logger.info(f"Wrote {self.frames_written} frame file(s) with prefix {self.prefix!r}")
