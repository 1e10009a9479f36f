"""
Header Model
============

Typed result of parsing a ``P6`` text header.
"""

from dataclasses import dataclass


MAGIC = b"P6"
MAX_VALUE = 255


@dataclass(frozen=True, slots=True)
class Header:
    """
    Parsed frame header.

    Attributes:
        width: Frame width in pixels (> 0)
        height: Frame height in pixels (> 0)
        max_value: Colour depth marker, always 255
    """

    width: int
    height: int
    max_value: int = MAX_VALUE

    @property
    def pixel_count(self) -> int:
        """Number of samples in one plane."""
        return self.width * self.height

    @property
    def frame_size(self) -> int:
        """Number of raw bytes in one interleaved RGB frame."""
        return self.width * self.height * 3

    def encode(self) -> bytes:
        """Serialize as the canonical three-line header."""
        return f"P6\n{self.width} {self.height}\n{self.max_value}\n".encode("ascii")

    def __repr__(self) -> str:
        return f"Header({self.width}x{self.height})"
