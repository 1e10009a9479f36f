"""
Frame Data Model
================

Internal frame representation for the decode and playback pipeline.

Design Rules:
    - Pixels are a (height, width, 3) uint8 array, RGB, row-major
    - The array is owned by whoever holds the Frame; grading mutates it
      in place and the sink copies out
    - Planes are 1-D uint8 arrays of exactly width * height samples
"""

from dataclasses import dataclass

import numpy as np

from rle_player.models.header import Header


# One colour channel of one frame, flattened row-major.
Plane = np.ndarray


@dataclass(slots=True)
class Frame:
    """
    One decoded RGB frame.

    Attributes:
        index: 1-based position of the frame in its source
        header: Header the frame was decoded under
        pixels: (height, width, 3) uint8 array, RGB order
    """

    index: int
    header: Header
    pixels: np.ndarray

    def __post_init__(self) -> None:
        """Validate invariants."""
        expected = (self.header.height, self.header.width, 3)
        if self.pixels.shape != expected:
            raise ValueError(
                f"pixel buffer shape {self.pixels.shape} does not match {expected}"
            )
        if self.pixels.dtype != np.uint8:
            raise ValueError(f"pixel buffer dtype must be uint8, got {self.pixels.dtype}")

    @property
    def width(self) -> int:
        return self.header.width

    @property
    def height(self) -> int:
        return self.header.height

    def planes(self) -> tuple:
        """Return (red, green, blue) as flattened copies."""
        return tuple(
            np.ascontiguousarray(self.pixels[:, :, channel]).reshape(-1)
            for channel in range(3)
        )

    def to_bytes(self) -> bytes:
        """Raw interleaved RGB bytes, (0, 0) first."""
        return self.pixels.tobytes()

    def __repr__(self) -> str:
        return f"Frame(index={self.index}, {self.width}x{self.height})"
