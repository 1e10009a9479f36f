"""
Frame Sinks
===========

Display backends that receive graded frames.

All implementations provide open/present/close plus a quit_requested flag
that the playback driver polls between cycles. A sink must not keep a
reference to the buffer passed to present(); the driver reuses or drops it
on the next cycle.

Backends:
    - OpenCVFrameSink: cv2 window (q or ESC requests a stop)
    - NullFrameSink: discards frames, for headless runs
"""

import logging
from typing import Protocol

import cv2
import numpy as np

from rle_player.errors import SinkError


logger = logging.getLogger(__name__)


QUIT_KEYS = (ord("q"), 27)


class FrameSink(Protocol):
    """
    Protocol for frame presentation backends.

    Attributes:
        quit_requested: Set by the sink when the viewer asks to stop
    """

    quit_requested: bool

    def open(self, width: int, height: int) -> None:
        """Create the output surface for frames of the given size."""
        ...

    def present(self, pixels: np.ndarray, width: int, height: int) -> None:
        """Display one (height, width, 3) RGB uint8 frame."""
        ...

    def close(self) -> None:
        """Release the output surface."""
        ...


class OpenCVFrameSink:
    """
    Presents frames in an OpenCV HighGUI window.

    The window is filled white on open, matching what a viewer sees before
    the first frame arrives.
    """

    def __init__(self, window_title: str = "rle player video") -> None:
        self.window_title = window_title
        self.quit_requested: bool = False
        self._open: bool = False
        self.frames_presented: int = 0

    def open(self, width: int, height: int) -> None:
        try:
            cv2.namedWindow(self.window_title, cv2.WINDOW_AUTOSIZE)
            blank = np.full((height, width, 3), 255, dtype=np.uint8)
            cv2.imshow(self.window_title, blank)
            cv2.waitKey(1)
        except cv2.error as e:
            raise SinkError(f"Window could not be created: {e}")

        self._open = True
        logger.info(f"OpenCVFrameSink opened: {width}x{height} '{self.window_title}'")

    def present(self, pixels: np.ndarray, width: int, height: int) -> None:
        if not self._open:
            raise SinkError("present() called before open()")
        if pixels.shape != (height, width, 3):
            raise SinkError(f"Frame shape {pixels.shape} does not match {width}x{height}")

        try:
            # cvtColor copies, so the caller keeps sole ownership of pixels
            bgr = cv2.cvtColor(pixels, cv2.COLOR_RGB2BGR)
            cv2.imshow(self.window_title, bgr)
            key = cv2.waitKey(1) & 0xFF
        except cv2.error as e:
            raise SinkError(f"Failed to present frame: {e}")

        self.frames_presented += 1
        if key in QUIT_KEYS:
            logger.info("Quit key pressed")
            self.quit_requested = True

    def close(self) -> None:
        if not self._open:
            return
        try:
            cv2.destroyWindow(self.window_title)
            cv2.waitKey(1)
        except cv2.error as e:
            logger.warning(f"Error destroying window: {e}")
        self._open = False
        logger.info(f"OpenCVFrameSink closed after {self.frames_presented} frame(s)")


class NullFrameSink:
    """Accepts and discards frames."""

    def __init__(self) -> None:
        self.quit_requested: bool = False
        self.frames_presented: int = 0

    def open(self, width: int, height: int) -> None:
        logger.info(f"NullFrameSink opened: {width}x{height}")

    def present(self, pixels: np.ndarray, width: int, height: int) -> None:
        self.frames_presented += 1

    def close(self) -> None:
        logger.info(f"NullFrameSink closed after {self.frames_presented} frame(s)")
