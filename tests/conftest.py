"""
Test Configuration
==================

Pytest fixtures and test configuration for rle-player.
"""

import io

import numpy as np
import pytest

from rle_player.codec.container import ContainerWriter
from rle_player.models.frame import Frame
from rle_player.models.header import Header
from rle_player.stream.writer import write_frame


class FakeClock:
    """Deterministic time source for PlaybackClock (seconds)."""

    def __init__(self) -> None:
        self.now: float = 0.0
        self.sleeps: list = []

    def time(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds

    def advance_ms(self, ms: float) -> None:
        self.now += ms / 1000.0


class RecordingSink:
    """
    Frame sink that keeps a copy of everything presented.

    Presenting advances the fake clock by present_ms to simulate work.
    """

    def __init__(self, clock: FakeClock, present_ms: float = 0.0) -> None:
        self.clock = clock
        self.present_ms = present_ms
        self.quit_requested: bool = False
        self.opened_with = None
        self.closed: bool = False
        self.frames: list = []
        self.present_times: list = []
        self.on_present = None

    def open(self, width: int, height: int) -> None:
        self.opened_with = (width, height)

    def present(self, pixels: np.ndarray, width: int, height: int) -> None:
        self.present_times.append(self.clock.now)
        self.frames.append(pixels.copy())
        self.clock.advance_ms(self.present_ms)
        if self.on_present is not None:
            self.on_present(len(self.frames))

    def close(self) -> None:
        self.closed = True


def _solid_frame(width: int, height: int, rgb, index: int = 1) -> Frame:
    pixels = np.empty((height, width, 3), dtype=np.uint8)
    pixels[...] = rgb
    return Frame(index=index, header=Header(width, height), pixels=pixels)


def _decoded_stream(frames, frame_separator: bool = False) -> bytes:
    out = io.BytesIO()
    for frame in frames:
        write_frame(out, frame, frame_separator)
    return out.getvalue()


def _container(frames) -> bytes:
    out = io.BytesIO()
    with ContainerWriter(out, frames[0].header) as writer:
        for frame in frames:
            writer.write(frame)
    return out.getvalue()


@pytest.fixture
def fake_clock():
    """Provide a FakeClock starting at t=0."""
    return FakeClock()


@pytest.fixture
def recording_sink(fake_clock):
    """Provide a RecordingSink bound to the fake clock."""
    return RecordingSink(fake_clock)


@pytest.fixture
def solid_frame():
    """Provide a builder for single-colour frames."""
    return _solid_frame


@pytest.fixture
def decoded_stream():
    """Provide a builder for decoded P6 streams."""
    return _decoded_stream


@pytest.fixture
def container_bytes():
    """Provide a builder for RLE containers."""
    return _container


@pytest.fixture
def red_blue_container():
    """
    The 2x1 reference container: a solid red frame then a solid blue frame,
    every plane written as a single repeat run.
    """
    header = b"P6\n2 1\n255\n"
    red = b"K" + bytes([0xFF, 255]) + bytes([0xFF, 0]) + bytes([0xFF, 0])
    blue = b"K" + bytes([0xFF, 0]) + bytes([0xFF, 0]) + bytes([0xFF, 255])
    return header + red + blue + b"E"
