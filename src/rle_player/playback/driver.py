"""
Playback Driver
===============

Owns the frame loop: decode, grade, present, pace.

States:
    RUNNING  entered after the first header has been parsed by start()
    STOPPED  terminal; reached on clean end of stream, a fatal error,
             a stop request or a quit from the sink

Cycle (RUNNING):
    1. clock.start_cycle()
    2. parse header (every cycle except the first) and read the frame
    3. grade the frame in place
    4. present it to the sink
    5. clock.finish_cycle(): sleep the remainder or count a lag event

Stop Handling:
    - EndOfStream at a header boundary is a clean stop
    - Any PlayerError is recorded in the result and stops playback
    - Any other exception propagates, but the sink is still closed
    - On STOPPED the last frame stays visible for settle_delay_ms, then
      the sink is closed
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from rle_player.errors import DimensionError, EndOfStream, PlayerError
from rle_player.grading.pipeline import ColorGradingPipeline
from rle_player.models.header import Header
from rle_player.playback.clock import PlaybackClock
from rle_player.playback.sink import FrameSink
from rle_player.playback.source import DecodedStreamReader


logger = logging.getLogger(__name__)


class PlayerState(str, Enum):
    """Playback driver states."""

    RUNNING = "RUNNING"
    STOPPED = "STOPPED"


class PlaybackMetrics:
    """Metrics for PlaybackDriver observability."""

    __slots__ = (
        "frames_presented",
        "lag_events",
        "total_cycle_ms",
        "last_cycle_ms",
        "max_cycle_ms",
    )

    def __init__(self) -> None:
        self.frames_presented: int = 0
        self.lag_events: int = 0
        self.total_cycle_ms: float = 0.0
        self.last_cycle_ms: float = 0.0
        self.max_cycle_ms: float = 0.0

    def record_cycle(self, elapsed_ms: float, lag_events: int) -> None:
        self.frames_presented += 1
        self.lag_events = lag_events
        self.total_cycle_ms += elapsed_ms
        self.last_cycle_ms = elapsed_ms
        self.max_cycle_ms = max(self.max_cycle_ms, elapsed_ms)

    @property
    def mean_cycle_ms(self) -> float:
        if self.frames_presented == 0:
            return 0.0
        return self.total_cycle_ms / self.frames_presented

    def to_dict(self) -> dict:
        """Export metrics as dict."""
        return {
            "frames_presented": self.frames_presented,
            "lag_events": self.lag_events,
            "mean_cycle_ms": round(self.mean_cycle_ms, 2),
            "last_cycle_ms": round(self.last_cycle_ms, 2),
            "max_cycle_ms": round(self.max_cycle_ms, 2),
        }


@dataclass(frozen=True, slots=True)
class PlaybackResult:
    """
    Outcome of a playback run.

    Attributes:
        state: Final driver state (always STOPPED after run())
        frames_presented: Frames handed to the sink
        lag_events: Cycles that overran the target delay
        error: The failure that stopped playback, or None for a clean stop
    """

    state: PlayerState
    frames_presented: int
    lag_events: int
    error: Optional[PlayerError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class PlaybackDriver:
    """
    Sequential decode/grade/present loop with wall-clock pacing.

    Example:
        driver = PlaybackDriver(source, sink, clock, grading)
        driver.start()
        result = driver.run()
    """

    def __init__(
        self,
        source: DecodedStreamReader,
        sink: FrameSink,
        clock: PlaybackClock,
        grading: ColorGradingPipeline,
        settle_delay_ms: float = 1000.0,
    ) -> None:
        """
        Initialize playback driver.

        Args:
            source: Decoded stream positioned at the first header
            sink: Display backend
            clock: Frame pacer
            grading: Colour grading applied to every frame
            settle_delay_ms: How long the final frame stays up after stopping
        """
        self.source = source
        self.sink = sink
        self.clock = clock
        self.grading = grading
        self.settle_delay_ms = settle_delay_ms

        self.state: Optional[PlayerState] = None
        self.header: Optional[Header] = None
        self.metrics = PlaybackMetrics()

        self._stop_requested: bool = False
        self._sink_open: bool = False

    def stop(self) -> None:
        """Ask the loop to stop before the next cycle. Safe from signal handlers."""
        self._stop_requested = True

    def start(self) -> Optional[Header]:
        """
        Parse the first header and open the sink.

        Returns:
            The first header, or None if the input held no frames (the
            driver is then already STOPPED)

        Raises:
            FormatError, DimensionError: On a malformed first header
            SinkError: If the sink cannot be opened
        """
        try:
            header = self.source.read_header()
        except EndOfStream:
            logger.warning("Input stream contains no frames")
            self.state = PlayerState.STOPPED
            return None

        self.sink.open(header.width, header.height)
        self._sink_open = True

        self.header = header
        self.state = PlayerState.RUNNING
        logger.info(
            f"Playback started: {header.width}x{header.height}, "
            f"{self.clock.target_delay_ms:.0f} ms/frame"
        )
        return header

    def run(self) -> PlaybackResult:
        """
        Run cycles until the driver stops.

        Returns:
            PlaybackResult describing how playback ended
        """
        if self.state is None:
            self.start()

        error: Optional[PlayerError] = None
        first_cycle = True

        try:
            while self.state == PlayerState.RUNNING:
                if self._stop_requested or self.sink.quit_requested:
                    logger.info("Stop requested, ending playback")
                    break

                self.clock.start_cycle()
                try:
                    if not first_cycle:
                        self._next_header()
                    frame = self.source.read_frame(self.header)
                    self.grading.apply(frame)
                    self.sink.present(frame.pixels, frame.width, frame.height)
                except EndOfStream:
                    logger.info("End of stream reached")
                    break
                except PlayerError as e:
                    error = e
                    logger.error(f"Playback aborted after {self.metrics.frames_presented} frame(s): {e}")
                    break

                first_cycle = False
                elapsed = self.clock.finish_cycle()
                self.metrics.record_cycle(elapsed, self.clock.lag_events)
                logger.debug(f"Presented {frame} in {elapsed:.1f} ms")
        finally:
            self.state = PlayerState.STOPPED
            self._shutdown()

        logger.info(f"Playback stopped: {self.metrics.to_dict()}")
        return PlaybackResult(
            state=self.state,
            frames_presented=self.metrics.frames_presented,
            lag_events=self.clock.lag_events,
            error=error,
        )

    def _next_header(self) -> None:
        header = self.source.read_header()
        if (header.width, header.height) != (self.header.width, self.header.height):
            raise DimensionError(
                f"Frame size changed mid-stream from "
                f"{self.header.width}x{self.header.height} to {header.width}x{header.height}"
            )
        self.header = header

    def _shutdown(self) -> None:
        if not self._sink_open:
            return
        if self.metrics.frames_presented > 0:
            self.clock.hold(self.settle_delay_ms)
        self.sink.close()
        self._sink_open = False
