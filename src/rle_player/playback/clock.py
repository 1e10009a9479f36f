"""
Playback Clock
==============

Wall-clock pacing for the playback loop.

Each cycle is timed from start_cycle() to finish_cycle(). If the work took
less than the target delay, the clock sleeps for the remainder; otherwise
it counts a lag event and warns ONCE, when the count first reaches the
warning threshold.

The time and sleep functions are injectable so pacing can be tested
without real waiting.
"""

import logging
import time
from typing import Callable, Optional


logger = logging.getLogger(__name__)


class PlaybackClock:
    """
    Frame-interval pacer.

    Attributes:
        target_delay_ms: Desired duration of one cycle
        lag_warning_threshold: Lag events before the one-time warning
        lag_events: Cycles whose work exceeded target_delay_ms
        cycle_started_at: Timestamp (seconds) of the current cycle start
    """

    def __init__(
        self,
        target_delay_ms: float,
        lag_warning_threshold: int = 2,
        time_fn: Callable[[], float] = time.monotonic,
        sleep_fn: Callable[[float], None] = time.sleep,
    ) -> None:
        """
        Initialize clock.

        Args:
            target_delay_ms: Frame interval in milliseconds (>= 0)
            lag_warning_threshold: Lag count that triggers the warning (>= 1)
            time_fn: Monotonic clock in seconds
            sleep_fn: Blocking sleep taking seconds
        """
        if target_delay_ms < 0:
            raise ValueError("target_delay_ms must be >= 0")
        if lag_warning_threshold < 1:
            raise ValueError("lag_warning_threshold must be >= 1")

        self.target_delay_ms = target_delay_ms
        self.lag_warning_threshold = lag_warning_threshold
        self._time = time_fn
        self._sleep = sleep_fn

        self.lag_events: int = 0
        self.cycle_started_at: Optional[float] = None
        self._warned: bool = False

    @property
    def warned(self) -> bool:
        """Whether the falling-behind warning has been emitted."""
        return self._warned

    def start_cycle(self) -> float:
        """Record the start of a decode+present cycle."""
        self.cycle_started_at = self._time()
        return self.cycle_started_at

    def elapsed_ms(self) -> float:
        """Milliseconds since start_cycle()."""
        if self.cycle_started_at is None:
            return 0.0
        return (self._time() - self.cycle_started_at) * 1000.0

    def finish_cycle(self) -> float:
        """
        Close the current cycle: sleep out the remainder or record lag.

        Returns:
            Elapsed work time in milliseconds (excluding the pacing sleep)
        """
        elapsed = self.elapsed_ms()

        if elapsed > self.target_delay_ms:
            self.lag_events += 1
            if self.lag_events == self.lag_warning_threshold and not self._warned:
                self._warned = True
                logger.warning(
                    f"Can't keep up with the demanded frame rate "
                    f"({self.target_delay_ms:.0f} ms/frame, last cycle took "
                    f"{elapsed:.1f} ms). Video will play with some unwanted delay."
                )
        else:
            self._sleep((self.target_delay_ms - elapsed) / 1000.0)

        return elapsed

    def hold(self, delay_ms: float) -> None:
        """Block for a fixed delay, outside any cycle."""
        if delay_ms > 0:
            self._sleep(delay_ms / 1000.0)
