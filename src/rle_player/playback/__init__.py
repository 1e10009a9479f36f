"""
Playback Module
===============

Real-time presentation of the decoded frame stream.

This module provides:
    - DecodedStreamReader: Header/payload reader for the decoded stream
    - PlaybackClock: Frame-interval pacing with one-time lag warning
    - FrameSink, OpenCVFrameSink, NullFrameSink: Display backends
    - PlaybackDriver: RUNNING/STOPPED frame loop

Example:
    from rle_player.playback import (
        DecodedStreamReader, NullFrameSink, PlaybackClock, PlaybackDriver,
    )

    driver = PlaybackDriver(
        source=DecodedStreamReader(ByteCursor(sys.stdin.buffer)),
        sink=NullFrameSink(),
        clock=PlaybackClock(target_delay_ms=40),
        grading=ColorGradingPipeline(ColorGradingParams()),
    )
    driver.start()
    result = driver.run()
"""

from rle_player.playback.source import DecodedStreamReader
from rle_player.playback.clock import PlaybackClock
from rle_player.playback.sink import FrameSink, NullFrameSink, OpenCVFrameSink
from rle_player.playback.driver import (
    PlaybackDriver,
    PlaybackMetrics,
    PlaybackResult,
    PlayerState,
)


__all__ = [
    "DecodedStreamReader",
    "PlaybackClock",
    "FrameSink",
    "NullFrameSink",
    "OpenCVFrameSink",
    "PlaybackDriver",
    "PlaybackMetrics",
    "PlaybackResult",
    "PlayerState",
]
