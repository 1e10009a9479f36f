"""
Error Types
===========

Typed failures raised by the decode and playback pipeline.

Every decode step raises one of these instead of terminating the process.
The playback driver and the CLI entry points decide what a failure means
for the run as a whole.

Hierarchy:
    PlayerError
        FormatError
            PacketOverrunError
        TruncatedPacketError
        DimensionError
        SinkError

EndOfStream is not a PlayerError. It signals that the source ran out exactly
at a frame boundary, the clean end of a video.
"""


class EndOfStream(Exception):
    """Raised when the source is exhausted before a new header starts."""
    pass


class PlayerError(Exception):
    """
    Base class for fatal decode/playback failures.

    Attributes:
        exit_code: Process exit status the CLI uses for this kind of failure
    """

    exit_code: int = 1


class FormatError(PlayerError):
    """Raised when the header or container framing is malformed."""

    exit_code = 3


class PacketOverrunError(FormatError):
    """Raised when an RLE literal run declares more samples than the plane has left."""
    pass


class TruncatedPacketError(PlayerError):
    """Raised when the stream ends inside an RLE packet or pixel payload."""

    exit_code = 4


class DimensionError(PlayerError):
    """Raised for unparsable or non-positive frame dimensions."""

    exit_code = 5


class SinkError(PlayerError):
    """Raised when the frame sink cannot be opened or cannot present."""

    exit_code = 6
