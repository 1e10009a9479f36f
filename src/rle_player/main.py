"""
rle-player Command Line
=======================

Entry points for the three pipeline stages.

Commands:
    rle-decode <rlefile> <prefix>
        Decode an RLE container. prefix "-" streams P6 frames to stdout,
        anything else writes <prefix>-00001, <prefix>-00002, ...

    rle-play <delayMs> [brightness contrast saturation]
        Play a decoded stream from stdin at one frame per delayMs.

    rle-encode <input> <rlefile>
        Encode a decoded stream ("-" for stdin) into an RLE container.

Exit Codes:
    0  success
    1  other playback failure
    2  usage error
    3  FormatError
    4  TruncatedPacketError
    5  DimensionError
    6  SinkError
    7  input file not found
    8  I/O failure (unwritable output, broken pipe)

Example:
    rle-decode video.rle - | rle-play 40 60 50 50
"""

import argparse
import logging
import signal
import sys
from pathlib import Path
from typing import List, Optional

from rle_player.codec.container import ContainerReader, ContainerWriter
from rle_player.config import Settings, SinkConfig, load_config, setup_logging
from rle_player.errors import FormatError, PlayerError
from rle_player.grading.pipeline import ColorGradingPipeline
from rle_player.models.grading import ColorGradingParams
from rle_player.playback.clock import PlaybackClock
from rle_player.playback.driver import PlaybackDriver
from rle_player.playback.sink import FrameSink, NullFrameSink, OpenCVFrameSink
from rle_player.playback.source import DecodedStreamReader
from rle_player.stream.cursor import ByteCursor
from rle_player.stream.writer import FrameFileWriter, FrameStreamWriter


logger = logging.getLogger(__name__)


EXIT_OK = 0
EXIT_NO_INPUT = 7
EXIT_IO_ERROR = 8

STDIO_NAME = "-"


# =============================================================================
# Shared Setup
# =============================================================================

def _add_common_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--config", default=None, help="Path to config.yaml")
    parser.add_argument(
        "--log-level",
        default=None,
        help="Override logging.level (DEBUG, INFO, WARNING, ERROR)",
    )


def _init_settings(args: argparse.Namespace) -> Settings:
    settings = load_config(args.config)
    if args.log_level:
        settings.logging.level = args.log_level
    setup_logging(settings)
    return settings


def _report(error: PlayerError) -> int:
    logger.error(f"{type(error).__name__}: {error}")
    return error.exit_code


def _report_io(error: OSError) -> int:
    logger.error(f"I/O error: {error}")
    return EXIT_IO_ERROR


# =============================================================================
# Frame Sink Factory
# =============================================================================

def create_frame_sink(config: SinkConfig, headless: bool = False) -> FrameSink:
    """
    Create frame sink based on config.

    Fails fast on an unknown backend name.
    """
    backend = "null" if headless else config.backend

    if backend == "opencv":
        logger.info("Using OpenCVFrameSink")
        return OpenCVFrameSink(window_title=config.window_title)

    elif backend == "null":
        logger.info("Using NullFrameSink")
        return NullFrameSink()

    else:
        raise ValueError(f"Unknown sink backend: {backend}")


# =============================================================================
# rle-decode
# =============================================================================

def decode_main(argv: Optional[List[str]] = None) -> int:
    """Decode an RLE container to a P6 stream or per-frame files."""
    parser = argparse.ArgumentParser(
        prog="rle-decode",
        description="Decode an RLE video container into P6 frames",
    )
    parser.add_argument("rlefile", help="RLE container to decode")
    parser.add_argument(
        "prefix",
        help="Output file prefix, or '-' to stream frames to stdout",
    )
    _add_common_options(parser)
    args = parser.parse_args(argv)

    settings = _init_settings(args)

    rle_path = Path(args.rlefile)
    if not rle_path.is_file():
        logger.error(f"RLE file {args.rlefile} does not exist")
        return EXIT_NO_INPUT

    if args.prefix == STDIO_NAME:
        writer = FrameStreamWriter(
            sys.stdout.buffer,
            frame_separator=settings.decode.emit_frame_separator,
        )
    else:
        writer = FrameFileWriter(args.prefix, suffix_digits=settings.decode.suffix_digits)

    try:
        try:
            with open(rle_path, "rb") as f:
                reader = ContainerReader(ByteCursor(f, chunk_size=settings.decode.chunk_size))
                reader.read_header()
                for frame in reader.frames():
                    writer.write(frame)
        finally:
            writer.close()
    except PlayerError as e:
        return _report(e)
    except OSError as e:
        return _report_io(e)

    return EXIT_OK


# =============================================================================
# rle-encode
# =============================================================================

def encode_main(argv: Optional[List[str]] = None) -> int:
    """Encode a decoded P6 stream into an RLE container."""
    parser = argparse.ArgumentParser(
        prog="rle-encode",
        description="Encode a stream of P6 frames into an RLE video container",
    )
    parser.add_argument("input", help="Decoded stream to read, or '-' for stdin")
    parser.add_argument("rlefile", help="RLE container to write")
    _add_common_options(parser)
    args = parser.parse_args(argv)

    settings = _init_settings(args)

    if args.input == STDIO_NAME:
        source = sys.stdin.buffer
    else:
        input_path = Path(args.input)
        if not input_path.is_file():
            logger.error(f"Input file {args.input} does not exist")
            return EXIT_NO_INPUT
        try:
            source = open(input_path, "rb")
        except OSError as e:
            return _report_io(e)

    try:
        reader = DecodedStreamReader(ByteCursor(source, chunk_size=settings.decode.chunk_size))
        frames = reader.frames()
        first = next(frames, None)
        if first is None:
            raise FormatError("Input stream contains no frames")

        with open(args.rlefile, "wb") as out:
            with ContainerWriter(out, first.header) as writer:
                writer.write(first)
                for frame in frames:
                    writer.write(frame)
    except PlayerError as e:
        return _report(e)
    except OSError as e:
        return _report_io(e)
    finally:
        if source is not sys.stdin.buffer:
            source.close()

    return EXIT_OK


# =============================================================================
# rle-play
# =============================================================================

def play_main(argv: Optional[List[str]] = None) -> int:
    """Play a decoded stream from stdin."""
    parser = argparse.ArgumentParser(
        prog="rle-play",
        description="Play a stream of P6 frames from stdin at a fixed frame interval",
    )
    parser.add_argument("delay_ms", type=int, help="Milliseconds per frame")
    parser.add_argument(
        "grading",
        type=int,
        nargs="*",
        metavar="brightness contrast saturation",
        help="Optional percentages in 0-100 (50 is neutral)",
    )
    parser.add_argument("--headless", action="store_true", help="Decode without a window")
    parser.add_argument(
        "--settle-ms",
        type=int,
        default=None,
        help="Override playback.settle_delay_ms",
    )
    _add_common_options(parser)
    args = parser.parse_args(argv)

    if len(args.grading) not in (0, 3):
        parser.error(
            f"expecting one or four inputs, {1 + len(args.grading)} provided"
        )
    if args.delay_ms < 0:
        parser.error("delay must be >= 0")

    settings = _init_settings(args)

    if args.grading:
        brightness, contrast, saturation = args.grading
        params = ColorGradingParams(
            brightness=brightness,
            contrast=contrast,
            saturation=saturation,
        )
    else:
        params = settings.grading

    settle_ms = settings.playback.settle_delay_ms if args.settle_ms is None else args.settle_ms

    driver = PlaybackDriver(
        source=DecodedStreamReader(
            ByteCursor(sys.stdin.buffer, chunk_size=settings.decode.chunk_size)
        ),
        sink=create_frame_sink(settings.sink, headless=args.headless),
        clock=PlaybackClock(
            target_delay_ms=args.delay_ms,
            lag_warning_threshold=settings.playback.lag_warning_threshold,
        ),
        grading=ColorGradingPipeline(params),
        settle_delay_ms=settle_ms,
    )

    def _handle_stop(signum, frame):
        logger.info(f"Received signal {signum}, stopping playback...")
        driver.stop()

    previous = {
        sig: signal.signal(sig, _handle_stop)
        for sig in (signal.SIGINT, signal.SIGTERM)
    }
    try:
        driver.start()
        result = driver.run()
    except PlayerError as e:
        return _report(e)
    except OSError as e:
        return _report_io(e)
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)

    if result.error is not None:
        return _report(result.error)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(play_main())
