"""
rle-player
==========

Decoder and real-time player for a run-length-encoded RGB video container.

Pipeline:
    RLE container -> rle-decode -> P6 frame stream -> rle-play -> window

Components:
    - stream: Byte cursor, P6 header lexer, decoded-stream writers
    - codec: PackBits-style plane codec, frame assembly, container framing
    - grading: Brightness/contrast/saturation pipeline
    - playback: Paced RUNNING/STOPPED frame loop and display sinks

Example:
    from rle_player.codec import ContainerReader
    from rle_player.stream import ByteCursor

    with open("video.rle", "rb") as f:
        reader = ContainerReader(ByteCursor(f))
        reader.read_header()
        for frame in reader.frames():
            print(frame)
"""

__version__ = "0.1.0"

__all__ = [
    "__version__",
]
