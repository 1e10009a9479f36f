"""
Codec Module
============

Run-length coding of colour planes and the frame container built on it.

Components:
    - decode_plane / encode_plane: PackBits-style plane codec
    - assemble_frame / read_interleaved_frame: Frame assembly
    - ContainerReader / ContainerWriter: 'K'...'E' framed RLE container
"""

from rle_player.codec.rle import (
    MAX_LITERAL_RUN,
    MAX_REPEAT_RUN,
    decode_plane,
    encode_plane,
)
from rle_player.codec.assembler import assemble_frame, read_interleaved_frame
from rle_player.codec.container import ContainerReader, ContainerWriter


__all__ = [
    "MAX_LITERAL_RUN",
    "MAX_REPEAT_RUN",
    "decode_plane",
    "encode_plane",
    "assemble_frame",
    "read_interleaved_frame",
    "ContainerReader",
    "ContainerWriter",
]
