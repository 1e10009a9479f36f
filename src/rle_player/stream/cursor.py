"""
Byte Cursor
===========

Pull-based buffered reader over a binary stream.

The header lexer, the RLE decoder and the raw frame reader all share one
cursor per source, so the exact byte where one stage stops is the exact
byte where the next one starts.

Design Rules:
    - Never reads ahead further than one refill chunk
    - peek() gives one byte of lookahead without consuming it
    - offset counts consumed bytes, for error messages only
    - Returns short reads instead of raising; callers decide what a short
      read means (clean end vs truncation)
"""

import io
from typing import BinaryIO, Optional


DEFAULT_CHUNK_SIZE = 64 * 1024


class ByteCursor:
    """
    Buffered byte reader with single-byte lookahead.

    Example:
        cursor = ByteCursor(open("video.rle", "rb"))
        first = cursor.read_byte()
        payload = cursor.read(16)
    """

    __slots__ = ("_source", "_chunk_size", "_buffer", "_pos", "_offset", "_eof")

    def __init__(self, source: BinaryIO, chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        """
        Initialize cursor.

        Args:
            source: Binary file-like object with a read(n) method
            chunk_size: Bytes requested from the source per refill. Must be >= 1.
        """
        if chunk_size < 1:
            raise ValueError("chunk_size must be >= 1")

        self._source = source
        self._chunk_size = chunk_size
        self._buffer = b""
        self._pos = 0
        self._offset = 0
        self._eof = False

    @classmethod
    def from_bytes(cls, data: bytes, chunk_size: int = DEFAULT_CHUNK_SIZE) -> "ByteCursor":
        """Build a cursor over an in-memory buffer."""
        return cls(io.BytesIO(data), chunk_size=chunk_size)

    @property
    def offset(self) -> int:
        """Total bytes consumed so far."""
        return self._offset

    def _fill(self) -> bool:
        """Refill the buffer if drained. Returns False at end of stream."""
        if self._pos < len(self._buffer):
            return True
        if self._eof:
            return False

        chunk = self._source.read(self._chunk_size)
        if not chunk:
            self._eof = True
            return False

        self._buffer = chunk
        self._pos = 0
        return True

    def at_eof(self) -> bool:
        """Whether no bytes remain."""
        return not self._fill()

    def peek(self) -> Optional[int]:
        """Return the next byte without consuming it, or None at end."""
        if not self._fill():
            return None
        return self._buffer[self._pos]

    def read_byte(self) -> Optional[int]:
        """Consume and return one byte, or None at end."""
        if not self._fill():
            return None
        value = self._buffer[self._pos]
        self._pos += 1
        self._offset += 1
        return value

    def read(self, n: int) -> bytes:
        """
        Consume up to n bytes.

        Returns fewer than n bytes only if the stream ended.
        """
        if n <= 0:
            return b""

        parts = []
        remaining = n
        while remaining > 0 and self._fill():
            available = len(self._buffer) - self._pos
            take = min(available, remaining)
            parts.append(self._buffer[self._pos:self._pos + take])
            self._pos += take
            self._offset += take
            remaining -= take

        if len(parts) == 1:
            return parts[0]
        return b"".join(parts)

    def __repr__(self) -> str:
        return f"ByteCursor(offset={self._offset}, eof={self._eof})"
