"""
Header Lexer
============

Pull-based tokenizer for the ``P6`` text header that precedes binary data.

Header Grammar:
    header    := sep* [frame-sep sep*] "P6" sep+ width sep+ height sep+ "255" one-sep
    sep       := " " | "\\t" | "\\n" | comment
    comment   := "#" <any bytes> "\\n"
    frame-sep := FF FF FF FF            (optional, decoded streams only)

Boundary Rule:
    After the colour-depth token EXACTLY one separator is consumed: a single
    whitespace byte, or one comment through its newline. The next byte
    belongs to the payload, which is binary and is never scanned here.

End of Stream:
    - Nothing but separators left before the header starts -> EndOfStream
      (clean end of video, not an error)
    - Stream ends after the header has started -> FormatError
"""

import logging
from typing import Optional

from rle_player.errors import DimensionError, EndOfStream, FormatError
from rle_player.models.header import MAGIC, MAX_VALUE, Header
from rle_player.stream.cursor import ByteCursor


logger = logging.getLogger(__name__)


WHITESPACE = frozenset(b" \t\n")
COMMENT = ord("#")
NEWLINE = ord("\n")
FRAME_SEPARATOR = b"\xff\xff\xff\xff"

# Enough for any 32-bit decimal dimension
MAX_TOKEN_LENGTH = 10
MAX_DIMENSION = 0xFFFFFFFF


def skip_comment(cursor: ByteCursor) -> None:
    """
    Consume a comment through its terminating newline.

    The cursor must be positioned on the ``#``. A comment cut off by the
    end of the stream is consumed up to the end.
    """
    while True:
        value = cursor.read_byte()
        if value is None or value == NEWLINE:
            return


class HeaderLexer:
    """
    Token reader over a ByteCursor.

    skip_whitespace_and_comments() is the only place separators are skipped,
    and it is invoked only between header tokens.

    Attributes:
        cursor: Shared byte cursor
        max_token_length: Longest token accepted before FormatError
    """

    def __init__(self, cursor: ByteCursor, max_token_length: int = MAX_TOKEN_LENGTH) -> None:
        self.cursor = cursor
        self.max_token_length = max_token_length

    def skip_whitespace_and_comments(self) -> None:
        """Consume any run of whitespace and comment lines."""
        while True:
            value = self.cursor.peek()
            if value is None:
                return
            if value == COMMENT:
                skip_comment(self.cursor)
            elif value in WHITESPACE:
                self.cursor.read_byte()
            else:
                return

    def read_token(self) -> bytes:
        """
        Read bytes up to the next separator or end of stream.

        Raises:
            FormatError: If the token is empty or exceeds max_token_length
        """
        token = bytearray()
        while True:
            value = self.cursor.peek()
            if value is None or value in WHITESPACE or value == COMMENT:
                break
            if len(token) >= self.max_token_length:
                raise FormatError(
                    f"Header token longer than {self.max_token_length} bytes "
                    f"at offset {self.cursor.offset}"
                )
            token.append(value)
            self.cursor.read_byte()

        if not token:
            raise FormatError(f"Expected header token at offset {self.cursor.offset}")
        return bytes(token)

    def read_separator(self) -> None:
        """
        Consume exactly one separator after the final header token.

        Raises:
            FormatError: If the stream ends before the separator
        """
        value = self.cursor.peek()
        if value is None:
            raise FormatError("Header truncated before pixel data")
        if value == COMMENT:
            skip_comment(self.cursor)
        else:
            # read_token only stops on whitespace, comment or end of stream
            self.cursor.read_byte()

    def next_token(self, name: str) -> bytes:
        """Skip separators, then read a token that must be present."""
        self.skip_whitespace_and_comments()
        if self.cursor.at_eof():
            raise FormatError(f"Header truncated before {name}")
        return self.read_token()

    def skip_frame_separator(self) -> bool:
        """
        Consume an optional FF FF FF FF frame separator.

        Returns:
            True if a separator was consumed.
        """
        if self.cursor.peek() != FRAME_SEPARATOR[0]:
            return False

        marker = self.cursor.read(len(FRAME_SEPARATOR))
        if marker != FRAME_SEPARATOR:
            raise FormatError(
                f"Malformed frame separator {marker.hex()} "
                f"at offset {self.cursor.offset - len(marker)}"
            )
        return True


def parse_dimension(token: bytes, name: str) -> int:
    """
    Parse a width/height token.

    Raises:
        DimensionError: If the token is not a positive decimal integer
    """
    if not token.isdigit():
        raise DimensionError(f"Invalid {name} {token!r}: not a decimal integer")

    value = int(token)
    if value <= 0 or value > MAX_DIMENSION:
        raise DimensionError(f"Invalid {name} {value}: must be in 1..{MAX_DIMENSION}")
    return value


def read_header(
    cursor: ByteCursor,
    allow_frame_separator: bool = True,
    max_token_length: Optional[int] = None,
) -> Header:
    """
    Parse one header from the cursor.

    Args:
        cursor: Cursor positioned at (or before, by separators) a header
        allow_frame_separator: Accept and discard a leading FF FF FF FF
        max_token_length: Override the token length bound

    Returns:
        Parsed Header. The cursor is left on the first payload byte.

    Raises:
        EndOfStream: If the source is exhausted before the header starts
        FormatError: On a bad marker or colour depth, or truncation
        DimensionError: On unparsable or non-positive dimensions
    """
    lexer = HeaderLexer(cursor, max_token_length or MAX_TOKEN_LENGTH)

    lexer.skip_whitespace_and_comments()
    if allow_frame_separator and lexer.skip_frame_separator():
        lexer.skip_whitespace_and_comments()
    if cursor.at_eof():
        raise EndOfStream(f"Source exhausted at offset {cursor.offset}")

    start = cursor.offset
    marker = lexer.read_token()
    if marker != MAGIC:
        raise FormatError(
            f"Incorrect input format {marker!r} at offset {start}, expected {MAGIC!r}"
        )

    width = parse_dimension(lexer.next_token("width"), "width")
    height = parse_dimension(lexer.next_token("height"), "height")

    depth = lexer.next_token("colour depth")
    if depth != str(MAX_VALUE).encode("ascii"):
        raise FormatError(f"Incorrect colour format {depth!r}, expected b'{MAX_VALUE}'")

    lexer.read_separator()

    header = Header(width=width, height=height)
    logger.debug(f"Parsed {header} at offset {start}")
    return header
