"""Byte-level tokenizer for VCD input.

The tokenizer reads from a ``ByteSource`` one byte at a time and produces
three token shapes:

- bounded tokens, collected into a caller-supplied ``TokenBuffer`` of fixed
  capacity (``read_token``);
- owned text tokens of any length (``read_token_string``);
- raw runs terminated by the literal ``$end`` (``read_terminated``), used for
  free text such as ``$comment`` bodies.

Nothing is ever pushed back: the whitespace byte that ends a token is
consumed with it.
"""

from typing import BinaryIO, Optional, Union

from .config import PARSER
from .errors import ParseErrorKind, VCDIOError, VCDParseError

WHITESPACE = frozenset(b" \t\r\n")
END_KEYWORD = b"$end"

Source = Union[BinaryIO, bytes, bytearray, memoryview]


class ByteSource:
    """Sequential bytes from a binary stream or an in-memory buffer.

    Streams are read in chunks of ``chunk_size`` bytes. The stream is never
    closed here; it belongs to the caller.
    """

    def __init__(self, source: Source, chunk_size: int = PARSER.READ_CHUNK_SIZE) -> None:
        self._chunk_size = chunk_size
        self._pos = 0
        if isinstance(source, (bytes, bytearray, memoryview)):
            self._reader: Optional[BinaryIO] = None
            self._chunk = bytes(source)
        else:
            if not hasattr(source, "read"):
                raise TypeError(f"Expected a binary stream or bytes, got {type(source).__name__}")
            self._reader = source
            self._chunk = b""

    def next_byte(self) -> Optional[int]:
        """Return the next byte, or None at end of input."""
        if self._pos >= len(self._chunk):
            if not self._fill():
                return None
        b = self._chunk[self._pos]
        self._pos += 1
        return b

    def _fill(self) -> bool:
        if self._reader is None:
            return False
        try:
            chunk = self._reader.read(self._chunk_size)
        except OSError as e:
            raise VCDIOError(e) from e
        if isinstance(chunk, str):
            raise TypeError("VCD source must be opened in binary mode")
        if not chunk:
            self._reader = None
            return False
        self._chunk = bytes(chunk)
        self._pos = 0
        return True


class TokenBuffer:
    """Fixed-capacity byte buffer holding one bounded token."""

    __slots__ = ("_data", "_length")

    def __init__(self, capacity: int) -> None:
        if capacity <= 0:
            raise ValueError(f"Token buffer capacity must be positive, got {capacity}")
        self._data = bytearray(capacity)
        self._length = 0

    @property
    def capacity(self) -> int:
        return len(self._data)

    def clear(self) -> None:
        self._length = 0

    def append(self, b: int) -> None:
        if self._length >= len(self._data):
            raise VCDParseError(ParseErrorKind.TOKEN_TOO_LONG, "Token too long")
        self._data[self._length] = b
        self._length += 1

    def value(self) -> bytes:
        return bytes(self._data[:self._length])

    def __len__(self) -> int:
        return self._length


class Tokenizer:
    """Whitespace-delimited tokens over a ``ByteSource``."""

    def __init__(self, source: ByteSource) -> None:
        self._source = source

    def read_byte(self) -> int:
        """Next byte; end of input here is a parse error."""
        b = self._source.next_byte()
        if b is None:
            raise VCDParseError(ParseErrorKind.UNEXPECTED_EOF, "Unexpected EOF")
        return b

    def skip_whitespace(self) -> Optional[int]:
        """Consume whitespace and return the first other byte, or None at end of input."""
        while True:
            b = self._source.next_byte()
            if b is None or b not in WHITESPACE:
                return b

    def read_token(self, buffer: TokenBuffer) -> bytes:
        buffer.clear()
        b = self.skip_whitespace()
        if b is None:
            raise VCDParseError(ParseErrorKind.UNEXPECTED_EOF, "Unexpected EOF")
        while b is not None and b not in WHITESPACE:
            buffer.append(b)
            b = self._source.next_byte()
        return buffer.value()

    def read_token_string(self) -> str:
        data = bytearray()
        b = self.skip_whitespace()
        if b is None:
            raise VCDParseError(ParseErrorKind.UNEXPECTED_EOF, "Unexpected EOF")
        while b is not None and b not in WHITESPACE:
            data.append(b)
            b = self._source.next_byte()
        return decode_text(data)

    def read_terminated(self) -> str:
        """Read raw bytes up to ``$end`` and return them trimmed."""
        data = bytearray()
        while not data.endswith(END_KEYWORD):
            data.append(self.read_byte())
        del data[-len(END_KEYWORD):]
        return decode_text(data).strip()


def decode_text(data: bytes) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise VCDParseError(ParseErrorKind.INVALID_TEXT, "Invalid UTF8") from e
