"""Error taxonomy for the VCD parser.

Two kinds of failure reach the caller:

- ``VCDIOError`` wraps whatever the byte source raised while reading.
- ``VCDParseError`` carries a ``ParseErrorKind`` and a short static message.

Both derive from ``VCDError`` so callers can catch everything in one place.
"""

from enum import Enum


class ParseErrorKind(Enum):
    UNEXPECTED_EOF = "unexpected_eof"
    TOKEN_TOO_LONG = "token_too_long"
    INVALID_TEXT = "invalid_text"
    INVALID_KEYWORD = "invalid_keyword"
    INVALID_NUMBER = "invalid_number"
    INVALID_VALUE = "invalid_value"
    INVALID_IDENTIFIER = "invalid_identifier"
    INVALID_COMMAND_BYTE = "invalid_command_byte"
    EXPECTED_END = "expected_end"
    UNEXPECTED_END_TOKEN = "unexpected_end_token"
    UNMATCHED_END = "unmatched_end"
    UNTERMINATED_SIMULATION_COMMAND = "unterminated_simulation_command"
    UNEXPECTED_COMMAND = "unexpected_command"
    SCOPE_TOO_DEEP = "scope_too_deep"


class VCDError(Exception):
    """Base class for every error raised by vcdscout."""


class VCDIOError(VCDError, OSError):
    """The underlying byte source failed to read."""

    def __init__(self, original: OSError):
        super().__init__(str(original))
        self.original = original


class VCDParseError(VCDError, ValueError):
    """The input is not valid VCD."""

    def __init__(self, kind: ParseErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message

    def __repr__(self) -> str:
        return f"VCDParseError({self.kind.name}, {self.message!r})"
