"""Streaming VCD parser.

``Parser`` wraps a byte source and is an iterator of commands. Each step
skips whitespace, reads one dispatch byte and decodes exactly one command:

    $   keyword command ($scope, $var, $dumpvars, $end, ...)
    #   timestamp
    0 1 x X z Z   scalar change (value first, then identifier code)
    b B vector change
    r R real change
    s S string change

``parse_header`` drives the same iterator through ``$enddefinitions`` and
assembles the scope tree; iterating afterwards yields the simulation body.

The parser keeps one piece of state besides the read cursor: the simulation
command opened by ``$dumpall``/``$dumpoff``/``$dumpon``/``$dumpvars``, which
the next ``$end`` closes.
"""

import logging
from enum import Enum
from typing import Iterator, Optional, Tuple, Type, TypeVar

from .config import PARSER, ParserConfig
from .data_model import (
    Begin, ChangeReal, ChangeScalar, ChangeString, ChangeVector, Command,
    Comment, Date, End, Enddefinitions, Header, IdentifierCode, Scope, ScopeDef,
    ScopeItem, ScopeType, SimulationCommand, Timescale, TimescaleDef,
    TimescaleUnit, Timestamp, Upscope, VarDef, Variable, VarType, Version,
)
from .errors import ParseErrorKind, VCDParseError
from .tokenizer import END_KEYWORD, ByteSource, Source, TokenBuffer, Tokenizer, decode_text
from .values import SCALAR_BYTES, decode_value, decode_vector

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)

_DIGITS = frozenset(b"0123456789")

_SIMULATION_KEYWORDS: dict[bytes, SimulationCommand] = {
    b"dumpall": SimulationCommand.DUMPALL,
    b"dumpoff": SimulationCommand.DUMPOFF,
    b"dumpon": SimulationCommand.DUMPON,
    b"dumpvars": SimulationCommand.DUMPVARS,
}


def _parse_uint(token: bytes) -> int:
    if not token or not all(b in _DIGITS for b in token):
        raise VCDParseError(ParseErrorKind.INVALID_NUMBER, "Invalid number")
    return int(token)


def _parse_float(token: bytes) -> float:
    if b"_" in token:
        raise VCDParseError(ParseErrorKind.INVALID_NUMBER, "Invalid number")
    try:
        return float(token.decode("ascii"))
    except (UnicodeDecodeError, ValueError) as e:
        raise VCDParseError(ParseErrorKind.INVALID_NUMBER, "Invalid number") from e


def _parse_enum(enum_cls: Type[E], token: bytes) -> E:
    try:
        return enum_cls(token.decode("ascii"))
    except (UnicodeDecodeError, ValueError) as e:
        raise VCDParseError(ParseErrorKind.INVALID_KEYWORD, "Invalid keyword") from e


class Parser:
    """VCD parser. Wraps a binary byte source and iterates over ``Command``s.

    Example:
        with open("dump.vcd", "rb") as f:
            parser = Parser(f)
            header = parser.parse_header()
            for command in parser:
                ...

    One parser must not be iterated from several threads at once.
    """

    def __init__(self, source: Source, config: ParserConfig = PARSER) -> None:
        self.config = config
        self._tokenizer = Tokenizer(ByteSource(source, config.READ_CHUNK_SIZE))
        self.simulation_command: Optional[SimulationCommand] = None

    def __iter__(self) -> Iterator[Command]:
        return self

    def __next__(self) -> Command:
        b = self._tokenizer.skip_whitespace()
        if b is None:
            if self.simulation_command is not None:
                raise VCDParseError(ParseErrorKind.UNTERMINATED_SIMULATION_COMMAND,
                                    "Unterminated simulation command")
            raise StopIteration
        if b == ord("$"):
            return self._parse_command()
        if b == ord("#"):
            return self._parse_timestamp()
        if b in SCALAR_BYTES:
            return self._parse_scalar(b)
        if b in b"bB":
            return self._parse_vector()
        if b in b"rR":
            return self._parse_real()
        if b in b"sS":
            return self._parse_string()
        raise VCDParseError(ParseErrorKind.INVALID_COMMAND_BYTE, "Unexpected character")

    # Token helpers

    def _read_token(self, capacity: int) -> bytes:
        return self._tokenizer.read_token(TokenBuffer(capacity))

    def _read_field(self) -> bytes:
        """Read a bounded field token that must not be ``$end``."""
        tok = self._read_token(self.config.TOKEN_BUFFER_SIZE)
        if tok == END_KEYWORD:
            raise VCDParseError(ParseErrorKind.UNEXPECTED_END_TOKEN, "Unexpected $end")
        return tok

    def _read_code(self) -> IdentifierCode:
        return IdentifierCode.from_token(self._read_field())

    def _read_command_end(self) -> None:
        tok = self._read_token(self.config.END_BUFFER_SIZE)
        if tok != END_KEYWORD:
            raise VCDParseError(ParseErrorKind.EXPECTED_END, "Expected $end")

    # Command decoders

    def _parse_command(self) -> Command:
        cmd = self._read_token(self.config.KEYWORD_BUFFER_SIZE)

        if cmd == b"comment":
            return Comment(self._tokenizer.read_terminated())
        if cmd == b"date":
            return Date(self._tokenizer.read_terminated())
        if cmd == b"version":
            return Version(self._tokenizer.read_terminated())
        if cmd == b"timescale":
            return self._parse_timescale()
        if cmd == b"scope":
            scope_type = _parse_enum(ScopeType, self._read_field())
            identifier = self._tokenizer.read_token_string()
            self._read_command_end()
            return ScopeDef(scope_type, identifier)
        if cmd == b"upscope":
            self._read_command_end()
            return Upscope()
        if cmd == b"var":
            return self._parse_var()
        if cmd == b"enddefinitions":
            self._read_command_end()
            return Enddefinitions()
        if cmd in _SIMULATION_KEYWORDS:
            return self._begin_simulation_command(_SIMULATION_KEYWORDS[cmd])
        if cmd == b"end":
            if self.simulation_command is None:
                raise VCDParseError(ParseErrorKind.UNMATCHED_END, "Unmatched $end")
            command, self.simulation_command = self.simulation_command, None
            return End(command)
        raise VCDParseError(ParseErrorKind.INVALID_KEYWORD, "Invalid keyword")

    def _parse_timescale(self) -> TimescaleDef:
        tok = self._read_timescale_token()
        # Support both "1ps" and "1 ps"
        idx = next((i for i, b in enumerate(tok) if b not in _DIGITS), None)
        if idx is not None:
            num, unit = tok[:idx], tok[idx:]
        else:
            num, unit = tok, self._read_timescale_token()
        self._read_command_end()
        return TimescaleDef(_parse_uint(num), _parse_enum(TimescaleUnit, unit))

    def _read_timescale_token(self) -> bytes:
        tok = self._read_token(self.config.TIMESCALE_BUFFER_SIZE)
        if tok == END_KEYWORD:
            raise VCDParseError(ParseErrorKind.UNEXPECTED_END_TOKEN, "Unexpected $end")
        return tok

    def _parse_var(self) -> VarDef:
        var_type = _parse_enum(VarType, self._read_field())
        size = _parse_uint(self._read_field())
        if size == 0:
            raise VCDParseError(ParseErrorKind.INVALID_NUMBER, "Invalid number")
        code = self._read_code()
        reference = self._tokenizer.read_token_string()
        tok = self._read_token(self.config.TOKEN_BUFFER_SIZE)
        if tok != END_KEYWORD:
            # Optional bit select, e.g. "$var wire 8 # data [7:0] $end"
            if not tok.startswith(b"["):
                raise VCDParseError(ParseErrorKind.EXPECTED_END, "Expected $end")
            reference = f"{reference} {decode_text(tok)}"
            self._read_command_end()
        return VarDef(var_type, size, code, reference)

    def _begin_simulation_command(self, command: SimulationCommand) -> Begin:
        self.simulation_command = command
        return Begin(command)

    def _parse_timestamp(self) -> Timestamp:
        return Timestamp(_parse_uint(self._read_field()))

    def _parse_scalar(self, initial: int) -> ChangeScalar:
        value = decode_value(initial)
        return ChangeScalar(self._read_code(), value)

    def _parse_vector(self) -> ChangeVector:
        values = decode_vector(self._read_token(self.config.VECTOR_BUFFER_SIZE))
        return ChangeVector(self._read_code(), values)

    def _parse_real(self) -> ChangeReal:
        value = _parse_float(self._read_field())
        return ChangeReal(self._read_code(), value)

    def _parse_string(self) -> ChangeString:
        value = self._tokenizer.read_token_string()
        return ChangeString(self._read_code(), value)

    # Header

    def _parse_scope(self, scope_type: ScopeType, identifier: str) -> Scope:
        """Read scope contents up to the matching ``$upscope``.

        Open scopes are kept on an explicit stack, so nesting depth is bounded
        only by ``MAX_SCOPE_DEPTH`` and not by the interpreter's recursion limit.
        """
        root = Scope(scope_type, identifier, [])
        stack: list[Scope] = [root]
        while True:
            command = next(self, None)
            if command is None:
                raise VCDParseError(ParseErrorKind.UNEXPECTED_EOF, "Unexpected EOF in $scope")
            children: list[ScopeItem] = stack[-1].children
            if isinstance(command, Upscope):
                stack.pop()
                if not stack:
                    return root
            elif isinstance(command, ScopeDef):
                if len(stack) >= self.config.MAX_SCOPE_DEPTH:
                    raise VCDParseError(ParseErrorKind.SCOPE_TOO_DEEP, "Scope nesting too deep")
                child = Scope(command.scope_type, command.identifier, [])
                children.append(child)
                stack.append(child)
            elif isinstance(command, VarDef):
                children.append(Variable(command.var_type, command.size, command.code, command.reference))
            else:
                raise VCDParseError(ParseErrorKind.UNEXPECTED_COMMAND, "Unexpected command in $scope")

    def parse_header(self) -> Header:
        """Parse the header of a VCD file into a ``Header``.

        After returning, the stream has been read just past the
        ``$enddefinitions $end`` command and can be iterated to obtain the
        simulation body.
        """
        comment: Optional[str] = None
        date: Optional[str] = None
        version: Optional[str] = None
        timescale: Optional[Timescale] = None
        scope: Optional[Scope] = None

        while True:
            command = next(self, None)
            if command is None:
                raise VCDParseError(ParseErrorKind.UNEXPECTED_EOF, "Unexpected EOF in header")
            if isinstance(command, Enddefinitions):
                break
            elif isinstance(command, Comment):
                comment = command.text
            elif isinstance(command, Date):
                date = command.text
            elif isinstance(command, Version):
                version = command.text
            elif isinstance(command, TimescaleDef):
                timescale = Timescale(command.magnitude, command.unit)
            elif isinstance(command, ScopeDef):
                if scope is not None:
                    logger.warning(f"Multiple top-level scopes, replacing '{scope.identifier}' "
                                   f"with '{command.identifier}'")
                scope = self._parse_scope(command.scope_type, command.identifier)
            else:
                raise VCDParseError(ParseErrorKind.UNEXPECTED_COMMAND, "Unexpected command in header")

        header = Header(comment=comment, date=date, version=version, timescale=timescale, scope=scope)
        if logger.isEnabledFor(logging.DEBUG):
            num_vars = sum(1 for _ in header.iter_vars())
            logger.debug(f"Parsed VCD header: root scope "
                         f"{scope.identifier if scope else None!r}, {num_vars} variables, "
                         f"timescale {timescale}")
        return header


def parse(source: Source, config: ParserConfig = PARSER) -> Tuple[Header, Parser]:
    """Parse the header and return it with the parser positioned at the body."""
    parser = Parser(source, config)
    header = parser.parse_header()
    return header, parser
