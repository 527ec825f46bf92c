"""Core data structures produced by the VCD parser.

The header of a VCD file is a tree of scopes and variables. Everything after
``$enddefinitions`` is a flat stream of commands.

    Header
    ├── date / version / comment: Optional[str]
    ├── timescale: Timescale(magnitude=100, unit=TimescaleUnit.NANOSECONDS)
    └── scope: Scope
        ├── scope_type: ScopeType.MODULE
        ├── identifier: "logic"
        └── children: [
            ├── Variable(WIRE, size=8, code="#", reference="data")
            ├── Variable(WIRE, size=1, code="$", reference="data_valid")
            └── Scope (nested, same shape)
            ]

    Command stream (one item per iteration step)
    ├── Begin(SimulationCommand.DUMPVARS)
    ├── ChangeVector(code="#", values=(X, X, X, X, X, X, X, X))
    ├── ChangeScalar(code="$", value=X)
    ├── End(SimulationCommand.DUMPVARS)
    ├── Timestamp(0)
    └── ...

All command and variable types are frozen dataclasses. ``Command`` and
``ScopeItem`` are closed unions; consumers dispatch on them with isinstance
checks and treat anything else as an unexpected command.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Sequence, Tuple, Union
from enum import Enum

from .errors import ParseErrorKind, VCDParseError

Time = int  # In Timescale units

# Printable range used by identifier codes
ID_CHAR_MIN = 0x21  # '!'
ID_CHAR_MAX = 0x7E  # '~'
NUM_ID_CHARS = ID_CHAR_MAX - ID_CHAR_MIN + 1


class LogicValue(Enum):
    """Four-state logic value of a single bit."""
    ZERO = "0"
    ONE = "1"
    UNKNOWN = "x"
    HIGH_IMPEDANCE = "z"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, order=True)
class IdentifierCode:
    """Opaque key correlating a ``$var`` declaration with its value changes.

    Equality and hashing use the code text. ``index`` exposes the bijective
    base-94 numbering some tools use to allocate codes ('!' is 0, '#' is 2,
    '!!' is 94).
    """
    text: str

    @classmethod
    def from_token(cls, token: bytes) -> "IdentifierCode":
        if not token:
            raise VCDParseError(ParseErrorKind.INVALID_IDENTIFIER, "Invalid identifier code")
        for b in token:
            if b < ID_CHAR_MIN or b > ID_CHAR_MAX:
                raise VCDParseError(ParseErrorKind.INVALID_IDENTIFIER, "Invalid identifier code")
        return cls(token.decode("ascii"))

    @classmethod
    def from_index(cls, index: int) -> "IdentifierCode":
        if index < 0:
            raise ValueError(f"Identifier index must be non-negative, got {index}")
        n = index + 1
        chars = []
        while n > 0:
            n, rem = divmod(n - 1, NUM_ID_CHARS)
            chars.append(chr(ID_CHAR_MIN + rem))
        return cls("".join(chars))

    @property
    def index(self) -> int:
        # First character is the least significant digit
        result = 0
        for ch in reversed(self.text):
            result = result * NUM_ID_CHARS + (ord(ch) - ID_CHAR_MIN + 1)
        return result - 1

    def __str__(self) -> str:
        return self.text


class VarType(Enum):
    EVENT = "event"
    INTEGER = "integer"
    PARAMETER = "parameter"
    REAL = "real"
    REALTIME = "realtime"
    REG = "reg"
    SUPPLY0 = "supply0"
    SUPPLY1 = "supply1"
    TIME = "time"
    TRI = "tri"
    TRIAND = "triand"
    TRIOR = "trior"
    TRIREG = "trireg"
    TRI0 = "tri0"
    TRI1 = "tri1"
    WAND = "wand"
    WIRE = "wire"
    WOR = "wor"
    STRING = "string"

    def __str__(self) -> str:
        return self.value


class ScopeType(Enum):
    MODULE = "module"
    TASK = "task"
    FUNCTION = "function"
    BEGIN = "begin"
    FORK = "fork"

    def __str__(self) -> str:
        return self.value


class TimescaleUnit(Enum):
    FEMTOSECONDS = "fs"  # 10^-15 seconds
    PICOSECONDS = "ps"   # 10^-12 seconds
    NANOSECONDS = "ns"   # 10^-9 seconds
    MICROSECONDS = "us"  # 10^-6 seconds
    MILLISECONDS = "ms"  # 10^-3 seconds
    SECONDS = "s"        # 10^0 seconds

    def to_exponent(self) -> int:
        """Get the power of 10 exponent for this unit."""
        exponents: dict[TimescaleUnit, int] = {
            TimescaleUnit.FEMTOSECONDS: -15,
            TimescaleUnit.PICOSECONDS: -12,
            TimescaleUnit.NANOSECONDS: -9,
            TimescaleUnit.MICROSECONDS: -6,
            TimescaleUnit.MILLISECONDS: -3,
            TimescaleUnit.SECONDS: 0
        }
        return exponents[self]

    def divisor(self) -> int:
        """Number of these units in one second."""
        return 10 ** -self.to_exponent()

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Timescale:
    """Represents the timescale declared in the header."""
    magnitude: int  # The numeric factor (e.g., 1, 10, 100)
    unit: TimescaleUnit

    def __str__(self) -> str:
        return f"{self.magnitude} {self.unit.value}"


class SimulationCommand(Enum):
    """Which bracketed simulation-command block is open."""
    DUMPALL = "dumpall"
    DUMPOFF = "dumpoff"
    DUMPON = "dumpon"
    DUMPVARS = "dumpvars"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Variable:
    var_type: VarType
    size: int
    code: IdentifierCode
    reference: str


@dataclass(frozen=True)
class Scope:
    """A named hierarchy level. Children keep declaration order."""
    scope_type: ScopeType
    identifier: str
    children: List["ScopeItem"] = field(default_factory=list)

    def find_var(self, reference: str) -> Optional[Variable]:
        """Find a variable declared directly in this scope."""
        for child in self.children:
            if isinstance(child, Variable) and child.reference == reference:
                return child
        return None

    def find_scope(self, identifier: str) -> Optional["Scope"]:
        """Find a scope declared directly in this scope."""
        for child in self.children:
            if isinstance(child, Scope) and child.identifier == identifier:
                return child
        return None

    def iter_vars(self, prefix: str = "") -> Iterator[Tuple[str, Variable]]:
        """Yield (full_name, variable) depth-first in declaration order."""
        path = f"{prefix}.{self.identifier}" if prefix else self.identifier
        # (path, remaining children) per open scope; iterative for deep trees
        stack: List[Tuple[str, Iterator[ScopeItem]]] = [(path, iter(self.children))]
        while stack:
            path, children = stack[-1]
            child = next(children, None)
            if child is None:
                stack.pop()
            elif isinstance(child, Variable):
                yield f"{path}.{child.reference}", child
            else:
                stack.append((f"{path}.{child.identifier}", iter(child.children)))


ScopeItem = Union[Variable, Scope]


@dataclass(frozen=True)
class Header:
    """Everything declared before ``$enddefinitions``."""
    comment: Optional[str] = None
    date: Optional[str] = None
    version: Optional[str] = None
    timescale: Optional[Timescale] = None
    scope: Optional[Scope] = None

    def find_var(self, path: Sequence[str]) -> Optional[Variable]:
        """Look up a variable by path, e.g. ``["top", "cpu", "clk"]``.

        The first element must name the root scope and the last one the
        variable reference.
        """
        if self.scope is None or len(path) < 2 or path[0] != self.scope.identifier:
            return None
        scope: Optional[Scope] = self.scope
        for name in path[1:-1]:
            scope = scope.find_scope(name)
            if scope is None:
                return None
        return scope.find_var(path[-1])

    def iter_vars(self) -> Iterator[Tuple[str, Variable]]:
        if self.scope is None:
            return iter(())
        return self.scope.iter_vars()

    def vars_by_code(self) -> Dict[IdentifierCode, List[str]]:
        """Map each identifier code to the full names declared with it.

        More than one name per code means the declarations alias one signal.
        """
        mapping: Dict[IdentifierCode, List[str]] = {}
        for full_name, var in self.iter_vars():
            mapping.setdefault(var.code, []).append(full_name)
        return mapping


# Commands

@dataclass(frozen=True)
class Comment:
    text: str


@dataclass(frozen=True)
class Date:
    text: str


@dataclass(frozen=True)
class Version:
    text: str


@dataclass(frozen=True)
class TimescaleDef:
    magnitude: int
    unit: TimescaleUnit


@dataclass(frozen=True)
class ScopeDef:
    scope_type: ScopeType
    identifier: str


@dataclass(frozen=True)
class Upscope:
    pass


@dataclass(frozen=True)
class VarDef:
    var_type: VarType
    size: int
    code: IdentifierCode
    reference: str


@dataclass(frozen=True)
class Enddefinitions:
    pass


@dataclass(frozen=True)
class Begin:
    command: SimulationCommand


@dataclass(frozen=True)
class End:
    command: SimulationCommand


@dataclass(frozen=True)
class Timestamp:
    time: Time


@dataclass(frozen=True)
class ChangeScalar:
    code: IdentifierCode
    value: LogicValue


@dataclass(frozen=True)
class ChangeVector:
    code: IdentifierCode
    values: Tuple[LogicValue, ...]


@dataclass(frozen=True)
class ChangeReal:
    code: IdentifierCode
    value: float


@dataclass(frozen=True)
class ChangeString:
    code: IdentifierCode
    value: str


Command = Union[
    Comment, Date, Version, TimescaleDef,
    ScopeDef, Upscope, VarDef, Enddefinitions,
    Begin, End, Timestamp,
    ChangeScalar, ChangeVector, ChangeReal, ChangeString,
]

COMMAND_TYPES: Tuple[type, ...] = (
    Comment, Date, Version, TimescaleDef,
    ScopeDef, Upscope, VarDef, Enddefinitions,
    Begin, End, Timestamp,
    ChangeScalar, ChangeVector, ChangeReal, ChangeString,
)

