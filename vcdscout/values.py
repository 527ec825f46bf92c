"""Decoding of four-state logic values.

A value byte is one of ``0 1 x X z Z``. Vector changes are written most
significant bit first and decoded byte by byte in that order.
"""

from typing import Iterable, Optional, Sequence, Tuple

from .data_model import LogicValue
from .errors import ParseErrorKind, VCDParseError

_VALUE_BYTES: dict[int, LogicValue] = {
    ord("0"): LogicValue.ZERO,
    ord("1"): LogicValue.ONE,
    ord("x"): LogicValue.UNKNOWN,
    ord("X"): LogicValue.UNKNOWN,
    ord("z"): LogicValue.HIGH_IMPEDANCE,
    ord("Z"): LogicValue.HIGH_IMPEDANCE,
}

# Leading bytes that start a scalar value change
SCALAR_BYTES = frozenset(_VALUE_BYTES)


def decode_value(b: int) -> LogicValue:
    """Map a single byte to its logic value."""
    value = _VALUE_BYTES.get(b)
    if value is None:
        raise VCDParseError(ParseErrorKind.INVALID_VALUE, "Invalid value")
    return value


def decode_vector(token: bytes) -> Tuple[LogicValue, ...]:
    """Decode every byte of a vector token, MSB first."""
    return tuple(decode_value(b) for b in token)


def vector_to_int(values: Sequence[LogicValue]) -> Optional[int]:
    """Integer value of an MSB-first vector, or None if any bit is x or z."""
    result = 0
    for v in values:
        if v is LogicValue.ONE:
            result = (result << 1) | 1
        elif v is LogicValue.ZERO:
            result <<= 1
        else:
            return None
    return result


def format_vector(values: Iterable[LogicValue]) -> str:
    """Render a vector the way it is written in a VCD body."""
    return "".join(v.value for v in values)
