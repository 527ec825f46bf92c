"""Tests for the command iterator on complete VCD files."""

import io
import pytest

from vcdscout import (
    Parser, ParserConfig, parse, IdentifierCode, LogicValue, SimulationCommand,
    Begin, End, Timestamp, ChangeScalar, ChangeVector, ChangeReal, ChangeString,
    VCDParseError, ParseErrorKind, ScopeType, TimescaleUnit, Timescale, VarType, Variable,
    COMMAND_TYPES,
)

V0 = LogicValue.ZERO
V1 = LogicValue.ONE
X = LogicValue.UNKNOWN
Z = LogicValue.HIGH_IMPEDANCE


def code(text: str) -> IdentifierCode:
    return IdentifierCode(text)


WIKIPEDIA_BODY = [
    Begin(SimulationCommand.DUMPVARS),
    ChangeVector(code("#"), (X, X, X, X, X, X, X, X)),
    ChangeScalar(code("$"), X),
    ChangeScalar(code("%"), V0),
    ChangeScalar(code("&"), X),
    ChangeScalar(code("'"), X),
    ChangeScalar(code("("), V1),
    ChangeScalar(code(")"), V0),
    End(SimulationCommand.DUMPVARS),
    Timestamp(0),
    ChangeVector(code("#"), (V1, V0, V0, V0, V0, V0, V0, V1)),
    ChangeScalar(code("$"), V0),
    ChangeScalar(code("%"), V1),
    Timestamp(2211),
    ChangeScalar(code("'"), V0),
    Timestamp(2296),
    ChangeVector(code("#"), (V0,)),
    ChangeScalar(code("$"), V1),
    Timestamp(2302),
    ChangeScalar(code("$"), V0),
    Timestamp(2303),
]


def test_wikipedia_sample(wikipedia_bytes):
    """Header fields and the exact ordered body sequence."""
    vcd = Parser(wikipedia_bytes)
    header = vcd.parse_header()

    assert header.comment == "Any comment text."
    assert header.date == "Date text."
    assert header.version == "VCD generator text."
    assert header.timescale == Timescale(100, TimescaleUnit.NANOSECONDS)

    assert header.scope.identifier == "logic"
    assert header.scope.scope_type == ScopeType.MODULE
    assert header.scope.children[0] == Variable(VarType.WIRE, 8, code("#"), "data")

    assert list(vcd) == WIKIPEDIA_BODY


def test_wikipedia_sample_from_file(wikipedia_vcd):
    """Same sample read from a binary file object."""
    with open(wikipedia_vcd, "rb") as f:
        header, vcd = parse(f)
        commands = list(vcd)
    assert header.scope.identifier == "logic"
    assert commands == WIKIPEDIA_BODY


def test_small_read_chunks_give_same_result(wikipedia_bytes):
    vcd = Parser(io.BytesIO(wikipedia_bytes), ParserConfig(READ_CHUNK_SIZE=3))
    vcd.parse_header()
    assert list(vcd) == WIKIPEDIA_BODY


def test_width_one_vector_is_not_scalar():
    vcd = Parser(b"b0 #")
    assert next(vcd) == ChangeVector(code("#"), (V0,))


def test_scalar_value_precedes_code():
    vcd = Parser(b"0%")
    assert next(vcd) == ChangeScalar(code("%"), V0)


@pytest.mark.parametrize("line,expected", [
    (b"1!", ChangeScalar(code("!"), V1)),
    (b"X!", ChangeScalar(code("!"), X)),
    (b"z!", ChangeScalar(code("!"), Z)),
    (b"Z!", ChangeScalar(code("!"), Z)),
    (b"B1z #", ChangeVector(code("#"), (V1, Z))),
    (b"r1.5 a", ChangeReal(code("a"), 1.5)),
    (b"R-2e3 a", ChangeReal(code("a"), -2000.0)),
    (b"shello a", ChangeString(code("a"), "hello")),
    (b"Sbye a", ChangeString(code("a"), "bye")),
    (b"#42", Timestamp(42)),
])
def test_single_body_commands(line, expected):
    assert list(Parser(line)) == [expected]


def test_empty_input_ends_immediately():
    assert list(Parser(b"")) == []
    assert list(Parser(b"  \r\n\t ")) == []


def test_token_at_end_of_input_without_trailing_whitespace():
    assert list(Parser(b"#10\n1!")) == [Timestamp(10), ChangeScalar(code("!"), V1)]


@pytest.mark.parametrize("keyword,kind", [
    (b"dumpall", SimulationCommand.DUMPALL),
    (b"dumpoff", SimulationCommand.DUMPOFF),
    (b"dumpon", SimulationCommand.DUMPON),
    (b"dumpvars", SimulationCommand.DUMPVARS),
])
def test_simulation_command_blocks(keyword, kind):
    vcd = Parser(b"$" + keyword + b"\n1!\n$end\n")
    assert next(vcd) == Begin(kind)
    assert vcd.simulation_command == kind
    assert next(vcd) == ChangeScalar(code("!"), V1)
    assert next(vcd) == End(kind)
    assert vcd.simulation_command is None
    assert list(vcd) == []


def test_empty_simulation_command_block():
    assert list(Parser(b"$dumpoff $end")) == [
        Begin(SimulationCommand.DUMPOFF),
        End(SimulationCommand.DUMPOFF),
    ]


def test_unmatched_end():
    vcd = Parser(b"#0\n$end\n")
    assert next(vcd) == Timestamp(0)
    with pytest.raises(VCDParseError) as excinfo:
        next(vcd)
    assert excinfo.value.kind == ParseErrorKind.UNMATCHED_END


def test_unterminated_simulation_command_at_end_of_input():
    vcd = Parser(b"$dumpvars\n1!\n")
    assert next(vcd) == Begin(SimulationCommand.DUMPVARS)
    assert next(vcd) == ChangeScalar(code("!"), V1)
    with pytest.raises(VCDParseError) as excinfo:
        next(vcd)
    assert excinfo.value.kind == ParseErrorKind.UNTERMINATED_SIMULATION_COMMAND


def test_parsers_do_not_share_simulation_state():
    first = Parser(b"$dumpvars 1! $end")
    second = Parser(b"$end")
    next(first)
    assert first.simulation_command == SimulationCommand.DUMPVARS
    with pytest.raises(VCDParseError) as excinfo:
        next(second)
    assert excinfo.value.kind == ParseErrorKind.UNMATCHED_END


def test_nested_file_body(nested_parser):
    nested_parser.parse_header()
    commands = list(nested_parser)

    assert commands[0] == Timestamp(0)
    assert commands[1] == Begin(SimulationCommand.DUMPVARS)
    assert ChangeVector(code("#"), (V0,) * 32) in commands
    assert ChangeReal(code("%"), 0.0) in commands
    assert ChangeString(code("&"), "IDLE") in commands
    assert ChangeString(code("&"), "RUN") in commands
    assert ChangeReal(code("%"), 1.25) in commands
    assert commands[-1] == End(SimulationCommand.DUMPON)

    begins = [c for c in commands if isinstance(c, Begin)]
    ends = [c for c in commands if isinstance(c, End)]
    assert [b.command for b in begins] == [e.command for e in ends] == [
        SimulationCommand.DUMPVARS, SimulationCommand.DUMPOFF, SimulationCommand.DUMPON,
    ]
    timestamps = [c.time for c in commands if isinstance(c, Timestamp)]
    assert timestamps == [0, 5, 10, 15, 20]


def test_command_types_cover_every_parsed_command(wikipedia_bytes, nested_vcd):
    with open(nested_vcd, "rb") as f:
        data = wikipedia_bytes + b"\n" + f.read()
    commands = list(Parser(data))
    assert {type(c) for c in commands} == set(COMMAND_TYPES)
    assert all(isinstance(c, COMMAND_TYPES) for c in commands)
