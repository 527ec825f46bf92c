"""vcdscout - streaming parser for Value Change Dump (VCD) files."""

__version__ = "0.1.0"

from .data_model import (
    LogicValue, IdentifierCode, VarType, ScopeType, TimescaleUnit, Timescale,
    SimulationCommand, Variable, Scope, ScopeItem, Header,
    Comment, Date, Version, TimescaleDef, ScopeDef, Upscope, VarDef, Enddefinitions,
    Begin, End, Timestamp, ChangeScalar, ChangeVector, ChangeReal, ChangeString,
    Command, COMMAND_TYPES
)
from .errors import VCDError, VCDIOError, VCDParseError, ParseErrorKind
from .parser import Parser, parse
from .tokenizer import ByteSource, TokenBuffer, Tokenizer
from .values import decode_value, decode_vector, vector_to_int, format_vector
from .persistence import save_header, load_header, header_to_dict, header_from_dict
from .config import PARSER, EXPORT, ParserConfig, ExportConfig

__all__ = [
    'LogicValue', 'IdentifierCode', 'VarType', 'ScopeType', 'TimescaleUnit', 'Timescale',
    'SimulationCommand', 'Variable', 'Scope', 'ScopeItem', 'Header',
    'Comment', 'Date', 'Version', 'TimescaleDef', 'ScopeDef', 'Upscope', 'VarDef', 'Enddefinitions',
    'Begin', 'End', 'Timestamp', 'ChangeScalar', 'ChangeVector', 'ChangeReal', 'ChangeString',
    'Command', 'COMMAND_TYPES',
    'VCDError', 'VCDIOError', 'VCDParseError', 'ParseErrorKind',
    'Parser', 'parse',
    'ByteSource', 'TokenBuffer', 'Tokenizer',
    'decode_value', 'decode_vector', 'vector_to_int', 'format_vector',
    'save_header', 'load_header', 'header_to_dict', 'header_from_dict',
    'PARSER', 'EXPORT', 'ParserConfig', 'ExportConfig',
]
