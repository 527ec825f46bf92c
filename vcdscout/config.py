"""Centralized configuration for vcdscout.

This module contains the buffer capacities, limits and export settings
used throughout the parser so they can be tuned in one place.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ParserConfig:
    """Configuration for the streaming VCD parser."""
    # Bounded token capacities (bytes)
    KEYWORD_BUFFER_SIZE: int = 16     # "enddefinitions" is the longest keyword
    TOKEN_BUFFER_SIZE: int = 32       # Numbers, enum names and identifier codes
    END_BUFFER_SIZE: int = 8          # Trailing "$end"
    TIMESCALE_BUFFER_SIZE: int = 8    # "100ns", or "100" then "ns"
    VECTOR_BUFFER_SIZE: int = 1024    # One byte per bit of a vector change

    # Scope nesting
    MAX_SCOPE_DEPTH: int = 256

    # Byte source
    READ_CHUNK_SIZE: int = 65536

    def __post_init__(self) -> None:
        for name in ("KEYWORD_BUFFER_SIZE", "TOKEN_BUFFER_SIZE", "END_BUFFER_SIZE",
                     "TIMESCALE_BUFFER_SIZE", "VECTOR_BUFFER_SIZE",
                     "MAX_SCOPE_DEPTH", "READ_CHUNK_SIZE"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive")


@dataclass(frozen=True)
class ExportConfig:
    """Configuration for the YAML header export."""
    SORT_KEYS: bool = False
    DEFAULT_FLOW_STYLE: bool = False
    INDENT: int = 2


# Global instances for easy access
PARSER = ParserConfig()
EXPORT = ExportConfig()
