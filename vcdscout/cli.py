"""Command-line inspector for VCD files.

    vcdscout dump.vcd                 # header, hierarchy and body statistics
    vcdscout dump.vcd --commands      # also print every body command
    vcdscout dump.vcd --yaml hdr.yaml # export the header as YAML
"""

import argparse
import logging
import pathlib
import sys
from collections import Counter
from typing import List, Optional

from .data_model import (
    COMMAND_TYPES, Begin, ChangeReal, ChangeScalar, ChangeString, ChangeVector, Command, End,
    Header, Scope, Timestamp, Variable
)
from .errors import VCDError
from .parser import Parser
from .persistence import save_header
from .values import format_vector


def print_scope(scope: Scope, prefix: str = "") -> None:
    """Print the scope hierarchy recursively."""
    print(f"{prefix}{scope.identifier} ({scope.scope_type})")
    for child in scope.children:
        if isinstance(child, Variable):
            print(f"{prefix}  {child.reference} [{child.var_type} {child.size}] {child.code}")
        else:
            print_scope(child, prefix + "  ")


def print_header(header: Header) -> None:
    if header.date is not None:
        print(f"Date:      {header.date}")
    if header.version is not None:
        print(f"Version:   {header.version}")
    if header.comment is not None:
        print(f"Comment:   {header.comment}")
    if header.timescale is not None:
        print(f"Timescale: {header.timescale}")
    if header.scope is not None:
        print("Hierarchy:")
        print_scope(header.scope, "  ")


def format_command(command: Command) -> str:
    if isinstance(command, Timestamp):
        return f"#{command.time}"
    elif isinstance(command, ChangeScalar):
        return f"{command.value}{command.code}"
    elif isinstance(command, ChangeVector):
        return f"b{format_vector(command.values)} {command.code}"
    elif isinstance(command, ChangeReal):
        return f"r{command.value!r} {command.code}"
    elif isinstance(command, ChangeString):
        return f"s{command.value} {command.code}"
    elif isinstance(command, Begin):
        return f"${command.command}"
    elif isinstance(command, End):
        return "$end"
    return repr(command)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Inspect a VCD (Value Change Dump) file")
    parser.add_argument("vcd_file", type=pathlib.Path, help="VCD file to read")
    parser.add_argument("--commands", action="store_true", help="Print every command of the simulation body")
    parser.add_argument("--yaml", type=pathlib.Path, help="Write the parsed header to this YAML file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    counts: Counter = Counter()
    try:
        with open(args.vcd_file, "rb") as f:
            vcd = Parser(f)
            header = vcd.parse_header()
            print_header(header)
            for command in vcd:
                counts[type(command)] += 1
                if args.commands:
                    print(format_command(command))
    except FileNotFoundError:
        print(f"error: file not found: {args.vcd_file}", file=sys.stderr)
        return 1
    except VCDError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"error: cannot read {args.vcd_file}: {e.strerror or e}", file=sys.stderr)
        return 1

    print("Body:")
    for command_type in COMMAND_TYPES:
        if counts[command_type]:
            print(f"  {command_type.__name__}: {counts[command_type]}")

    if args.yaml:
        save_header(header, args.yaml)
        print(f"Header written to {args.yaml}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
