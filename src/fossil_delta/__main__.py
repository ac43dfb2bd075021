"""
Fossil delta command line tool.

Create, apply and inspect deltas between files.

Usage::

    python -m fossil_delta create old.txt new.txt -o new.delta
    python -m fossil_delta apply old.txt new.delta -o new.txt
    python -m fossil_delta info new.delta

Commands:
    create SOURCE TARGET   Write the delta turning SOURCE into TARGET
    apply SOURCE DELTA     Write the target rebuilt from SOURCE and DELTA
    info DELTA             Describe the records of DELTA

Output goes to stdout unless -o/--output is given.

Environment:
    FOSSIL_DELTA_MAX_CANDIDATES  Source blocks examined per hash lookup
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from fossil_delta.apply import apply
from fossil_delta.config import DeltaConfig
from fossil_delta.create import create
from fossil_delta.exceptions import DeltaError
from fossil_delta.program import Copy, Insert, parse_delta

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Configure root logging for the command line tool."""
    level = logging.DEBUG if verbose else logging.INFO

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s %(levelname)-8s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )

    root = logging.getLogger()
    root.setLevel(level)
    root.addHandler(handler)


def _write_output(data: bytes, output: Path | None) -> None:
    """Write result bytes to a file, or to stdout when no file is given."""
    if output is None:
        sys.stdout.buffer.write(data)
        sys.stdout.buffer.flush()
    else:
        output.write_bytes(data)


def run_create(source: Path, target: Path, output: Path | None) -> None:
    """Encode TARGET against SOURCE."""
    source_data = source.read_bytes()
    target_data = target.read_bytes()

    delta = create(source_data, target_data, DeltaConfig.from_env())
    logger.info(
        "Created delta of %d bytes for a %d byte target (%d byte source)",
        len(delta),
        len(target_data),
        len(source_data),
    )
    _write_output(delta, output)


def run_apply(source: Path, delta: Path, output: Path | None) -> None:
    """Rebuild a target from SOURCE and DELTA."""
    target = apply(source.read_bytes(), delta.read_bytes())
    logger.info("Applied delta, reconstructed %d bytes", len(target))
    _write_output(target, output)


def describe_delta(delta: bytes) -> str:
    """Summarize a delta's records as human readable lines."""
    program = parse_delta(delta)
    inserts = sum(1 for op in program.operations if isinstance(op, Insert))
    copies = sum(1 for op in program.operations if isinstance(op, Copy))

    return "\n".join(
        [
            f"delta size:    {len(delta)}",
            f"output size:   {program.size}",
            f"inserts:       {inserts} ({program.inserted_bytes} bytes)",
            f"copies:        {copies} ({program.copied_bytes} bytes)",
            f"checksum:      {program.checksum:#010x}",
        ]
    )


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="fossil-delta",
        description="Fossil delta encoder and decoder",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging (traces every encoder and decoder step)",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    create_parser = commands.add_parser("create", help="Create a delta")
    create_parser.add_argument("source", type=Path, help="Original file")
    create_parser.add_argument("target", type=Path, help="Revised file")
    create_parser.add_argument("-o", "--output", type=Path, default=None, help="Delta file")

    apply_parser = commands.add_parser("apply", help="Apply a delta")
    apply_parser.add_argument("source", type=Path, help="Original file")
    apply_parser.add_argument("delta", type=Path, help="Delta file")
    apply_parser.add_argument("-o", "--output", type=Path, default=None, help="Rebuilt file")

    info_parser = commands.add_parser("info", help="Describe a delta")
    info_parser.add_argument("delta", type=Path, help="Delta file")

    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    try:
        if args.command == "create":
            run_create(args.source, args.target, args.output)
        elif args.command == "apply":
            run_apply(args.source, args.delta, args.output)
        else:
            print(describe_delta(args.delta.read_bytes()))
    except DeltaError as e:
        logger.error("Invalid delta: %s", e)
        return 1
    except (OSError, ValueError) as e:
        logger.error("%s", e)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
