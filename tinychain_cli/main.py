"""
Module 04 - CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m tinychain_cli root [RECORD ...] [--file PATH] [--algorithm NAME] [--json]
    python -m tinychain_cli verify [RECORD ...] [--file PATH]
    python -m tinychain_cli contains CANDIDATE [RECORD ...] [--file PATH] [--hex]
    python -m tinychain_cli print [RECORD ...] [--file PATH]
    python -m tinychain_cli proof INDEX [RECORD ...] [--file PATH] [--check]
    python -m tinychain_cli demo
    python -m tinychain_cli config --init

Environment Variables:
    TINYCHAIN_ALGORITHM         Digest algorithm (default: sha1)
    TINYCHAIN_STRICT_ALGORITHM  Reject unknown algorithm names (default: false)
    TINYCHAIN_LOG_LEVEL         Log level (default: INFO)
    TINYCHAIN_LOG_FILE          Additional log file
    TINYCHAIN_OUTPUT_FORMAT     human or json (default: human)
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from core.config import get_default_config_template, load_config
from core.crypto.hashing import supported_algorithms
from core.schemas.errors import TinychainException
from tinychain_cli import EXIT_RUNTIME_ERROR, EXIT_SUCCESS, __version__
from tinychain_cli.commands import proof, tree


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )


def _add_records_argument(parser: argparse.ArgumentParser) -> None:
    """Positional records; added after any command-specific positionals."""
    parser.add_argument(
        "records",
        nargs="*",
        type=str,
        help="Records to hash (UTF-8 encoded)",
    )


def _records_parser() -> argparse.ArgumentParser:
    """Options shared by every command that builds a tree."""
    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument(
        "--file", "-f",
        type=str,
        default=None,
        help="File with one record per line (appended after positional records)",
    )
    parent.add_argument(
        "--json-records",
        action="store_true",
        default=False,
        help="JSON-encode each record as a string before hashing",
    )
    parent.add_argument(
        "--algorithm", "-a",
        type=str,
        default=None,
        help=(
            f"Digest algorithm: {', '.join(supported_algorithms())} "
            "(default: from config or sha1; unknown names fall back to sha1)"
        ),
    )
    parent.add_argument(
        "--strict-algorithm",
        action="store_true",
        default=False,
        help="Fail on an unknown algorithm name instead of falling back",
    )
    parent.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON",
    )
    parent.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Print tracebacks on errors",
    )
    return parent


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="tinychain",
        description="tinychain CLI - Build, verify and inspect Merkle trees.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to configuration file (default: ./tinychain.yaml or ~/.config/tinychain/config.yaml)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")
    records = _records_parser()

    # --- root command ---
    root_parser = subparsers.add_parser(
        "root",
        parents=[records],
        help="Print the Merkle root of the records",
    )
    _add_records_argument(root_parser)
    root_parser.set_defaults(func=tree.root_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        parents=[records],
        help="Build the tree and verify every node hash",
    )
    _add_records_argument(verify_parser)
    verify_parser.set_defaults(func=tree.verify_cmd)

    # --- contains command ---
    contains_parser = subparsers.add_parser(
        "contains",
        parents=[records],
        help="Check whether a record is one of the leaves",
        description="Exit code 0 if the candidate is a leaf, 2 if not.",
    )
    contains_parser.add_argument(
        "candidate",
        type=str,
        help="Candidate record",
    )
    contains_parser.add_argument(
        "--hex",
        action="store_true",
        default=False,
        help="Candidate is 0x-prefixed hex instead of UTF-8 text",
    )
    _add_records_argument(contains_parser)
    contains_parser.set_defaults(func=tree.contains_cmd)

    # --- print command ---
    print_parser = subparsers.add_parser(
        "print",
        parents=[records],
        help="Print every node, level by level",
    )
    _add_records_argument(print_parser)
    print_parser.set_defaults(func=tree.print_cmd)

    # --- proof command ---
    proof_parser = subparsers.add_parser(
        "proof",
        parents=[records],
        help="Print the inclusion proof for a leaf",
    )
    proof_parser.add_argument(
        "index",
        type=int,
        help="0-based leaf position",
    )
    proof_parser.add_argument(
        "--check",
        action="store_true",
        default=False,
        help="Verify the proof against the tree root",
    )
    _add_records_argument(proof_parser)
    proof_parser.set_defaults(func=proof.proof_cmd)

    # --- demo command ---
    demo_parser = subparsers.add_parser(
        "demo",
        help="Build and print the sample md5 tree over \"test data 0\"..\"test data 3\"",
    )
    demo_parser.add_argument("--json", action="store_true", help="JSON output")
    demo_parser.add_argument("--debug", action="store_true", help="Debug mode")
    demo_parser.set_defaults(func=tree.demo_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage configuration",
        description="Initialize or display configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default="tinychain.yaml",
        help="Path for config file (default: tinychain.yaml)",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template())
        print(f"Created configuration file: {config_path}")
        print("You can also use environment variables (TINYCHAIN_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        print(json.dumps(args.runtime_config.to_dict(), indent=2))
        return EXIT_SUCCESS

    print("Usage: tinychain config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def _report_error(args: argparse.Namespace, error: Exception) -> None:
    if getattr(args, "json", False) and isinstance(error, TinychainException):
        print(json.dumps({"error": error.to_error_model().model_dump()}, indent=2))
    elif getattr(args, "debug", False):
        traceback.print_exc()
    else:
        print(f"Error: {error}", file=sys.stderr)


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed / not found)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    try:
        config = load_config(args.config)
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    log_level = args.log_level or config.logging.level
    setup_logging(level=log_level, log_file=config.logging.file)

    args.runtime_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        _report_error(args, e)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
