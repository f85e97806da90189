"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m arbor_cli demo [--size N] [--sample B] [--json]
    python -m arbor_cli build ITEM... [--hex] [--layers] [--json]
    python -m arbor_cli prove ITEM... --target T [--hex] [--out PATH]
    python -m arbor_cli verify --target T --proof PATH --root HEX [--hex] [--json]
    python -m arbor_cli config --init

Environment Variables:
    ARBOR_WORKERS           Threads used to hash each layer (default: 1)
    ARBOR_EXAMPLE_SIZE      Block count for the demo command (default: 8)
    ARBOR_LOG_LEVEL         Log level (default: INFO)
    ARBOR_LOG_FILE          Also write logs to this file
    ARBOR_OUTPUT_FORMAT     human or json
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from arbor import __version__
from arbor.schemas.errors import ArborException
from arbor_cli.commands import build, demo, prove, verify
from arbor_cli.config import get_default_config_template, load_config


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


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


def _add_input_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "items",
        nargs="*",
        help="Data blocks, in order (UTF-8 text unless --hex)",
    )
    parser.add_argument(
        "--from-file",
        type=str,
        default=None,
        help="Read additional data blocks from a file, one per line",
    )
    parser.add_argument(
        "--hex",
        action="store_true",
        default=False,
        help="Interpret data blocks and target as hex strings",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="arbor",
        description="Build binary Merkle trees, generate and verify inclusion proofs.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to configuration file, JSON or YAML (default: ./arbor.json or ~/.config/arbor/config.json)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- demo command ---
    demo_parser = subparsers.add_parser(
        "demo",
        help="Build a tree over sample blocks and prove one of them",
        description="Build a tree over [0x00]..[N-1], prove one block and verify the proof.",
    )
    demo_parser.add_argument(
        "--size", "-n",
        type=int,
        default=None,
        help="Number of sample blocks (default: from config, 8)",
    )
    demo_parser.add_argument(
        "--sample",
        type=int,
        default=2,
        help="Byte value of the block to prove (default: 2)",
    )
    demo_parser.add_argument("--json", action="store_true", default=False, help="JSON output")
    demo_parser.add_argument("--debug", action="store_true", default=False, help="Debug mode")
    demo_parser.set_defaults(func=demo.demo_cmd)

    # --- build command ---
    build_parser = subparsers.add_parser(
        "build",
        help="Build a tree and print its root",
        description="Build a tree from data blocks; the block count must be a power of two.",
    )
    _add_input_arguments(build_parser)
    build_parser.add_argument(
        "--layers",
        action="store_true",
        default=False,
        help="Print every layer of the tree",
    )
    build_parser.add_argument("--json", action="store_true", default=False, help="JSON output")
    build_parser.add_argument("--debug", action="store_true", default=False, help="Debug mode")
    build_parser.set_defaults(func=build.build_cmd)

    # --- prove command ---
    prove_parser = subparsers.add_parser(
        "prove",
        help="Generate an inclusion proof for one block",
        description="Build a tree from data blocks and write a JSON proof for the target block.",
    )
    _add_input_arguments(prove_parser)
    prove_parser.add_argument(
        "--target", "-t",
        type=str,
        required=True,
        help="The data block to prove",
    )
    prove_parser.add_argument(
        "--out", "-o",
        type=str,
        default=None,
        help="Write the proof document here instead of stdout",
    )
    prove_parser.add_argument("--debug", action="store_true", default=False, help="Debug mode")
    prove_parser.set_defaults(func=prove.prove_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify an inclusion proof against a root",
        description="Recompute the root from a block and proof; exit 2 when it does not match.",
    )
    verify_parser.add_argument(
        "--target", "-t",
        type=str,
        required=True,
        help="The data block claimed to be a leaf",
    )
    verify_parser.add_argument(
        "--proof", "-p",
        type=str,
        required=True,
        help="Path to the proof document ('-' for stdin)",
    )
    verify_parser.add_argument(
        "--root", "-r",
        type=str,
        required=True,
        help="Claimed root digest as hex",
    )
    verify_parser.add_argument(
        "--hex",
        action="store_true",
        default=False,
        help="Interpret the target as a hex string",
    )
    verify_parser.add_argument("--json", action="store_true", default=False, help="JSON output")
    verify_parser.add_argument("--debug", action="store_true", default=False, help="Debug mode")
    verify_parser.set_defaults(func=verify.verify_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage CLI configuration",
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
        default="arbor.json",
        help="Path for config file (default: arbor.json)",
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
        print("You can also use environment variables (ARBOR_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        print(json.dumps(args.cli_config.to_dict(), indent=2))
        return EXIT_SUCCESS

    print("Usage: arbor config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed or leaf not found)
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

    log_level = args.log_level or config.log_level
    setup_logging(level=log_level, log_file=config.log_file)

    # Attach config to args for commands to use
    args.cli_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except ArborException as e:
        if getattr(args, "debug", False):
            traceback.print_exc()
        else:
            print(f"Error [{e.code}]: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if getattr(args, "debug", False):
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
