"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m hashtree_cli root <items_file> [--hash NAME] [--salt S] [--hex] [--json]
    python -m hashtree_cli prove <items_file> (--item ITEM | --index N) [--out PATH]
    python -m hashtree_cli verify --proof PATH --item ITEM [--root HEX] [--json]

Items files hold one item per line ('-' reads stdin); with --hex every
line (and --item) is hex-decoded instead of taken as UTF-8 text.

Environment Variables:
    HASHTREE_HASH                 Hash provider (default: blake2b)
    HASHTREE_SALT                 Leaf salt
    HASHTREE_PARALLEL_THRESHOLD   Item count at which construction goes parallel
    HASHTREE_MAX_WORKERS          Thread pool size for parallel construction
    HASHTREE_LOG_LEVEL            Log level (default: INFO)
    HASHTREE_LOG_FILE             Optional log file
"""

from __future__ import annotations

import argparse
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

import yaml

from hashtree.config.runtime import RuntimeConfig, get_default_config
from hashtree.crypto.providers import available_providers
from hashtree.schemas.errors import HashTreeException

from hashtree_cli.commands import prove, root, verify
from hashtree_cli.commands.common import EXIT_RUNTIME_ERROR


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


def load_config(path: Path | None) -> RuntimeConfig:
    """Load config from a YAML file (with env overrides) or from the environment."""
    if path is None:
        return get_default_config()
    return RuntimeConfig.from_yaml(path).with_env_overrides()


def _add_tree_options(parser: argparse.ArgumentParser) -> None:
    """Options shared by every subcommand that hashes."""
    parser.add_argument(
        "--hash",
        type=str,
        default=None,
        choices=available_providers(),
        help="Hash algorithm (default: from config, blake2b)",
    )
    salt_group = parser.add_mutually_exclusive_group()
    salt_group.add_argument(
        "--salt",
        type=str,
        default=None,
        help="Salt appended to every item before leaf hashing (UTF-8)",
    )
    salt_group.add_argument(
        "--salt-hex",
        type=str,
        default=None,
        help="Salt given as hex",
    )
    parser.add_argument(
        "--hex",
        action="store_true",
        default=False,
        help="Items are hex-encoded rather than UTF-8 text",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Print tracebacks on errors",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="hashtree",
        description="Build Merkle roots, generate membership proofs and verify them.",
    )
    parser.add_argument(
        "--version", action="version", version="%(prog)s 0.1.0"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to a YAML configuration file",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- root command ---
    root_parser = subparsers.add_parser(
        "root",
        help="Compute the Merkle root of a file of items",
    )
    root_parser.add_argument(
        "items_file",
        type=str,
        help="File with one item per line ('-' for stdin)",
    )
    _add_tree_options(root_parser)
    root_parser.set_defaults(func=root.root_cmd)

    # --- prove command ---
    prove_parser = subparsers.add_parser(
        "prove",
        help="Generate a membership proof for one item",
    )
    prove_parser.add_argument(
        "items_file",
        type=str,
        help="File with one item per line ('-' for stdin)",
    )
    target = prove_parser.add_mutually_exclusive_group(required=True)
    target.add_argument(
        "--item",
        type=str,
        default=None,
        help="Item to prove (first exact match)",
    )
    target.add_argument(
        "--index",
        type=int,
        default=None,
        help="Position of the item to prove",
    )
    prove_parser.add_argument(
        "--out", "-o",
        type=str,
        default=None,
        help="Write the proof document here instead of stdout",
    )
    _add_tree_options(prove_parser)
    prove_parser.set_defaults(func=prove.prove_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify a membership proof against a root",
    )
    verify_parser.add_argument(
        "--proof", "-p",
        type=str,
        required=True,
        help="Proof document from 'prove', or a bare {index, hashes} proof",
    )
    verify_parser.add_argument(
        "--item",
        type=str,
        required=True,
        help="Item the proof is claimed for",
    )
    verify_parser.add_argument(
        "--root",
        type=str,
        default=None,
        help="Root to verify against (default: root stored in the proof document)",
    )
    _add_tree_options(verify_parser)
    verify_parser.set_defaults(func=verify.verify_cmd)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    # Load configuration
    try:
        config = load_config(args.config)
    except (OSError, ValueError, TypeError, yaml.YAMLError) as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    # Setup logging
    log_level = args.log_level or config.logging.level
    setup_logging(level=log_level, log_file=config.logging.file)

    # Attach config to args for commands to use
    args.runtime_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except (HashTreeException, OSError, ValueError) as e:
        if args.debug:
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
