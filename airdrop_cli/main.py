"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m airdrop_cli build <recipients.csv|-> [--contract ADDR] [--json]
    python -m airdrop_cli proof <root|contract> <address> [--json]
    python -m airdrop_cli verify <root> <address> <amount> "<proof>" [--json]
    python -m airdrop_cli export <root|contract> [--out PATH]
    python -m airdrop_cli import <record.json|->
    python -m airdrop_cli alias <root> <contract>
    python -m airdrop_cli config --init

Environment Variables:
    AIRDROP_STORE_BACKEND       Store backend: memory or file
    AIRDROP_STORE_PATH          Directory for the file backend
    AIRDROP_LOG_LEVEL           Log level (default: INFO)
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from airdrop_cli.commands import distribution, proof
from airdrop_cli.config import DEFAULT_CONFIG_NAME, get_default_config_template, load_config
from core.schemas.errors import EntitlementException


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def setup_logging(level: str = "INFO", fmt: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        level=log_level,
        format=fmt or "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def _add_json_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="airdrop",
        description="Merkle airdrop CLI - build distributions, look up and verify proofs.",
    )
    parser.add_argument(
        "--version", action="version", version="%(prog)s 0.1.0"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help=f"Path to configuration file (default: ./{DEFAULT_CONFIG_NAME} or ~/.config/airdrop/config.yaml)",
    )
    parser.add_argument(
        "--store",
        type=str,
        default=None,
        help="Directory of the file-backed proof store (overrides config)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Print tracebacks on errors",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- build command ---
    build_parser = subparsers.add_parser(
        "build",
        help="Build a distribution from an address,amount CSV",
        description="Parse recipients, build the Merkle tree and store the record. "
                    "Malformed rows are skipped and reported.",
    )
    build_parser.add_argument("csv_path", type=str, help="CSV file, or - for stdin")
    build_parser.add_argument(
        "--contract",
        type=str,
        default=None,
        help="Distribution contract address to attach",
    )
    _add_json_flag(build_parser)
    build_parser.set_defaults(func=distribution.build_cmd)

    # --- proof command ---
    proof_parser = subparsers.add_parser(
        "proof",
        help="Show the stored proof for an address",
    )
    proof_parser.add_argument("key", type=str, help="Merkle root or distribution contract address")
    proof_parser.add_argument("address", type=str, help="Recipient address")
    _add_json_flag(proof_parser)
    proof_parser.set_defaults(func=proof.proof_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify a proof against a root offline",
        description="Exit code 0 when the proof is valid, 2 when it is not.",
    )
    verify_parser.add_argument("root", type=str, help="Merkle root")
    verify_parser.add_argument("address", type=str, help="Recipient address")
    verify_parser.add_argument("amount", type=str, help="Amount in base units")
    verify_parser.add_argument(
        "proof",
        type=str,
        help="Proof hashes: JSON list or comma/space separated",
    )
    _add_json_flag(verify_parser)
    verify_parser.set_defaults(func=proof.verify_cmd)

    # --- export command ---
    export_parser = subparsers.add_parser(
        "export",
        help="Export a stored distribution as JSON",
    )
    export_parser.add_argument("key", type=str, help="Merkle root or distribution contract address")
    export_parser.add_argument("--out", "-o", type=str, default=None, help="Output file (default: stdout)")
    export_parser.set_defaults(func=distribution.export_cmd)

    # --- import command ---
    import_parser = subparsers.add_parser(
        "import",
        help="Import an exported distribution",
        description="Validates the record (root, proofs, recipients) before storing it.",
    )
    import_parser.add_argument("path", type=str, help="Exported JSON file, or - for stdin")
    _add_json_flag(import_parser)
    import_parser.set_defaults(func=distribution.import_cmd)

    # --- alias command ---
    alias_parser = subparsers.add_parser(
        "alias",
        help="Attach a distribution contract address to a root",
    )
    alias_parser.add_argument("root", type=str, help="Merkle root")
    alias_parser.add_argument("address", type=str, help="Distribution contract address")
    _add_json_flag(alias_parser)
    alias_parser.set_defaults(func=distribution.alias_cmd)

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
        default=DEFAULT_CONFIG_NAME,
        help=f"Path for config file (default: {DEFAULT_CONFIG_NAME})",
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
        print("\nEdit this file to configure your settings.")
        return EXIT_SUCCESS

    print(json.dumps(args.runtime_config.to_dict(), indent=2))
    return EXIT_SUCCESS


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
        config = load_config(args.config, store_path=args.store)
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    # Setup logging
    setup_logging(level=args.log_level or config.logging.level, fmt=config.logging.format)

    # Attach config to args for commands to use
    args.runtime_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except EntitlementException as e:
        if args.debug:
            traceback.print_exc()
        print(f"Error [{e.code}]: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if args.debug:
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
