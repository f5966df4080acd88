"""
CLI Distribution Commands

Build a distribution from CSV, attach its contract address, and move
records between machines.

Usage:
    airdrop build recipients.csv [--contract 0x...] [--json]
    airdrop alias <root> <contract-address>
    airdrop export <root-or-contract> [--out record.json]
    airdrop import record.json
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from pathlib import Path
from typing import Any

from core.schemas.distribution import DistributionRecord
from orchestrator.service import EntitlementService


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def _service(args: Namespace) -> EntitlementService:
    return EntitlementService.from_config(args.runtime_config)


def _read_input(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def record_summary(record: DistributionRecord) -> dict[str, Any]:
    return {
        "root": record.root,
        "recipients": len(record.recipients),
        "total_amount": str(record.total_amount),
        "distribution_contract": record.distribution_contract,
    }


def print_summary(summary: dict[str, Any], warnings: list[str] | None = None) -> None:
    print(f"Root:         {summary['root']}")
    print(f"Recipients:   {summary['recipients']}")
    print(f"Total amount: {summary['total_amount']}")
    if summary.get("distribution_contract"):
        print(f"Contract:     {summary['distribution_contract']}")
    if warnings:
        print(f"\nSkipped {len(warnings)} row(s):")
        for w in warnings:
            print(f"  - {w}")


def build_cmd(args: Namespace) -> int:
    """Parse a CSV file, build the tree and store the record."""
    text = _read_input(args.csv_path)
    record, parsed = _service(args).build_distribution_from_csv(text, args.contract)

    summary = record_summary(record)
    if args.json:
        summary["skipped"] = parsed.warnings
        print(json.dumps(summary, indent=2))
    else:
        print_summary(summary, parsed.warnings)
    return EXIT_SUCCESS


def alias_cmd(args: Namespace) -> int:
    """Attach a distribution contract address to a stored root."""
    record = _service(args).attach_distribution_address(args.root, args.address)
    if args.json:
        print(json.dumps(record_summary(record), indent=2))
    else:
        print(f"Attached {record.distribution_contract} to {record.root}")
    return EXIT_SUCCESS


def export_cmd(args: Namespace) -> int:
    """Write a stored record as canonical JSON."""
    text = _service(args).export_distribution(args.key)
    if args.out:
        Path(args.out).write_text(text, encoding="utf-8")
        logger.info(f"Exported {args.key} to {args.out}")
        print(f"Exported to {args.out}")
    else:
        print(text)
    return EXIT_SUCCESS


def import_cmd(args: Namespace) -> int:
    """Validate an exported record and store it."""
    record = _service(args).import_distribution(_read_input(args.path))
    if args.json:
        print(json.dumps(record_summary(record), indent=2))
    else:
        print(f"Imported distribution {record.root} ({len(record.recipients)} recipients)")
    return EXIT_SUCCESS
