"""
Airdrop CLI

Command-line interface for the Merkle airdrop entitlement engine.

Usage:
    python -m airdrop_cli build recipients.csv
    python -m airdrop_cli proof <root-or-contract> <address>
    python -m airdrop_cli verify <root> <address> <amount> "<proof>"
    python -m airdrop_cli export <root> --out record.json
    python -m airdrop_cli import record.json
    python -m airdrop_cli alias <root> <contract-address>
"""

__version__ = "0.1.0"
