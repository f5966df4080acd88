"""CLI subcommands."""

from airdrop_cli.commands import distribution, proof

__all__ = ["distribution", "proof"]
