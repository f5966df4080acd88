"""
Test fixtures package for entitlement engine tests.

This package provides factory functions and fake collaborators.
Organized into layers:
- common.py: Addresses, recipients, trees, records and stores
- chain.py: FakeChain implementing ChainReader and ChainWriter

Usage:
    from fixtures import make_record, FakeChain

    def test_something():
        record = make_record(distribution_contract=DISTRIBUTION_CONTRACT)
"""

from .common import (
    ADDR_A,
    ADDR_B,
    ADDR_C,
    ADDR_D,
    ADDR_E,
    DISTRIBUTION_CONTRACT,
    OTHER_CONTRACT,
    REPUTATION_CONTRACT,
    make_address,
    make_hash,
    make_recipients,
    make_record,
    make_pair_recipients,
    make_store,
    make_tree,
)

from .chain import FakeChain

__all__ = [
    # Common
    "ADDR_A",
    "ADDR_B",
    "ADDR_C",
    "ADDR_D",
    "ADDR_E",
    "DISTRIBUTION_CONTRACT",
    "OTHER_CONTRACT",
    "REPUTATION_CONTRACT",
    "make_address",
    "make_hash",
    "make_recipients",
    "make_record",
    "make_pair_recipients",
    "make_store",
    "make_tree",
    # Chain
    "FakeChain",
]
