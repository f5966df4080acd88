"""
Common test fixtures shared by all modules.

Provides factory functions for core entitlement data structures:
- Addresses and recipient lists
- DistributionTree / DistributionRecord
- ProofStore over an in-memory backend
"""

from typing import Optional

from core.merkle.builder import DistributionTree, build_distribution
from core.schemas.distribution import DistributionRecord, Recipient
from core.store.backends import InMemoryKeyValueStore
from core.store.proof_store import ProofStore


# =============================================================================
# Addresses
# =============================================================================

ADDR_A = "0x" + "aa" * 20
ADDR_B = "0x" + "bb" * 20
ADDR_C = "0x" + "cc" * 20
ADDR_D = "0x" + "dd" * 20
ADDR_E = "0x" + "ee" * 20

DISTRIBUTION_CONTRACT = "0x" + "d1" * 20
OTHER_CONTRACT = "0x" + "d2" * 20
REPUTATION_CONTRACT = "0x" + "e1" * 20


def make_address(n: int) -> str:
    """Deterministic address for index n (n >= 1)."""
    return "0x" + f"{n:040x}"


def make_hash(byte: int) -> str:
    """0x-prefixed 32-byte hex value made of one repeated byte."""
    return "0x" + f"{byte:02x}" * 32


# =============================================================================
# Recipients
# =============================================================================

def make_recipients(count: int = 3, base_amount: int = 100) -> list[Recipient]:
    """
    Create ``count`` recipients with distinct addresses and amounts.

    Amounts are base_amount * (i + 1).
    """
    return [
        Recipient(address=make_address(i + 1), amount=base_amount * (i + 1))
        for i in range(count)
    ]


def make_pair_recipients(amount_a: int = 1000) -> list[tuple[str, int]]:
    """The two-recipient list used throughout the Merkle tests."""
    return [(ADDR_A, amount_a), (ADDR_B, 500)]


# =============================================================================
# Trees and Records
# =============================================================================

def make_tree(recipients: Optional[list] = None) -> DistributionTree:
    """Build a tree from recipients (default: the two-recipient pairs)."""
    return build_distribution(recipients if recipients is not None else make_pair_recipients())


def make_record(
    recipients: Optional[list] = None,
    distribution_contract: Optional[str] = None,
) -> DistributionRecord:
    """Build a DistributionRecord, optionally with an attached contract."""
    record = make_tree(recipients).to_record()
    if distribution_contract:
        record = record.with_distribution_contract(distribution_contract)
    return record


def make_store() -> ProofStore:
    """ProofStore over a fresh in-memory backend."""
    return ProofStore(InMemoryKeyValueStore())
