"""
Module 02 - Merkle Tree and Commitments
Deterministic sorted-pair Merkle tree construction + proof generation/verification.

Owner: Protocol/Crypto Engineer
Module ID: M02

This module provides:
- encode_leaf / leaf_hash: ABI (address, uint256) leaf encoding
- build_distribution: Recipient set -> root + per-address proofs
- MerkleProof: Dataclass representing a Merkle inclusion proof
- build_merkle_root / build_merkle_proof / verify_merkle_proof

Canonical Commitment Rules:
1. Leaf hashing: keccak256(abi.encode(address, uint256))
2. Leaves sorted before building
3. Parent hashing: keccak256(sorted(a, b))
4. Odd node: carried up unchanged
5. Single leaf: root = leaf

Usage:
    from core.merkle import build_distribution, MerkleVerifier

    tree = build_distribution([("0xaaa...", 1000), ("0xbbb...", 500)])
    proof = tree.proof_for("0xaaa...")
    assert MerkleVerifier.verify(proof)
"""
from .leaf import (
    LEAF_ABI_TYPES,
    encode_leaf,
    leaf_hash,
    recipient_leaf,
)

from .merkle_tree import (
    MerkleProof,
    merkle_parent,
    build_merkle_levels,
    build_merkle_root,
    proof_from_levels,
    build_merkle_proof,
    process_proof,
    verify_merkle_proof,
    compute_tree_depth,
)

from .merkle_proofs import (
    MerkleProver,
    MerkleVerifier,
)

from .builder import (
    DistributionTree,
    build_distribution,
    validate_recipients,
    verify_recipient,
)


__all__ = [
    # Leaf encoding
    "LEAF_ABI_TYPES",
    "encode_leaf",
    "leaf_hash",
    "recipient_leaf",
    # Core types
    "MerkleProof",
    "DistributionTree",
    # Core functions
    "merkle_parent",
    "build_merkle_levels",
    "build_merkle_root",
    "proof_from_levels",
    "build_merkle_proof",
    "process_proof",
    "verify_merkle_proof",
    "compute_tree_depth",
    "build_distribution",
    "validate_recipients",
    "verify_recipient",
    # Convenience classes
    "MerkleProver",
    "MerkleVerifier",
]
