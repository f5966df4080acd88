"""
Module 02 - Merkle Proofs Convenience Wrappers
Thin wrappers around the tree and leaf functions for a cleaner API.

Owner: Protocol/Crypto Engineer
Module ID: M02

This module provides class-based interfaces:
- MerkleProver: Generate proofs for leaves or (address, amount) pairs
- MerkleVerifier: Verify proofs, including hex-encoded ones as stored
  in distribution records and pasted by users
"""
from __future__ import annotations

from typing import Any, Sequence

from core.crypto.hashing import bytes32_from_hex
from core.merkle.leaf import leaf_hash
from core.merkle.merkle_tree import (
    MerkleProof,
    build_merkle_proof,
    build_merkle_root,
    process_proof,
    verify_merkle_proof,
)


class MerkleProver:
    """
    Convenience class for generating Merkle proofs.

    Example:
        >>> leaves = [leaf_hash(a, v) for a, v in pairs]
        >>> proof = MerkleProver.prove(leaves, leaves[1])
        >>> proof.leaf == leaves[1]
        True
    """

    @staticmethod
    def prove(leaves: Sequence[bytes], leaf: bytes) -> MerkleProof:
        """
        Generate a Merkle proof for ``leaf``.

        Raises:
            ValueError: If leaves is empty or does not contain ``leaf``
        """
        return build_merkle_proof(leaves, leaf)

    @staticmethod
    def prove_pair(pairs: Sequence[tuple[str, Any]], address: str, amount: Any) -> MerkleProof:
        """
        Generate a Merkle proof for one (address, amount) pair.

        Pairs are first converted to leaves via the ABI leaf encoding.
        """
        leaves = [leaf_hash(a, v) for a, v in pairs]
        return build_merkle_proof(leaves, leaf_hash(address, amount))

    @staticmethod
    def compute_root(leaves: Sequence[bytes]) -> bytes:
        """Compute the Merkle root for a sequence of leaves."""
        return build_merkle_root(leaves)


class MerkleVerifier:
    """
    Convenience class for verifying Merkle proofs.

    Example:
        >>> MerkleVerifier.verify(MerkleProver.prove(leaves, leaves[1]))
        True
    """

    @staticmethod
    def verify(proof: MerkleProof) -> bool:
        """Verify a Merkle proof."""
        return verify_merkle_proof(proof)

    @staticmethod
    def verify_leaf_in_root(leaf: bytes, siblings: Sequence[bytes], root: bytes) -> bool:
        """Verify a leaf is included in a Merkle root using raw components."""
        return process_proof(leaf, siblings) == root

    @staticmethod
    def verify_claim(address: str, amount: Any, proof: Sequence[str], root: str) -> bool:
        """
        Verify an (address, amount) claim against a hex root.

        This is the off-chain equivalent of the contract's claim check.
        Malformed hex in the proof or root fails verification rather
        than raising.
        """
        try:
            siblings = [bytes32_from_hex(p) for p in proof]
            root_bytes = bytes32_from_hex(root)
        except ValueError:
            return False
        return MerkleVerifier.verify_leaf_in_root(leaf_hash(address, amount), siblings, root_bytes)


__all__ = [
    "MerkleProver",
    "MerkleVerifier",
]
