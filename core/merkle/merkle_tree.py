"""
Module 02 - Merkle Tree Implementation
Deterministic sorted-pair Merkle tree construction, proof generation,
and verification.

Owner: Protocol/Crypto Engineer
Module ID: M02

Canonical Commitment Rules (Hard Contracts):
1. Leaf hashing: keccak256(abi.encode(address, uint256))
   - Implemented in core.merkle.leaf
2. Leaf order: leaves are sorted ascending (bytewise) before building
3. Parent hashing: parent = keccak256(min(a, b) + max(a, b))
4. Odd rule: carry-up. An unpaired last node is promoted unchanged to the
   next level and contributes no proof entry.
5. Empty leaves: rejected
6. Single leaf: root = leaf, proof = []

Verification is OpenZeppelin ``MerkleProof.verify``: fold the proof
over the leaf with sorted-pair hashing and compare against the root.
Proofs built under rule 4 carry no position flags and verify under it
unchanged, which is the same convention merkletreejs uses with
``sortPairs: true``.

Determinism Notes:
- Sorting leaves makes the root a function of the leaf multiset only
- Sorting pairs removes any left/right ambiguity from proofs
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from core.crypto.hashing import HASH_LENGTH, hash_pair


@dataclass(frozen=True)
class MerkleProof:
    """
    A Merkle inclusion proof for a single leaf.

    Attributes:
        leaf: The leaf hash being proven (32 bytes)
        siblings: Sibling hashes from leaf level to just below the root
        root: The Merkle root this proof is against
    """
    leaf: bytes
    root: bytes
    siblings: list[bytes] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate proof structure."""
        if len(self.leaf) != HASH_LENGTH:
            raise ValueError(f"Leaf must be {HASH_LENGTH} bytes, got {len(self.leaf)}")
        if len(self.root) != HASH_LENGTH:
            raise ValueError(f"Root must be {HASH_LENGTH} bytes, got {len(self.root)}")
        for sibling in self.siblings:
            if len(sibling) != HASH_LENGTH:
                raise ValueError(f"Sibling must be {HASH_LENGTH} bytes, got {len(sibling)}")


def merkle_parent(left: bytes, right: bytes) -> bytes:
    """
    Compute the parent hash of two child nodes.

    Order-insensitive: merkle_parent(a, b) == merkle_parent(b, a).
    """
    return hash_pair(left, right)


def _check_leaves(leaves: Sequence[bytes]) -> None:
    if len(leaves) == 0:
        raise ValueError("Cannot build a Merkle tree from an empty leaf list")
    for i, leaf in enumerate(leaves):
        if len(leaf) != HASH_LENGTH:
            raise ValueError(
                f"Leaf {i} must be {HASH_LENGTH} bytes, got {len(leaf)}"
            )


def build_merkle_levels(leaves: Sequence[bytes]) -> list[list[bytes]]:
    """
    Build every level of the tree, leaves first.

    Algorithm:
    1. Sort leaves ascending
    2. Pair adjacent nodes, hash each pair sorted
    3. If a level has an odd count, carry the last node up unchanged
    4. Repeat until a single root remains

    Example: [a, b, c] -> [[a, b, c], [H(a,b), c], [H(H(a,b), c)]]

    Returns:
        List of levels; levels[0] is the sorted leaves, levels[-1] == [root]

    Raises:
        ValueError: If leaves is empty or a leaf is not 32 bytes
    """
    _check_leaves(leaves)

    levels: list[list[bytes]] = [sorted(leaves)]

    while len(levels[-1]) > 1:
        current_level = levels[-1]
        next_level: list[bytes] = []
        for i in range(0, len(current_level) - 1, 2):
            next_level.append(merkle_parent(current_level[i], current_level[i + 1]))
        if len(current_level) % 2 == 1:
            next_level.append(current_level[-1])
        levels.append(next_level)

    return levels


def build_merkle_root(leaves: Sequence[bytes]) -> bytes:
    """
    Build a Merkle root from a sequence of leaf hashes.

    Input order does not matter.

    Returns:
        32-byte Merkle root
    """
    return build_merkle_levels(leaves)[-1][0]


def proof_from_levels(levels: Sequence[Sequence[bytes]], index: int) -> list[bytes]:
    """
    Collect the sibling path for the leaf at ``index`` of ``levels[0]``.

    A node carried up without a partner contributes nothing at that level.
    """
    if index < 0 or index >= len(levels[0]):
        raise IndexError(
            f"Leaf index {index} out of range for {len(levels[0])} leaves"
        )

    siblings: list[bytes] = []
    current_index = index
    for level in levels[:-1]:
        sibling_index = current_index ^ 1
        if sibling_index < len(level):
            siblings.append(level[sibling_index])
        current_index //= 2
    return siblings


def build_merkle_proof(leaves: Sequence[bytes], leaf: bytes) -> MerkleProof:
    """
    Generate a Merkle proof for a given leaf.

    Args:
        leaves: All leaf hashes of the tree (any order)
        leaf: The leaf to prove

    Returns:
        MerkleProof with leaf, siblings (leaf-to-root) and root

    Raises:
        ValueError: If leaves is empty or does not contain ``leaf``
    """
    levels = build_merkle_levels(leaves)
    try:
        index = levels[0].index(leaf)
    except ValueError:
        raise ValueError("Leaf is not part of the tree") from None

    return MerkleProof(
        leaf=leaf,
        siblings=proof_from_levels(levels, index),
        root=levels[-1][0],
    )


def process_proof(leaf: bytes, siblings: Sequence[bytes]) -> bytes:
    """
    Recompute a root by folding siblings over the leaf.

    Mirrors OpenZeppelin ``MerkleProof.processProof``.
    """
    computed = leaf
    for sibling in siblings:
        computed = merkle_parent(computed, sibling)
    return computed


def verify_merkle_proof(proof: MerkleProof) -> bool:
    """
    Verify a Merkle proof.

    Returns:
        True if replaying the proof reproduces the claimed root
    """
    return process_proof(proof.leaf, proof.siblings) == proof.root


def compute_tree_depth(num_leaves: int) -> int:
    """
    Compute the number of levels (leaves to root, inclusive).

    A single leaf has depth 1, two leaves have depth 2, three have depth 3.
    """
    if num_leaves == 0:
        return 0

    depth = 1
    n = num_leaves
    while n > 1:
        n = (n + 1) // 2
        depth += 1
    return depth


__all__ = [
    "MerkleProof",
    "merkle_parent",
    "build_merkle_levels",
    "build_merkle_root",
    "proof_from_levels",
    "build_merkle_proof",
    "process_proof",
    "verify_merkle_proof",
    "compute_tree_depth",
]
