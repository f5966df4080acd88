"""
Module 02 - Distribution Tree Builder

Turns a recipient set into {root, leaf per address, proof per address}.

Construction is atomic: every recipient is validated and duplicate
addresses are rejected before any hash is computed, and the tree is
only returned once every proof has been derived.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Union

from pydantic import ValidationError

from core.crypto.addresses import normalize_address
from core.crypto.hashing import to_hex
from core.merkle.leaf import recipient_leaf
from core.merkle.merkle_tree import (
    MerkleProof,
    build_merkle_levels,
    proof_from_levels,
    verify_merkle_proof,
)
from core.schemas.distribution import DistributionRecord, Recipient
from core.schemas.errors import DistributionConstructionException, ErrorCodes


logger = logging.getLogger(__name__)


RecipientInput = Union[Recipient, Mapping[str, Any], tuple[str, Any]]


@dataclass(frozen=True)
class DistributionTree:
    """A fully built distribution: root plus per-address leaves and proofs."""
    root: bytes
    recipients: tuple[Recipient, ...]
    leaf_of: dict[str, bytes] = field(default_factory=dict)
    proof_of: dict[str, list[bytes]] = field(default_factory=dict)

    @property
    def root_hex(self) -> str:
        return to_hex(self.root)

    @property
    def total_amount(self) -> int:
        return sum(r.amount for r in self.recipients)

    def proof_for(self, address: str) -> MerkleProof | None:
        """Proof for an address, or None if it is not in the tree."""
        try:
            key = normalize_address(address)
        except ValueError:
            return None
        if key not in self.leaf_of:
            return None
        return MerkleProof(leaf=self.leaf_of[key], siblings=list(self.proof_of[key]), root=self.root)

    def to_record(self) -> DistributionRecord:
        """Serializable record for the Proof Store."""
        return DistributionRecord(
            root=self.root_hex,
            recipients=list(self.recipients),
            proofs={
                address: [to_hex(p) for p in proof]
                for address, proof in self.proof_of.items()
            },
            leaves={address: to_hex(leaf) for address, leaf in self.leaf_of.items()},
        )


def _coerce_recipient(item: RecipientInput, position: int) -> Recipient:
    try:
        if isinstance(item, Recipient):
            return item
        if isinstance(item, tuple):
            address, amount = item
            return Recipient(address=address, amount=amount)
        return Recipient.model_validate(dict(item))
    except ValidationError as e:
        failed = {str(err["loc"][0]) for err in e.errors() if err["loc"]}
        code = ErrorCodes.INVALID_ADDRESS if "address" in failed else ErrorCodes.INVALID_AMOUNT
        raise DistributionConstructionException(
            f"Invalid recipient at position {position}: {e.errors()[0]['msg']}",
            code=code,
            details={"position": position},
        ) from e
    except (TypeError, ValueError) as e:
        raise DistributionConstructionException(
            f"Invalid recipient at position {position}: {e}",
            details={"position": position},
        ) from e


def validate_recipients(recipients: Iterable[RecipientInput]) -> list[Recipient]:
    """
    Normalize and validate a recipient set without hashing anything.

    Raises:
        DistributionConstructionException: empty set, malformed entry,
            or duplicate address (case-insensitive)
    """
    validated: list[Recipient] = []
    seen: set[str] = set()
    for position, item in enumerate(recipients):
        recipient = _coerce_recipient(item, position)
        if recipient.address in seen:
            raise DistributionConstructionException(
                f"Duplicate recipient address: {recipient.address}",
                code=ErrorCodes.DUPLICATE_RECIPIENT,
                address=recipient.address,
                details={"position": position},
            )
        seen.add(recipient.address)
        validated.append(recipient)

    if not validated:
        raise DistributionConstructionException(
            "Cannot build a distribution from an empty recipient set",
            code=ErrorCodes.EMPTY_RECIPIENTS,
        )
    return validated


def build_distribution(recipients: Iterable[RecipientInput]) -> DistributionTree:
    """
    Build a distribution tree from recipients.

    Args:
        recipients: Recipient models, {"address", "amount"} mappings, or
            (address, amount) tuples, in any order

    Returns:
        DistributionTree whose root is independent of input order

    Raises:
        DistributionConstructionException: See validate_recipients
    """
    validated = validate_recipients(recipients)

    leaf_of = {r.address: recipient_leaf(r) for r in validated}
    levels = build_merkle_levels(list(leaf_of.values()))
    root = levels[-1][0]

    index_of = {leaf: i for i, leaf in enumerate(levels[0])}
    proof_of = {
        address: proof_from_levels(levels, index_of[leaf])
        for address, leaf in leaf_of.items()
    }

    tree = DistributionTree(
        root=root,
        recipients=tuple(validated),
        leaf_of=leaf_of,
        proof_of=proof_of,
    )
    logger.info(
        f"Built distribution {tree.root_hex} with {len(validated)} recipients "
        f"(depth {len(levels)})"
    )
    return tree


def verify_recipient(recipient: RecipientInput, proof: Iterable[bytes], root: bytes) -> bool:
    """
    Check that a recipient's leaf plus proof reproduces ``root``.

    Malformed recipients simply fail verification.
    """
    try:
        validated = _coerce_recipient(recipient, 0)
    except DistributionConstructionException:
        return False
    try:
        candidate = MerkleProof(leaf=recipient_leaf(validated), siblings=list(proof), root=root)
    except ValueError:
        return False
    return verify_merkle_proof(candidate)


__all__ = [
    "RecipientInput",
    "DistributionTree",
    "validate_recipients",
    "build_distribution",
    "verify_recipient",
]
