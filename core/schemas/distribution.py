"""
Module 01 - Schemas & Canonicalization
File: distribution.py

Purpose: Recipient and distribution record schemas.
A DistributionRecord is what the Proof Store persists per Merkle root:
the full recipient list, the per-address proofs and the optional
distribution-contract alias attached after on-chain creation.
"""

from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
    model_validator,
)

from core.crypto.addresses import normalize_address
from core.crypto.hashing import is_bytes32_hex

from .versioning import RECORD_FORMAT_VERSION


UINT256_MAX: int = 2**256 - 1


def parse_uint256(value: Any) -> int:
    """
    Coerce a uint256 amount from an int or a plain decimal string.

    Floats, scientific notation ("1e18"), signs and hex are rejected so that
    an amount is never silently rounded.

    Raises:
        ValueError: If the value is not a non-negative integer below 2**256
    """
    if isinstance(value, bool):
        raise ValueError("amount must be an integer, got bool")
    if isinstance(value, int):
        amount = value
    elif isinstance(value, str):
        text = value.strip()
        if not text.isdigit() or not text.isascii():
            raise ValueError(f"amount must be a non-negative decimal integer, got: {value!r}")
        amount = int(text)
    else:
        raise ValueError(f"amount must be an integer, got {type(value).__name__}")
    if amount < 0 or amount > UINT256_MAX:
        raise ValueError(f"amount out of uint256 range: {amount}")
    return amount


class Recipient(BaseModel):
    """
    One (address, amount) entitlement.

    Immutable once included in a tree. The address is stored in its
    lowercase canonical form so uniqueness is case-insensitive.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    address: str = Field(..., description="20-byte EVM address, lowercase 0x hex")
    amount: int = Field(..., description="Entitlement amount (uint256)")

    @field_validator("address", mode="before")
    @classmethod
    def validate_address(cls, v: Any) -> str:
        return normalize_address(v)

    @field_validator("amount", mode="before")
    @classmethod
    def validate_amount(cls, v: Any) -> int:
        return parse_uint256(v)

    @field_serializer("amount", when_used="json")
    def serialize_amount(self, v: int) -> str:
        # uint256 values overflow JSON numbers in most consumers
        return str(v)


class ProofLookup(BaseModel):
    """Result of looking up one recipient in a stored distribution."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    root: str
    address: str
    amount: int
    proof: list[str] = Field(default_factory=list)

    @field_serializer("amount", when_used="json")
    def serialize_amount(self, v: int) -> str:
        return str(v)


class DistributionRecord(BaseModel):
    """
    Persisted distribution: root, recipients and per-address proofs.

    Lifecycle:
    - Created once when a tree is built
    - ``distribution_contract`` attached later as a secondary lookup key
    - Never otherwise mutated; never deleted by the engine
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    format_version: str = Field(default=RECORD_FORMAT_VERSION)
    root: str = Field(..., description="Merkle root, 0x-prefixed 32-byte hex")
    recipients: list[Recipient] = Field(..., min_length=1)
    proofs: dict[str, list[str]] = Field(
        ...,
        description="Recipient address -> sibling hashes, leaf to root",
    )
    leaves: dict[str, str] = Field(
        default_factory=dict,
        description="Recipient address -> leaf hash",
    )
    distribution_contract: str | None = Field(
        default=None,
        description="Distribution contract address, attached after creation",
    )

    @field_validator("root")
    @classmethod
    def validate_root(cls, v: str) -> str:
        if not is_bytes32_hex(v):
            raise ValueError(f"root must be a 0x-prefixed 32-byte hex value, got: {v!r}")
        return v.lower()

    @field_validator("distribution_contract", mode="before")
    @classmethod
    def validate_distribution_contract(cls, v: Any) -> str | None:
        if v is None:
            return None
        return normalize_address(v)

    @field_validator("proofs", mode="before")
    @classmethod
    def validate_proofs(cls, v: Any) -> dict[str, list[str]]:
        if not isinstance(v, dict):
            raise ValueError("proofs must be a mapping of address -> list of hashes")
        normalized: dict[str, list[str]] = {}
        for address, proof in v.items():
            if not isinstance(proof, list):
                raise ValueError(f"proof for {address} must be a list")
            for entry in proof:
                if not is_bytes32_hex(entry):
                    raise ValueError(f"proof entry for {address} is not a 32-byte hex value: {entry!r}")
            normalized[normalize_address(address)] = [p.lower() for p in proof]
        return normalized

    @field_validator("leaves", mode="before")
    @classmethod
    def validate_leaves(cls, v: Any) -> dict[str, str]:
        if v is None:
            return {}
        if not isinstance(v, dict):
            raise ValueError("leaves must be a mapping of address -> hash")
        normalized: dict[str, str] = {}
        for address, leaf in v.items():
            if not is_bytes32_hex(leaf):
                raise ValueError(f"leaf for {address} is not a 32-byte hex value: {leaf!r}")
            normalized[normalize_address(address)] = leaf.lower()
        return normalized

    @model_validator(mode="after")
    def validate_consistency(self) -> "DistributionRecord":
        addresses = [r.address for r in self.recipients]
        if len(set(addresses)) != len(addresses):
            raise ValueError("recipients contain duplicate addresses")
        missing = sorted(set(addresses) - set(self.proofs))
        if missing:
            raise ValueError(f"missing proofs for recipients: {missing}")
        extra = sorted(set(self.proofs) - set(addresses))
        if extra:
            raise ValueError(f"proofs present for unknown addresses: {extra}")
        return self

    @property
    def total_amount(self) -> int:
        return sum(r.amount for r in self.recipients)

    def get_recipient(self, address: str) -> Recipient | None:
        """Find a recipient by address (case-insensitive)."""
        try:
            normalized = normalize_address(address)
        except ValueError:
            return None
        for recipient in self.recipients:
            if recipient.address == normalized:
                return recipient
        return None

    def get_amount(self, address: str) -> int | None:
        recipient = self.get_recipient(address)
        return recipient.amount if recipient else None

    def is_address_in_tree(self, address: str) -> bool:
        return self.get_recipient(address) is not None

    def with_distribution_contract(self, address: str) -> "DistributionRecord":
        """Return a copy of this record with the contract alias set."""
        return self.model_validate(
            {**self.model_dump(), "distribution_contract": address}
        )
