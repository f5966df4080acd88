"""
Module 02 - Leaf Encoder
Deterministic (address, amount) -> 32-byte leaf.

Owner: Protocol/Crypto Engineer
Module ID: M02

Leaf rule (hard contract with the distribution contract):
    leaf = keccak256(abi.encode(address account, uint256 amount))

abi.encode left-pads the address to 32 bytes and writes the amount as a
32-byte big-endian word. Any deviation produces proofs for a different
root than the one recorded on-chain, which only shows up when a claim
reverts, so malformed input is rejected before hashing.
"""
from __future__ import annotations

from typing import Any

from eth_abi import encode as abi_encode

from core.crypto.addresses import address_to_bytes, normalize_address
from core.crypto.hashing import keccak256
from core.schemas.distribution import Recipient, parse_uint256
from core.schemas.errors import ErrorCodes, LeafEncodingException


LEAF_ABI_TYPES: tuple[str, str] = ("address", "uint256")


def encode_leaf(address: str, amount: Any) -> bytes:
    """
    ABI-encode one (address, uint256) pair.

    Args:
        address: 0x-prefixed 20-byte address (any case)
        amount: Non-negative integer below 2**256, or its decimal string

    Returns:
        64 bytes: 32-byte padded address followed by 32-byte amount

    Raises:
        LeafEncodingException: On a malformed address or amount
    """
    try:
        normalized = normalize_address(address)
    except ValueError as e:
        raise LeafEncodingException(
            str(e), code=ErrorCodes.INVALID_ADDRESS, value=str(address)
        ) from e
    try:
        value = parse_uint256(amount)
    except ValueError as e:
        raise LeafEncodingException(
            str(e), code=ErrorCodes.INVALID_AMOUNT, value=str(amount)
        ) from e
    return abi_encode(list(LEAF_ABI_TYPES), [address_to_bytes(normalized), value])


def leaf_hash(address: str, amount: Any) -> bytes:
    """keccak256 of the ABI-encoded pair."""
    return keccak256(encode_leaf(address, amount))


def recipient_leaf(recipient: Recipient) -> bytes:
    """Leaf for an already validated recipient."""
    return leaf_hash(recipient.address, recipient.amount)


__all__ = [
    "LEAF_ABI_TYPES",
    "encode_leaf",
    "leaf_hash",
    "recipient_leaf",
]
