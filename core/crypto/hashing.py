"""
Module 02 - Hashing Utilities
Keccak-256 hashing and hex helpers for Merkle commitments.

Owner: Protocol/Crypto Engineer
Module ID: M02

This module provides:
- Keccak-256 hashing for raw bytes (the EVM hash, not NIST SHA3-256)
- Sorted-pair hashing used for every internal tree node
- Hex encoding/decoding with 0x prefix
- Shape checks for 32-byte hex values

Security/Determinism Notes:
- Always hash raw bytes exactly as specified
- Pair hashing sorts its inputs, so callers never tag left/right
- This module must not import from core.schemas (schemas import it)
"""
from __future__ import annotations

import re

from eth_utils import keccak


HASH_LENGTH = 32

_BYTES32_HEX_RE = re.compile(r"^0x[0-9a-fA-F]{64}$")


def keccak256(data: bytes) -> bytes:
    """
    Compute the Keccak-256 hash of raw bytes.

    Args:
        data: Raw bytes to hash

    Returns:
        32-byte Keccak-256 digest

    Example:
        >>> keccak256(b"").hex()
        'c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470'
    """
    return keccak(primitive=data)


def hash_pair(a: bytes, b: bytes) -> bytes:
    """
    Hash two child nodes in sorted order.

    parent = keccak256(min(a, b) + max(a, b))

    This matches OpenZeppelin's ``MerkleProof`` commutative hashing, so
    proofs never need left/right position flags.
    """
    if b < a:
        a, b = b, a
    return keccak256(a + b)


def to_hex(data: bytes) -> str:
    """
    Convert bytes to hexadecimal string with 0x prefix.

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert hexadecimal string (with 0x prefix) to bytes.

    Raises:
        ValueError: If string doesn't start with 0x, has odd length,
                   or contains invalid hex characters
    """
    if not hex_string.startswith("0x"):
        raise ValueError(
            f"Hex string must start with '0x' prefix, got: {hex_string[:10]}..."
        )

    hex_content = hex_string[2:]

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length after 0x prefix, "
            f"got length {len(hex_content)}"
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e


def is_bytes32_hex(value: object) -> bool:
    """True for a 66-character string: ``0x`` followed by 64 hex digits."""
    return isinstance(value, str) and bool(_BYTES32_HEX_RE.match(value))


def bytes32_from_hex(hex_string: str) -> bytes:
    """
    Decode a 32-byte hex value.

    Raises:
        ValueError: If the string is not exactly ``0x`` + 64 hex digits
    """
    if not is_bytes32_hex(hex_string):
        raise ValueError(f"Expected a 32-byte 0x-prefixed hex value, got: {hex_string!r}")
    return bytes.fromhex(hex_string[2:])


__all__ = [
    "HASH_LENGTH",
    "keccak256",
    "hash_pair",
    "to_hex",
    "from_hex",
    "is_bytes32_hex",
    "bytes32_from_hex",
]
