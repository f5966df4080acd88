"""
Module 02 - Address Utilities

EVM address shape checks and normalization. Addresses are compared
case-insensitively everywhere in the engine, so the canonical form is
lowercase ``0x`` + 40 hex digits (checksums are accepted but not required).
"""
from __future__ import annotations

from eth_utils import is_hex_address, to_checksum_address


ADDRESS_BYTES = 20


def is_address(value: object) -> bool:
    """True for a ``0x``-prefixed, 40-hex-digit string."""
    return (
        isinstance(value, str)
        and value.startswith("0x")
        and len(value) == 2 + 2 * ADDRESS_BYTES
        and is_hex_address(value)
    )


def normalize_address(value: object) -> str:
    """
    Return the lowercase canonical form of an address.

    Raises:
        ValueError: If the value is not a 20-byte hex address
    """
    if not isinstance(value, str):
        raise ValueError(f"Address must be a string, got {type(value).__name__}")
    candidate = value.strip()
    if not is_address(candidate):
        raise ValueError(f"Invalid EVM address: {value!r}")
    return candidate.lower()


def checksum_address(value: str) -> str:
    """EIP-55 checksummed form, for display only."""
    return to_checksum_address(normalize_address(value))


def address_to_bytes(value: str) -> bytes:
    """Decode a normalized address into its 20 raw bytes."""
    return bytes.fromhex(normalize_address(value)[2:])


__all__ = [
    "ADDRESS_BYTES",
    "is_address",
    "normalize_address",
    "checksum_address",
    "address_to_bytes",
]
