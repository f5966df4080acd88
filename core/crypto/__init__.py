"""
Core cryptographic utilities.

Module 02 provides Keccak-256 hashing, sorted-pair hashing and
EVM address helpers.
"""
from .hashing import (
    HASH_LENGTH,
    keccak256,
    hash_pair,
    to_hex,
    from_hex,
    is_bytes32_hex,
    bytes32_from_hex,
)
from .addresses import (
    ADDRESS_BYTES,
    is_address,
    normalize_address,
    checksum_address,
    address_to_bytes,
)

__all__ = [
    "HASH_LENGTH",
    "keccak256",
    "hash_pair",
    "to_hex",
    "from_hex",
    "is_bytes32_hex",
    "bytes32_from_hex",
    "ADDRESS_BYTES",
    "is_address",
    "normalize_address",
    "checksum_address",
    "address_to_bytes",
]
