"""
Module 03 - Proof Store

Persists distribution records per root and serves per-recipient proofs
by root or by distribution-contract alias, over an injectable key-value
backend (in-memory or file).
"""

from .backends import (
    FileKeyValueStore,
    InMemoryKeyValueStore,
    KeyValueStore,
    create_backend,
)
from .proof_store import (
    ALIAS_PREFIX,
    INDEX_KEY,
    RECORD_PREFIX,
    REQUIRED_RECORD_FIELDS,
    ProofStore,
    ReadWriteLock,
    parse_record,
)

__all__ = [
    "FileKeyValueStore",
    "InMemoryKeyValueStore",
    "KeyValueStore",
    "create_backend",
    "ALIAS_PREFIX",
    "INDEX_KEY",
    "RECORD_PREFIX",
    "REQUIRED_RECORD_FIELDS",
    "ProofStore",
    "ReadWriteLock",
    "parse_record",
]
