"""
Module 03 - Proof Store
File: proof_store.py

Purpose: Persist distribution records per Merkle root and serve
per-recipient proofs, by root or by the distribution-contract alias
attached after on-chain creation.

Key layout on the backend:
    distribution:record:<root>     canonical JSON of the DistributionRecord
    distribution:alias:<address>   root the alias points at
    distribution:index             JSON list of stored roots

The store is a local cache, not a source of truth: the on-chain root is
authoritative, and a missing record means the claimant must supply the
proof themselves.
"""

from __future__ import annotations

import json
import logging
import threading
from contextlib import contextmanager
from typing import Iterator, Optional, Union

from pydantic import ValidationError

from core.crypto.addresses import is_address, normalize_address
from core.crypto.hashing import is_bytes32_hex
from core.merkle.builder import DistributionTree, build_distribution
from core.merkle.merkle_proofs import MerkleVerifier
from core.schemas.canonical import dumps_canonical
from core.schemas.distribution import DistributionRecord, ProofLookup
from core.schemas.errors import (
    ErrorCodes,
    ProofStoreException,
    RecordImportException,
)
from core.schemas.versioning import (
    UnsupportedRecordFormatError,
    assert_supported_record_format,
)

from .backends import InMemoryKeyValueStore, KeyValueStore


logger = logging.getLogger(__name__)


RECORD_PREFIX = "distribution:record:"
ALIAS_PREFIX = "distribution:alias:"
INDEX_KEY = "distribution:index"

REQUIRED_RECORD_FIELDS: tuple[str, ...] = ("root", "proofs", "recipients")


class ReadWriteLock:
    """Single-writer / many-reader lock."""

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writer:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._readers:
                self._cond.wait()
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


def _record_bytes(record: DistributionRecord) -> bytes:
    return dumps_canonical(record.model_dump(mode="json")).encode("utf-8")


def _same_content(a: DistributionRecord, b: DistributionRecord) -> bool:
    """Equal apart from the alias, which is attached separately."""
    strip = {"distribution_contract"}
    return a.model_dump(mode="json", exclude=strip) == b.model_dump(mode="json", exclude=strip)


class ProofStore:
    """
    Distribution records keyed by root, with secondary alias keys.

    All writes hold the write lock; reads hold the read lock, so a reader
    never observes a record without its alias entry or index update.
    """

    def __init__(self, backend: Optional[KeyValueStore] = None) -> None:
        self.backend: KeyValueStore = backend if backend is not None else InMemoryKeyValueStore()
        self._lock = ReadWriteLock()

    # -------------------------------------------------------------------------
    # Internal helpers (caller holds the lock)
    # -------------------------------------------------------------------------

    def _load(self, root: str) -> Optional[DistributionRecord]:
        raw = self.backend.get(RECORD_PREFIX + root)
        if raw is None:
            return None
        return DistributionRecord.model_validate_json(raw)

    def _write(self, record: DistributionRecord) -> None:
        self.backend.set(RECORD_PREFIX + record.root, _record_bytes(record))

    def _index(self) -> list[str]:
        raw = self.backend.get(INDEX_KEY)
        return json.loads(raw) if raw else []

    def _add_to_index(self, root: str) -> None:
        roots = self._index()
        if root not in roots:
            roots.append(root)
            self.backend.set(INDEX_KEY, json.dumps(roots).encode("utf-8"))

    def _resolve(self, key: str) -> Optional[str]:
        candidate = key.strip().lower()
        if is_bytes32_hex(candidate):
            return candidate if self.backend.get(RECORD_PREFIX + candidate) is not None else None
        if is_address(candidate):
            raw = self.backend.get(ALIAS_PREFIX + candidate)
            return raw.decode("utf-8") if raw else None
        return None

    def _set_alias(self, root: str, address: str) -> None:
        existing = self.backend.get(ALIAS_PREFIX + address)
        if existing is not None and existing.decode("utf-8") != root:
            raise ProofStoreException(
                f"Address {address} is already attached to distribution {existing.decode('utf-8')}",
                code=ErrorCodes.ALIAS_CONFLICT,
                key=address,
            )
        self.backend.set(ALIAS_PREFIX + address, root.encode("utf-8"))

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def save(self, record: Union[DistributionRecord, DistributionTree]) -> DistributionRecord:
        """
        Persist a distribution record under its root.

        Saving identical content again is a no-op. A different record under
        an existing root is rejected.

        Raises:
            ProofStoreException: RECORD_CONFLICT or ALIAS_CONFLICT
        """
        if isinstance(record, DistributionTree):
            record = record.to_record()

        with self._lock.write():
            existing = self._load(record.root)
            if existing is not None:
                if not _same_content(existing, record):
                    raise ProofStoreException(
                        f"A different distribution is already stored under root {record.root}",
                        code=ErrorCodes.RECORD_CONFLICT,
                        key=record.root,
                    )
                if (
                    record.distribution_contract
                    and existing.distribution_contract
                    and record.distribution_contract != existing.distribution_contract
                ):
                    raise ProofStoreException(
                        f"Distribution {record.root} is already attached to {existing.distribution_contract}",
                        code=ErrorCodes.ALIAS_CONFLICT,
                        key=record.root,
                    )
                if record.distribution_contract and not existing.distribution_contract:
                    self._set_alias(record.root, record.distribution_contract)
                    existing = existing.with_distribution_contract(record.distribution_contract)
                    self._write(existing)
                logger.debug(f"Distribution {record.root} already stored")
                return existing

            if record.distribution_contract:
                self._set_alias(record.root, record.distribution_contract)
            self._write(record)
            self._add_to_index(record.root)

        logger.info(f"Saved distribution {record.root} ({len(record.recipients)} recipients)")
        return record

    def attach_distribution_address(self, root: str, address: str) -> DistributionRecord:
        """
        Make ``address`` a second lookup key for the record at ``root``.

        The alias points at the root; the record is not copied.

        Raises:
            ValueError: Malformed address
            ProofStoreException: RECORD_NOT_FOUND or ALIAS_CONFLICT
        """
        alias = normalize_address(address)
        root_key = root.strip().lower()

        with self._lock.write():
            record = self._load(root_key) if is_bytes32_hex(root_key) else None
            if record is None:
                raise ProofStoreException(
                    f"No distribution stored under root {root}",
                    code=ErrorCodes.RECORD_NOT_FOUND,
                    key=root,
                )
            if record.distribution_contract and record.distribution_contract != alias:
                raise ProofStoreException(
                    f"Distribution {root_key} is already attached to {record.distribution_contract}",
                    code=ErrorCodes.ALIAS_CONFLICT,
                    key=root_key,
                )
            self._set_alias(record.root, alias)
            if record.distribution_contract != alias:
                record = record.with_distribution_contract(alias)
                self._write(record)

        logger.info(f"Attached distribution contract {alias} to root {record.root}")
        return record

    def resolve_root(self, key: str) -> Optional[str]:
        """Root for a root or alias key, or None when unknown."""
        with self._lock.read():
            return self._resolve(key)

    def get_record(self, key: str) -> Optional[DistributionRecord]:
        """Record for a root or alias key, or None when unknown."""
        with self._lock.read():
            root = self._resolve(key)
            return self._load(root) if root else None

    def lookup(self, key: str, recipient_address: str) -> Optional[ProofLookup]:
        """
        Amount and proof for a recipient, by root or alias.

        Returns None when the distribution or the recipient is unknown,
        which callers treat as "proof required from user".
        """
        try:
            address = normalize_address(recipient_address)
        except ValueError:
            logger.debug(f"Lookup with malformed recipient address: {recipient_address!r}")
            return None

        record = self.get_record(key)
        if record is None:
            return None
        recipient = record.get_recipient(address)
        if recipient is None:
            return None
        return ProofLookup(
            root=record.root,
            address=address,
            amount=recipient.amount,
            proof=list(record.proofs[address]),
        )

    def list_roots(self) -> list[str]:
        with self._lock.read():
            return list(self._index())

    def export(self, key: str) -> str:
        """
        Serialize a stored record to canonical JSON text.

        Raises:
            ProofStoreException: RECORD_NOT_FOUND
        """
        record = self.get_record(key)
        if record is None:
            raise ProofStoreException(
                f"No distribution stored under {key}",
                code=ErrorCodes.RECORD_NOT_FOUND,
                key=key,
            )
        return _record_bytes(record).decode("utf-8")

    def import_record(self, text: str) -> DistributionRecord:
        """
        Validate exported text and save it.

        Checks that root, proofs and recipients are present, that the
        format version is supported, that the recipients rebuild to the
        declared root and that every stored proof verifies against it.

        Raises:
            RecordImportException: On any validation failure
            ProofStoreException: If it conflicts with stored data
        """
        record = parse_record(text)
        return self.save(record)


def parse_record(text: str) -> DistributionRecord:
    """
    Parse and integrity-check exported distribution text.

    Raises:
        RecordImportException: On any validation failure
    """
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, TypeError) as e:
        raise RecordImportException(f"Distribution export is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise RecordImportException("Distribution export must be a JSON object")

    missing = [name for name in REQUIRED_RECORD_FIELDS if not data.get(name)]
    if missing:
        raise RecordImportException(
            f"Distribution export is missing required fields: {', '.join(missing)}",
            missing=missing,
        )

    version = data.get("format_version")
    if version is not None:
        try:
            assert_supported_record_format(version)
        except UnsupportedRecordFormatError as e:
            raise RecordImportException(str(e), details={"format_version": version}) from e

    try:
        record = DistributionRecord.model_validate(data)
    except ValidationError as e:
        raise RecordImportException(
            f"Distribution export failed validation: {e.errors()[0]['msg']}",
            details={"errors": len(e.errors())},
        ) from e

    rebuilt = build_distribution(record.recipients).to_record()
    if rebuilt.root != record.root:
        raise RecordImportException(
            "Recipients do not rebuild to the declared root",
            details={"declared_root": record.root, "computed_root": rebuilt.root},
        )
    for recipient in record.recipients:
        proof = record.proofs[recipient.address]
        if not MerkleVerifier.verify_claim(recipient.address, recipient.amount, proof, record.root):
            raise RecordImportException(
                f"Stored proof for {recipient.address} does not verify against the root",
                details={"address": recipient.address},
            )
    if record.leaves and record.leaves != rebuilt.leaves:
        raise RecordImportException("Stored leaves do not match the recipients")

    return record.model_validate(
        {**record.model_dump(), "leaves": rebuilt.leaves}
    )


__all__ = [
    "RECORD_PREFIX",
    "ALIAS_PREFIX",
    "INDEX_KEY",
    "REQUIRED_RECORD_FIELDS",
    "ReadWriteLock",
    "ProofStore",
    "parse_record",
]
