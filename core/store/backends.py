"""
Module 03 - Proof Store Backends
File: backends.py

Purpose: Injectable key-value persistence for the Proof Store.
The store only ever needs ``get(key) -> bytes | None`` and
``set(key, value)``; any technology offering those two calls can back it.
"""

from __future__ import annotations

import os
import re
import tempfile
import threading
from pathlib import Path
from typing import Optional, Protocol, runtime_checkable


_KEY_RE = re.compile(r"^[A-Za-z0-9_.:\-]+$")


def _check_key(key: str) -> None:
    if not key or not _KEY_RE.match(key):
        raise ValueError(f"Invalid store key: {key!r}")


@runtime_checkable
class KeyValueStore(Protocol):
    """Local persistent key-value store."""

    def get(self, key: str) -> Optional[bytes]:
        """Return the stored bytes, or None when absent."""
        ...

    def set(self, key: str, value: bytes) -> None:
        """Store bytes under key, replacing any previous value."""
        ...


class InMemoryKeyValueStore:
    """Dict-backed store for tests and ephemeral sessions."""

    def __init__(self) -> None:
        self._data: dict[str, bytes] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[bytes]:
        _check_key(key)
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: bytes) -> None:
        _check_key(key)
        with self._lock:
            self._data[key] = bytes(value)

    def __len__(self) -> int:
        return len(self._data)


class FileKeyValueStore:
    """
    One file per key under a directory.

    Writes go to a temp file in the same directory and are moved into
    place with ``os.replace`` so readers never see a half-written value.
    """

    SUFFIX = ".json"

    def __init__(self, root_dir: str | Path) -> None:
        self.root_dir = Path(root_dir)
        self.root_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        _check_key(key)
        return self.root_dir / (key.replace(":", "__") + self.SUFFIX)

    def get(self, key: str) -> Optional[bytes]:
        path = self._path(key)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None

    def set(self, key: str, value: bytes) -> None:
        path = self._path(key)
        fd, tmp_name = tempfile.mkstemp(dir=self.root_dir, prefix=".tmp-", suffix=self.SUFFIX)
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(value)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


def create_backend(kind: str, path: str | Path | None = None) -> KeyValueStore:
    """
    Build a backend by name.

    Args:
        kind: "memory" or "file"
        path: Directory for the file backend

    Raises:
        ValueError: Unknown backend kind or missing path
    """
    if kind == "memory":
        return InMemoryKeyValueStore()
    if kind == "file":
        if path is None:
            raise ValueError("File backend requires a path")
        return FileKeyValueStore(path)
    raise ValueError(f"Unknown store backend: {kind!r}")


__all__ = [
    "KeyValueStore",
    "InMemoryKeyValueStore",
    "FileKeyValueStore",
    "create_backend",
]
