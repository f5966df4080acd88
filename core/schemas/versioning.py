"""
Module 01 - Schemas & Canonicalization
File: versioning.py

Purpose: Centralize the distribution record format version.
No imports from other schema files to avoid circular dependencies.
"""

from typing import Literal

# Format version written into every exported distribution record
RECORD_FORMAT_VERSION: str = "v1"

RecordFormatVersion = Literal["v1"]

SUPPORTED_RECORD_FORMAT_VERSIONS: frozenset[str] = frozenset({"v1"})


class UnsupportedRecordFormatError(ValueError):
    """Raised when an imported record declares an unknown format version."""

    def __init__(self, version: str, supported: frozenset[str] | None = None) -> None:
        self.version = version
        self.supported = supported or SUPPORTED_RECORD_FORMAT_VERSIONS
        super().__init__(
            f"Unsupported record format version: '{version}'. "
            f"Supported versions: {sorted(self.supported)}"
        )


def is_supported_record_format(version: str) -> bool:
    """Check whether a record format version can be imported."""
    return isinstance(version, str) and version in SUPPORTED_RECORD_FORMAT_VERSIONS


def assert_supported_record_format(version: str) -> None:
    """
    Validate that the given record format version is supported.

    Raises:
        UnsupportedRecordFormatError: If the version is not supported.
    """
    if not is_supported_record_format(version):
        raise UnsupportedRecordFormatError(version)
