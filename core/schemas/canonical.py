"""
Module 01 - Schemas & Canonicalization
File: canonical.py

Purpose: Deterministic serialization of distribution records for storage,
export and byte-for-byte comparison.

CRITICAL: All outputs from this module MUST be deterministic across runs.
"""

import json
from typing import Any

from .errors import CanonicalizationException

# Canonical JSON separators - no whitespace
CANONICAL_JSON_SEPARATORS: tuple[str, str] = (",", ":")


def canonicalize_value(value: Any, path: str = "") -> Any:
    """
    Recursively canonicalize JSON-mode data (``model_dump(mode="json")``).

    None entries in mappings are dropped. Amounts travel as decimal strings,
    so floats have no place in a record and are rejected with everything
    else that is not a str, int, list or dict.

    Raises:
        CanonicalizationException: If the value cannot be canonicalized
    """
    if value is None or isinstance(value, (str, int)):
        return value

    if isinstance(value, dict):
        # Keys are sorted during JSON serialization
        return {
            k: canonicalize_value(v, f"{path}.{k}" if path else k)
            for k, v in value.items()
            if v is not None
        }

    if isinstance(value, (list, tuple)):
        return [
            canonicalize_value(item, f"{path}[{i}]")
            for i, item in enumerate(value)
        ]

    raise CanonicalizationException(
        message=f"Cannot canonicalize value of type {type(value).__name__}",
        details={"path": path, "type": type(value).__name__},
    )


def dumps_canonical(obj: Any) -> str:
    """
    Serialize JSON-mode data to a canonical JSON string.

    Returns:
        A canonical JSON string with:
            - Sorted keys
            - No extra whitespace
            - None fields excluded

    Raises:
        CanonicalizationException: If serialization fails.

    Example:
        >>> dumps_canonical({"b": 2, "a": None, "c": ["x"]})
        '{"b":2,"c":["x"]}'
    """
    canonicalized = canonicalize_value(obj)
    return json.dumps(
        canonicalized,
        sort_keys=True,
        separators=CANONICAL_JSON_SEPARATORS,
        ensure_ascii=False,
    )
