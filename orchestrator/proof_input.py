"""
Manual Proof Input

Parses a Merkle proof pasted by the user when the local Proof Store has
no record for the distribution.

Accepted shapes:
    ["0x..", "0x.."]            bracketed JSON list
    [0x.., 0x..]                bracketed list without quotes
    0x.. 0x..  /  0x..,0x..     whitespace, comma or newline separated

Entries that are not 0x followed by 64 hex digits are dropped. An empty
result is a parse failure the user can retry.
"""

from __future__ import annotations

import json
import logging
import re

from core.crypto.hashing import is_bytes32_hex
from core.schemas.errors import ProofParseException


logger = logging.getLogger(__name__)


_SEPARATORS = re.compile(r"[\s,]+")

PROOF_FORMAT_HINT = (
    "Invalid Merkle proof format. Enter 32-byte hex values starting with 0x, "
    "as a JSON list or separated by commas, spaces or newlines."
)


def _candidates(text: str) -> list[str]:
    if text.startswith("[") and text.endswith("]"):
        try:
            data = json.loads(text)
        except json.JSONDecodeError:
            text = text[1:-1]
        else:
            if isinstance(data, list):
                return [item if isinstance(item, str) else repr(item) for item in data]
            return []
    return [token.strip("\"'") for token in _SEPARATORS.split(text) if token]


def parse_manual_proof(text: str) -> list[str]:
    """
    Normalize pasted proof text into an ordered list of hex32 strings.

    Returns:
        Lowercased hex strings in input order

    Raises:
        ProofParseException: No valid entry remained
    """
    if not isinstance(text, str):
        raise ProofParseException("Proof input must be text")

    candidates = _candidates(text.strip())
    proof = [c.lower() for c in candidates if is_bytes32_hex(c)]

    dropped = len(candidates) - len(proof)
    if dropped:
        logger.warning(f"Dropped {dropped} malformed proof entr{'y' if dropped == 1 else 'ies'}")

    if not proof:
        raise ProofParseException(
            PROOF_FORMAT_HINT,
            details={"entries_seen": len(candidates)},
        )
    return proof


__all__ = [
    "PROOF_FORMAT_HINT",
    "parse_manual_proof",
]
