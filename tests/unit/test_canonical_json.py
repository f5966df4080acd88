"""
Module 01 - Canonical JSON Unit Tests
Tests for core/schemas/canonical.py

Tests:
- Key ordering and whitespace
- None handling
- Records dumped in JSON mode
- Rejection of floats and unknown types
"""
import pytest

from core.schemas.canonical import dumps_canonical
from core.schemas.distribution import Recipient
from core.schemas.errors import CanonicalizationException


class TestDumpsCanonical:
    """Tests for dumps_canonical()."""

    def test_sorted_keys_no_whitespace(self):
        assert dumps_canonical({"b": 1, "a": [1, 2]}) == '{"a":[1,2],"b":1}'

    def test_nested_keys_sorted(self):
        assert dumps_canonical({"z": {"y": 1, "x": 2}}) == '{"z":{"x":2,"y":1}}'

    def test_none_values_dropped(self):
        assert dumps_canonical({"a": 1, "b": None}) == '{"a":1}'

    def test_json_mode_model_dump(self):
        """Amounts are serialized as decimal strings."""
        recipient = Recipient(address="0x" + "AA" * 20, amount=10**30)
        dumped = dumps_canonical(recipient.model_dump(mode="json"))
        assert dumped == '{"address":"0x' + "aa" * 20 + '","amount":"' + str(10**30) + '"}'

    def test_float_rejected(self):
        with pytest.raises(CanonicalizationException) as exc_info:
            dumps_canonical({"x": [1.5]})
        assert exc_info.value.details["path"] == "x[0]"

    def test_unknown_type_rejected(self):
        with pytest.raises(CanonicalizationException):
            dumps_canonical({"x": object()})

    def test_deterministic(self):
        data = {"root": "0x" + "ab" * 32, "proofs": {"b": ["0x01"], "a": []}}
        assert dumps_canonical(data) == dumps_canonical(dict(reversed(list(data.items()))))
