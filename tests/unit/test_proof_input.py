"""
Manual Proof Input Unit Tests
Tests for orchestrator/proof_input.py
"""
import json
import logging

import pytest

from core.schemas.errors import ErrorCodes, ProofParseException
from orchestrator.proof_input import PROOF_FORMAT_HINT, parse_manual_proof


H1 = "0x" + "11" * 32
H2 = "0x" + "22" * 32
H3 = "0x" + "ab" * 32


class TestParseManualProof:
    """Accepted input shapes."""

    def test_unquoted_bracketed_list(self):
        """[0x11..,0x22..] without quotes parses to two entries."""
        assert parse_manual_proof(f"[{H1},{H2}]") == [H1, H2]

    def test_json_list(self):
        assert parse_manual_proof(json.dumps([H1, H2])) == [H1, H2]

    def test_comma_separated(self):
        assert parse_manual_proof(f"{H1}, {H2}") == [H1, H2]

    def test_whitespace_and_newlines(self):
        assert parse_manual_proof(f"  {H1}\n{H2}\t{H3}\n") == [H1, H2, H3]

    def test_quoted_tokens(self):
        assert parse_manual_proof(f"'{H1}' \"{H2}\"") == [H1, H2]

    def test_order_preserved(self):
        assert parse_manual_proof(f"{H2} {H1}") == [H2, H1]

    def test_uppercase_normalized(self):
        assert parse_manual_proof("0x" + "AB" * 32) == [H3]

    def test_single_entry(self):
        assert parse_manual_proof(H1) == [H1]


class TestMalformedEntries:
    """Malformed entries are dropped; an empty result fails."""

    def test_bad_entries_dropped(self, caplog):
        with caplog.at_level(logging.WARNING, logger="orchestrator.proof_input"):
            result = parse_manual_proof(f"{H1}, 0x1234, nope, {H2}")
        assert result == [H1, H2]
        assert "Dropped 2 malformed proof entries" in caplog.text

    def test_missing_prefix_dropped(self):
        assert parse_manual_proof(f"{'11' * 32} {H2}") == [H2]

    def test_not_a_hash(self):
        with pytest.raises(ProofParseException) as exc_info:
            parse_manual_proof("not-a-hash")
        assert exc_info.value.code == ErrorCodes.PROOF_PARSE_ERROR
        assert exc_info.value.retryable
        assert exc_info.value.message == PROOF_FORMAT_HINT
        assert exc_info.value.details["entries_seen"] == 1

    @pytest.mark.parametrize("text", ["", "   ", "[]", "[,]", '{"a": 1}'])
    def test_empty_result(self, text):
        with pytest.raises(ProofParseException):
            parse_manual_proof(text)

    def test_json_non_string_items_dropped(self):
        assert parse_manual_proof(json.dumps([H1, 17, None])) == [H1]

    def test_non_text_rejected(self):
        with pytest.raises(ProofParseException):
            parse_manual_proof([H1])
