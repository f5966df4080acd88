"""
Recipient CSV Input Unit Tests
Tests for orchestrator/recipients_input.py
"""
from orchestrator.recipients_input import parse_recipients_csv

from fixtures.common import ADDR_A, ADDR_B, ADDR_C


class TestParseRecipientsCsv:
    """Well-formed input."""

    def test_basic(self):
        result = parse_recipients_csv(f"{ADDR_A},1000\n{ADDR_B},500\n")
        assert [(r.address, r.amount) for r in result.recipients] == [(ADDR_A, 1000), (ADDR_B, 500)]
        assert result.skipped == []
        assert result.ok
        assert not result.header

    def test_header_skipped(self):
        result = parse_recipients_csv(f"address,amount\n{ADDR_A},1\n")
        assert result.header
        assert len(result.recipients) == 1
        assert result.skipped == []

    def test_header_variants(self):
        for name in ("Recipient", "wallet"):
            assert parse_recipients_csv(f"{name},amount\n{ADDR_A},1\n").header

    def test_blank_lines_ignored(self):
        result = parse_recipients_csv(f"\n{ADDR_A},1\n\n\n{ADDR_B},2\n")
        assert len(result.recipients) == 2
        assert result.skipped == []

    def test_whitespace_trimmed_and_lowercased(self):
        result = parse_recipients_csv(f"  {ADDR_A.upper().replace('0X', '0x')} ,  42 \n")
        assert result.recipients[0].address == ADDR_A
        assert result.recipients[0].amount == 42

    def test_large_amount(self):
        big = str(2**255)
        result = parse_recipients_csv(f"{ADDR_A},{big}\n")
        assert result.recipients[0].amount == 2**255

    def test_duplicates_kept(self):
        result = parse_recipients_csv(f"{ADDR_A},1\n{ADDR_A},2\n")
        assert len(result.recipients) == 2

    def test_extra_columns_ignored(self):
        result = parse_recipients_csv(f"{ADDR_A},1,note\n")
        assert result.recipients[0].amount == 1


class TestSkippedRows:
    """Malformed rows are skipped and reported with their line numbers."""

    def test_bad_rows_reported(self):
        text = "\n".join([
            "address,amount",
            f"{ADDR_A},1000",
            "0x1234,5",
            f"{ADDR_B},1e18",
            f"{ADDR_C},-3",
            f"{ADDR_C}",
            f"{ADDR_C},7",
        ])
        result = parse_recipients_csv(text)
        assert [(r.address, r.amount) for r in result.recipients] == [(ADDR_A, 1000), (ADDR_C, 7)]
        assert [row.line for row in result.skipped] == [3, 4, 5, 6]
        assert result.warnings[0].startswith("line 3: invalid address format")
        assert "invalid amount" in result.warnings[1]
        assert result.warnings[3] == "line 6: expected address,amount"

    def test_header_not_first_is_data(self):
        result = parse_recipients_csv(f"{ADDR_A},1\naddress,amount\n")
        assert not result.header
        assert len(result.skipped) == 1

    def test_nothing_valid(self):
        result = parse_recipients_csv("garbage\nmore,garbage\n")
        assert not result.ok
        assert len(result.skipped) == 2

    def test_empty_text(self):
        result = parse_recipients_csv("")
        assert result.recipients == []
        assert result.skipped == []
