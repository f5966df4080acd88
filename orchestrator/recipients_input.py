"""
Recipient List Input

Turns ``address,amount`` CSV text into recipients for the tree builder.
Malformed rows are skipped with a warning and reported back; they never
fail the batch.
"""

from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass, field

from core.crypto.addresses import is_address
from core.schemas.distribution import Recipient, parse_uint256


logger = logging.getLogger(__name__)


@dataclass
class SkippedRow:
    """A CSV row that was not turned into a recipient."""
    line: int
    content: str
    reason: str


@dataclass
class RecipientParseResult:
    """Recipients parsed from text plus everything that was skipped."""
    recipients: list[Recipient] = field(default_factory=list)
    skipped: list[SkippedRow] = field(default_factory=list)
    header: bool = False

    @property
    def warnings(self) -> list[str]:
        return [f"line {row.line}: {row.reason}" for row in self.skipped]

    @property
    def ok(self) -> bool:
        return bool(self.recipients)


def _is_header(cells: list[str]) -> bool:
    return bool(cells) and cells[0].strip().lower() in ("address", "recipient", "wallet")


def parse_recipients_csv(text: str) -> RecipientParseResult:
    """
    Parse ``address,amount`` rows.

    A first row whose address column reads "address" is treated as a
    header. Blank lines are ignored. Rows with a bad address shape, a
    non-numeric, negative, scientific-notation or out-of-range amount are
    skipped. Duplicate addresses are kept; the builder rejects them.
    """
    result = RecipientParseResult()
    seen_content = False

    for line_no, cells in enumerate(csv.reader(io.StringIO(text)), start=1):
        cells = [c.strip() for c in cells]
        if not any(cells):
            continue

        if not seen_content:
            seen_content = True
            if _is_header(cells):
                result.header = True
                continue

        raw = ",".join(cells)
        if len(cells) < 2:
            result.skipped.append(SkippedRow(line_no, raw, "expected address,amount"))
            logger.warning(f"Skipping line {line_no}: expected address,amount")
            continue

        address, amount_text = cells[0], cells[1]
        if not is_address(address):
            result.skipped.append(SkippedRow(line_no, raw, f"invalid address format: {address}"))
            logger.warning(f"Invalid address format at line {line_no}: {address}")
            continue

        try:
            amount = parse_uint256(amount_text)
        except ValueError as e:
            result.skipped.append(SkippedRow(line_no, raw, f"invalid amount: {e}"))
            logger.warning(f"Invalid amount format at line {line_no}: {amount_text}")
            continue

        result.recipients.append(Recipient(address=address, amount=amount))

    logger.info(
        f"Parsed {len(result.recipients)} recipients, skipped {len(result.skipped)} rows"
    )
    return result


__all__ = [
    "SkippedRow",
    "RecipientParseResult",
    "parse_recipients_csv",
]
