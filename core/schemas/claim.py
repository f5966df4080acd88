"""
Module 01 - Schemas & Canonicalization
File: claim.py

Purpose: Claim flow schemas - orchestrator states, transaction handles
and receipts from the chain-write collaborator, and the outcome surfaced
to the UI.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from .eligibility import EligibilityVerdict, ReasonCode


class ClaimState(str, Enum):
    """Claim orchestrator states."""
    IDLE = "IDLE"
    CHECKING_ELIGIBILITY = "CHECKING_ELIGIBILITY"
    BLOCKED = "BLOCKED"
    AWAITING_MANUAL_PROOF = "AWAITING_MANUAL_PROOF"
    READY_TO_SUBMIT = "READY_TO_SUBMIT"
    SUBMITTED = "SUBMITTED"
    CLAIMED = "CLAIMED"
    FAILED = "FAILED"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATES


TERMINAL_STATES: frozenset[ClaimState] = frozenset({
    ClaimState.BLOCKED,
    ClaimState.CLAIMED,
    ClaimState.FAILED,
})


class FailureKind(str, Enum):
    """Why a submitted claim ended in FAILED."""
    REVERTED = "REVERTED"
    CONFIRMATION_TIMEOUT = "CONFIRMATION_TIMEOUT"
    NETWORK_ERROR = "NETWORK_ERROR"
    SUBMISSION_ERROR = "SUBMISSION_ERROR"
    AMOUNT_UNAVAILABLE = "AMOUNT_UNAVAILABLE"


class ClaimCallShape(str, Enum):
    """
    Argument layout of the distribution contract's claim function.

    Fixed per deployment: every claim sent to one contract uses the same
    layout, whatever the proof's source.
    """
    PROOF_ONLY = "proof_only"              # claim(bytes32[] proof)
    AMOUNT_AND_PROOF = "amount_and_proof"  # claim(uint256 amount, bytes32[] proof)


CONFIRMATION_TIMEOUT_MESSAGE = (
    "Timed out waiting for confirmation; the transaction may still be pending."
)


class TransactionHandle(BaseModel):
    """Handle for a broadcast transaction."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    tx_hash: str = Field(..., min_length=1)


class TransactionReceipt(BaseModel):
    """Confirmation result for a broadcast transaction."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    tx_hash: str
    success: bool
    revert_reason: str | None = None
    block_number: int | None = None


class ClaimOutcome(BaseModel):
    """Snapshot of one claim session, rendered by the UI."""

    model_config = ConfigDict(extra="forbid")

    distribution: str
    address: str
    state: ClaimState
    reason: ReasonCode | None = Field(
        default=None,
        description="Blocking reason when state is BLOCKED",
    )
    verdict: EligibilityVerdict | None = None
    proof: list[str] | None = None
    proof_source: str | None = Field(
        default=None,
        description="'store' or 'manual'",
    )
    amount: int | None = None
    tx_hash: str | None = None
    failure_kind: FailureKind | None = None
    failure_reason: str | None = Field(
        default=None,
        description="Raw failure reason preserved for diagnostics",
    )
    error_message: str | None = Field(
        default=None,
        description="Recoverable, user-facing error (e.g. proof parse failure)",
    )

    @property
    def is_terminal(self) -> bool:
        return self.state.is_terminal
