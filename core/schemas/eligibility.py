"""
Module 01 - Schemas & Canonicalization
File: eligibility.py

Purpose: Eligibility verdict schemas.
The verdict is recomputed on every check and never cached across claim
attempts. Facts whose chain read failed are None, never a default 0/False.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ReasonCode(str, Enum):
    """Why an address may or may not claim."""
    ELIGIBLE = "ELIGIBLE"
    NOT_ACTIVATED = "NOT_ACTIVATED"
    BLACKLISTED = "BLACKLISTED"
    ALREADY_CLAIMED = "ALREADY_CLAIMED"
    KYC_TOO_LOW = "KYC_TOO_LOW"
    TRUST_SCORE_TOO_LOW = "TRUST_SCORE_TOO_LOW"
    NOT_STARTED = "NOT_STARTED"
    ENDED = "ENDED"
    GENERIC_INELIGIBLE = "GENERIC_INELIGIBLE"
    UNKNOWN_DUE_TO_READ_FAILURE = "UNKNOWN_DUE_TO_READ_FAILURE"


# Blocking reasons in the order they are reported. The first failing
# check wins so UI messaging is deterministic.
REASON_PRIORITY: tuple[ReasonCode, ...] = (
    ReasonCode.NOT_ACTIVATED,
    ReasonCode.BLACKLISTED,
    ReasonCode.ALREADY_CLAIMED,
    ReasonCode.KYC_TOO_LOW,
    ReasonCode.TRUST_SCORE_TOO_LOW,
    ReasonCode.NOT_STARTED,
    ReasonCode.ENDED,
    ReasonCode.GENERIC_INELIGIBLE,
)


REASON_MESSAGES: dict[ReasonCode, str] = {
    ReasonCode.ELIGIBLE: "You are eligible to claim this airdrop.",
    ReasonCode.NOT_ACTIVATED: "Your account is not activated. Activate it before claiming.",
    ReasonCode.BLACKLISTED: "Your address is blacklisted from this airdrop.",
    ReasonCode.ALREADY_CLAIMED: "You have already claimed this airdrop.",
    ReasonCode.KYC_TOO_LOW: "Your KYC level is below the level this airdrop requires. Complete verification to continue.",
    ReasonCode.TRUST_SCORE_TOO_LOW: "Your trust score is below the minimum this airdrop requires.",
    ReasonCode.NOT_STARTED: "This airdrop has not started yet.",
    ReasonCode.ENDED: "The claim period for this airdrop has ended.",
    ReasonCode.GENERIC_INELIGIBLE: "Your address is not eligible for this airdrop.",
    ReasonCode.UNKNOWN_DUE_TO_READ_FAILURE: "Eligibility could not be determined because on-chain data was unavailable. Please retry.",
}


def reason_message(reason: ReasonCode) -> str:
    """Actionable, user-facing message for a reason code."""
    return REASON_MESSAGES[reason]


class AccountFacts(BaseModel):
    """
    Raw on-chain facts for one (address, distribution) pair.

    Every field is optional: None means the read failed.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    is_activated: bool | None = None
    trust_score: int | None = None
    kyc_level: int | None = None
    is_blacklisted: bool | None = None
    has_claimed: bool | None = None
    contract_eligible: bool | None = Field(
        default=None,
        description="The distribution contract's own isEligible() gate",
    )
    required_trust_score: int | None = None
    required_kyc_level: int | None = None
    start_time: int | None = None
    end_time: int | None = None

    @property
    def unknown_fields(self) -> list[str]:
        return sorted(name for name, value in self.model_dump().items() if value is None)


class EligibilityVerdict(BaseModel):
    """The engine's combined judgment plus the first blocking reason."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    address: str
    distribution: str
    is_activated: bool | None = None
    trust_score: int | None = None
    kyc_level: int | None = None
    is_blacklisted: bool | None = None
    has_claimed: bool | None = None
    required_trust_score: int | None = None
    required_kyc_level: int | None = None
    is_eligible: bool = False
    reason: ReasonCode = ReasonCode.GENERIC_INELIGIBLE
    unknown_fields: list[str] = Field(default_factory=list)

    @property
    def message(self) -> str:
        return reason_message(self.reason)
