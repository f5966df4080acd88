"""
API Response Models

Pydantic models for API response serialization.
"""

from typing import Any

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response for GET /health endpoint."""

    ok: bool = True
    service: str = "merkle-airdrop-api"
    version: str = "v1"


class SkippedRowInfo(BaseModel):
    """A CSV row the build skipped."""

    line: int
    content: str
    reason: str


class DistributionSummary(BaseModel):
    """Response for POST /distributions and POST /distributions/import."""

    ok: bool = True
    root: str = Field(..., description="Merkle root")
    recipient_count: int = Field(..., description="Number of recipients in the tree")
    total_amount: str = Field(..., description="Sum of all amounts, decimal string")
    distribution_contract: str | None = Field(default=None)
    skipped: list[SkippedRowInfo] = Field(
        default_factory=list,
        description="CSV rows that were not included",
    )


class DistributionListResponse(BaseModel):
    """Response for GET /distributions."""

    ok: bool = True
    roots: list[str] = Field(default_factory=list)


class ProofResponse(BaseModel):
    """Response for GET /distributions/{key}/proofs/{address}."""

    ok: bool = True
    root: str
    address: str
    amount: str = Field(..., description="Amount in base units, decimal string")
    proof: list[str] = Field(default_factory=list)


class ParseProofResponse(BaseModel):
    """Response for POST /proofs/parse."""

    ok: bool = True
    proof: list[str] = Field(default_factory=list)
    count: int = 0


class VerifyProofResponse(BaseModel):
    """Response for POST /proofs/verify."""

    ok: bool = True
    valid: bool = Field(..., description="Whether the proof reproduces the root")


class EligibilityResponse(BaseModel):
    """Response for GET /eligibility/{distribution}/{address}."""

    ok: bool = True
    verdict: dict[str, Any] = Field(..., description="Eligibility verdict")
    message: str = Field(..., description="User-facing message for the reason code")


class ErrorDetail(BaseModel):
    """Detailed error information."""

    code: str = Field(..., description="Error code")
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, Any] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Standard error response."""

    ok: bool = False
    error: ErrorDetail = Field(..., description="Error details")
