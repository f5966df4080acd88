"""
API Request Models

Pydantic models for API request validation.
Amounts are accepted as decimal strings (or integers) so that uint256
values survive JSON clients that only have doubles.
"""

from pydantic import BaseModel, Field, model_validator


class RecipientIn(BaseModel):
    """One recipient in a build request."""

    address: str = Field(..., description="0x-prefixed 20-byte address")
    amount: str | int = Field(..., description="Amount in base units, decimal")


class BuildDistributionRequest(BaseModel):
    """Request body for POST /distributions."""

    recipients: list[RecipientIn] | None = Field(
        default=None,
        description="Recipients as structured JSON",
    )
    csv: str | None = Field(
        default=None,
        max_length=5_000_000,
        description="Recipients as 'address,amount' CSV text; malformed rows are skipped",
    )
    distribution_contract: str | None = Field(
        default=None,
        description="Distribution contract address to attach immediately",
    )

    @model_validator(mode="after")
    def exactly_one_source(self) -> "BuildDistributionRequest":
        if (self.recipients is None) == (self.csv is None):
            raise ValueError("Provide exactly one of 'recipients' or 'csv'")
        return self


class AttachAliasRequest(BaseModel):
    """Request body for POST /distributions/{root}/alias."""

    address: str = Field(..., description="Distribution contract address")


class ParseProofRequest(BaseModel):
    """Request body for POST /proofs/parse."""

    text: str = Field(
        ...,
        max_length=100_000,
        description="Pasted proof: JSON list or whitespace/comma separated hex values",
    )


class VerifyProofRequest(BaseModel):
    """Request body for POST /proofs/verify."""

    root: str = Field(..., description="Merkle root, 0x-prefixed 32-byte hex")
    address: str = Field(..., description="Recipient address")
    amount: str | int = Field(..., description="Recipient amount in base units")
    proof: list[str] = Field(default_factory=list, description="Sibling hashes, leaf to root")
