"""API request and response models."""

from api.models.requests import (
    AttachAliasRequest,
    BuildDistributionRequest,
    ParseProofRequest,
    RecipientIn,
    VerifyProofRequest,
)
from api.models.responses import (
    DistributionListResponse,
    DistributionSummary,
    EligibilityResponse,
    ErrorDetail,
    ErrorResponse,
    HealthResponse,
    ParseProofResponse,
    ProofResponse,
    SkippedRowInfo,
    VerifyProofResponse,
)

__all__ = [
    "AttachAliasRequest",
    "BuildDistributionRequest",
    "ParseProofRequest",
    "RecipientIn",
    "VerifyProofRequest",
    "DistributionListResponse",
    "DistributionSummary",
    "EligibilityResponse",
    "ErrorDetail",
    "ErrorResponse",
    "HealthResponse",
    "ParseProofResponse",
    "ProofResponse",
    "SkippedRowInfo",
    "VerifyProofResponse",
]
