"""
Eligibility Route

Fresh eligibility verdict from on-chain state.
"""

from fastapi import APIRouter, Depends

from api.deps import get_service
from api.errors import InvalidRequestError
from api.models.responses import EligibilityResponse
from orchestrator.service import EntitlementService


router = APIRouter(prefix="/eligibility", tags=["eligibility"])


@router.get("/{distribution}/{address}", response_model=EligibilityResponse)
async def get_eligibility(
    distribution: str,
    address: str,
    service: EntitlementService = Depends(get_service),
) -> EligibilityResponse:
    """
    Evaluate eligibility; never cached.

    Answers 503 when no chain reader is configured.
    """
    try:
        verdict = await service.get_eligibility(address, distribution)
    except ValueError as e:
        raise InvalidRequestError(str(e)) from e
    return EligibilityResponse(
        verdict=verdict.model_dump(mode="json"),
        message=verdict.message,
    )
