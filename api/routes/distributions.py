"""
Distribution Routes

Build, alias, look up, export and import distribution records.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response

from api.deps import get_service
from api.errors import InvalidRequestError, ProofNotFoundError
from api.models.requests import AttachAliasRequest, BuildDistributionRequest
from api.models.responses import (
    DistributionListResponse,
    DistributionSummary,
    ProofResponse,
    SkippedRowInfo,
)
from core.schemas.distribution import DistributionRecord
from orchestrator.service import EntitlementService


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/distributions", tags=["distributions"])


def _summary(record: DistributionRecord, skipped: list[SkippedRowInfo] | None = None) -> DistributionSummary:
    return DistributionSummary(
        root=record.root,
        recipient_count=len(record.recipients),
        total_amount=str(record.total_amount),
        distribution_contract=record.distribution_contract,
        skipped=skipped or [],
    )


@router.get("", response_model=DistributionListResponse)
def list_distributions(service: EntitlementService = Depends(get_service)) -> DistributionListResponse:
    """Roots of every stored distribution."""
    return DistributionListResponse(roots=service.store.list_roots())


@router.post("", response_model=DistributionSummary)
def build_distribution(
    request: BuildDistributionRequest,
    service: EntitlementService = Depends(get_service),
) -> DistributionSummary:
    """
    Build a Merkle distribution from recipients and store it.

    CSV input skips malformed rows and reports them in ``skipped``.
    """
    try:
        if request.csv is not None:
            record, parsed = service.build_distribution_from_csv(
                request.csv, request.distribution_contract
            )
            skipped = [
                SkippedRowInfo(line=row.line, content=row.content, reason=row.reason)
                for row in parsed.skipped
            ]
            return _summary(record, skipped)

        record = service.build_distribution(
            [(r.address, r.amount) for r in request.recipients or []],
            request.distribution_contract,
        )
        return _summary(record)
    except ValueError as e:
        raise InvalidRequestError(str(e)) from e


@router.post("/import", response_model=DistributionSummary)
async def import_distribution(
    request: Request,
    service: EntitlementService = Depends(get_service),
) -> DistributionSummary:
    """Import a previously exported record (raw JSON body)."""
    body = await request.body()
    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError as e:
        raise InvalidRequestError("Request body must be UTF-8 JSON") from e
    record = service.import_distribution(text)
    return _summary(record)


@router.post("/{root}/alias", response_model=DistributionSummary)
def attach_alias(
    root: str,
    request: AttachAliasRequest,
    service: EntitlementService = Depends(get_service),
) -> DistributionSummary:
    """Attach the on-chain distribution contract address to a stored root."""
    try:
        record = service.attach_distribution_address(root, request.address)
    except ValueError as e:
        raise InvalidRequestError(str(e)) from e
    return _summary(record)


@router.get("/{key}/proofs/{address}", response_model=ProofResponse)
def get_proof(
    key: str,
    address: str,
    service: EntitlementService = Depends(get_service),
) -> ProofResponse:
    """Stored amount and proof for a recipient, by root or contract address."""
    found = service.get_proof(address, key)
    if found is None:
        raise ProofNotFoundError(key, address)
    return ProofResponse(
        root=found.root,
        address=found.address,
        amount=str(found.amount),
        proof=found.proof,
    )


@router.get("/{key}/export")
def export_distribution(
    key: str,
    service: EntitlementService = Depends(get_service),
) -> Response:
    """Canonical JSON export of a stored record."""
    return Response(content=service.export_distribution(key), media_type="application/json")
