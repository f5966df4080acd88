"""
Proof Routes

Normalize pasted proofs and verify proofs off-chain.
"""

from fastapi import APIRouter

from api.models.requests import ParseProofRequest, VerifyProofRequest
from api.models.responses import ParseProofResponse, VerifyProofResponse
from core.merkle.merkle_proofs import MerkleVerifier
from orchestrator.proof_input import parse_manual_proof


router = APIRouter(prefix="/proofs", tags=["proofs"])


@router.post("/parse", response_model=ParseProofResponse)
def parse_proof(request: ParseProofRequest) -> ParseProofResponse:
    """
    Parse pasted proof text.

    Malformed entries are dropped; an empty result is a PROOF_PARSE_ERROR.
    """
    proof = parse_manual_proof(request.text)
    return ParseProofResponse(proof=proof, count=len(proof))


@router.post("/verify", response_model=VerifyProofResponse)
def verify_proof(request: VerifyProofRequest) -> VerifyProofResponse:
    """
    Check that (address, amount) with the proof reproduces the root.

    A malformed address or amount is a 400; malformed proof hex is invalid.
    """
    valid = MerkleVerifier.verify_claim(request.address, request.amount, request.proof, request.root)
    return VerifyProofResponse(valid=valid)
