"""
Module 05 - Claim Orchestration and Service Wiring

In-process runtime that composes the entitlement modules into the flows
exposed to the UI, HTTP API and CLI.

Public API:
- ClaimOrchestrator: Claim state machine per (distribution, address)
- ClaimSession: Mutable state of one claim attempt
- parse_manual_proof: Normalize pasted proof text
- parse_recipients_csv: address,amount rows -> recipients (skip and warn)
- EntitlementService: Facade over build / lookup / eligibility / claim
"""

from orchestrator.claim_orchestrator import (
    ALLOWED_TRANSITIONS,
    ClaimOrchestrator,
    ClaimSession,
)
from orchestrator.proof_input import PROOF_FORMAT_HINT, parse_manual_proof
from orchestrator.recipients_input import (
    RecipientParseResult,
    SkippedRow,
    parse_recipients_csv,
)
from orchestrator.service import ChainNotConfiguredException, EntitlementService

__all__ = [
    "ALLOWED_TRANSITIONS",
    "ClaimOrchestrator",
    "ClaimSession",
    "PROOF_FORMAT_HINT",
    "parse_manual_proof",
    "RecipientParseResult",
    "SkippedRow",
    "parse_recipients_csv",
    "ChainNotConfiguredException",
    "EntitlementService",
]
