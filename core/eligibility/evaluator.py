"""
Module 04 - Eligibility Evaluator

Combines on-chain account facts into a single verdict with a reason code.

Every call re-reads current chain state; verdicts are never cached,
because acting on stale eligibility would let a blocked or already
claimed address proceed.

Reason priority (first blocking check wins):
    NOT_ACTIVATED -> BLACKLISTED -> ALREADY_CLAIMED -> KYC_TOO_LOW
    -> TRUST_SCORE_TOO_LOW -> NOT_STARTED -> ENDED -> GENERIC_INELIGIBLE

A fact whose read failed is unknown, not false/zero. Unknown facts never
produce a blocking reason of their own; if nothing definite blocks and
something is unknown, the verdict is UNKNOWN_DUE_TO_READ_FAILURE.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, Optional

from core.chain.interfaces import ChainReader, ContractFunctions
from core.crypto.addresses import normalize_address
from core.schemas.eligibility import (
    REASON_PRIORITY,
    AccountFacts,
    EligibilityVerdict,
    ReasonCode,
)


logger = logging.getLogger(__name__)


# A check returns True when it blocks, False when it passes and None
# when the facts it needs are unknown.
CheckFn = Callable[[AccountFacts, int], Optional[bool]]


def _below(value: Optional[int], required: Optional[int]) -> Optional[bool]:
    if required is None:
        return None
    if required == 0:
        return False
    if value is None:
        return None
    return value < required


def _not_started(facts: AccountFacts, now: int) -> Optional[bool]:
    if facts.start_time is None:
        return None
    return facts.start_time > 0 and now < facts.start_time


def _ended(facts: AccountFacts, now: int) -> Optional[bool]:
    if facts.end_time is None:
        return None
    return facts.end_time > 0 and now > facts.end_time


def _negate(value: Optional[bool]) -> Optional[bool]:
    return None if value is None else not value


CHECKS: dict[ReasonCode, CheckFn] = {
    ReasonCode.NOT_ACTIVATED: lambda f, now: _negate(f.is_activated),
    ReasonCode.BLACKLISTED: lambda f, now: f.is_blacklisted,
    ReasonCode.ALREADY_CLAIMED: lambda f, now: f.has_claimed,
    ReasonCode.KYC_TOO_LOW: lambda f, now: _below(f.kyc_level, f.required_kyc_level),
    ReasonCode.TRUST_SCORE_TOO_LOW: lambda f, now: _below(f.trust_score, f.required_trust_score),
    ReasonCode.NOT_STARTED: _not_started,
    ReasonCode.ENDED: _ended,
    ReasonCode.GENERIC_INELIGIBLE: lambda f, now: _negate(f.contract_eligible),
}


def decide(facts: AccountFacts, now: int) -> ReasonCode:
    """
    Pure decision rule over already fetched facts.

    Returns:
        ELIGIBLE, the first blocking reason in priority order, or
        UNKNOWN_DUE_TO_READ_FAILURE
    """
    any_unknown = False
    for reason in REASON_PRIORITY:
        blocked = CHECKS[reason](facts, now)
        if blocked is None:
            any_unknown = True
        elif blocked:
            return reason
    if any_unknown:
        return ReasonCode.UNKNOWN_DUE_TO_READ_FAILURE
    return ReasonCode.ELIGIBLE


def build_verdict(
    address: str,
    distribution: str,
    facts: AccountFacts,
    now: int,
) -> EligibilityVerdict:
    """Wrap a decision into the verdict surfaced to callers."""
    reason = decide(facts, now)
    return EligibilityVerdict(
        address=address,
        distribution=distribution,
        is_activated=facts.is_activated,
        trust_score=facts.trust_score,
        kyc_level=facts.kyc_level,
        is_blacklisted=facts.is_blacklisted,
        has_claimed=facts.has_claimed,
        required_trust_score=facts.required_trust_score,
        required_kyc_level=facts.required_kyc_level,
        is_eligible=reason == ReasonCode.ELIGIBLE,
        reason=reason,
        unknown_fields=facts.unknown_fields,
    )


class EligibilityEvaluator:
    """
    Fetches account facts from the chain reader and evaluates them.

    Args:
        reader: Chain-read collaborator
        reputation_contract: Contract holding activation, trust score and
            KYC level. Defaults to the distribution contract itself.
        check_contract_gate: Also read the distribution contract's own
            ``isEligible(address)``. Disable for contracts without it.
        read_timeout_s: Per-read timeout; a timed out read is unknown
        clock: Returns current unix time in seconds
    """

    def __init__(
        self,
        reader: ChainReader,
        *,
        reputation_contract: Optional[str] = None,
        check_contract_gate: bool = True,
        read_timeout_s: Optional[float] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.reader = reader
        self.reputation_contract = (
            normalize_address(reputation_contract) if reputation_contract else None
        )
        self.check_contract_gate = check_contract_gate
        self.read_timeout_s = read_timeout_s
        self.clock = clock

    async def _read(self, name: str, call: Awaitable[Any]) -> Any:
        try:
            if self.read_timeout_s is not None:
                return await asyncio.wait_for(call, timeout=self.read_timeout_s)
            return await call
        except Exception as e:
            logger.warning(f"Eligibility read '{name}' failed: {type(e).__name__}: {e}")
            return None

    async def fetch_facts(self, address: str, distribution: str) -> AccountFacts:
        """
        Read every fact needed for a verdict, concurrently.

        Read failures are logged and recorded as None.
        """
        account = normalize_address(address)
        dist = normalize_address(distribution)
        rep = self.reputation_contract or dist
        f = ContractFunctions
        r = self.reader

        reads: dict[str, Awaitable[Any]] = {
            "is_activated": r.read_bool(rep, f.IS_ACTIVATED, [account]),
            "trust_score": r.read_uint(rep, f.TRUST_SCORE, [account]),
            "kyc_level": r.read_uint(rep, f.KYC_LEVEL, [account]),
            "is_blacklisted": r.read_bool(dist, f.IS_BLACKLISTED, [account]),
            "has_claimed": r.read_bool(dist, f.HAS_CLAIMED, [account]),
            "required_trust_score": r.read_uint(dist, f.REQUIRED_TRUST_SCORE, []),
            "required_kyc_level": r.read_uint(dist, f.REQUIRED_KYC_LEVEL, []),
            "start_time": r.read_uint(dist, f.START_TIME, []),
            "end_time": r.read_uint(dist, f.END_TIME, []),
        }
        if self.check_contract_gate:
            reads["contract_eligible"] = r.read_bool(dist, f.IS_ELIGIBLE, [account])

        names = list(reads)
        values = await asyncio.gather(*(self._read(n, reads[n]) for n in names))
        facts = dict(zip(names, values))
        if not self.check_contract_gate:
            facts["contract_eligible"] = True
        return AccountFacts(**facts)

    async def evaluate(self, address: str, distribution: str) -> EligibilityVerdict:
        """
        Fresh verdict for ``address`` in ``distribution``.

        Raises:
            ValueError: Malformed address or distribution address
        """
        account = normalize_address(address)
        dist = normalize_address(distribution)
        facts = await self.fetch_facts(account, dist)
        verdict = build_verdict(account, dist, facts, int(self.clock()))
        logger.info(
            f"Eligibility for {account} in {dist}: {verdict.reason.value}"
            + (f" (unknown: {', '.join(verdict.unknown_fields)})" if verdict.unknown_fields else "")
        )
        return verdict


__all__ = [
    "CHECKS",
    "decide",
    "build_verdict",
    "EligibilityEvaluator",
]
