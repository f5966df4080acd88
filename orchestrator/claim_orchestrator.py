"""
Module 05 - Claim Orchestrator

Purpose: Sequence proof retrieval (or manual input), eligibility
confirmation and claim submission for one (distribution, address) pair,
and surface every result as a ClaimOutcome.

State machine (terminal states marked *):

    IDLE -> CHECKING_ELIGIBILITY
    CHECKING_ELIGIBILITY -> BLOCKED*               verdict ineligible
    CHECKING_ELIGIBILITY -> READY_TO_SUBMIT        proof from store
    CHECKING_ELIGIBILITY -> AWAITING_MANUAL_PROOF  no stored proof
    AWAITING_MANUAL_PROOF -> READY_TO_SUBMIT       proof text parsed
    READY_TO_SUBMIT -> SUBMITTED                   transaction broadcast
    READY_TO_SUBMIT -> FAILED*                     amount unreadable or submission rejected
    SUBMITTED -> CLAIMED* | FAILED*                confirmation result
    FAILED -> IDLE                                 reset

Only one operation per pair runs at a time, and a pair with a broadcast
but unconfirmed transaction cannot be submitted again. Sessions are kept
per orchestrator instance and driven from a single event loop.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from core.chain.interfaces import ChainReader, ChainWriter, ContractFunctions
from core.crypto.addresses import normalize_address
from core.eligibility.evaluator import EligibilityEvaluator
from core.schemas.claim import (
    CONFIRMATION_TIMEOUT_MESSAGE,
    ClaimCallShape,
    ClaimOutcome,
    ClaimState,
    FailureKind,
    TransactionHandle,
)
from core.schemas.eligibility import EligibilityVerdict
from core.schemas.errors import (
    ClaimInProgressException,
    ClaimStateException,
    ProofParseException,
)
from core.store.proof_store import ProofStore

from .proof_input import parse_manual_proof


logger = logging.getLogger(__name__)


ALLOWED_TRANSITIONS: dict[ClaimState, frozenset[ClaimState]] = {
    ClaimState.IDLE: frozenset({ClaimState.CHECKING_ELIGIBILITY}),
    ClaimState.CHECKING_ELIGIBILITY: frozenset({
        ClaimState.BLOCKED,
        ClaimState.READY_TO_SUBMIT,
        ClaimState.AWAITING_MANUAL_PROOF,
        ClaimState.IDLE,
    }),
    ClaimState.AWAITING_MANUAL_PROOF: frozenset({
        ClaimState.READY_TO_SUBMIT,
        ClaimState.CHECKING_ELIGIBILITY,
    }),
    ClaimState.READY_TO_SUBMIT: frozenset({
        ClaimState.SUBMITTED,
        ClaimState.FAILED,
        ClaimState.CHECKING_ELIGIBILITY,
    }),
    ClaimState.SUBMITTED: frozenset({ClaimState.CLAIMED, ClaimState.FAILED}),
    ClaimState.BLOCKED: frozenset(),
    ClaimState.CLAIMED: frozenset(),
    ClaimState.FAILED: frozenset({ClaimState.IDLE}),
}

# States from which a new eligibility check may start without a reset.
_RESTARTABLE = frozenset({
    ClaimState.IDLE,
    ClaimState.AWAITING_MANUAL_PROOF,
    ClaimState.READY_TO_SUBMIT,
})


@dataclass
class ClaimSession:
    """Mutable state of one claim attempt."""
    distribution: str
    address: str
    state: ClaimState = ClaimState.IDLE
    verdict: Optional[EligibilityVerdict] = None
    proof: Optional[list[str]] = None
    proof_source: Optional[str] = None
    amount: Optional[int] = None
    handle: Optional[TransactionHandle] = None
    failure_kind: Optional[FailureKind] = None
    failure_reason: Optional[str] = None
    error_message: Optional[str] = None
    history: list[ClaimState] = field(default_factory=list)

    @property
    def key(self) -> tuple[str, str]:
        return (self.distribution, self.address)

    def transition(self, new_state: ClaimState) -> None:
        if new_state not in ALLOWED_TRANSITIONS[self.state]:
            raise ClaimStateException(
                f"Cannot move claim from {self.state.value} to {new_state.value}",
                state=self.state.value,
                details={"target": new_state.value},
            )
        logger.debug(
            f"Claim {self.address} @ {self.distribution}: {self.state.value} -> {new_state.value}"
        )
        self.history.append(self.state)
        self.state = new_state

    def fail(self, kind: FailureKind, reason: str) -> None:
        self.transition(ClaimState.FAILED)
        self.failure_kind = kind
        self.failure_reason = reason
        logger.warning(f"Claim {self.address} @ {self.distribution} failed ({kind.value}): {reason}")

    def outcome(self) -> ClaimOutcome:
        return ClaimOutcome(
            distribution=self.distribution,
            address=self.address,
            state=self.state,
            reason=self.verdict.reason if self.state == ClaimState.BLOCKED and self.verdict else None,
            verdict=self.verdict,
            proof=list(self.proof) if self.proof is not None else None,
            proof_source=self.proof_source,
            amount=self.amount,
            tx_hash=self.handle.tx_hash if self.handle else None,
            failure_kind=self.failure_kind,
            failure_reason=self.failure_reason,
            error_message=self.error_message,
        )


class ClaimOrchestrator:
    """
    Drives claim sessions through the state machine.

    Args:
        store: Proof Store consulted for stored proofs
        evaluator: Eligibility evaluator (re-fetches every call)
        writer: Chain-write collaborator
        confirmation_timeout_s: Max wait for a receipt; None waits forever
        claim_function: Contract function called to claim
        claim_call_shape: Argument layout of the claim function; the same
            for stored and manual proofs
        require_proof: When False, a missing proof does not stop the flow
        reader: Chain reader for getClaimAmount (default: the evaluator's)
    """

    def __init__(
        self,
        store: ProofStore,
        evaluator: EligibilityEvaluator,
        writer: ChainWriter,
        *,
        confirmation_timeout_s: Optional[float] = 120.0,
        claim_function: str = ContractFunctions.CLAIM,
        claim_call_shape: ClaimCallShape | str = ClaimCallShape.PROOF_ONLY,
        require_proof: bool = True,
        reader: Optional[ChainReader] = None,
    ) -> None:
        self.store = store
        self.evaluator = evaluator
        self.writer = writer
        self.reader = reader if reader is not None else evaluator.reader
        self.confirmation_timeout_s = confirmation_timeout_s
        self.claim_function = claim_function
        self.claim_call_shape = ClaimCallShape(claim_call_shape)
        self.require_proof = require_proof
        self._sessions: dict[tuple[str, str], ClaimSession] = {}
        self._busy: set[tuple[str, str]] = set()

    # -------------------------------------------------------------------------
    # Session bookkeeping
    # -------------------------------------------------------------------------

    @staticmethod
    def _key(address: str, distribution: str) -> tuple[str, str]:
        return (normalize_address(distribution), normalize_address(address))

    def get_session(self, address: str, distribution: str) -> Optional[ClaimSession]:
        return self._sessions.get(self._key(address, distribution))

    def outcome(self, address: str, distribution: str) -> Optional[ClaimOutcome]:
        session = self.get_session(address, distribution)
        return session.outcome() if session else None

    def _require_session(self, address: str, distribution: str) -> ClaimSession:
        session = self.get_session(address, distribution)
        if session is None:
            raise ClaimStateException(
                f"No claim session for {address} in {distribution}",
                state=ClaimState.IDLE.value,
            )
        return session

    def _acquire(self, key: tuple[str, str]) -> None:
        if key in self._busy:
            raise ClaimInProgressException(
                f"A claim operation for {key[1]} in {key[0]} is already running",
                distribution=key[0],
                address=key[1],
            )
        self._busy.add(key)

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    async def begin(
        self,
        address: str,
        distribution: str,
        manual_proof: Optional[str] = None,
        amount: Optional[int] = None,
    ) -> ClaimOutcome:
        """
        Start (or restart) a claim: check eligibility, then find a proof.

        A finished session (BLOCKED, CLAIMED or FAILED) is replaced by a
        new one; eligibility is always re-read.

        Raises:
            ClaimInProgressException: Another operation for the pair is
                running, or a submitted transaction is unconfirmed
            ValueError: Malformed address
        """
        key = self._key(address, distribution)
        session = self._sessions.get(key)
        if session is not None and session.state == ClaimState.SUBMITTED:
            raise ClaimInProgressException(
                f"Claim for {key[1]} in {key[0]} is awaiting confirmation",
                distribution=key[0],
                address=key[1],
            )
        self._acquire(key)
        try:
            if session is None or session.state not in _RESTARTABLE:
                session = ClaimSession(distribution=key[0], address=key[1])
                self._sessions[key] = session
            session.error_message = None
            session.transition(ClaimState.CHECKING_ELIGIBILITY)

            try:
                verdict = await self.evaluator.evaluate(session.address, session.distribution)
            except BaseException:
                session.transition(ClaimState.IDLE)
                raise
            session.verdict = verdict

            if not verdict.is_eligible:
                session.transition(ClaimState.BLOCKED)
                logger.info(f"Claim {session.address} @ {session.distribution} blocked: {verdict.reason.value}")
                return session.outcome()

            stored = self.store.lookup(session.distribution, session.address)
            if stored is not None:
                session.proof = list(stored.proof)
                session.proof_source = "store"
                session.amount = stored.amount
                session.transition(ClaimState.READY_TO_SUBMIT)
                return session.outcome()

            if not self.require_proof:
                session.proof = []
                session.proof_source = None
                session.amount = amount
                session.transition(ClaimState.READY_TO_SUBMIT)
                return session.outcome()

            session.proof = None
            session.proof_source = None
            session.amount = None
            session.transition(ClaimState.AWAITING_MANUAL_PROOF)
            logger.info(f"No stored proof for {session.address} @ {session.distribution}")
            if manual_proof is not None:
                self._apply_manual_proof(session, manual_proof, amount)
            return session.outcome()
        finally:
            self._busy.discard(key)

    def _apply_manual_proof(self, session: ClaimSession, text: str, amount: Optional[int]) -> None:
        try:
            proof = parse_manual_proof(text)
        except ProofParseException as e:
            session.error_message = e.message
            return
        session.proof = proof
        session.proof_source = "manual"
        session.amount = amount
        session.error_message = None
        session.transition(ClaimState.READY_TO_SUBMIT)

    def provide_manual_proof(
        self,
        address: str,
        distribution: str,
        text: str,
        amount: Optional[int] = None,
    ) -> ClaimOutcome:
        """
        Supply proof text for a session waiting on one.

        A parse failure keeps the session in AWAITING_MANUAL_PROOF with an
        error message; the user may retry.

        Raises:
            ClaimStateException: Session is not awaiting a proof
        """
        session = self._require_session(address, distribution)
        if session.state != ClaimState.AWAITING_MANUAL_PROOF:
            raise ClaimStateException(
                "Claim is not waiting for a manual proof",
                state=session.state.value,
            )
        self._apply_manual_proof(session, text, amount)
        return session.outcome()

    async def _resolve_amount(self, session: ClaimSession) -> None:
        # A stored or user-given amount wins; otherwise ask the contract.
        if self.claim_call_shape != ClaimCallShape.AMOUNT_AND_PROOF or session.amount is not None:
            return
        call = self.reader.read_uint(
            session.distribution, ContractFunctions.CLAIM_AMOUNT, [session.address]
        )
        timeout = self.evaluator.read_timeout_s
        if timeout is not None:
            session.amount = await asyncio.wait_for(call, timeout=timeout)
        else:
            session.amount = await call
        logger.info(f"Claim amount for {session.address} @ {session.distribution} read on-chain: {session.amount}")

    def _claim_args(self, session: ClaimSession) -> list[Any]:
        proof = list(session.proof or [])
        if self.claim_call_shape == ClaimCallShape.AMOUNT_AND_PROOF:
            return [session.amount, proof]
        return [proof]

    async def submit(self, address: str, distribution: str) -> ClaimOutcome:
        """
        Broadcast the claim transaction and wait for its confirmation.

        Raises:
            ClaimStateException: Session is not READY_TO_SUBMIT
            ClaimInProgressException: Another operation for the pair is running
        """
        session = self._require_session(address, distribution)
        if session.state == ClaimState.SUBMITTED:
            raise ClaimInProgressException(
                f"Claim for {session.address} in {session.distribution} is awaiting confirmation",
                distribution=session.distribution,
                address=session.address,
            )
        self._acquire(session.key)
        try:
            if session.state != ClaimState.READY_TO_SUBMIT:
                raise ClaimStateException(
                    "Claim is not ready to submit",
                    state=session.state.value,
                )

            try:
                await self._resolve_amount(session)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                session.fail(FailureKind.AMOUNT_UNAVAILABLE, f"{type(e).__name__}: {e}")
                return session.outcome()

            try:
                handle = await self.writer.submit(
                    session.distribution, self.claim_function, self._claim_args(session)
                )
            except asyncio.CancelledError:
                raise
            except Exception as e:
                session.fail(FailureKind.SUBMISSION_ERROR, f"{type(e).__name__}: {e}")
                return session.outcome()

            session.handle = handle
            session.transition(ClaimState.SUBMITTED)
            logger.info(f"Claim {session.address} @ {session.distribution} submitted: {handle.tx_hash}")
            await self._confirm(session)
            return session.outcome()
        finally:
            self._busy.discard(session.key)

    async def await_confirmation(self, address: str, distribution: str) -> ClaimOutcome:
        """
        Resume waiting for a SUBMITTED claim, e.g. after a cancelled wait.

        Raises:
            ClaimStateException: Session is not SUBMITTED
            ClaimInProgressException: Another wait for the pair is running
        """
        session = self._require_session(address, distribution)
        self._acquire(session.key)
        try:
            if session.state != ClaimState.SUBMITTED:
                raise ClaimStateException(
                    "Claim has no transaction awaiting confirmation",
                    state=session.state.value,
                )
            await self._confirm(session)
            return session.outcome()
        finally:
            self._busy.discard(session.key)

    async def _confirm(self, session: ClaimSession) -> None:
        # Cancellation propagates and leaves the session SUBMITTED: the
        # broadcast transaction cannot be withdrawn.
        try:
            receipt = await asyncio.wait_for(
                self.writer.await_confirmation(session.handle),
                timeout=self.confirmation_timeout_s,
            )
        except asyncio.TimeoutError:
            session.fail(FailureKind.CONFIRMATION_TIMEOUT, CONFIRMATION_TIMEOUT_MESSAGE)
            return
        except asyncio.CancelledError:
            logger.info(f"Confirmation wait for {session.handle.tx_hash} cancelled")
            raise
        except Exception as e:
            session.fail(FailureKind.NETWORK_ERROR, f"{type(e).__name__}: {e}")
            return

        if receipt.success:
            session.transition(ClaimState.CLAIMED)
            logger.info(f"Claim {session.address} @ {session.distribution} confirmed: {receipt.tx_hash}")
        else:
            session.fail(FailureKind.REVERTED, receipt.revert_reason or "Transaction reverted")

    def reset(self, address: str, distribution: str) -> ClaimOutcome:
        """
        Return a FAILED session to IDLE so the user can start over.

        Raises:
            ClaimStateException: Session is not FAILED
        """
        session = self._require_session(address, distribution)
        if session.key in self._busy:
            raise ClaimInProgressException(
                "Cannot reset a claim while an operation is running",
                distribution=session.distribution,
                address=session.address,
            )
        session.transition(ClaimState.IDLE)
        session.verdict = None
        session.proof = None
        session.proof_source = None
        session.amount = None
        session.handle = None
        session.failure_kind = None
        session.failure_reason = None
        session.error_message = None
        return session.outcome()

    async def claim(
        self,
        address: str,
        distribution: str,
        manual_proof: Optional[str] = None,
        amount: Optional[int] = None,
    ) -> ClaimOutcome:
        """Run begin and, when the session is ready, submit."""
        outcome = await self.begin(address, distribution, manual_proof=manual_proof, amount=amount)
        if outcome.state != ClaimState.READY_TO_SUBMIT:
            return outcome
        return await self.submit(address, distribution)


__all__ = [
    "ALLOWED_TRANSITIONS",
    "ClaimSession",
    "ClaimOrchestrator",
]
