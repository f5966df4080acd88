"""
Entitlement Service

Facade consumed by the UI, HTTP API and CLI. Wires the tree builder,
Proof Store, eligibility evaluator and claim orchestrator together from
a RuntimeConfig.

Usage:
    service = EntitlementService.from_config(config, reader=reader, writer=writer)
    record = service.build_distribution([("0xaaa...", 1000), ("0xbbb...", 500)])
    verdict = await service.get_eligibility("0xaaa...", "0xdistribution...")
    outcome = await service.submit_claim("0xaaa...", "0xdistribution...")
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional, Sequence, Union

from core.chain.interfaces import ChainReader, ChainWriter
from core.config.runtime import RuntimeConfig
from core.crypto.addresses import normalize_address
from core.eligibility.evaluator import EligibilityEvaluator
from core.merkle.builder import RecipientInput, build_distribution
from core.merkle.merkle_proofs import MerkleVerifier
from core.schemas.claim import ClaimOutcome
from core.schemas.distribution import DistributionRecord, ProofLookup
from core.schemas.eligibility import EligibilityVerdict
from core.schemas.errors import (
    DistributionConstructionException,
    EntitlementException,
    ErrorCodes,
)
from core.store.proof_store import ProofStore

from .claim_orchestrator import ClaimOrchestrator
from .recipients_input import RecipientParseResult, parse_recipients_csv


logger = logging.getLogger(__name__)


class ChainNotConfiguredException(EntitlementException):
    """Raised when an operation needs a chain collaborator that was not given."""

    def __init__(self, capability: str) -> None:
        super().__init__(
            message=f"No chain {capability} configured",
            code=ErrorCodes.CHAIN_NOT_CONFIGURED,
            details={"capability": capability},
            retryable=False,
        )


class EntitlementService:
    """
    Single entry point for distribution building and claiming.

    Chain collaborators are optional: building, lookup, export and import
    work offline; eligibility needs a reader and claiming needs both.
    """

    def __init__(
        self,
        store: Optional[ProofStore] = None,
        reader: Optional[ChainReader] = None,
        writer: Optional[ChainWriter] = None,
        config: Optional[RuntimeConfig] = None,
    ) -> None:
        self.config = config or RuntimeConfig()
        self.store = store if store is not None else self.config.build_store()
        self.reader = reader
        self.writer = writer
        self._evaluator: Optional[EligibilityEvaluator] = None
        self._orchestrator: Optional[ClaimOrchestrator] = None

    @classmethod
    def from_config(
        cls,
        config: RuntimeConfig,
        reader: Optional[ChainReader] = None,
        writer: Optional[ChainWriter] = None,
    ) -> "EntitlementService":
        return cls(store=config.build_store(), reader=reader, writer=writer, config=config)

    @property
    def evaluator(self) -> EligibilityEvaluator:
        if self.reader is None:
            raise ChainNotConfiguredException("reader")
        if self._evaluator is None:
            chain = self.config.chain
            self._evaluator = EligibilityEvaluator(
                self.reader,
                reputation_contract=chain.reputation_contract,
                check_contract_gate=chain.check_contract_gate,
                read_timeout_s=chain.read_timeout_s,
            )
        return self._evaluator

    @property
    def orchestrator(self) -> ClaimOrchestrator:
        if self.writer is None:
            raise ChainNotConfiguredException("writer")
        if self._orchestrator is None:
            self._orchestrator = ClaimOrchestrator(
                self.store,
                self.evaluator,
                self.writer,
                confirmation_timeout_s=self.config.chain.confirmation_timeout_s,
                claim_function=self.config.chain.claim_function,
                claim_call_shape=self.config.chain.claim_call_shape,
            )
        return self._orchestrator

    # -------------------------------------------------------------------------
    # Distribution building and storage
    # -------------------------------------------------------------------------

    def build_distribution(
        self,
        recipients: Iterable[RecipientInput],
        distribution_contract: Optional[str] = None,
    ) -> DistributionRecord:
        """
        Build a tree for the recipients and save it, with its alias if given.

        The record and alias are saved together: when the alias is taken,
        nothing is stored.

        Raises:
            DistributionConstructionException: Empty, duplicate or malformed input
            ProofStoreException: RECORD_CONFLICT or ALIAS_CONFLICT
            ValueError: Malformed contract address
        """
        record = build_distribution(recipients).to_record()
        if distribution_contract:
            record = record.with_distribution_contract(normalize_address(distribution_contract))
        return self.store.save(record)

    def build_distribution_from_csv(
        self,
        text: str,
        distribution_contract: Optional[str] = None,
    ) -> tuple[DistributionRecord, RecipientParseResult]:
        """
        Parse CSV text, build and save. Skipped rows are returned, not raised.

        Raises:
            DistributionConstructionException: No valid rows, or duplicates
        """
        parsed = parse_recipients_csv(text)
        if not parsed.recipients:
            raise DistributionConstructionException(
                "No valid recipients found in CSV input",
                code=ErrorCodes.EMPTY_RECIPIENTS,
                details={"skipped": len(parsed.skipped)},
            )
        return self.build_distribution(parsed.recipients, distribution_contract), parsed

    def attach_distribution_address(self, root: str, address: str) -> DistributionRecord:
        return self.store.attach_distribution_address(root, address)

    def get_proof(self, address: str, distribution: str) -> Optional[ProofLookup]:
        """Stored amount and proof, or None ("proof required from user")."""
        return self.store.lookup(distribution, address)

    def export_distribution(self, root: str) -> str:
        return self.store.export(root)

    def import_distribution(self, text: str) -> DistributionRecord:
        return self.store.import_record(text)

    @staticmethod
    def verify_claim(address: str, amount: Any, proof: Sequence[str], root: str) -> bool:
        """Off-chain check that (address, amount) with proof reproduces root."""
        return MerkleVerifier.verify_claim(address, amount, proof, root)

    # -------------------------------------------------------------------------
    # Chain-backed operations
    # -------------------------------------------------------------------------

    async def get_eligibility(self, address: str, distribution: str) -> EligibilityVerdict:
        """
        Fresh eligibility verdict.

        Raises:
            ChainNotConfiguredException: No chain reader
        """
        return await self.evaluator.evaluate(address, distribution)

    async def submit_claim(
        self,
        address: str,
        distribution: str,
        proof: Optional[Union[str, Sequence[str]]] = None,
        amount: Optional[int] = None,
    ) -> ClaimOutcome:
        """
        Check eligibility, resolve a proof and submit the claim.

        ``proof`` is only used when the store has no record for the
        distribution; it may be pasted text or a list of hex strings.

        Raises:
            ChainNotConfiguredException: No chain reader or writer
            ClaimInProgressException: A claim for the pair is already running
        """
        manual = proof if proof is None or isinstance(proof, str) else " ".join(proof)
        outcome = await self.orchestrator.claim(address, distribution, manual_proof=manual, amount=amount)
        logger.info(f"Claim {outcome.address} @ {outcome.distribution} is now {outcome.state.value}")
        return outcome


__all__ = [
    "ChainNotConfiguredException",
    "EntitlementService",
]
