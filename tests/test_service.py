"""
Entitlement Service Tests

End-to-end flows through EntitlementService: build, alias, lookup,
export/import between two services, eligibility and claim submission.
"""

import asyncio

import pytest

from core.config.runtime import RuntimeConfig
from core.schemas.claim import ClaimState
from core.schemas.eligibility import ReasonCode
from core.schemas.errors import (
    DistributionConstructionException,
    ErrorCodes,
    ProofStoreException,
)
from orchestrator.service import ChainNotConfiguredException, EntitlementService

from fixtures.chain import FakeChain
from fixtures.common import (
    ADDR_A,
    ADDR_B,
    ADDR_C,
    DISTRIBUTION_CONTRACT,
    OTHER_CONTRACT,
    make_pair_recipients,
    make_store,
)


H1 = "0x" + "11" * 32


@pytest.fixture
def service(chain):
    return EntitlementService(store=make_store(), reader=chain, writer=chain)


class TestDistributionLifecycle:
    """Build, alias, look up and transfer distributions."""

    def test_proof_fails_against_other_root(self, service):
        """The stored proof verifies; the same proof fails against a 999 tree."""
        record = service.build_distribution(make_pair_recipients())
        found = service.get_proof(ADDR_A, record.root)
        assert EntitlementService.verify_claim(ADDR_A, 1000, found.proof, record.root)

        other = service.build_distribution(make_pair_recipients(999))
        assert other.root != record.root
        assert not service.verify_claim(ADDR_A, 1000, found.proof, other.root)

    def test_build_with_contract(self, service):
        record = service.build_distribution(make_pair_recipients(), DISTRIBUTION_CONTRACT)
        assert record.distribution_contract == DISTRIBUTION_CONTRACT
        assert service.get_proof(ADDR_B, DISTRIBUTION_CONTRACT).amount == 500

    def test_attach_later(self, service):
        record = service.build_distribution(make_pair_recipients())
        assert service.get_proof(ADDR_A, DISTRIBUTION_CONTRACT) is None
        service.attach_distribution_address(record.root, DISTRIBUTION_CONTRACT)
        assert service.get_proof(ADDR_A, DISTRIBUTION_CONTRACT) == service.get_proof(ADDR_A, record.root)

    def test_unknown_recipient(self, service):
        record = service.build_distribution(make_pair_recipients())
        assert service.get_proof(ADDR_C, record.root) is None

    def test_build_from_csv(self, service):
        record, parsed = service.build_distribution_from_csv(
            f"{ADDR_A},1000\n{ADDR_B},500\n{ADDR_C},1.5\n"
        )
        assert len(record.recipients) == 2
        assert len(parsed.skipped) == 1
        assert record.root == service.build_distribution(make_pair_recipients()).root

    def test_build_from_csv_nothing_valid(self, service):
        with pytest.raises(DistributionConstructionException) as exc_info:
            service.build_distribution_from_csv("bad,row\n")
        assert exc_info.value.code == ErrorCodes.EMPTY_RECIPIENTS
        assert service.store.list_roots() == []

    def test_duplicate_stores_nothing(self, service):
        with pytest.raises(DistributionConstructionException):
            service.build_distribution([(ADDR_A, 100), (ADDR_A, 200)])
        assert service.store.list_roots() == []

    def test_alias_conflict_stores_nothing(self, service):
        first = service.build_distribution(make_pair_recipients(), DISTRIBUTION_CONTRACT)
        with pytest.raises(ProofStoreException) as exc_info:
            service.build_distribution([(ADDR_C, 1)], DISTRIBUTION_CONTRACT)
        assert exc_info.value.code == ErrorCodes.ALIAS_CONFLICT
        assert service.store.resolve_root(DISTRIBUTION_CONTRACT) == first.root
        assert service.store.list_roots() == [first.root]

    def test_rebuild_with_other_contract_rejected(self, service):
        first = service.build_distribution(make_pair_recipients(), DISTRIBUTION_CONTRACT)
        with pytest.raises(ProofStoreException) as exc_info:
            service.build_distribution(make_pair_recipients(), OTHER_CONTRACT)
        assert exc_info.value.code == ErrorCodes.ALIAS_CONFLICT
        assert service.store.get_record(first.root).distribution_contract == DISTRIBUTION_CONTRACT
        assert service.get_proof(ADDR_A, OTHER_CONTRACT) is None

    def test_malformed_contract_stores_nothing(self, service):
        with pytest.raises(ValueError):
            service.build_distribution(make_pair_recipients(), "0x12")
        assert service.store.list_roots() == []

    def test_export_import(self, service):
        record = service.build_distribution(make_pair_recipients(), DISTRIBUTION_CONTRACT)
        other = EntitlementService(store=make_store())
        imported = other.import_distribution(service.export_distribution(DISTRIBUTION_CONTRACT))
        assert imported.root == record.root
        assert other.get_proof(ADDR_A, DISTRIBUTION_CONTRACT) == service.get_proof(ADDR_A, record.root)

    def test_from_config(self, tmp_path):
        config = RuntimeConfig.from_dict({"store": {"backend": "file", "path": str(tmp_path)}})
        record = EntitlementService.from_config(config).build_distribution(make_pair_recipients())
        assert EntitlementService.from_config(config).get_proof(ADDR_A, record.root) is not None


class TestChainOperations:
    """Eligibility and claims through the service."""

    def test_eligibility(self, service, chain):
        chain.set_account(ADDR_A, kyc_level=0)
        chain.set_default("requiredKYCLevel", 1)
        verdict = asyncio.run(service.get_eligibility(ADDR_A, DISTRIBUTION_CONTRACT))
        assert verdict.reason == ReasonCode.KYC_TOO_LOW

    def test_submit_with_stored_proof(self, service, chain):
        service.build_distribution(make_pair_recipients(), DISTRIBUTION_CONTRACT)
        outcome = asyncio.run(service.submit_claim(ADDR_A, DISTRIBUTION_CONTRACT))
        assert outcome.state == ClaimState.CLAIMED
        assert outcome.proof_source == "store"
        proof = service.get_proof(ADDR_A, DISTRIBUTION_CONTRACT).proof
        assert chain.submissions[0][2] == [proof]

    def test_submit_with_manual_list(self, service, chain):
        outcome = asyncio.run(service.submit_claim(ADDR_A, OTHER_CONTRACT, proof=[H1]))
        assert outcome.state == ClaimState.CLAIMED
        assert outcome.proof == [H1]
        assert chain.submissions[0][2] == [[H1]]

    def test_submit_without_proof_waits(self, service, chain):
        outcome = asyncio.run(service.submit_claim(ADDR_A, OTHER_CONTRACT))
        assert outcome.state == ClaimState.AWAITING_MANUAL_PROOF
        assert chain.submissions == []

    def test_config_applied(self, chain):
        config = RuntimeConfig.from_dict({
            "chain": {"claim_function": "claimTokens", "check_contract_gate": False}
        })
        chain.set_account(ADDR_A, contract_eligible=False)
        service = EntitlementService(store=make_store(), reader=chain, writer=chain, config=config)
        outcome = asyncio.run(service.submit_claim(ADDR_A, OTHER_CONTRACT, proof=H1))
        assert outcome.state == ClaimState.CLAIMED
        assert chain.submissions[0][1] == "claimTokens"

    def test_claim_call_shape_from_config(self, chain):
        config = RuntimeConfig.from_dict({"chain": {"claim_call_shape": "amount_and_proof"}})
        service = EntitlementService(store=make_store(), reader=chain, writer=chain, config=config)
        service.build_distribution(make_pair_recipients(), DISTRIBUTION_CONTRACT)
        chain.set_account(ADDR_C, claim_amount=5)
        asyncio.run(service.submit_claim(ADDR_A, DISTRIBUTION_CONTRACT))
        asyncio.run(service.submit_claim(ADDR_C, DISTRIBUTION_CONTRACT, proof=[H1]))
        assert chain.submissions[0][2][0] == 1000
        assert chain.submissions[1][2] == [5, [H1]]

    def test_no_reader(self):
        service = EntitlementService(store=make_store())
        with pytest.raises(ChainNotConfiguredException) as exc_info:
            asyncio.run(service.get_eligibility(ADDR_A, DISTRIBUTION_CONTRACT))
        assert exc_info.value.code == ErrorCodes.CHAIN_NOT_CONFIGURED

    def test_no_writer(self, chain):
        service = EntitlementService(store=make_store(), reader=chain)
        with pytest.raises(ChainNotConfiguredException):
            asyncio.run(service.submit_claim(ADDR_A, DISTRIBUTION_CONTRACT))
