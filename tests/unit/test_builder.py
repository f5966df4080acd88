"""
Module 02 - Distribution Builder Unit Tests
Tests for core/merkle/builder.py

Tests:
- Root is independent of input order
- Every recipient's proof verifies; no non-recipient verifies
- Validation failures (empty, duplicate, malformed)
- Construction failure stores nothing
"""
import random

import pytest

from core.crypto.hashing import from_hex, keccak256
from core.merkle import builder as builder_module
from core.merkle.builder import build_distribution, validate_recipients, verify_recipient
from core.merkle.leaf import leaf_hash
from core.merkle.merkle_proofs import MerkleVerifier
from core.schemas.errors import DistributionConstructionException, ErrorCodes
from orchestrator.service import EntitlementService

from fixtures.common import (
    ADDR_A,
    ADDR_B,
    ADDR_C,
    make_recipients,
    make_pair_recipients,
    make_store,
)


class TestBuildDistribution:
    """Tests for build_distribution()."""

    def test_two_recipient_root(self):
        """Two recipients: root is the sorted-pair hash of both leaves."""
        tree = build_distribution(make_pair_recipients())
        leaf_a = leaf_hash(ADDR_A, 1000)
        leaf_b = leaf_hash(ADDR_B, 500)
        lo, hi = sorted([leaf_a, leaf_b])
        assert tree.root == keccak256(lo + hi)
        assert tree.proof_of[ADDR_A] == [leaf_b]
        assert tree.proof_of[ADDR_B] == [leaf_a]

    def test_amount_change_changes_root(self):
        assert (
            build_distribution(make_pair_recipients(1000)).root
            != build_distribution(make_pair_recipients(1001)).root
        )

    def test_order_independent(self):
        recipients = make_recipients(9)
        shuffled = list(recipients)
        random.Random(7).shuffle(shuffled)
        assert build_distribution(recipients).root == build_distribution(shuffled).root

    def test_every_recipient_verifies(self):
        recipients = make_recipients(7)
        tree = build_distribution(recipients)
        for r in recipients:
            proof = tree.proof_of[r.address]
            assert MerkleVerifier.verify_claim(
                r.address, r.amount, ["0x" + p.hex() for p in proof], tree.root_hex
            )

    def test_non_recipient_does_not_verify(self):
        recipients = make_recipients(4)
        tree = build_distribution(recipients)
        for r in recipients:
            assert not verify_recipient((ADDR_C, r.amount), tree.proof_of[r.address], tree.root)
            assert not verify_recipient((r.address, r.amount + 1), tree.proof_of[r.address], tree.root)

    def test_single_recipient(self):
        tree = build_distribution([(ADDR_A, 1)])
        assert tree.root == leaf_hash(ADDR_A, 1)
        assert tree.proof_of[ADDR_A] == []

    def test_accepts_mappings(self):
        tree = build_distribution([{"address": ADDR_A, "amount": "1000"}, {"address": ADDR_B, "amount": 500}])
        assert tree.root == build_distribution(make_pair_recipients()).root

    def test_total_amount(self):
        assert build_distribution(make_pair_recipients()).total_amount == 1500

    def test_proof_for(self):
        tree = build_distribution(make_pair_recipients())
        proof = tree.proof_for(ADDR_A.upper().replace("0X", "0x"))
        assert proof is not None
        assert proof.root == tree.root
        assert tree.proof_for(ADDR_C) is None
        assert tree.proof_for("garbage") is None

    def test_to_record(self):
        tree = build_distribution(make_pair_recipients())
        record = tree.to_record()
        assert record.root == tree.root_hex
        assert from_hex(record.leaves[ADDR_A]) == leaf_hash(ADDR_A, 1000)
        assert record.get_amount(ADDR_B) == 500
        assert record.distribution_contract is None


class TestValidateRecipients:
    """Tests for validate_recipients()."""

    def test_empty_rejected(self):
        with pytest.raises(DistributionConstructionException) as exc_info:
            build_distribution([])
        assert exc_info.value.code == ErrorCodes.EMPTY_RECIPIENTS

    def test_duplicate_rejected_case_insensitive(self):
        with pytest.raises(DistributionConstructionException) as exc_info:
            validate_recipients([(ADDR_A, 1), (ADDR_A.upper().replace("0X", "0x"), 2)])
        assert exc_info.value.code == ErrorCodes.DUPLICATE_RECIPIENT
        assert exc_info.value.details["address"] == ADDR_A

    def test_bad_address_rejected(self):
        with pytest.raises(DistributionConstructionException) as exc_info:
            validate_recipients([(ADDR_A, 1), ("0x1234", 2)])
        assert exc_info.value.code == ErrorCodes.INVALID_ADDRESS
        assert exc_info.value.details["position"] == 1

    def test_bad_amount_rejected(self):
        with pytest.raises(DistributionConstructionException) as exc_info:
            validate_recipients([(ADDR_A, "1.5")])
        assert exc_info.value.code == ErrorCodes.INVALID_AMOUNT

    def test_normalizes(self):
        validated = validate_recipients([(ADDR_A.upper().replace("0X", "0x"), "7")])
        assert validated[0].address == ADDR_A
        assert validated[0].amount == 7


class TestConstructionFailure:
    """A failure while hashing leaves nothing behind."""

    def test_leaf_failure_stores_nothing(self, monkeypatch):
        calls = []

        def failing_leaf(recipient):
            calls.append(recipient.address)
            if len(calls) == 2:
                raise RuntimeError("hash failure")
            return leaf_hash(recipient.address, recipient.amount)

        monkeypatch.setattr(builder_module, "recipient_leaf", failing_leaf)
        service = EntitlementService(store=make_store())

        with pytest.raises(RuntimeError, match="hash failure"):
            service.build_distribution(make_recipients(3))

        assert service.store.list_roots() == []

    def test_duplicate_rejected_before_hashing(self, monkeypatch):
        """[(A, 100), (A, 200)] fails validation without computing any leaf."""
        def unexpected_leaf(recipient):
            raise AssertionError("leaf hashed before validation")

        monkeypatch.setattr(builder_module, "recipient_leaf", unexpected_leaf)
        with pytest.raises(DistributionConstructionException) as exc_info:
            build_distribution([(ADDR_A, 100), (ADDR_A, 200)])
        assert exc_info.value.code == ErrorCodes.DUPLICATE_RECIPIENT
