"""
CLI Proof Commands

Look up stored proofs and verify proofs off-chain.

Usage:
    airdrop proof <root-or-contract> <address> [--json]
    airdrop verify <root> <address> <amount> "<proof text>" [--json]
"""

from __future__ import annotations

import json
import sys
from argparse import Namespace

from core.merkle.merkle_proofs import MerkleVerifier
from orchestrator.proof_input import parse_manual_proof
from orchestrator.service import EntitlementService


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def proof_cmd(args: Namespace) -> int:
    """Print the stored amount and proof for an address."""
    service = EntitlementService.from_config(args.runtime_config)
    found = service.get_proof(args.address, args.key)
    if found is None:
        print(
            f"No stored proof for {args.address} in {args.key}; "
            "the proof must be supplied manually.",
            file=sys.stderr,
        )
        return EXIT_RUNTIME_ERROR

    if args.json:
        print(found.model_dump_json(indent=2))
    else:
        print(f"Root:    {found.root}")
        print(f"Address: {found.address}")
        print(f"Amount:  {found.amount}")
        print("Proof:")
        for entry in found.proof:
            print(f"  {entry}")
    return EXIT_SUCCESS


def verify_cmd(args: Namespace) -> int:
    """Verify (address, amount, proof) against a root."""
    proof = parse_manual_proof(args.proof) if args.proof.strip() else []
    valid = MerkleVerifier.verify_claim(args.address, args.amount, proof, args.root)

    if args.json:
        print(json.dumps({"valid": valid, "root": args.root, "address": args.address}))
    else:
        print("VALID" if valid else "INVALID")
    return EXIT_SUCCESS if valid else EXIT_VERIFICATION_FAILED
