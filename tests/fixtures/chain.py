"""
Fake chain collaborators.

FakeChain implements both ChainReader and ChainWriter over plain dicts so
eligibility and claim flows can be driven without a node.

Usage:
    chain = FakeChain()
    chain.set_account(ADDR_A, activated=True, trust_score=80, kyc_level=2)
    chain.fail_reads.add("getTrustScore")
    chain.receipt_success = False
"""

import asyncio
import itertools
from typing import Any, Optional, Sequence

from core.chain.interfaces import ChainReadError, ChainWriteError, ContractFunctions
from core.schemas.claim import TransactionHandle, TransactionReceipt


class FakeChain:
    """In-memory chain with configurable failures and delays."""

    def __init__(self) -> None:
        # (contract, function, args tuple) -> value; args tuple may be ()
        self.values: dict[tuple[str, str, tuple], Any] = {}
        # Function-level defaults used when no exact entry exists
        self.defaults: dict[str, Any] = {
            ContractFunctions.IS_ACTIVATED: True,
            ContractFunctions.TRUST_SCORE: 100,
            ContractFunctions.KYC_LEVEL: 3,
            ContractFunctions.IS_BLACKLISTED: False,
            ContractFunctions.HAS_CLAIMED: False,
            ContractFunctions.IS_ELIGIBLE: True,
            ContractFunctions.REQUIRED_TRUST_SCORE: 0,
            ContractFunctions.REQUIRED_KYC_LEVEL: 0,
            ContractFunctions.START_TIME: 0,
            ContractFunctions.END_TIME: 0,
        }
        self.fail_reads: set[str] = set()
        self.read_delay: float = 0.0
        self.reads: list[tuple[str, str, tuple]] = []

        self.submissions: list[tuple[str, str, list]] = []
        self.fail_submit: bool = False
        self.fail_confirmation: bool = False
        self.receipt_success: bool = True
        self.revert_reason: Optional[str] = None
        self.confirmation_delay: float = 0.0
        self._tx_counter = itertools.count(1)

    # -------------------------------------------------------------------------
    # Setup helpers
    # -------------------------------------------------------------------------

    def set_value(self, contract: str, function: str, args: Sequence[Any], value: Any) -> None:
        self.values[(contract.lower(), function, tuple(a.lower() if isinstance(a, str) else a for a in args))] = value

    def set_default(self, function: str, value: Any) -> None:
        self.defaults[function] = value

    def set_account(self, address: str, **facts: Any) -> None:
        """Override per-account facts regardless of contract."""
        mapping = {
            "activated": ContractFunctions.IS_ACTIVATED,
            "trust_score": ContractFunctions.TRUST_SCORE,
            "kyc_level": ContractFunctions.KYC_LEVEL,
            "blacklisted": ContractFunctions.IS_BLACKLISTED,
            "claimed": ContractFunctions.HAS_CLAIMED,
            "contract_eligible": ContractFunctions.IS_ELIGIBLE,
            "claim_amount": ContractFunctions.CLAIM_AMOUNT,
        }
        for name, value in facts.items():
            self.values[("*", mapping[name], (address.lower(),))] = value

    # -------------------------------------------------------------------------
    # ChainReader
    # -------------------------------------------------------------------------

    async def _read(self, contract: str, function: str, args: Sequence[Any]) -> Any:
        key_args = tuple(a.lower() if isinstance(a, str) else a for a in args)
        self.reads.append((contract.lower(), function, key_args))
        if self.read_delay:
            await asyncio.sleep(self.read_delay)
        if function in self.fail_reads:
            raise ChainReadError(f"execution reverted: {function}", function=function, contract=contract)
        for key in ((contract.lower(), function, key_args), ("*", function, key_args)):
            if key in self.values:
                return self.values[key]
        if function in self.defaults:
            return self.defaults[function]
        raise ChainReadError(f"unknown function {function}", function=function, contract=contract)

    async def read_bool(self, contract: str, function: str, args: Sequence[Any] = ()) -> bool:
        return bool(await self._read(contract, function, args))

    async def read_uint(self, contract: str, function: str, args: Sequence[Any] = ()) -> int:
        return int(await self._read(contract, function, args))

    async def read_address(self, contract: str, function: str, args: Sequence[Any] = ()) -> str:
        return str(await self._read(contract, function, args))

    # -------------------------------------------------------------------------
    # ChainWriter
    # -------------------------------------------------------------------------

    async def submit(self, contract: str, function: str, args: Sequence[Any] = ()) -> TransactionHandle:
        await asyncio.sleep(0)
        if self.fail_submit:
            raise ChainWriteError("user rejected transaction", function=function, contract=contract)
        self.submissions.append((contract.lower(), function, list(args)))
        return TransactionHandle(tx_hash="0x" + f"{next(self._tx_counter):064x}")

    async def await_confirmation(self, handle: TransactionHandle) -> TransactionReceipt:
        if self.confirmation_delay:
            await asyncio.sleep(self.confirmation_delay)
        else:
            await asyncio.sleep(0)
        if self.fail_confirmation:
            raise ChainWriteError("connection reset by peer")
        return TransactionReceipt(
            tx_hash=handle.tx_hash,
            success=self.receipt_success,
            revert_reason=None if self.receipt_success else (self.revert_reason or "execution reverted"),
            block_number=1,
        )
