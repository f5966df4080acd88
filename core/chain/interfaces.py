"""
Chain Collaborator Interfaces

Boundary contracts for the blockchain client. The engine never talks to
a node directly; it receives objects implementing these protocols
(a web3 wrapper in production, an in-memory fake in tests).

Reads, submission and confirmation are the only suspension points in
the engine, so every method here is a coroutine.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence, runtime_checkable

from core.schemas.claim import TransactionHandle, TransactionReceipt


# Contract function names read by the eligibility evaluator and written
# by the claim orchestrator.
class ContractFunctions:
    """Function names on the distribution / reputation contracts."""
    IS_ACTIVATED = "isActivated"
    TRUST_SCORE = "getTrustScore"
    KYC_LEVEL = "getKYCLevel"
    IS_BLACKLISTED = "isBlacklisted"
    HAS_CLAIMED = "hasClaimed"
    IS_ELIGIBLE = "isEligible"
    REQUIRED_TRUST_SCORE = "requiredTrustScore"
    REQUIRED_KYC_LEVEL = "requiredKYCLevel"
    START_TIME = "startTime"
    END_TIME = "endTime"
    CLAIM_AMOUNT = "getClaimAmount"
    CLAIM = "claim"


class ChainError(Exception):
    """Error raised by a chain collaborator."""

    def __init__(
        self,
        message: str,
        function: Optional[str] = None,
        contract: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.function = function
        self.contract = contract


class ChainReadError(ChainError):
    """A contract read failed (RPC error, missing function, decode error)."""


class ChainWriteError(ChainError):
    """A transaction could not be submitted or its confirmation not fetched."""


@runtime_checkable
class ChainReader(Protocol):
    """Read-only contract calls."""

    async def read_bool(self, contract: str, function: str, args: Sequence[Any] = ()) -> bool:
        ...

    async def read_uint(self, contract: str, function: str, args: Sequence[Any] = ()) -> int:
        ...

    async def read_address(self, contract: str, function: str, args: Sequence[Any] = ()) -> str:
        ...


@runtime_checkable
class ChainWriter(Protocol):
    """Transaction submission and confirmation."""

    async def submit(self, contract: str, function: str, args: Sequence[Any] = ()) -> TransactionHandle:
        ...

    async def await_confirmation(self, handle: TransactionHandle) -> TransactionReceipt:
        ...


__all__ = [
    "ContractFunctions",
    "ChainError",
    "ChainReadError",
    "ChainWriteError",
    "ChainReader",
    "ChainWriter",
]
