"""
Module 01 - Schemas & Canonicalization
File: errors.py

Purpose: Standard error taxonomy across the entitlement engine.
Defines both Pydantic models for structured error communication
and Python exceptions for control flow.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes used across the engine."""

    # Schema & Validation Errors
    SCHEMA_VALIDATION_ERROR = "SCHEMA_VALIDATION_ERROR"
    CANONICALIZATION_ERROR = "CANONICALIZATION_ERROR"

    # Construction Errors
    INVALID_ADDRESS = "INVALID_ADDRESS"
    INVALID_AMOUNT = "INVALID_AMOUNT"
    EMPTY_RECIPIENTS = "EMPTY_RECIPIENTS"
    DUPLICATE_RECIPIENT = "DUPLICATE_RECIPIENT"

    # Proof Store Errors
    RECORD_CONFLICT = "RECORD_CONFLICT"
    RECORD_NOT_FOUND = "RECORD_NOT_FOUND"
    ALIAS_CONFLICT = "ALIAS_CONFLICT"
    RECORD_IMPORT_INVALID = "RECORD_IMPORT_INVALID"

    # Claim Errors
    PROOF_PARSE_ERROR = "PROOF_PARSE_ERROR"
    INVALID_STATE_TRANSITION = "INVALID_STATE_TRANSITION"
    CLAIM_IN_PROGRESS = "CLAIM_IN_PROGRESS"

    # Service Errors
    CHAIN_NOT_CONFIGURED = "CHAIN_NOT_CONFIGURED"


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class EntitlementError(BaseModel):
    """
    Base error model for structured error communication.

    Used for passing errors between modules (and over HTTP) without
    exceptions.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.DUPLICATE_RECIPIENT],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class EntitlementException(Exception):
    """
    Base exception for all entitlement engine errors.

    Carries structured error information and can be converted
    to/from EntitlementError models.
    """

    def __init__(
        self,
        message: str,
        code: str = "ENTITLEMENT_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> EntitlementError:
        """Convert this exception to an EntitlementError model."""
        return EntitlementError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class CanonicalizationException(EntitlementException):
    """Exception raised when canonical serialization fails."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.CANONICALIZATION_ERROR,
            details=details,
            retryable=False,
        )


class LeafEncodingException(EntitlementException):
    """Exception raised when a recipient cannot be ABI-encoded into a leaf."""

    def __init__(
        self,
        message: str,
        code: str = ErrorCodes.INVALID_ADDRESS,
        value: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if value is not None:
            full_details["value"] = value
        super().__init__(
            message=message,
            code=code,
            details=full_details,
            retryable=False,
        )


class DistributionConstructionException(EntitlementException):
    """Exception raised when a recipient set cannot form a distribution."""

    def __init__(
        self,
        message: str,
        code: str = ErrorCodes.SCHEMA_VALIDATION_ERROR,
        address: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if address:
            full_details["address"] = address
        super().__init__(
            message=message,
            code=code,
            details=full_details,
            retryable=False,
        )


class ProofStoreException(EntitlementException):
    """Exception raised for conflicting or missing Proof Store entries."""

    def __init__(
        self,
        message: str,
        code: str = ErrorCodes.RECORD_CONFLICT,
        key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if key:
            full_details["key"] = key
        super().__init__(
            message=message,
            code=code,
            details=full_details,
            retryable=False,
        )


class RecordImportException(EntitlementException):
    """Exception raised when an exported distribution cannot be imported."""

    def __init__(
        self,
        message: str,
        missing: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if missing:
            full_details["missing"] = missing
        super().__init__(
            message=message,
            code=ErrorCodes.RECORD_IMPORT_INVALID,
            details=full_details,
            retryable=False,
        )


class ProofParseException(EntitlementException):
    """Exception raised when manually entered proof text yields no hashes."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.PROOF_PARSE_ERROR,
            details=details,
            retryable=True,
        )


class ClaimStateException(EntitlementException):
    """Exception raised on an illegal claim state transition."""

    def __init__(
        self,
        message: str,
        state: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if state:
            full_details["state"] = state
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_STATE_TRANSITION,
            details=full_details,
            retryable=False,
        )


class ClaimInProgressException(EntitlementException):
    """Exception raised when a claim for the same pair is already active."""

    def __init__(
        self,
        message: str,
        distribution: str | None = None,
        address: str | None = None,
    ) -> None:
        details: dict[str, Any] = {}
        if distribution:
            details["distribution"] = distribution
        if address:
            details["address"] = address
        super().__init__(
            message=message,
            code=ErrorCodes.CLAIM_IN_PROGRESS,
            details=details,
            retryable=True,
        )
