"""
Module 01 - Schemas & Canonicalization
File: __init__.py

Purpose: Export the public API for the schemas module.
This is the main entry point for other modules to import schema definitions.
"""

# Version constants
from .versioning import (
    RECORD_FORMAT_VERSION,
    SUPPORTED_RECORD_FORMAT_VERSIONS,
    RecordFormatVersion,
    UnsupportedRecordFormatError,
    assert_supported_record_format,
    is_supported_record_format,
)

# Canonical serialization API
from .canonical import (
    CANONICAL_JSON_SEPARATORS,
    canonicalize_value,
    dumps_canonical,
)

# Error models and exceptions
from .errors import (
    CanonicalizationException,
    ClaimInProgressException,
    ClaimStateException,
    DistributionConstructionException,
    EntitlementError,
    EntitlementException,
    ErrorCodes,
    LeafEncodingException,
    ProofParseException,
    ProofStoreException,
    RecordImportException,
)

# Distribution schemas
from .distribution import (
    UINT256_MAX,
    DistributionRecord,
    ProofLookup,
    Recipient,
    parse_uint256,
)

# Eligibility schemas
from .eligibility import (
    REASON_MESSAGES,
    REASON_PRIORITY,
    AccountFacts,
    EligibilityVerdict,
    ReasonCode,
    reason_message,
)

# Claim schemas
from .claim import (
    CONFIRMATION_TIMEOUT_MESSAGE,
    TERMINAL_STATES,
    ClaimCallShape,
    ClaimOutcome,
    ClaimState,
    FailureKind,
    TransactionHandle,
    TransactionReceipt,
)


__all__ = [
    # Versioning
    "RECORD_FORMAT_VERSION",
    "SUPPORTED_RECORD_FORMAT_VERSIONS",
    "RecordFormatVersion",
    "UnsupportedRecordFormatError",
    "assert_supported_record_format",
    "is_supported_record_format",
    # Canonical serialization
    "CANONICAL_JSON_SEPARATORS",
    "canonicalize_value",
    "dumps_canonical",
    # Errors
    "CanonicalizationException",
    "ClaimInProgressException",
    "ClaimStateException",
    "DistributionConstructionException",
    "EntitlementError",
    "EntitlementException",
    "ErrorCodes",
    "LeafEncodingException",
    "ProofParseException",
    "ProofStoreException",
    "RecordImportException",
    # Distribution
    "UINT256_MAX",
    "DistributionRecord",
    "ProofLookup",
    "Recipient",
    "parse_uint256",
    # Eligibility
    "REASON_MESSAGES",
    "REASON_PRIORITY",
    "AccountFacts",
    "EligibilityVerdict",
    "ReasonCode",
    "reason_message",
    # Claim
    "CONFIRMATION_TIMEOUT_MESSAGE",
    "TERMINAL_STATES",
    "ClaimCallShape",
    "ClaimOutcome",
    "ClaimState",
    "FailureKind",
    "TransactionHandle",
    "TransactionReceipt",
]
