"""
HTTP API (FastAPI)

HTTP API for the Merkle airdrop entitlement engine:
- /distributions - Build, alias, look up, export and import records
- /proofs - Parse and verify proofs
- /eligibility - Fresh eligibility verdicts
- GET /health - Health check

Usage:
    uvicorn api.app:app --reload
"""

__version__ = "0.1.0"
