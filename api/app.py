"""
FastAPI Application

Main application setup and configuration.

Usage:
    uvicorn api.app:app --reload

    # Or run directly
    python -m api.app
"""

import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.errors import (
    APIError,
    api_error_handler,
    entitlement_error_handler,
    generic_error_handler,
)
from api.routes import distributions, eligibility, health, proofs
from core.schemas.errors import EntitlementException


# Configure logging - respects AIRDROP_LOG_LEVEL env var
def _resolve_log_level() -> int:
    """Resolve log level from env var, defaulting to INFO."""
    raw = os.getenv("AIRDROP_LOG_LEVEL")
    return getattr(logging, (raw or "INFO").upper(), logging.INFO)


logging.basicConfig(
    level=_resolve_log_level(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(
        title="Merkle Airdrop API",
        description="""
HTTP API for the Merkle airdrop entitlement engine.

## Endpoints

- **POST /distributions** - Build a distribution from recipients (JSON or CSV)
- **POST /distributions/{root}/alias** - Attach the distribution contract address
- **GET /distributions/{key}/proofs/{address}** - Stored amount and proof
- **GET /distributions/{key}/export** / **POST /distributions/import** - Record transfer
- **POST /proofs/parse** - Normalize a pasted proof
- **POST /proofs/verify** - Verify a proof against a root
- **GET /eligibility/{distribution}/{address}** - Fresh eligibility verdict
- **GET /health** - Health check

Amounts are decimal strings in base units.
        """,
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register exception handlers
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(EntitlementException, entitlement_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    # Include routers
    app.include_router(health.router)
    app.include_router(distributions.router)
    app.include_router(proofs.router)
    app.include_router(eligibility.router)

    return app


# Create the application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
