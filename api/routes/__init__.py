"""API route handlers."""

from api.routes import distributions, eligibility, health, proofs

__all__ = ["distributions", "eligibility", "health", "proofs"]
