"""
Module 04 - Eligibility Evaluator

Fresh, read-only eligibility verdicts from on-chain account facts.
"""

from .evaluator import (
    CHECKS,
    EligibilityEvaluator,
    build_verdict,
    decide,
)

__all__ = [
    "CHECKS",
    "EligibilityEvaluator",
    "build_verdict",
    "decide",
]
