"""
Chain collaborator interfaces (reads, writes, confirmation).
"""

from .interfaces import (
    ChainError,
    ChainReadError,
    ChainReader,
    ChainWriteError,
    ChainWriter,
    ContractFunctions,
)

__all__ = [
    "ChainError",
    "ChainReadError",
    "ChainReader",
    "ChainWriteError",
    "ChainWriter",
    "ContractFunctions",
]
