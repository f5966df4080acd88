"""
Runtime Configuration

Central configuration for proof storage, chain interaction and logging.
"""

from __future__ import annotations

import copy
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from core.store.backends import create_backend
from core.store.proof_store import ProofStore

load_dotenv()

# Relative to the working directory, shared with the CLI.
DEFAULT_STORE_DIR = ".airdrop/store"

CLAIM_CALL_SHAPES = ("proof_only", "amount_and_proof")


@dataclass
class StoreConfig:
    """Where distribution records are kept."""
    backend: str = "memory"
    path: Optional[str] = None

    def __post_init__(self):
        if self.backend not in ("memory", "file"):
            raise ValueError(f"Unknown store backend: {self.backend!r}")
        if self.backend == "file" and not self.path:
            self.path = str(Path.cwd() / DEFAULT_STORE_DIR)


@dataclass
class ChainConfig:
    """Chain interaction settings."""
    confirmation_timeout_s: float = 120.0
    read_timeout_s: Optional[float] = 15.0
    claim_function: str = "claim"
    reputation_contract: Optional[str] = None
    check_contract_gate: bool = True
    # Argument layout of the claim call: claim(proof) or claim(amount, proof)
    claim_call_shape: str = "proof_only"

    def __post_init__(self):
        if self.claim_call_shape not in CLAIM_CALL_SHAPES:
            raise ValueError(f"Unknown claim call shape: {self.claim_call_shape!r}")


@dataclass
class LoggingConfig:
    """Logging settings applied at entry points."""
    level: str = "INFO"
    format: str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _env_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration for the entitlement engine.

    Can be loaded from:
    - Environment variables
    - YAML file
    - Programmatic construction
    """
    store: StoreConfig = field(default_factory=StoreConfig)
    chain: ChainConfig = field(default_factory=ChainConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    extra: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        Supported variables:
        - AIRDROP_STORE_BACKEND: "memory" or "file"
        - AIRDROP_STORE_PATH: Directory for the file backend
        - AIRDROP_CONFIRMATION_TIMEOUT: Seconds to wait for a receipt
        - AIRDROP_READ_TIMEOUT: Seconds per chain read
        - AIRDROP_CLAIM_FUNCTION: Contract function used to claim
        - AIRDROP_CLAIM_CALL_SHAPE: "proof_only" or "amount_and_proof"
        - AIRDROP_REPUTATION_CONTRACT: Contract holding trust/KYC facts
        - AIRDROP_CHECK_CONTRACT_GATE: Read isEligible() (true/false)
        - AIRDROP_LOG_LEVEL: Logging level name
        """
        overrides: dict[str, Any] = {}

        # Store settings
        if os.getenv("AIRDROP_STORE_BACKEND"):
            overrides.setdefault("store", {})["backend"] = os.getenv("AIRDROP_STORE_BACKEND")
        if os.getenv("AIRDROP_STORE_PATH"):
            overrides.setdefault("store", {})["path"] = os.getenv("AIRDROP_STORE_PATH")

        # Chain settings
        if os.getenv("AIRDROP_CONFIRMATION_TIMEOUT"):
            overrides.setdefault("chain", {})["confirmation_timeout_s"] = float(
                os.getenv("AIRDROP_CONFIRMATION_TIMEOUT")
            )
        if os.getenv("AIRDROP_READ_TIMEOUT"):
            overrides.setdefault("chain", {})["read_timeout_s"] = float(
                os.getenv("AIRDROP_READ_TIMEOUT")
            )
        if os.getenv("AIRDROP_CLAIM_FUNCTION"):
            overrides.setdefault("chain", {})["claim_function"] = os.getenv("AIRDROP_CLAIM_FUNCTION")
        if os.getenv("AIRDROP_CLAIM_CALL_SHAPE"):
            overrides.setdefault("chain", {})["claim_call_shape"] = os.getenv("AIRDROP_CLAIM_CALL_SHAPE")
        if os.getenv("AIRDROP_REPUTATION_CONTRACT"):
            overrides.setdefault("chain", {})["reputation_contract"] = os.getenv(
                "AIRDROP_REPUTATION_CONTRACT"
            )
        if os.getenv("AIRDROP_CHECK_CONTRACT_GATE"):
            overrides.setdefault("chain", {})["check_contract_gate"] = _env_bool(
                os.getenv("AIRDROP_CHECK_CONTRACT_GATE", "true")
            )

        # Logging
        if os.getenv("AIRDROP_LOG_LEVEL"):
            overrides.setdefault("logging", {})["level"] = os.getenv("AIRDROP_LOG_LEVEL").upper()

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """Load configuration purely from environment variables."""
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f)

        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        store_data = data.get("store", {}) or {}
        chain_data = data.get("chain", {}) or {}
        logging_data = data.get("logging", {}) or {}

        return cls(
            store=StoreConfig(**store_data),
            chain=ChainConfig(**chain_data),
            logging=LoggingConfig(**logging_data),
            extra=data.get("extra", {}) or {},
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)
        for section in ("store", "chain", "logging"):
            for key, value in overrides.get(section, {}).items():
                setattr(getattr(new_config, section), key, value)

        # Re-run validation (path default for the file backend, call shape)
        new_config.store.__post_init__()
        new_config.chain.__post_init__()
        return new_config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "store": {
                "backend": self.store.backend,
                "path": self.store.path,
            },
            "chain": {
                "confirmation_timeout_s": self.chain.confirmation_timeout_s,
                "read_timeout_s": self.chain.read_timeout_s,
                "claim_function": self.chain.claim_function,
                "reputation_contract": self.chain.reputation_contract,
                "check_contract_gate": self.chain.check_contract_gate,
                "claim_call_shape": self.chain.claim_call_shape,
            },
            "logging": {
                "level": self.logging.level,
                "format": self.logging.format,
            },
            "extra": self.extra,
        }

    def build_store(self) -> ProofStore:
        """Proof store over the configured backend."""
        return ProofStore(create_backend(self.store.backend, self.store.path))


# Global default configuration
_default_config: Optional[RuntimeConfig] = None


def get_default_config() -> RuntimeConfig:
    """Get the default runtime configuration."""
    global _default_config
    if _default_config is None:
        _default_config = RuntimeConfig.from_env()
    return _default_config


def set_default_config(config: Optional[RuntimeConfig]) -> None:
    """Set (or with None, reset) the default runtime configuration."""
    global _default_config
    _default_config = config


__all__ = [
    "CLAIM_CALL_SHAPES",
    "DEFAULT_STORE_DIR",
    "StoreConfig",
    "ChainConfig",
    "LoggingConfig",
    "RuntimeConfig",
    "get_default_config",
    "set_default_config",
]
