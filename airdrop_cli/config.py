"""
CLI Configuration

Loads RuntimeConfig for the CLI from a YAML file and environment
variables. Unlike the API, the CLI defaults to the file backend so that
records persist between invocations.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import yaml

from core.config.runtime import DEFAULT_STORE_DIR, RuntimeConfig


DEFAULT_CONFIG_NAME = "airdrop.yaml"


def default_config_paths() -> list[Path]:
    return [
        Path.cwd() / DEFAULT_CONFIG_NAME,
        Path.cwd() / ".airdrop.yaml",
        Path.home() / ".config" / "airdrop" / "config.yaml",
    ]


def load_config(config_path: Optional[Path] = None, store_path: Optional[str] = None) -> RuntimeConfig:
    """
    Load configuration from file and/or environment.

    Environment variables override file settings; ``store_path`` (from
    ``--store``) overrides both.

    Raises:
        FileNotFoundError: An explicit config path does not exist
    """
    config: RuntimeConfig | None = None

    if config_path is not None:
        config = RuntimeConfig.from_yaml(config_path)
    else:
        for path in default_config_paths():
            if path.exists():
                config = RuntimeConfig.from_yaml(path)
                break

    if config is None:
        config = RuntimeConfig.from_dict(
            {"store": {"backend": "file", "path": str(Path.cwd() / DEFAULT_STORE_DIR)}}
        )

    config = config.with_env_overrides()

    if store_path:
        config.store.backend = "file"
        config.store.path = store_path
    return config


def get_default_config_template() -> str:
    """Get a template configuration file."""
    template = {
        "store": {"backend": "file", "path": DEFAULT_STORE_DIR},
        "chain": {
            "confirmation_timeout_s": 120.0,
            "read_timeout_s": 15.0,
            "claim_function": "claim",
            "reputation_contract": None,
            "check_contract_gate": True,
            "claim_call_shape": "proof_only",
        },
        "logging": {"level": "INFO"},
    }
    return yaml.safe_dump(template, sort_keys=False)
