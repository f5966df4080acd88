"""
API Dependencies

Dependency injection for the API.
Provides the process-wide EntitlementService built from RuntimeConfig.
Tests replace it through ``app.dependency_overrides[get_service]``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from core.config.runtime import RuntimeConfig
from orchestrator.service import EntitlementService

logger = logging.getLogger(__name__)


CONFIG_SEARCH_PATHS = (
    Path("airdrop.yaml"),
    Path(".airdrop.yaml"),
    Path.home() / ".config" / "airdrop" / "config.yaml",
)


def load_runtime_config() -> RuntimeConfig:
    """Load RuntimeConfig from a config file, then overlay environment variables.

    Search order for config file:
      1. ./airdrop.yaml
      2. ./.airdrop.yaml
      3. ~/.config/airdrop/config.yaml

    Environment variables ALWAYS override config file values.
    """
    config: RuntimeConfig | None = None

    for path in CONFIG_SEARCH_PATHS:
        if path.exists():
            try:
                config = RuntimeConfig.from_yaml(path)
                logger.info(f"Loaded config from {path}")
                break
            except Exception as e:
                logger.warning(f"Failed to parse {path}: {e}")

    if config is None:
        config = RuntimeConfig()

    return config.with_env_overrides()


_service: Optional[EntitlementService] = None


def get_service() -> EntitlementService:
    """
    Shared service instance.

    No chain reader or writer is wired by default: build, lookup,
    export, import and proof endpoints work offline, and eligibility
    answers 503 until a deployment supplies a reader via ``set_service``.
    """
    global _service
    if _service is None:
        _service = EntitlementService.from_config(load_runtime_config())
    return _service


def set_service(service: Optional[EntitlementService]) -> None:
    """Install (or with None, reset) the shared service instance."""
    global _service
    _service = service
