"""
Module 09D - API Dependencies

Dependency injection for the API.
Provides the runtime config and the generator/verifier handles used by routes.
"""

from __future__ import annotations

import logging
from functools import lru_cache

from fastapi import Depends

from core.config.runtime import RuntimeConfig, load_runtime_config
from core.sim import CommitmentGenerator, CommitmentVerifier

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_runtime_config() -> RuntimeConfig:
    """
    Load RuntimeConfig once per process.

    Search order for config file:
      1. ./capsule.json
      2. ./.capsule.json
      3. ~/.config/capsule/config.json

    Environment variables ALWAYS override config file values.
    Tests replace this through ``app.dependency_overrides``.
    """
    config = load_runtime_config()
    logger.debug(f"Runtime config resolved: {config.to_dict()}")
    return config


def get_generator(
    config: RuntimeConfig = Depends(get_runtime_config),
) -> CommitmentGenerator:
    """Create a CommitmentGenerator bound to the simulation config."""
    return CommitmentGenerator(config.simulation)


def get_verifier(
    config: RuntimeConfig = Depends(get_runtime_config),
) -> CommitmentVerifier:
    """Create a CommitmentVerifier bound to the simulation config."""
    return CommitmentVerifier(config.simulation)
