"""
Runtime Configuration Module

Provides configuration loading and management for the capsule simulator.
"""

from .runtime import (
    ENV_PREFIX,
    RuntimeConfig,
    ServiceConfig,
    SimulationConfig,
    config_search_paths,
    get_default_config_template,
    load_runtime_config,
)

__all__ = [
    "ENV_PREFIX",
    "RuntimeConfig",
    "ServiceConfig",
    "SimulationConfig",
    "config_search_paths",
    "get_default_config_template",
    "load_runtime_config",
]
