"""
Runtime Configuration

Central configuration for the capsule simulator: simulation constants,
HTTP service settings, and logging.
"""

from __future__ import annotations

import copy
import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from core.schemas.errors import ConfigurationException

load_dotenv()

logger = logging.getLogger(__name__)


# Environment variable prefix
ENV_PREFIX = "CAPSULE_"


@dataclass
class SimulationConfig:
    """Constants for capsule generation and verification."""
    default_dataset_gb: float = 500
    default_audit_ratio: float = 10
    default_cache_warm: bool = True
    capsules_per_ratio_unit: int = 125  # illustrative scaling
    sample_index: int = 2
    base_retrieval_ms: float = 18.0
    cold_cache_multiplier: float = 3.2
    max_capsules: int = 250_000

    def __post_init__(self) -> None:
        if self.sample_index < 0:
            raise ConfigurationException(
                f"sample_index must be non-negative, got {self.sample_index}",
                setting="simulation.sample_index",
            )
        if self.max_capsules < 1:
            raise ConfigurationException(
                f"max_capsules must be at least 1, got {self.max_capsules}",
                setting="simulation.max_capsules",
            )


@dataclass
class ServiceConfig:
    """Configuration for the HTTP service."""
    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: list[str] = field(default_factory=lambda: ["*"])


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration for the capsule simulator.

    Can be loaded from:
    - Environment variables
    - JSON or YAML file
    - Programmatic construction
    """
    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    service: ServiceConfig = field(default_factory=ServiceConfig)
    log_level: str = "INFO"
    log_file: Optional[str] = None

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        Supported variables:
        - CAPSULE_LOG_LEVEL: Log level name
        - CAPSULE_LOG_FILE: Optional log file path
        - CAPSULE_HOST / CAPSULE_PORT: Service bind address
        - CAPSULE_CORS_ORIGINS: Comma-separated allowed origins
        - CAPSULE_BASE_RETRIEVAL_MS: Warm-cache latency baseline
        - CAPSULE_COLD_CACHE_MULTIPLIER: Cold-cache latency multiplier
        - CAPSULE_MAX_CAPSULES: Upper bound on leaves per generation
        """
        overrides: dict[str, Any] = {}

        if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
            overrides["log_level"] = os.getenv(f"{ENV_PREFIX}LOG_LEVEL")
        if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
            overrides["log_file"] = os.getenv(f"{ENV_PREFIX}LOG_FILE")

        # Service settings
        if os.getenv(f"{ENV_PREFIX}HOST"):
            overrides.setdefault("service", {})["host"] = os.getenv(f"{ENV_PREFIX}HOST")
        if os.getenv(f"{ENV_PREFIX}PORT"):
            overrides.setdefault("service", {})["port"] = _env_number(f"{ENV_PREFIX}PORT", int)
        if os.getenv(f"{ENV_PREFIX}CORS_ORIGINS"):
            origins = os.getenv(f"{ENV_PREFIX}CORS_ORIGINS", "")
            overrides.setdefault("service", {})["cors_origins"] = [
                o.strip() for o in origins.split(",") if o.strip()
            ]

        # Simulation settings
        if os.getenv(f"{ENV_PREFIX}BASE_RETRIEVAL_MS"):
            overrides.setdefault("simulation", {})["base_retrieval_ms"] = _env_number(
                f"{ENV_PREFIX}BASE_RETRIEVAL_MS", float
            )
        if os.getenv(f"{ENV_PREFIX}COLD_CACHE_MULTIPLIER"):
            overrides.setdefault("simulation", {})["cold_cache_multiplier"] = _env_number(
                f"{ENV_PREFIX}COLD_CACHE_MULTIPLIER", float
            )
        if os.getenv(f"{ENV_PREFIX}MAX_CAPSULES"):
            overrides.setdefault("simulation", {})["max_capsules"] = _env_number(
                f"{ENV_PREFIX}MAX_CAPSULES", int
            )

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """
        Load configuration purely from environment variables.

        Uses defaults for any values not specified in env vars.
        """
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_file(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a JSON or YAML file (by extension)."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            if path.suffix in (".yaml", ".yml"):
                import yaml
                data = yaml.safe_load(f) or {}
            else:
                data = json.load(f)

        if not isinstance(data, dict):
            raise ConfigurationException(
                f"Config file must contain an object, got {type(data).__name__}",
                setting=str(path),
            )
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        simulation_data = data.get("simulation", {}) or {}
        service_data = data.get("service", {}) or {}

        try:
            simulation = SimulationConfig(**simulation_data)
            service = ServiceConfig(**service_data)
        except TypeError as e:
            raise ConfigurationException(f"Unknown configuration key: {e}") from e

        return cls(
            simulation=simulation,
            service=service,
            log_level=data.get("log_level", "INFO"),
            log_file=data.get("log_file"),
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

        for section in ("simulation", "service"):
            if section in overrides:
                target = getattr(new_config, section)
                for key, value in overrides[section].items():
                    setattr(target, key, value)

        if "log_level" in overrides:
            new_config.log_level = overrides["log_level"]
        if "log_file" in overrides:
            new_config.log_file = overrides["log_file"]

        return new_config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "simulation": {
                "default_dataset_gb": self.simulation.default_dataset_gb,
                "default_audit_ratio": self.simulation.default_audit_ratio,
                "default_cache_warm": self.simulation.default_cache_warm,
                "capsules_per_ratio_unit": self.simulation.capsules_per_ratio_unit,
                "sample_index": self.simulation.sample_index,
                "base_retrieval_ms": self.simulation.base_retrieval_ms,
                "cold_cache_multiplier": self.simulation.cold_cache_multiplier,
                "max_capsules": self.simulation.max_capsules,
            },
            "service": {
                "host": self.service.host,
                "port": self.service.port,
                "cors_origins": list(self.service.cors_origins),
            },
            "log_level": self.log_level,
            "log_file": self.log_file,
        }


def _env_number(name: str, cast: type) -> Any:
    raw = os.getenv(name, "")
    try:
        return cast(raw)
    except ValueError as e:
        raise ConfigurationException(
            f"Environment variable {name} is not a valid {cast.__name__}: {raw!r}",
            setting=name,
        ) from e


def config_search_paths() -> list[Path]:
    """Default config file locations, in lookup order."""
    return [
        Path.cwd() / "capsule.json",
        Path.cwd() / ".capsule.json",
        Path.home() / ".config" / "capsule" / "config.json",
    ]


def load_runtime_config(config_path: Path | None = None) -> RuntimeConfig:
    """
    Load RuntimeConfig from a config file, then overlay environment variables.

    When ``config_path`` is None the default search paths are tried in order.
    Environment variables ALWAYS override config file values.

    Args:
        config_path: Optional explicit config file

    Returns:
        Merged configuration
    """
    config: RuntimeConfig | None = None

    if config_path is not None:
        config = RuntimeConfig.from_file(config_path)
        logger.info(f"Loaded config from {config_path}")
    else:
        for path in config_search_paths():
            if path.exists():
                config = RuntimeConfig.from_file(path)
                logger.info(f"Loaded config from {path}")
                break

    if config is None:
        config = RuntimeConfig()

    return config.with_env_overrides()


def get_default_config_template() -> str:
    """Get a template configuration file."""
    return json.dumps(RuntimeConfig().to_dict(), indent=2) + "\n"
