"""
Runtime Configuration

Central configuration for tree construction defaults and logging.
"""

from __future__ import annotations

import copy
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from hashtree.crypto.providers import HashProvider, get_provider
from hashtree.schemas.errors import ConfigurationError

load_dotenv()


# Environment variable prefix
ENV_PREFIX = "HASHTREE_"

# Below this many items, trees are always built on the calling thread.
DEFAULT_PARALLEL_THRESHOLD = 4096


def _env_int(name: str) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return None
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(
            f"{name} must be an integer, got {raw!r}", setting=name
        ) from e


@dataclass
class MerkleConfig:
    """Configuration for tree construction and verification."""
    hash_algorithm: str = "blake2b"
    salt: Optional[str] = None
    parallel_threshold: int = DEFAULT_PARALLEL_THRESHOLD
    max_workers: Optional[int] = None

    def __post_init__(self):
        if self.parallel_threshold < 1:
            raise ConfigurationError(
                f"parallel_threshold must be positive, got {self.parallel_threshold}",
                setting="parallel_threshold",
            )
        if self.max_workers is not None and self.max_workers < 1:
            raise ConfigurationError(
                f"max_workers must be positive, got {self.max_workers}",
                setting="max_workers",
            )

    @property
    def salt_bytes(self) -> Optional[bytes]:
        """Salt encoded as UTF-8, or None when unsalted."""
        if self.salt is None:
            return None
        return self.salt.encode("utf-8")


@dataclass
class LoggingConfig:
    """Configuration for log output."""
    level: str = "INFO"
    file: Optional[str] = None


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration.

    Can be loaded from:
    - Environment variables (and a .env file)
    - YAML file
    - Programmatic construction
    """
    merkle: MerkleConfig = field(default_factory=MerkleConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    extra: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        This is the SINGLE source of truth for all env var reading.

        Supported variables:
        - HASHTREE_HASH: hash provider name (blake2b, keccak256, ...)
        - HASHTREE_SALT: leaf salt (UTF-8)
        - HASHTREE_PARALLEL_THRESHOLD: item count at which leaf hashing fans out
        - HASHTREE_MAX_WORKERS: thread pool size for parallel construction
        - HASHTREE_LOG_LEVEL: log level
        - HASHTREE_LOG_FILE: optional log file
        """
        overrides: dict[str, Any] = {}

        if os.getenv(f"{ENV_PREFIX}HASH"):
            overrides.setdefault("merkle", {})["hash_algorithm"] = os.getenv(f"{ENV_PREFIX}HASH")
        if os.getenv(f"{ENV_PREFIX}SALT") is not None:
            overrides.setdefault("merkle", {})["salt"] = os.getenv(f"{ENV_PREFIX}SALT")

        threshold = _env_int(f"{ENV_PREFIX}PARALLEL_THRESHOLD")
        if threshold is not None:
            overrides.setdefault("merkle", {})["parallel_threshold"] = threshold
        workers = _env_int(f"{ENV_PREFIX}MAX_WORKERS")
        if workers is not None:
            overrides.setdefault("merkle", {})["max_workers"] = workers

        if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
            overrides.setdefault("logging", {})["level"] = os.getenv(f"{ENV_PREFIX}LOG_LEVEL")
        if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
            overrides.setdefault("logging", {})["file"] = os.getenv(f"{ENV_PREFIX}LOG_FILE")

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """
        Load configuration purely from environment variables.

        Uses defaults for any values not specified in env vars.
        """
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
        merkle_data = data.get("merkle", {})
        logging_data = data.get("logging", {})

        merkle = MerkleConfig(**merkle_data) if merkle_data else MerkleConfig()
        log = LoggingConfig(**logging_data) if logging_data else LoggingConfig()

        return cls(
            merkle=merkle,
            logging=log,
            extra=data.get("extra", {}),
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

        if "merkle" in overrides:
            for key, value in overrides["merkle"].items():
                setattr(new_config.merkle, key, value)

        if "logging" in overrides:
            for key, value in overrides["logging"].items():
                setattr(new_config.logging, key, value)

        return new_config

    def provider(self) -> HashProvider:
        """Resolve the configured hash provider."""
        return get_provider(self.merkle.hash_algorithm)

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "merkle": {
                "hash_algorithm": self.merkle.hash_algorithm,
                "salt": self.merkle.salt,
                "parallel_threshold": self.merkle.parallel_threshold,
                "max_workers": self.merkle.max_workers,
            },
            "logging": {
                "level": self.logging.level,
                "file": self.logging.file,
            },
            "extra": self.extra,
        }


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
