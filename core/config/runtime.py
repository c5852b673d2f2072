"""
Runtime Configuration

Central configuration for tree construction, logging and CLI output.
"""

from __future__ import annotations

import copy
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from core.schemas.errors import ConfigurationException

load_dotenv()


ENV_PREFIX = "TINYCHAIN_"


@dataclass
class MerkleConfig:
    """Configuration for tree construction."""
    algorithm: str = "sha1"
    # Unknown algorithm names fall back to sha1 unless this is set
    strict_algorithm: bool = False

    def __post_init__(self) -> None:
        # YAML/JSON may carry the flag as a quoted string
        if isinstance(self.strict_algorithm, str):
            self.strict_algorithm = _env_bool(self.strict_algorithm)


@dataclass
class LoggingConfig:
    """Configuration for logging."""
    level: str = "INFO"
    file: Optional[str] = None


@dataclass
class OutputConfig:
    """Configuration for CLI output."""
    format: str = "human"  # "human" or "json"


def _env_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration.

    Can be loaded from:
    - Environment variables
    - YAML (or JSON) file
    - Programmatic construction
    """
    merkle: MerkleConfig = field(default_factory=MerkleConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    extra: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        Supported variables:
        - TINYCHAIN_ALGORITHM: Digest algorithm name
        - TINYCHAIN_STRICT_ALGORITHM: Reject unknown algorithm names (true/false)
        - TINYCHAIN_LOG_LEVEL: Log level
        - TINYCHAIN_LOG_FILE: Additional log file
        - TINYCHAIN_OUTPUT_FORMAT: "human" or "json"
        """
        overrides: dict[str, Any] = {}

        if os.getenv(f"{ENV_PREFIX}ALGORITHM"):
            overrides.setdefault("merkle", {})["algorithm"] = os.getenv(f"{ENV_PREFIX}ALGORITHM")
        if os.getenv(f"{ENV_PREFIX}STRICT_ALGORITHM"):
            overrides.setdefault("merkle", {})["strict_algorithm"] = _env_bool(
                os.getenv(f"{ENV_PREFIX}STRICT_ALGORITHM", "false")
            )

        if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
            overrides.setdefault("logging", {})["level"] = os.getenv(f"{ENV_PREFIX}LOG_LEVEL")
        if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
            overrides.setdefault("logging", {})["file"] = os.getenv(f"{ENV_PREFIX}LOG_FILE")

        if os.getenv(f"{ENV_PREFIX}OUTPUT_FORMAT"):
            overrides.setdefault("output", {})["format"] = os.getenv(f"{ENV_PREFIX}OUTPUT_FORMAT")

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """Load configuration purely from environment variables."""
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file. JSON files parse as YAML too."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigurationException(
                    f"Invalid config file {path}: {e}",
                    details={"path": str(path)},
                ) from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigurationException(
                f"Config file {path} must contain a mapping",
                details={"path": str(path)},
            )
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        merkle_data = data.get("merkle", {}) or {}
        logging_data = data.get("logging", {}) or {}
        output_data = data.get("output", {}) or {}

        try:
            merkle = MerkleConfig(**merkle_data)
            logging_config = LoggingConfig(**logging_data)
            output = OutputConfig(**output_data)
        except TypeError as e:
            raise ConfigurationException(f"Invalid configuration: {e}") from e

        return cls(
            merkle=merkle,
            logging=logging_config,
            output=output,
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
        for section in ("merkle", "logging", "output"):
            for key, value in overrides.get(section, {}).items():
                setattr(getattr(new_config, section), key, value)

        return new_config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "merkle": {
                "algorithm": self.merkle.algorithm,
                "strict_algorithm": self.merkle.strict_algorithm,
            },
            "logging": {
                "level": self.logging.level,
                "file": self.logging.file,
            },
            "output": {
                "format": self.output.format,
            },
            "extra": self.extra,
        }


DEFAULT_CONFIG_PATHS = (
    Path("tinychain.yaml"),
    Path(".tinychain.yaml"),
    Path.home() / ".config" / "tinychain" / "config.yaml",
)


def load_config(config_path: str | Path | None = None) -> RuntimeConfig:
    """
    Load configuration from file and/or environment.

    Environment variables override file settings. Without an explicit
    path, the first existing file in DEFAULT_CONFIG_PATHS is used.

    Raises:
        FileNotFoundError: If config_path is given but does not exist
    """
    if config_path is not None:
        config = RuntimeConfig.from_yaml(config_path)
    else:
        config = RuntimeConfig()
        for default_path in DEFAULT_CONFIG_PATHS:
            if default_path.exists():
                config = RuntimeConfig.from_yaml(default_path)
                break

    return config.with_env_overrides()


def get_default_config_template() -> str:
    """Get a template configuration file."""
    return """\
merkle:
  # md5, sha1, sha256 or sha512; unknown names fall back to sha1
  algorithm: sha1
  strict_algorithm: false
logging:
  level: INFO
  file: null
output:
  format: human
"""


# Global default configuration
_default_config: Optional[RuntimeConfig] = None


def get_default_config() -> RuntimeConfig:
    """Get the default runtime configuration."""
    global _default_config
    if _default_config is None:
        _default_config = RuntimeConfig.from_env()
    return _default_config


def set_default_config(config: RuntimeConfig) -> None:
    """Set the default runtime configuration."""
    global _default_config
    _default_config = config
