"""
CLI Configuration

Configuration management for the arbor CLI.
Supports a JSON or YAML configuration file and environment variables
(including a local ``.env`` file).
"""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

load_dotenv()


# Environment variable prefix
ENV_PREFIX = "ARBOR_"

OUTPUT_FORMATS = ("human", "json")


@dataclass
class CLIConfig:
    """Main CLI configuration."""

    # Tree construction
    workers: int = 1
    example_size: int = 8

    # Logging
    log_level: str = "INFO"
    log_file: str | None = None

    # Output
    default_output_format: str = "human"  # "human" or "json"

    def validate(self) -> None:
        """Reject values the commands cannot work with."""
        if self.workers < 1:
            raise ValueError(f"workers must be >= 1, got {self.workers}")
        if self.example_size < 1:
            raise ValueError(f"example_size must be >= 1, got {self.example_size}")
        if self.default_output_format not in OUTPUT_FORMATS:
            raise ValueError(
                f"default_output_format must be one of {OUTPUT_FORMATS}, "
                f"got {self.default_output_format!r}"
            )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _apply(config: CLIConfig, data: dict[str, Any]) -> CLIConfig:
    config.workers = int(data.get("workers", config.workers))
    config.example_size = int(data.get("example_size", config.example_size))
    config.log_level = data.get("log_level", config.log_level)
    config.log_file = data.get("log_file", config.log_file)
    config.default_output_format = data.get(
        "default_output_format", config.default_output_format
    )
    return config


def load_config_from_env(config: CLIConfig | None = None) -> CLIConfig:
    """Apply ARBOR_* environment variables on top of ``config``."""
    config = config or CLIConfig()
    overrides: dict[str, Any] = {}

    if os.getenv(f"{ENV_PREFIX}WORKERS"):
        overrides["workers"] = os.getenv(f"{ENV_PREFIX}WORKERS")
    if os.getenv(f"{ENV_PREFIX}EXAMPLE_SIZE"):
        overrides["example_size"] = os.getenv(f"{ENV_PREFIX}EXAMPLE_SIZE")
    if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
        overrides["log_level"] = os.getenv(f"{ENV_PREFIX}LOG_LEVEL")
    if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
        overrides["log_file"] = os.getenv(f"{ENV_PREFIX}LOG_FILE")
    if os.getenv(f"{ENV_PREFIX}OUTPUT_FORMAT"):
        overrides["default_output_format"] = os.getenv(f"{ENV_PREFIX}OUTPUT_FORMAT")

    return _apply(config, overrides)


def load_config_from_file(path: Path) -> CLIConfig:
    """Load configuration from a JSON or YAML file."""
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r") as f:
        if path.suffix.lower() in (".yaml", ".yml"):
            data = yaml.safe_load(f) or {}
        else:
            data = json.load(f)

    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {path}")

    return _apply(CLIConfig(), data)


def default_config_paths() -> list[Path]:
    return [
        Path.cwd() / "arbor.json",
        Path.cwd() / ".arbor.json",
        Path.home() / ".config" / "arbor" / "config.json",
    ]


def load_config(config_path: Path | None = None) -> CLIConfig:
    """
    Load configuration from file and/or environment.

    Environment variables override file settings.

    Args:
        config_path: Optional path to config file. When omitted, the first
                     existing default location is used.

    Returns:
        Merged, validated configuration
    """
    config = CLIConfig()

    if config_path is not None:
        config = load_config_from_file(config_path)
    else:
        for default_path in default_config_paths():
            if default_path.exists():
                config = load_config_from_file(default_path)
                break

    config = load_config_from_env(config)
    config.validate()
    return config


def get_default_config_template() -> str:
    """Get a template configuration file."""
    return json.dumps(CLIConfig().to_dict(), indent=2) + "\n"
