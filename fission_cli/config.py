"""
CLI Configuration

Configuration management for the fission CLI.
Supports environment variables and configuration files.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path

from core.config import ClientConfig, HttpConfig


# Environment variable prefix
ENV_PREFIX = "FISSION_"


@dataclass
class CLIConfig:
    """Main CLI configuration."""

    # Controller connection
    server_url: str = ""
    namespace: str = "default"
    http_timeout: float | None = None

    # Logging
    log_level: str = "INFO"
    log_file: str | None = None

    # Output
    default_output_format: str = "human"  # "human" or "json"

    def to_client_config(self) -> ClientConfig:
        """Connection settings handed to the package manager."""
        return ClientConfig(
            server_url=self.server_url,
            namespace=self.namespace,
            http=HttpConfig(timeout=self.http_timeout),
        )


def load_config_from_env() -> CLIConfig:
    """Load configuration from environment variables."""
    config = CLIConfig()

    config.server_url = os.getenv(f"{ENV_PREFIX}URL", "")
    config.namespace = os.getenv(f"{ENV_PREFIX}NAMESPACE", "default")
    if os.getenv(f"{ENV_PREFIX}HTTP_TIMEOUT"):
        config.http_timeout = float(os.getenv(f"{ENV_PREFIX}HTTP_TIMEOUT"))

    # Logging
    config.log_level = os.getenv(f"{ENV_PREFIX}LOG_LEVEL", "INFO")
    config.log_file = os.getenv(f"{ENV_PREFIX}LOG_FILE")

    return config


def load_config_from_file(path: Path) -> CLIConfig:
    """Load configuration from a JSON file."""
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r") as f:
        data = json.load(f)

    config = CLIConfig()

    config.server_url = data.get("server_url", config.server_url)
    config.namespace = data.get("namespace", config.namespace)
    config.http_timeout = data.get("http_timeout", config.http_timeout)

    # Logging
    config.log_level = data.get("log_level", config.log_level)
    config.log_file = data.get("log_file", config.log_file)

    config.default_output_format = data.get("default_output_format", config.default_output_format)

    return config


def load_config(config_path: Path | None = None) -> CLIConfig:
    """
    Load configuration from file and/or environment.

    Environment variables override file settings.

    Args:
        config_path: Optional path to config file

    Returns:
        Merged configuration
    """
    config = CLIConfig()

    if config_path is not None:
        config = load_config_from_file(config_path)
    else:
        default_paths = [
            Path.cwd() / "fission.json",
            Path.cwd() / ".fission.json",
            Path.home() / ".config" / "fission" / "config.json",
        ]
        for default_path in default_paths:
            if default_path.exists():
                config = load_config_from_file(default_path)
                break

    # Override with environment variables
    env_config = load_config_from_env()

    if os.getenv(f"{ENV_PREFIX}URL"):
        config.server_url = env_config.server_url
    if os.getenv(f"{ENV_PREFIX}NAMESPACE"):
        config.namespace = env_config.namespace
    if os.getenv(f"{ENV_PREFIX}HTTP_TIMEOUT"):
        config.http_timeout = env_config.http_timeout
    if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
        config.log_level = env_config.log_level
    if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
        config.log_file = env_config.log_file

    return config


def get_default_config_template() -> str:
    """Get a template configuration file."""
    return """{
  "server_url": "http://localhost:8888",
  "namespace": "default",
  "http_timeout": null,
  "log_level": "INFO",
  "log_file": null,
  "default_output_format": "human"
}
"""
