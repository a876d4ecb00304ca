"""
Runtime Configuration

Explicit client configuration passed into every component.
There is no ambient or global client; callers build a ClientConfig once
and hand it to the resource client, storage client and package manager.
"""

from __future__ import annotations

import copy
import os
from dataclasses import dataclass, field
from typing import Any, Optional

from dotenv import load_dotenv

load_dotenv()


# Path segment on the controller that tunnels to the storage service
STORAGE_PROXY_PATH = "/proxy/storage"

DEFAULT_NAMESPACE = "default"


def normalize_server_url(server_url: str) -> str:
    """Prepend ``http://`` to a bare host and drop any trailing slash."""
    url = server_url.strip()
    if not (url.startswith("http://") or url.startswith("https://")):
        url = "http://" + url
    return url.rstrip("/")


@dataclass
class HttpConfig:
    """
    Configuration for the HTTP client.

    ``timeout`` of None leaves the transport default in place.
    """
    timeout: Optional[float] = None
    user_agent: str = "fission-cli/0.1.0"
    proxy: Optional[str] = None


@dataclass
class ClientConfig:
    """
    Connection settings for the controller.

    Can be loaded from:
    - Environment variables
    - A dictionary (e.g. parsed CLI config file)
    - Programmatic construction
    """
    server_url: str = ""
    namespace: str = DEFAULT_NAMESPACE
    http: HttpConfig = field(default_factory=HttpConfig)

    def __post_init__(self):
        if self.server_url:
            self.server_url = normalize_server_url(self.server_url)

    @property
    def storage_proxy_url(self) -> str:
        """Base URL of the storage service as reached through the controller."""
        return self.server_url + STORAGE_PROXY_PATH

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        Supported variables:
        - FISSION_URL: controller base URL
        - FISSION_NAMESPACE: namespace for packages and functions
        - FISSION_HTTP_TIMEOUT: request timeout in seconds
        - FISSION_HTTP_PROXY: HTTP proxy URL
        """
        overrides: dict[str, Any] = {}

        if os.getenv("FISSION_URL"):
            overrides["server_url"] = os.getenv("FISSION_URL")
        if os.getenv("FISSION_NAMESPACE"):
            overrides["namespace"] = os.getenv("FISSION_NAMESPACE")
        if os.getenv("FISSION_HTTP_TIMEOUT"):
            overrides.setdefault("http", {})["timeout"] = float(os.getenv("FISSION_HTTP_TIMEOUT"))
        if os.getenv("FISSION_HTTP_PROXY"):
            overrides.setdefault("http", {})["proxy"] = os.getenv("FISSION_HTTP_PROXY")

        return overrides

    @classmethod
    def from_env(cls) -> "ClientConfig":
        """Load configuration purely from environment variables."""
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ClientConfig":
        """Load configuration from a dictionary (supports partial data)."""
        http_data = data.get("http", {})
        http = HttpConfig(**http_data) if http_data else HttpConfig()

        return cls(
            server_url=data.get("server_url", "") or "",
            namespace=data.get("namespace") or DEFAULT_NAMESPACE,
            http=http,
        )

    def with_env_overrides(self) -> "ClientConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)

        if "server_url" in overrides:
            new_config.server_url = normalize_server_url(overrides["server_url"])
        if "namespace" in overrides:
            new_config.namespace = overrides["namespace"]
        if "http" in overrides:
            for key, value in overrides["http"].items():
                setattr(new_config.http, key, value)

        return new_config
