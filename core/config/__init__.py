"""
Runtime Configuration Module

Provides explicit connection configuration for the client components.
"""

from .runtime import (
    DEFAULT_NAMESPACE,
    STORAGE_PROXY_PATH,
    ClientConfig,
    HttpConfig,
    normalize_server_url,
)

__all__ = [
    "DEFAULT_NAMESPACE",
    "STORAGE_PROXY_PATH",
    "ClientConfig",
    "HttpConfig",
    "normalize_server_url",
]
