"""
Storage Service Module
"""

from .client import ARCHIVE_PATH, StorageClient

__all__ = [
    "ARCHIVE_PATH",
    "StorageClient",
]
