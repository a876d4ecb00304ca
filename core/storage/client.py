"""
Storage Service Client

Uploads archive files to the content store and builds the URLs that
package records use to reference them.
"""

from __future__ import annotations

import logging
from pathlib import Path
from urllib.parse import quote

from core.http import HttpClient, HttpError
from core.schemas.errors import FileAccessException, UploadException


logger = logging.getLogger(__name__)

ARCHIVE_PATH = "/v1/archive"
UPLOAD_FIELD = "uploadfile"


class StorageClient:
    """
    Client for the storage service.

    Args:
        base_url: Storage service root, usually the controller's storage proxy
        http: Shared HTTP client
    """

    def __init__(self, base_url: str, http: HttpClient) -> None:
        self.base_url = base_url.rstrip("/")
        self.http = http

    def upload(self, path: str | Path) -> str:
        """
        Upload a file and return its content id.

        Raises:
            FileAccessException: the file cannot be opened
            UploadException: connection error, non-2xx reply or malformed reply
        """
        path = Path(path)
        endpoint = self.base_url + ARCHIVE_PATH
        try:
            fh = open(path, "rb")
        except OSError as e:
            raise FileAccessException(f"Cannot read {path}: {e}", path=str(path)) from e

        logger.info(f"Uploading {path} to {endpoint}")
        with fh:
            try:
                response = self.http.post(
                    endpoint,
                    files={UPLOAD_FIELD: (path.name, fh, "application/octet-stream")},
                )
            except HttpError as e:
                raise UploadException(f"Upload of {path} failed: {e}", path=str(path)) from e

        if not response.ok:
            raise UploadException(
                f"Upload of {path} rejected with HTTP {response.status_code}",
                path=str(path),
                status_code=response.status_code,
            )

        try:
            content_id = response.json()["id"]
        except (ValueError, KeyError, TypeError) as e:
            raise UploadException(
                f"Storage service returned no archive id for {path}",
                path=str(path),
                status_code=response.status_code,
            ) from e

        if not content_id:
            raise UploadException(
                f"Storage service returned an empty archive id for {path}",
                path=str(path),
            )
        return str(content_id)

    def url_for(self, content_id: str) -> str:
        """Absolute URL of a stored archive."""
        return f"{self.base_url}{ARCHIVE_PATH}?id={quote(content_id, safe='')}"
