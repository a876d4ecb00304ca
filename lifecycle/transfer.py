"""
Archive Transfer

Downloads stored archives to local files. URL archives are always fetched
through the controller's storage proxy, never from the stored host.
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from pathlib import Path
from urllib.parse import urlsplit

from core.config import STORAGE_PROXY_PATH, ClientConfig
from core.http import HttpClient, HttpError
from core.schemas import Archive, DownloadException


logger = logging.getLogger(__name__)

ZIP_MAGIC = b"PK\x03\x04"
TMP_SUFFIX = ".tmp"
ZIP_SUFFIX = ".zip"


def is_zip_file(path: str | Path) -> bool:
    """True when the file starts with the zip local-file-header signature."""
    with open(path, "rb") as f:
        return f.read(len(ZIP_MAGIC)) == ZIP_MAGIC


def proxy_url_for(config: ClientConfig, archive_url: str) -> str:
    """
    Rewrite a stored archive URL into a request against the storage proxy.

    The host of ``archive_url`` is discarded; its path and query are appended
    to the controller's storage proxy URL. A path that already starts with
    the proxy segment is not prefixed twice.
    """
    parts = urlsplit(archive_url)
    if not parts.path:
        raise DownloadException(f"Archive URL has no path: {archive_url!r}", url=archive_url)
    path = parts.path
    if path.startswith(STORAGE_PROXY_PATH + "/"):
        path = path[len(STORAGE_PROXY_PATH):]
    request_uri = path + (f"?{parts.query}" if parts.query else "")
    return config.storage_proxy_url + request_uri


class ArchiveTransfer:
    """
    Fetch archives into fresh temporary directories.

    Args:
        config: Connection settings; supplies the storage proxy URL
        http: Shared HTTP client
        temp_root: Parent for the per-call directories (system temp dir by default)
    """

    def __init__(
        self,
        config: ClientConfig,
        http: HttpClient,
        *,
        temp_root: str | Path | None = None,
    ) -> None:
        self.config = config
        self.http = http
        self.temp_root = str(temp_root) if temp_root is not None else None

    def _download(self, url: str) -> bytes:
        download_url = proxy_url_for(self.config, url)
        logger.info(f"Downloading {url} via {download_url}")
        try:
            response = self.http.get(download_url)
        except HttpError as e:
            raise DownloadException(f"Download of {url} failed: {e}", url=url) from e
        if not response.ok:
            raise DownloadException(
                f"Download of {url} failed with HTTP {response.status_code}",
                url=url,
                status_code=response.status_code,
            )
        return response.content

    def fetch(self, archive: Archive, destination_name: str) -> Path:
        """
        Materialize ``archive`` as a local file and return its path.

        The file lands in a new directory named ``destination_name``, or
        ``destination_name.zip`` when its content is a zip archive.

        Raises:
            DownloadException: on any network or I/O failure
        """
        try:
            tmp_dir = Path(tempfile.mkdtemp(prefix="fission-", dir=self.temp_root))
        except OSError as e:
            raise DownloadException(f"Cannot create temporary directory: {e}") from e

        tmp_path = tmp_dir / (destination_name + TMP_SUFFIX)
        try:
            data = archive.literal if archive.is_literal else self._download(archive.url)
            tmp_path.write_bytes(data)
            final_path = tmp_dir / destination_name
            if is_zip_file(tmp_path):
                final_path = tmp_dir / (destination_name + ZIP_SUFFIX)
            os.replace(tmp_path, final_path)
        except OSError as e:
            shutil.rmtree(tmp_dir, ignore_errors=True)
            raise DownloadException(
                f"Cannot write archive to {tmp_dir}: {e}",
                url=archive.url or None,
            ) from e
        except DownloadException:
            shutil.rmtree(tmp_dir, ignore_errors=True)
            raise

        logger.debug(f"Archive written to {final_path}")
        return final_path
