"""
Archive Resolver

Turns a local file into an Archive descriptor: small files are embedded
as literals, anything at or above the literal size limit is uploaded to
the storage service and referenced by URL.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from core.schemas import ARCHIVE_LITERAL_SIZE_LIMIT, Archive, FileAccessException
from core.storage import StorageClient


logger = logging.getLogger(__name__)


class ArchiveResolver:
    """
    Resolve file paths to archives.

    A single upload attempt is made for large files; failures surface as
    UploadException with the original cause attached.
    """

    def __init__(
        self,
        storage: StorageClient,
        *,
        literal_size_limit: int = ARCHIVE_LITERAL_SIZE_LIMIT,
    ) -> None:
        self.storage = storage
        self.literal_size_limit = literal_size_limit

    def _file_size(self, path: Path) -> int:
        try:
            stat = path.stat()
        except OSError as e:
            raise FileAccessException(f"Cannot stat {path}: {e}", path=str(path)) from e
        if not path.is_file():
            raise FileAccessException(f"Not a regular file: {path}", path=str(path))
        if not os.access(path, os.R_OK):
            raise FileAccessException(f"File is not readable: {path}", path=str(path))
        return stat.st_size

    def resolve(self, path: str | Path) -> Archive:
        """
        Build an archive for ``path``.

        Raises:
            FileAccessException: the file is missing or unreadable
            UploadException: the storage service rejected the upload
        """
        path = Path(path)
        size = self._file_size(path)

        if size < self.literal_size_limit:
            try:
                contents = path.read_bytes()
            except OSError as e:
                raise FileAccessException(f"Cannot read {path}: {e}", path=str(path)) from e
            logger.debug(f"Embedding {path} ({size} bytes) as literal archive")
            return Archive.from_literal(contents)

        content_id = self.storage.upload(path)
        url = self.storage.url_for(content_id)
        logger.info(f"Uploaded {path} ({size} bytes) as {url}")
        return Archive.from_url(url)
