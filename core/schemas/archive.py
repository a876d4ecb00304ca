"""
Archive schemas

Purpose: Reference to function source or deployment bytes.
An archive is either embedded in the package record (literal) or stored
in the storage service and referenced by URL.
"""

from __future__ import annotations

import base64
import binascii
from enum import Enum
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
    model_validator,
)


# Files at or above this size are uploaded instead of being inlined
ARCHIVE_LITERAL_SIZE_LIMIT: int = 256 * 1024


class ArchiveType(str, Enum):
    """Storage kind of an archive."""

    LITERAL = "literal"
    URL = "url"


class Archive(BaseModel):
    """
    Immutable archive reference.

    Exactly one of ``literal`` / ``url`` is populated, determined by ``type``.
    Updates replace the whole value; archives are never mutated in place.
    Literal bytes travel base64-encoded in JSON. Fields the controller adds
    (a checksum, for instance) are carried through unchanged.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    type: ArchiveType = Field(
        ...,
        description="Whether the bytes are embedded or stored remotely",
    )
    literal: bytes = Field(
        default=b"",
        description="Embedded archive bytes (literal archives only)",
    )
    url: str = Field(
        default="",
        description="Storage service URL (url archives only)",
    )

    @field_validator("literal", mode="before")
    @classmethod
    def _decode_literal(cls, value: Any) -> Any:
        if isinstance(value, str):
            try:
                return base64.b64decode(value, validate=True)
            except binascii.Error as e:
                raise ValueError(f"literal is not valid base64: {e}") from e
        return value

    @field_serializer("literal", when_used="json")
    def _encode_literal(self, value: bytes) -> str:
        return base64.b64encode(value).decode("ascii")

    @model_validator(mode="after")
    def _check_populated_field(self) -> "Archive":
        if self.type == ArchiveType.LITERAL:
            if self.url:
                raise ValueError("literal archive must not carry a url")
            if len(self.literal) >= ARCHIVE_LITERAL_SIZE_LIMIT:
                raise ValueError(
                    f"literal archive of {len(self.literal)} bytes exceeds "
                    f"limit of {ARCHIVE_LITERAL_SIZE_LIMIT} bytes"
                )
        else:
            if self.literal:
                raise ValueError("url archive must not carry literal bytes")
            if not self.url:
                raise ValueError("url archive requires a url")
        return self

    @classmethod
    def from_literal(cls, data: bytes) -> "Archive":
        return cls(type=ArchiveType.LITERAL, literal=data)

    @classmethod
    def from_url(cls, url: str) -> "Archive":
        return cls(type=ArchiveType.URL, url=url)

    @property
    def is_literal(self) -> bool:
        return self.type == ArchiveType.LITERAL
