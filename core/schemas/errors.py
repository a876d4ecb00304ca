"""
Errors

Purpose: Standard error taxonomy for the package lifecycle client.
Defines both a Pydantic model for structured error output
and Python exceptions for control flow.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes."""

    # Validation
    MISSING_ARGUMENT = "MISSING_ARGUMENT"
    FILE_ACCESS = "FILE_ACCESS"

    # Resource store
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    PERSIST_FAILED = "PERSIST_FAILED"
    RESOURCE_CLIENT_ERROR = "RESOURCE_CLIENT_ERROR"

    # Archive transfer
    UPLOAD_FAILED = "UPLOAD_FAILED"
    DOWNLOAD_FAILED = "DOWNLOAD_FAILED"


# =============================================================================
# Pydantic Error Model (Structured Communication)
# =============================================================================

class FissionError(BaseModel):
    """
    Structured error, used for machine-readable CLI output.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.NOT_FOUND],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )

    def to_exception(self) -> "FissionException":
        """Convert this error model to a raised exception."""
        return FissionException(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class FissionException(Exception):
    """
    Base exception for all client errors.

    Carries structured error information and can be converted
    to a FissionError model.
    """

    def __init__(
        self,
        message: str,
        code: str = "FISSION_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> FissionError:
        """Convert this exception to a FissionError model."""
        details = dict(self.details)
        if self.__cause__ is not None and "cause" not in details:
            details["cause"] = str(self.__cause__)
        return FissionError(
            code=self.code,
            message=self.message,
            details=details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class MissingArgumentException(FissionException):
    """A required argument was not supplied. Raised before any remote call."""

    def __init__(
        self,
        message: str,
        argument: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if argument:
            full_details["argument"] = argument
        super().__init__(
            message=message,
            code=ErrorCodes.MISSING_ARGUMENT,
            details=full_details,
        )


class FileAccessException(FissionException):
    """A local file is missing or unreadable."""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if path:
            full_details["path"] = path
        super().__init__(
            message=message,
            code=ErrorCodes.FILE_ACCESS,
            details=full_details,
        )


class ResourceClientException(FissionException):
    """Transport or protocol failure talking to the resource store."""

    def __init__(
        self,
        message: str,
        code: str = ErrorCodes.RESOURCE_CLIENT_ERROR,
        kind: str | None = None,
        name: str | None = None,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        full_details = details or {}
        if kind:
            full_details["kind"] = kind
        if name:
            full_details["name"] = name
        if status_code is not None:
            full_details["status_code"] = status_code
        super().__init__(
            message=message,
            code=code,
            details=full_details,
            retryable=retryable,
        )
        self.kind = kind
        self.name = name
        self.status_code = status_code


class NotFoundException(ResourceClientException):
    """The referenced record does not exist."""

    def __init__(self, message: str, kind: str | None = None, name: str | None = None) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.NOT_FOUND,
            kind=kind,
            name=name,
            status_code=404,
        )


class ConflictException(ResourceClientException):
    """
    An operation is blocked by the current state of the store.

    Raised when dependent functions block a package update without force,
    and when the store rejects a stale resource version or a duplicate name.
    """

    def __init__(
        self,
        message: str,
        kind: str | None = None,
        name: str | None = None,
        dependents: list[str] | None = None,
    ) -> None:
        details: dict[str, Any] = {}
        if dependents:
            details["dependents"] = list(dependents)
        super().__init__(
            message=message,
            code=ErrorCodes.CONFLICT,
            kind=kind,
            name=name,
            status_code=409,
            details=details,
        )
        self.dependents = list(dependents or [])


class PersistException(ResourceClientException):
    """A write to the resource store failed."""

    def __init__(
        self,
        message: str,
        kind: str | None = None,
        name: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.PERSIST_FAILED,
            kind=kind,
            name=name,
            status_code=status_code,
        )


class UploadException(FissionException):
    """Uploading an archive to the storage service failed."""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        status_code: int | None = None,
    ) -> None:
        details: dict[str, Any] = {}
        if path:
            details["path"] = path
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(
            message=message,
            code=ErrorCodes.UPLOAD_FAILED,
            details=details,
        )


class DownloadException(FissionException):
    """Fetching an archive to a local path failed."""

    def __init__(
        self,
        message: str,
        url: str | None = None,
        status_code: int | None = None,
    ) -> None:
        details: dict[str, Any] = {}
        if url:
            details["url"] = url
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(
            message=message,
            code=ErrorCodes.DOWNLOAD_FAILED,
            details=details,
        )
