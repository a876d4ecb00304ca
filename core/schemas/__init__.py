"""
Schemas

Purpose: Export the public API for the schemas module.
This is the main entry point for other modules to import record definitions.
"""

# Archive schemas
from .archive import (
    ARCHIVE_LITERAL_SIZE_LIMIT,
    Archive,
    ArchiveType,
)

# Package schemas
from .package import (
    BuildStatus,
    EnvironmentReference,
    ObjectMeta,
    Package,
    PackageSpec,
    PackageStatus,
)

# Function schemas
from .function import (
    Function,
    FunctionPackageRef,
    FunctionSpec,
    PackageRef,
)

# Error models and exceptions
from .errors import (
    ConflictException,
    DownloadException,
    ErrorCodes,
    FileAccessException,
    FissionError,
    FissionException,
    MissingArgumentException,
    NotFoundException,
    PersistException,
    ResourceClientException,
    UploadException,
)

__all__ = [
    # Archive
    "ARCHIVE_LITERAL_SIZE_LIMIT",
    "Archive",
    "ArchiveType",
    # Package
    "BuildStatus",
    "EnvironmentReference",
    "ObjectMeta",
    "Package",
    "PackageSpec",
    "PackageStatus",
    # Function
    "Function",
    "FunctionPackageRef",
    "FunctionSpec",
    "PackageRef",
    # Errors
    "ConflictException",
    "DownloadException",
    "ErrorCodes",
    "FileAccessException",
    "FissionError",
    "FissionException",
    "MissingArgumentException",
    "NotFoundException",
    "PersistException",
    "ResourceClientException",
    "UploadException",
]
