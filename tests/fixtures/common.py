"""
Common test fixtures shared by all modules.

Provides factory functions for:
- Package / Function records
- A fake storage service
- A PackageManager wired to an in-memory resource store
"""

from pathlib import Path
from typing import Optional
from unittest.mock import Mock

from core.config import ClientConfig
from core.http import HttpResponse
from core.schemas import (
    Archive,
    BuildStatus,
    EnvironmentReference,
    Function,
    FunctionPackageRef,
    FunctionSpec,
    ObjectMeta,
    Package,
    PackageRef,
    PackageSpec,
    PackageStatus,
    UploadException,
)

from controller import InMemoryResourceClient
from lifecycle import ArchiveResolver, ArchiveTransfer, PackageManager


SERVER_URL = "http://controller.test:8888"


# =============================================================================
# Record Factories
# =============================================================================

def make_package(
    name: str = "pkg1",
    env: str = "python",
    source: Optional[Archive] = None,
    deployment: Optional[Archive] = None,
    status: BuildStatus = BuildStatus.SUCCEEDED,
    description: str = "",
    build_log: str = "",
) -> Package:
    """Create a Package record for testing."""
    if source is None and deployment is None:
        deployment = Archive.from_literal(b"print('hello')\n")
    return Package(
        metadata=ObjectMeta(name=name),
        spec=PackageSpec(
            environment=EnvironmentReference(name=env),
            source=source,
            deployment=deployment,
            description=description,
            status=PackageStatus(build_status=status, build_log=build_log),
        ),
    )


def make_function(
    name: str = "fn1",
    package_name: str = "pkg1",
    package_version: str = "",
    env: str = "python",
) -> Function:
    """Create a Function record referencing ``package_name``."""
    return Function(
        metadata=ObjectMeta(name=name),
        spec=FunctionSpec(
            environment=EnvironmentReference(name=env),
            package=FunctionPackageRef(
                package_ref=PackageRef(name=package_name, resource_version=package_version),
                function_name="main",
            ),
        ),
    )


# =============================================================================
# Collaborator Fakes
# =============================================================================

class FakeStorage:
    """Storage service double that records uploads."""

    def __init__(self, base_url: str = SERVER_URL + "/proxy/storage", fail: bool = False) -> None:
        self.base_url = base_url
        self.fail = fail
        self.uploads: list[Path] = []

    def upload(self, path) -> str:
        if self.fail:
            raise UploadException(f"Upload of {path} failed: connection refused", path=str(path))
        self.uploads.append(Path(path))
        return f"id-{len(self.uploads)}"

    def url_for(self, content_id: str) -> str:
        return f"{self.base_url}/v1/archive?id={content_id}"


def make_response(status_code: int = 200, content: bytes = b"", headers: Optional[dict] = None) -> HttpResponse:
    return HttpResponse(status_code=status_code, content=content, headers=headers or {})


def make_manager(
    temp_root: Path,
    *,
    storage: Optional[FakeStorage] = None,
    http: Optional[Mock] = None,
    client: Optional[InMemoryResourceClient] = None,
    literal_size_limit: Optional[int] = None,
) -> PackageManager:
    """PackageManager over an in-memory store and fake storage."""
    config = ClientConfig(server_url=SERVER_URL)
    temp_root.mkdir(parents=True, exist_ok=True)
    storage = storage or FakeStorage()
    resolver_kwargs = {}
    if literal_size_limit is not None:
        resolver_kwargs["literal_size_limit"] = literal_size_limit
    return PackageManager(
        config=config,
        client=client or InMemoryResourceClient(),
        resolver=ArchiveResolver(storage, **resolver_kwargs),
        transfer=ArchiveTransfer(config, http or Mock(), temp_root=temp_root),
    )
