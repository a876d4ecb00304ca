"""
Package schemas

Purpose: Package records as persisted by the controller.
A package bundles an environment reference, source and/or deployment
archives, and the build status of its deployable artifact.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .archive import Archive


class BuildStatus(str, Enum):
    """Lifecycle state of a package's compiled deployment artifact."""

    SUCCEEDED = "succeeded"
    PENDING = "pending"
    RUNNING = "running"
    FAILED = "failed"


class ObjectMeta(BaseModel):
    """
    Record metadata.

    Fields not modelled here (labels, annotations, timestamps) are kept
    so that a read-modify-write cycle sends them back unchanged.

    ``resource_version`` is an opaque optimistic-concurrency stamp issued by
    the store on every write. It is empty for records not yet persisted.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: str = Field(..., min_length=1)
    namespace: str = Field(default="default")
    resource_version: str = Field(default="", alias="resourceVersion")
    uid: str = Field(default="")


class EnvironmentReference(BaseModel):
    """Reference to the runtime environment a package builds and runs in."""

    model_config = ConfigDict(extra="allow")

    namespace: str = Field(default="default")
    name: str = Field(..., min_length=1)


class PackageStatus(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    build_status: BuildStatus = Field(
        default=BuildStatus.SUCCEEDED,
        alias="buildstatus",
    )
    build_log: str = Field(default="", alias="buildlog")


class PackageSpec(BaseModel):
    """Desired state of a package."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    environment: EnvironmentReference
    source: Archive | None = Field(
        default=None,
        description="Source archive; its presence implies a build",
    )
    deployment: Archive | None = Field(
        default=None,
        description="Pre-built deployment archive",
    )
    description: str = Field(default="")
    status: PackageStatus = Field(default_factory=PackageStatus)

    @field_validator("source", "deployment", mode="before")
    @classmethod
    def _empty_archive_is_absent(cls, value: Any) -> Any:
        # the controller sends an unset archive as {} or with an empty type
        if isinstance(value, dict) and not value.get("type"):
            return None
        return value

    def initial_build_status(self) -> BuildStatus:
        """
        Build status a freshly created package starts in.

        A source archive needs a build, so the package waits in PENDING.
        A deployment-only package is ready immediately.
        """
        if self.source is not None:
            return BuildStatus.PENDING
        return BuildStatus.SUCCEEDED


class Package(BaseModel):
    """A persisted package record."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    metadata: ObjectMeta
    spec: PackageSpec

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def resource_version(self) -> str:
        return self.metadata.resource_version

    @property
    def build_status(self) -> BuildStatus:
        return self.spec.status.build_status

    def to_wire(self) -> dict:
        """Serialize to the controller's JSON representation."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
