"""
Function schemas

Purpose: Function records. Only the fields the package lifecycle reads are
modelled; everything else is carried through untouched on write.
A function references the package it runs by name and resource version.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from .package import EnvironmentReference, ObjectMeta


class PackageRef(BaseModel):
    """
    Pointer from a function to a package revision.

    The function treats the package as stale unless ``resource_version``
    matches the package's current resource version.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    namespace: str = Field(default="default")
    name: str = Field(default="", description="Empty when the function has no package")
    resource_version: str = Field(default="", alias="resourceversion")


class FunctionPackageRef(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    package_ref: PackageRef = Field(default_factory=PackageRef, alias="packageref")
    function_name: str = Field(default="", alias="functionName")


class FunctionSpec(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    environment: EnvironmentReference | None = None
    package: FunctionPackageRef = Field(default_factory=FunctionPackageRef)


class Function(BaseModel):
    """A persisted function record."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    metadata: ObjectMeta
    spec: FunctionSpec

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def package_name(self) -> str:
        return self.spec.package.package_ref.name

    def with_package_version(self, resource_version: str) -> "Function":
        """Return a copy whose package reference points at ``resource_version``."""
        ref = self.spec.package.package_ref.model_copy(
            update={"resource_version": resource_version}
        )
        package = self.spec.package.model_copy(update={"package_ref": ref})
        spec = self.spec.model_copy(update={"package": package})
        return self.model_copy(update={"spec": spec})

    def to_wire(self) -> dict:
        """Serialize to the controller's JSON representation."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
