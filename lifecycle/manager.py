"""
Package Record Manager

Creates, updates, reads and deletes package records, driving archive
resolution, build-status transitions and dependent-function consistency.

Build status rules:
- a package with a source archive starts PENDING (a build must run)
- a deployment-only package starts SUCCEEDED (already built)
- changing the environment or the source archive resets to PENDING
- changing only the deployment archive or description keeps the status
"""

from __future__ import annotations

import logging
import uuid
from pathlib import Path
from typing import Optional

from core.config import ClientConfig
from core.http import HttpClient
from core.schemas import (
    BuildStatus,
    ConflictException,
    EnvironmentReference,
    Function,
    MissingArgumentException,
    ObjectMeta,
    Package,
    PackageSpec,
    PackageStatus,
)
from core.storage import StorageClient

from controller import ResourceClient, RestResourceClient
from lifecycle.archives import ArchiveResolver
from lifecycle.dependents import DependentFunctionQuery
from lifecycle.transfer import ArchiveTransfer
from lifecycle.views import render_package_info, render_package_table


logger = logging.getLogger(__name__)


def generate_package_name() -> str:
    """Random 128-bit lowercase identifier; collisions are treated as negligible."""
    return str(uuid.uuid4()).lower()


class PackageManager:
    """
    Package lifecycle operations over a resource client.

    Usage:
        manager = PackageManager.from_config(ClientConfig(server_url="controller:8888"))
        pkg = manager.create("python", src="handler.py")
    """

    def __init__(
        self,
        config: ClientConfig,
        client: ResourceClient,
        resolver: ArchiveResolver,
        transfer: ArchiveTransfer,
        dependents: Optional[DependentFunctionQuery] = None,
    ) -> None:
        self.config = config
        self.client = client
        self.resolver = resolver
        self.transfer = transfer
        self.dependents = dependents or DependentFunctionQuery(client)

    @classmethod
    def from_config(cls, config: ClientConfig) -> "PackageManager":
        """Wire the REST resource client, storage client and transfer client."""
        http = HttpClient(config.http)
        client = RestResourceClient(config, http=http)
        storage = StorageClient(config.storage_proxy_url, http)
        return cls(
            config=config,
            client=client,
            resolver=ArchiveResolver(storage),
            transfer=ArchiveTransfer(config, http),
        )

    def _environment(self, env_name: str) -> EnvironmentReference:
        return EnvironmentReference(namespace=self.config.namespace, name=env_name)

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create(
        self,
        env: str,
        src: Optional[str | Path] = None,
        deploy: Optional[str | Path] = None,
        description: str = "",
    ) -> Package:
        """
        Create a package from local source and/or deployment files.

        Raises:
            MissingArgumentException: no environment, or neither src nor deploy
            FileAccessException / UploadException: an archive could not be resolved
            PersistException / ConflictException: the store rejected the record
        """
        if not env:
            raise MissingArgumentException("Need --env argument.", argument="env")
        if not src and not deploy:
            raise MissingArgumentException(
                "Need --src to specify source archive, or use --deploy to specify deployment archive.",
                argument="src",
            )

        spec = PackageSpec(environment=self._environment(env), description=description or "")

        if deploy:
            spec = spec.model_copy(update={"deployment": self.resolver.resolve(deploy)})
            if src:
                logger.warning(
                    "Deployment may be overwritten by builder manager after source package compilation"
                )
        if src:
            spec = spec.model_copy(update={"source": self.resolver.resolve(src)})

        spec = spec.model_copy(update={"status": PackageStatus(build_status=spec.initial_build_status())})

        package = Package(
            metadata=ObjectMeta(name=generate_package_name(), namespace=self.config.namespace),
            spec=spec,
        )
        meta = self.client.package_create(package)
        logger.info(f"package '{meta.name}' created")
        return package.model_copy(update={"metadata": meta})

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    def update(
        self,
        name: str,
        *,
        env: Optional[str] = None,
        description: Optional[str] = None,
        src: Optional[str | Path] = None,
        deploy: Optional[str | Path] = None,
        force: bool = False,
    ) -> Package:
        """
        Update a package and re-point its dependent functions.

        With dependents present and ``force`` unset, nothing is changed and
        ConflictException is raised. After the package is persisted, each
        dependent function's package reference is moved to the new resource
        version; a failure there raises PersistException without rolling
        back functions already updated.

        Raises:
            MissingArgumentException: no name, or nothing to change
            NotFoundException: the package does not exist
            ConflictException: dependents exist and force is not set
        """
        if not name:
            raise MissingArgumentException("Need --name argument.", argument="name")
        if not (env or description or src or deploy):
            raise MissingArgumentException(
                "Need --env or --desc or --src or --deploy argument.",
            )

        pkg = self.client.package_get(name)
        functions = self.dependents.list_functions_referencing(name)
        if functions and not force:
            raise ConflictException(
                "Package is used by multiple functions, use -f to force update",
                kind="package",
                name=name,
                dependents=[fn.name for fn in functions],
            )

        changes: dict = {}
        needs_build = False

        if env:
            changes["environment"] = pkg.spec.environment.model_copy(update={"name": env})
            needs_build = True
        if src:
            changes["source"] = self.resolver.resolve(src)
            needs_build = True
        if deploy:
            changes["deployment"] = self.resolver.resolve(deploy)
        if description:
            changes["description"] = description
        if needs_build:
            # pending state triggers a package build
            changes["status"] = pkg.spec.status.model_copy(update={"build_status": BuildStatus.PENDING})

        updated = pkg.model_copy(update={"spec": pkg.spec.model_copy(update=changes)})
        meta = self.client.package_update(updated)
        updated = updated.model_copy(update={"metadata": meta})
        logger.info(f"package '{name}' updated to version {meta.resource_version}")

        self.dependents.repoint(functions, meta.resource_version)
        return updated

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, name: str) -> Package:
        if not name:
            raise MissingArgumentException("Need name of package, use --name", argument="name")
        return self.client.package_get(name)

    def list(self) -> list[Package]:
        return self.client.package_list()

    def info(self, name: str) -> str:
        return render_package_info(self.get(name))

    def render_list(self, packages: Optional[list[Package]] = None) -> str:
        return render_package_table(self.list() if packages is None else packages)

    def functions_using(self, name: str) -> list[Function]:
        return self.dependents.list_functions_referencing(name)

    def download(self, name: str, target: Optional[str] = None) -> list[Path]:
        """
        Fetch a package's source and deployment archives to local files.

        Each archive lands in its own fresh temporary directory. ``target``
        names the files and defaults to the package name.
        """
        pkg = self.get(name)
        if not target:
            logger.info("Empty target file name, used package name instead")
            target = pkg.name

        paths = []
        for archive in (pkg.spec.source, pkg.spec.deployment):
            if archive is not None:
                paths.append(self.transfer.fetch(archive, target))
        return paths

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    def delete(self, name: str, *, force: bool = False) -> bool:
        """
        Delete a package unless functions still use it.

        A delete blocked by dependents is not an error: it is logged and
        reported by returning False.

        Returns:
            True when the package was deleted
        """
        if not name:
            raise MissingArgumentException("Need --name argument.", argument="name")

        functions = self.dependents.list_functions_referencing(name)
        if functions and not force:
            logger.warning(
                f"Package {name} is used by functions {', '.join(fn.name for fn in functions)}, "
                "use -f to force delete"
            )
            return False

        self.client.package_delete(name)
        logger.info(f"Package {name} is deleted")
        return True
