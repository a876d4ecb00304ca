"""
Resource Client Contract

Create/Get/Update/Delete/List/Watch access to the package and function
records held by the controller. The package lifecycle depends only on this
contract, never on a particular transport.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional, Union

from core.schemas import Function, ObjectMeta, Package


logger = logging.getLogger(__name__)

Record = Union[Package, Function]


class ResourceKind(Enum):
    """Record kinds served by the controller, keyed by their URL plural."""

    PACKAGE = "packages"
    FUNCTION = "functions"

    @property
    def model(self) -> type[Record]:
        return Package if self is ResourceKind.PACKAGE else Function

    @property
    def label(self) -> str:
        return "package" if self is ResourceKind.PACKAGE else "function"


class EventType(str, Enum):
    ADDED = "ADDED"
    MODIFIED = "MODIFIED"
    DELETED = "DELETED"


@dataclass(frozen=True)
class ResourceEvent:
    """A change observed by ``watch``."""
    type: EventType
    kind: ResourceKind
    record: Record


class ResourceClient(ABC):
    """
    Base class for resource clients.

    Subclasses implement the five kind-generic primitives; the typed
    package/function helpers and polling ``watch`` are shared.

    Errors:
        NotFoundException: the named record does not exist
        ConflictException: duplicate name or stale resource version
        PersistException: any other write failure
        ResourceClientException: any other read failure
    """

    def __init__(self, namespace: str = "default") -> None:
        self.namespace = namespace

    @abstractmethod
    def create(self, kind: ResourceKind, record: Record) -> ObjectMeta:
        """Persist a new record and return its stored metadata."""

    @abstractmethod
    def get(self, kind: ResourceKind, name: str) -> Record:
        """Fetch a record by name."""

    @abstractmethod
    def update(self, kind: ResourceKind, record: Record) -> ObjectMeta:
        """Replace a record and return its metadata with the new resource version."""

    @abstractmethod
    def delete(self, kind: ResourceKind, name: str) -> None:
        """Remove a record by name."""

    @abstractmethod
    def list(self, kind: ResourceKind) -> list[Record]:
        """All records of a kind in this client's namespace."""

    def watch(
        self,
        kind: ResourceKind,
        *,
        interval: float = 2.0,
        max_polls: Optional[int] = None,
    ) -> Iterator[ResourceEvent]:
        """
        Yield changes to records of ``kind`` by polling ``list``.

        The first poll reports every existing record as ADDED. Changes are
        detected through resource versions. Stops after ``max_polls`` polls
        when given, otherwise runs until the caller stops iterating.
        """
        known: dict[str, Record] = {}
        polls = 0
        while max_polls is None or polls < max_polls:
            if polls:
                time.sleep(interval)
            polls += 1

            current = {r.metadata.name: r for r in self.list(kind)}
            for name, record in current.items():
                previous = known.get(name)
                if previous is None:
                    yield ResourceEvent(EventType.ADDED, kind, record)
                elif previous.metadata.resource_version != record.metadata.resource_version:
                    yield ResourceEvent(EventType.MODIFIED, kind, record)
            for name, record in known.items():
                if name not in current:
                    yield ResourceEvent(EventType.DELETED, kind, record)
            known = current

    # ------------------------------------------------------------------
    # Typed helpers
    # ------------------------------------------------------------------

    def package_create(self, package: Package) -> ObjectMeta:
        return self.create(ResourceKind.PACKAGE, package)

    def package_get(self, name: str) -> Package:
        return self.get(ResourceKind.PACKAGE, name)

    def package_update(self, package: Package) -> ObjectMeta:
        return self.update(ResourceKind.PACKAGE, package)

    def package_delete(self, name: str) -> None:
        self.delete(ResourceKind.PACKAGE, name)

    def package_list(self) -> list[Package]:
        return self.list(ResourceKind.PACKAGE)

    def package_watch(self, **kwargs) -> Iterator[ResourceEvent]:
        return self.watch(ResourceKind.PACKAGE, **kwargs)

    def function_create(self, function: Function) -> ObjectMeta:
        return self.create(ResourceKind.FUNCTION, function)

    def function_get(self, name: str) -> Function:
        return self.get(ResourceKind.FUNCTION, name)

    def function_update(self, function: Function) -> ObjectMeta:
        return self.update(ResourceKind.FUNCTION, function)

    def function_delete(self, name: str) -> None:
        self.delete(ResourceKind.FUNCTION, name)

    def function_list(self) -> list[Function]:
        return self.list(ResourceKind.FUNCTION)

    def function_watch(self, **kwargs) -> Iterator[ResourceEvent]:
        return self.watch(ResourceKind.FUNCTION, **kwargs)
