"""
In-Memory Resource Client

Process-local resource store with the same contract as the REST client.
Stamps increasing resource versions on every write and rejects stale
updates, so optimistic-concurrency behaviour can be exercised offline.
"""

from __future__ import annotations

import itertools

from core.schemas import (
    ConflictException,
    NotFoundException,
    ObjectMeta,
    PersistException,
)

from controller.base import Record, ResourceClient, ResourceKind


class InMemoryResourceClient(ResourceClient):
    """Dict-backed resource client."""

    def __init__(self, namespace: str = "default") -> None:
        super().__init__(namespace=namespace)
        self._records: dict[tuple[ResourceKind, str], Record] = {}
        self._versions = itertools.count(1)

    def _key(self, kind: ResourceKind, name: str) -> tuple[ResourceKind, str]:
        return kind, name

    def _stamp(self, record: Record) -> Record:
        meta = record.metadata.model_copy(update={
            "namespace": self.namespace,
            "resource_version": str(next(self._versions)),
        })
        return record.model_copy(update={"metadata": meta}, deep=True)

    def create(self, kind: ResourceKind, record: Record) -> ObjectMeta:
        if not isinstance(record, kind.model):
            raise PersistException(f"Expected a {kind.label} record", kind=kind.label)
        key = self._key(kind, record.metadata.name)
        if key in self._records:
            raise ConflictException(
                f"{kind.label} {record.metadata.name!r} already exists",
                kind=kind.label,
                name=record.metadata.name,
            )
        stored = self._stamp(record)
        self._records[key] = stored
        return stored.metadata.model_copy()

    def get(self, kind: ResourceKind, name: str) -> Record:
        try:
            return self._records[self._key(kind, name)].model_copy(deep=True)
        except KeyError:
            raise NotFoundException(f"{kind.label} {name!r} not found", kind=kind.label, name=name)

    def update(self, kind: ResourceKind, record: Record) -> ObjectMeta:
        name = record.metadata.name
        key = self._key(kind, name)
        current = self._records.get(key)
        if current is None:
            raise NotFoundException(f"{kind.label} {name!r} not found", kind=kind.label, name=name)
        supplied = record.metadata.resource_version
        if supplied and supplied != current.metadata.resource_version:
            raise ConflictException(
                f"{kind.label} {name!r} was modified: have version {supplied}, "
                f"store has {current.metadata.resource_version}",
                kind=kind.label,
                name=name,
            )
        stored = self._stamp(record)
        self._records[key] = stored
        return stored.metadata.model_copy()

    def delete(self, kind: ResourceKind, name: str) -> None:
        try:
            del self._records[self._key(kind, name)]
        except KeyError:
            raise NotFoundException(f"{kind.label} {name!r} not found", kind=kind.label, name=name)

    def list(self, kind: ResourceKind) -> list[Record]:
        return [
            record.model_copy(deep=True)
            for (record_kind, _), record in self._records.items()
            if record_kind is kind
        ]
