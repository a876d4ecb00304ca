"""
REST Resource Client

Resource client backed by the controller's JSON REST API:

    POST   /v1/{kind}              create
    GET    /v1/{kind}              list
    GET    /v1/{kind}/{name}       get
    PUT    /v1/{kind}/{name}       update
    DELETE /v1/{kind}/{name}       delete

Every request carries the namespace as a query parameter.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from core.config import ClientConfig
from core.http import HttpClient, HttpError, HttpResponse
from core.schemas import (
    ConflictException,
    NotFoundException,
    ObjectMeta,
    PersistException,
    ResourceClientException,
)

from controller.base import Record, ResourceClient, ResourceKind


logger = logging.getLogger(__name__)

API_PREFIX = "/v1"


class RestResourceClient(ResourceClient):
    """
    Resource client talking to a live controller.

    Usage:
        config = ClientConfig(server_url="http://controller:8888")
        client = RestResourceClient(config)
        packages = client.package_list()
    """

    def __init__(self, config: ClientConfig, http: HttpClient | None = None) -> None:
        super().__init__(namespace=config.namespace)
        self.config = config
        self.http = http or HttpClient(config.http)

    def _collection_url(self, kind: ResourceKind) -> str:
        return f"{self.config.server_url}{API_PREFIX}/{kind.value}"

    def _record_url(self, kind: ResourceKind, name: str) -> str:
        return f"{self._collection_url(kind)}/{name}"

    def _params(self) -> dict[str, str]:
        return {"namespace": self.namespace}

    def _check(
        self,
        response: HttpResponse,
        kind: ResourceKind,
        name: str | None,
        *,
        action: str,
        write: bool,
    ) -> None:
        if response.ok:
            return
        target = f"{kind.label} {name}" if name else kind.value
        message = f"Failed to {action} {target}: HTTP {response.status_code} {response.text.strip()}"
        if response.status_code == 404:
            raise NotFoundException(f"{kind.label} {name!r} not found", kind=kind.label, name=name)
        if response.status_code == 409:
            raise ConflictException(message, kind=kind.label, name=name)
        if write:
            raise PersistException(message, kind=kind.label, name=name, status_code=response.status_code)
        raise ResourceClientException(message, kind=kind.label, name=name, status_code=response.status_code)

    def _send(
        self,
        method: str,
        url: str,
        kind: ResourceKind,
        name: str | None,
        *,
        action: str,
        write: bool,
        body: Any = None,
    ) -> HttpResponse:
        try:
            response = self.http.request(method, url, params=self._params(), json=body)
        except HttpError as e:
            target = f"{kind.label} {name}" if name else kind.value
            message = f"Failed to {action} {target}: {e}"
            if write:
                raise PersistException(message, kind=kind.label, name=name) from e
            raise ResourceClientException(message, kind=kind.label, name=name) from e
        self._check(response, kind, name, action=action, write=write)
        return response

    def _parse(self, kind: ResourceKind, data: Any) -> Record:
        try:
            return kind.model.model_validate(data)
        except ValidationError as e:
            raise ResourceClientException(
                f"Malformed {kind.label} record from controller: {e}",
                kind=kind.label,
            ) from e

    def _parse_meta(self, kind: ResourceKind, response: HttpResponse) -> ObjectMeta:
        try:
            return ObjectMeta.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise PersistException(
                f"Malformed metadata in {kind.label} write reply: {e}",
                kind=kind.label,
            ) from e

    def create(self, kind: ResourceKind, record: Record) -> ObjectMeta:
        name = record.metadata.name
        response = self._send(
            "POST", self._collection_url(kind), kind, name,
            action="create", write=True, body=record.to_wire(),
        )
        return self._parse_meta(kind, response)

    def get(self, kind: ResourceKind, name: str) -> Record:
        response = self._send(
            "GET", self._record_url(kind, name), kind, name,
            action="get", write=False,
        )
        try:
            data = response.json()
        except ValueError as e:
            raise ResourceClientException(
                f"Malformed {kind.label} reply for {name}", kind=kind.label, name=name,
            ) from e
        return self._parse(kind, data)

    def update(self, kind: ResourceKind, record: Record) -> ObjectMeta:
        name = record.metadata.name
        response = self._send(
            "PUT", self._record_url(kind, name), kind, name,
            action="update", write=True, body=record.to_wire(),
        )
        return self._parse_meta(kind, response)

    def delete(self, kind: ResourceKind, name: str) -> None:
        self._send(
            "DELETE", self._record_url(kind, name), kind, name,
            action="delete", write=True,
        )

    def list(self, kind: ResourceKind) -> list[Record]:
        response = self._send(
            "GET", self._collection_url(kind), kind, None,
            action="list", write=False,
        )
        try:
            items = response.json()
        except ValueError as e:
            raise ResourceClientException(f"Malformed {kind.value} list reply", kind=kind.label) from e
        if isinstance(items, dict):
            items = items.get("items") or []
        return [self._parse(kind, item) for item in items]
