"""
Controller Resource Clients

Typed access to package and function records.

Public API:
- ResourceClient: abstract Create/Get/Update/Delete/List/Watch contract
- RestResourceClient: client for the controller's REST API
- InMemoryResourceClient: process-local store with the same contract
- ResourceKind, ResourceEvent, EventType: watch and dispatch types
"""

from controller.base import (
    EventType,
    Record,
    ResourceClient,
    ResourceEvent,
    ResourceKind,
)
from controller.memory import InMemoryResourceClient
from controller.rest import RestResourceClient

__all__ = [
    "EventType",
    "Record",
    "ResourceClient",
    "ResourceEvent",
    "ResourceKind",
    "InMemoryResourceClient",
    "RestResourceClient",
]
