"""Resource reference value objects.

A reference to a control-plane resource is supplied either as an identifier,
as a human-readable name that still needs resolving, or not at all:

- ``Resolved(id)``      already an identifier, never looked up
- ``Unresolved(name)``  looked up once by the resolver
- ``EMPTY``             nothing supplied, passed through as ``""``
"""
from enum import Enum
from typing import Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class ResourceKind(str, Enum):
    """Kinds of resources the deploy step references by name."""
    SERVICE_OFFERING = "ServiceOffering"
    DISK_OFFERING = "DiskOffering"
    ZONE = "Zone"
    TEMPLATE = "Template"
    NETWORK = "Network"

    @property
    def list_command(self) -> str:
        """CloudStack API command used to look this kind up by name."""
        return f"list{self.value}s"

    @property
    def response_key(self) -> str:
        """Key holding the result list inside a list response."""
        return self.value.lower()

    @property
    def label(self) -> str:
        """Lower-case phrase used in operator messages."""
        return {
            ResourceKind.SERVICE_OFFERING: "service offering",
            ResourceKind.DISK_OFFERING: "disk offering",
            ResourceKind.ZONE: "zone",
            ResourceKind.TEMPLATE: "template",
            ResourceKind.NETWORK: "network",
        }[self]


class Resolved(BaseModel):
    """A reference that already carries its identifier."""
    model_config = ConfigDict(frozen=True)

    id: str


class Unresolved(BaseModel):
    """A reference known only by name."""
    model_config = ConfigDict(frozen=True)

    name: str
    filters: Dict[str, str] = Field(default_factory=dict)


class EmptyReference(BaseModel):
    """Nothing was supplied for this resource."""
    model_config = ConfigDict(frozen=True)


EMPTY = EmptyReference()

ResourceReference = Union[Resolved, Unresolved, EmptyReference]


def reference_from(resource_id: Optional[str], name: Optional[str]) -> ResourceReference:
    """Build a reference from an optional id/name pair. The id wins."""
    if resource_id:
        return Resolved(id=resource_id)
    if name:
        return Unresolved(name=name)
    return EMPTY
