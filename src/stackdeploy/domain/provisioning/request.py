"""Provisioning request and its resolved counterpart."""
from typing import List

from pydantic import BaseModel, ConfigDict, Field

from stackdeploy.domain.references.value_objects import (
    EMPTY,
    ResourceReference,
    Unresolved,
    Resolved,
    reference_from,
)


class ProvisioningRequest(BaseModel):
    """Input of the deploy step.

    For every resource either the identifier or the name may be supplied.
    When both are empty the remote call receives an empty value.
    """
    model_config = ConfigDict(frozen=True)

    service_offering_id: str = ""
    service_offering: str = ""
    disk_offering_id: str = ""
    disk_offering: str = ""
    zone_id: str = ""
    zone: str = ""
    template_id: str = ""
    template: str = ""
    network_ids: List[str] = Field(default_factory=list)
    networks: List[str] = Field(default_factory=list)

    hypervisor: str = ""
    user_data: str = ""
    template_name: str = ""

    @property
    def service_offering_ref(self) -> ResourceReference:
        return reference_from(self.service_offering_id, self.service_offering)

    @property
    def disk_offering_ref(self) -> ResourceReference:
        return reference_from(self.disk_offering_id, self.disk_offering)

    @property
    def zone_ref(self) -> ResourceReference:
        return reference_from(self.zone_id, self.zone)

    @property
    def template_ref(self) -> ResourceReference:
        return reference_from(self.template_id, self.template)

    @property
    def network_refs(self) -> List[ResourceReference]:
        """Ordered network references. Explicit ids take precedence over names."""
        if self.network_ids:
            return [Resolved(id=network_id) for network_id in self.network_ids]
        return [Unresolved(name=name) if name else EMPTY for name in self.networks]


class ResolvedReferences(BaseModel):
    """The request's references with every name replaced by its identifier."""
    model_config = ConfigDict(frozen=True)

    service_offering_id: str = ""
    disk_offering_id: str = ""
    zone_id: str = ""
    template_id: str = ""
    network_ids: List[str] = Field(default_factory=list)

    def with_field(self, field: str, value) -> "ResolvedReferences":
        """Return a copy with one more field populated.

        Raises:
            ValueError: If the field was already populated
        """
        if getattr(self, field):
            raise ValueError(f"{field} is already resolved")
        return self.model_copy(update={field: value})
