"""Port for control-plane operations used by the deploy step."""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from stackdeploy.domain.provisioning.jobs import AsyncJobHandle, CreatedResource, JobStatus
from stackdeploy.domain.references.value_objects import ResourceKind


class ControlPlanePort(ABC):
    """Port for the remote control plane."""

    @abstractmethod
    def name_to_id(self, name: str, kind: ResourceKind,
                   filters: Optional[Dict[str, str]] = None) -> str:
        """Resolve a display name to an identifier.

        Raises:
            Exception: If the name is absent or ambiguous
        """

    @abstractmethod
    def deploy_virtual_machine(self, service_offering_id: str, template_id: str,
                               zone_id: str, disk_offering_id: str, display_name: str,
                               network_ids: List[str], key_pair: str, user_data: str,
                               hypervisor: str) -> CreatedResource:
        """Submit a create request and return the new id and its job handle."""

    @abstractmethod
    def destroy_virtual_machine(self, resource_id: str) -> AsyncJobHandle:
        """Submit a destroy request and return its job handle."""

    @abstractmethod
    def query_async_job(self, job: AsyncJobHandle) -> JobStatus:
        """Return the current status of an async job."""
