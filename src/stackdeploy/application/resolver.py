"""Resolution of resource names into control-plane identifiers."""
import logging
from typing import Dict, List, Optional

from stackdeploy.domain.base.ports import ControlPlanePort
from stackdeploy.domain.core.exceptions import ResolutionError
from stackdeploy.domain.provisioning.request import ProvisioningRequest, ResolvedReferences
from stackdeploy.domain.references.value_objects import (
    EmptyReference,
    Resolved,
    ResourceKind,
    ResourceReference,
    Unresolved,
)

logger = logging.getLogger(__name__)

ZONE_FILTERS = {"available": "true"}
TEMPLATE_FILTER = "executable"


class ResourceResolver:
    """Translates display names into identifiers with one remote lookup per name."""

    def __init__(self, client: ControlPlanePort):
        self._client = client

    def resolve(self, name: str, kind: ResourceKind,
                filters: Optional[Dict[str, str]] = None) -> str:
        """
        Resolve a single name.

        Args:
            name: Display name of the resource
            kind: Kind of resource being looked up
            filters: Optional disambiguating filters

        Returns:
            The resource identifier

        Raises:
            ResolutionError: If the lookup fails, is ambiguous or finds nothing
        """
        logger.debug(f"Resolving {kind.value} '{name}' with filters {filters or {}}")
        try:
            resource_id = self._client.name_to_id(name, kind, filters)
        except Exception as e:
            raise ResolutionError(kind.value, name, e) from e

        if not resource_id:
            raise ResolutionError(kind.value, name, ValueError("empty identifier returned"))

        logger.info(f"Resolved {kind.value} '{name}' to {resource_id}")
        return resource_id

    def resolve_reference(self, reference: ResourceReference, kind: ResourceKind,
                          filters: Optional[Dict[str, str]] = None) -> str:
        """Resolve a reference, skipping the lookup for ids and empty values."""
        if isinstance(reference, Resolved):
            return reference.id
        if isinstance(reference, EmptyReference):
            return ""
        if isinstance(reference, Unresolved):
            merged = {**reference.filters, **(filters or {})}
            return self.resolve(reference.name, kind, merged or None)
        raise TypeError(f"Unsupported reference type: {type(reference).__name__}")

    def resolve_all(self, request: ProvisioningRequest) -> ResolvedReferences:
        """
        Resolve every reference of a request.

        The zone is resolved before the template because template lookup is
        filtered by zone id. The first failure aborts.

        Raises:
            ResolutionError: On the first reference that cannot be resolved
        """
        resolved = ResolvedReferences()

        resolved = self._populate(
            resolved, "service_offering_id",
            self.resolve_reference(request.service_offering_ref, ResourceKind.SERVICE_OFFERING))
        resolved = self._populate(
            resolved, "disk_offering_id",
            self.resolve_reference(request.disk_offering_ref, ResourceKind.DISK_OFFERING))
        resolved = self._populate(
            resolved, "zone_id",
            self.resolve_reference(request.zone_ref, ResourceKind.ZONE, ZONE_FILTERS))

        template_filters = {
            "zoneid": resolved.zone_id,
            "templatefilter": TEMPLATE_FILTER,
        }
        resolved = self._populate(
            resolved, "template_id",
            self.resolve_reference(request.template_ref, ResourceKind.TEMPLATE, template_filters))

        return self._populate(resolved, "network_ids", self.resolve_networks(request.network_refs))

    def resolve_networks(self, references: List[ResourceReference]) -> List[str]:
        """Resolve networks one by one, keeping their order."""
        network_ids = [""] * len(references)
        for index, reference in enumerate(references):
            network_ids[index] = self.resolve_reference(reference, ResourceKind.NETWORK)
        return network_ids

    @staticmethod
    def _populate(resolved: ResolvedReferences, field: str, value) -> ResolvedReferences:
        if not value:
            return resolved
        return resolved.with_field(field, value)
