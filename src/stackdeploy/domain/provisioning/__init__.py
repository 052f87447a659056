"""Provisioning domain objects."""

from .jobs import AsyncJobHandle, CreatedResource, JobStatus
from .request import ProvisioningRequest, ResolvedReferences
from .run_context import RunContext

__all__ = [
    "AsyncJobHandle",
    "CreatedResource",
    "JobStatus",
    "ProvisioningRequest",
    "ResolvedReferences",
    "RunContext",
]
