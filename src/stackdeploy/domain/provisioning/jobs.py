"""Async job value objects."""
from enum import IntEnum

from pydantic import BaseModel, ConfigDict


class JobStatus(IntEnum):
    """Status codes reported by the control plane for an async job."""
    PENDING = 0
    SUCCEEDED = 1
    FAILED = 2

    @property
    def is_terminal(self) -> bool:
        return self is not JobStatus.PENDING


class AsyncJobHandle(BaseModel):
    """Opaque token for an in-flight remote operation."""
    model_config = ConfigDict(frozen=True)

    job_id: str

    def __str__(self) -> str:
        return self.job_id


class CreatedResource(BaseModel):
    """Identifier of a newly created resource and the job creating it."""
    model_config = ConfigDict(frozen=True)

    resource_id: str
    job: AsyncJobHandle
