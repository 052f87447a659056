# src/stackdeploy/domain/core/exceptions.py
from typing import Any, Optional, List


class DomainException(Exception):
    """Base exception for all domain-specific errors."""
    pass


class ResolutionError(DomainException):
    """Raised when a resource name cannot be resolved to an identifier."""
    def __init__(self, kind: str, name: str, cause: Optional[BaseException] = None):
        super().__init__(f"Unable to resolve {kind} '{name}': {cause}")
        self.kind = kind
        self.name = name
        self.cause = cause


class RenderError(DomainException):
    """Raised when user data cannot be expanded."""
    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class CreationError(DomainException):
    """Raised when the control plane rejects or fails a create request."""
    def __init__(self, message: str, details: Any = None):
        super().__init__(message)
        self.details = details


class JobFailedError(CreationError):
    """Raised when an async job reaches a terminal failure state."""
    def __init__(self, job_id: str, details: Any = None):
        super().__init__(f"Async job {job_id} finished with a failure status", details)
        self.job_id = job_id


class JobTimeoutError(DomainException):
    """Raised when an async job does not finish within the allowed time."""
    def __init__(self, job_id: str, timeout: float):
        super().__init__(f"Async job {job_id} did not complete within {timeout:g}s")
        self.job_id = job_id
        self.timeout = timeout


class DestructionError(DomainException):
    """Raised when a created resource could not be destroyed. Never fatal."""
    def __init__(self, resource_id: str, cause: Optional[BaseException] = None):
        super().__init__(f"Failed to destroy resource {resource_id}: {cause}")
        self.resource_id = resource_id
        self.cause = cause


class RunContextError(DomainException):
    """Raised when a run context value is missing or has the wrong type."""
    def __init__(self, key: str, expected: str, actual: Optional[str] = None):
        if actual is None:
            message = f"Run context is missing required value '{key}'"
        else:
            message = f"Run context value '{key}' should be {expected}, got {actual}"
        super().__init__(message)
        self.key = key
        self.expected = expected
        self.actual = actual


class ConfigurationError(DomainException):
    """Raised when deploy configuration fails validation."""
    def __init__(self, message: str, fields: Optional[List[str]] = None):
        super().__init__(message)
        self.fields = fields or []
