"""Infrastructure-level exceptions raised by control plane adapters."""
from typing import Optional, Any


class InfrastructureError(Exception):
    """Base exception for infrastructure-related errors."""
    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.details = details


class ControlPlaneError(InfrastructureError):
    """Raised when the control plane API rejects a request."""
    def __init__(self, message: str, error_code: Optional[int] = None, details: Optional[Any] = None):
        super().__init__(message, details)
        self.error_code = error_code


class ControlPlaneConnectionError(ControlPlaneError):
    """Raised when the control plane cannot be reached."""
    pass


class LookupFailedError(ControlPlaneError):
    """Raised when a name lookup finds no match or more than one."""
    pass
