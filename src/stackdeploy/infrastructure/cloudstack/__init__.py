"""CloudStack control plane adapter."""

from .client import CloudStackClient

__all__ = ["CloudStackClient"]
