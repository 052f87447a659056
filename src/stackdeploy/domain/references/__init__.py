"""Resource reference value objects."""

from .value_objects import (
    EMPTY,
    EmptyReference,
    Resolved,
    ResourceKind,
    ResourceReference,
    Unresolved,
    reference_from,
)

__all__ = [
    "EMPTY",
    "EmptyReference",
    "Resolved",
    "ResourceKind",
    "ResourceReference",
    "Unresolved",
    "reference_from",
]
