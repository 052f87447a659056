"""Typed state shared by the steps of one pipeline run."""
from dataclasses import dataclass
from typing import Any, Optional, Type, TypeVar

from stackdeploy.domain.core.exceptions import RunContextError

T = TypeVar('T')


@dataclass
class RunContext:
    """State threaded through every step of a single pipeline run.

    Each field has exactly one producer. Consumers read fields through
    ``require`` so a missing or mistyped value fails fast.
    """

    # Provided by the pipeline before the deploy step runs
    client: Any = None
    ui: Any = None
    config: Any = None
    ssh_key_name: Optional[str] = None
    http_ip: Optional[str] = None
    http_port: Optional[str] = None

    # Produced by the deploy step
    user_data: Optional[str] = None
    virtual_machine_id: Optional[str] = None
    error: Optional[BaseException] = None

    def require(self, key: str, expected: Type[T]) -> T:
        """Return a field value after checking it is present and of the expected type.

        Raises:
            RunContextError: If the value is missing or of another type
        """
        value = getattr(self, key, None)
        if value is None:
            raise RunContextError(key, expected.__name__)
        if not isinstance(value, expected):
            raise RunContextError(key, expected.__name__, type(value).__name__)
        return value
