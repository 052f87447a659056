"""Port for user-data template rendering."""

from abc import ABC, abstractmethod
from typing import Any, Dict


class UserDataRenderingPort(ABC):
    """Port for template expansion engines."""

    @abstractmethod
    def render(self, template: str, context: Dict[str, Any]) -> str:
        """Render template text with variables from context."""
