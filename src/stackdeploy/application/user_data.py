"""User data preparation for the new virtual machine."""
import logging
from dataclasses import dataclass, asdict

from stackdeploy.domain.base.ports import UserDataRenderingPort
from stackdeploy.domain.core.exceptions import RenderError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BootCommandTemplateData:
    """Variables available to user data templates."""
    HTTPIP: str
    HTTPPort: str
    Name: str


class UserDataRenderer:
    """Expands user data templates. An empty template never reaches the engine."""

    def __init__(self, engine: UserDataRenderingPort):
        self._engine = engine

    def render(self, template: str, context: BootCommandTemplateData) -> str:
        """
        Render user data.

        Args:
            template: Raw user data, possibly empty
            context: Values for the template placeholders

        Returns:
            The rendered user data, or an empty string for an empty template

        Raises:
            RenderError: If the engine fails for any reason
        """
        if not template:
            return ""

        try:
            rendered = self._engine.render(template, asdict(context))
        except RenderError:
            raise
        except Exception as e:
            raise RenderError(f"Error preparing user data: {e}", e) from e

        logger.debug(f"Rendered user data ({len(rendered)} characters)")
        return rendered
