"""Jinja2 implementation of user data rendering."""
import logging
from typing import Any, Dict, Optional

from jinja2 import Environment, StrictUndefined, TemplateError

from stackdeploy.domain.base.ports import UserDataRenderingPort
from stackdeploy.domain.core.exceptions import RenderError


class JinjaUserDataRenderer(UserDataRenderingPort):
    """
    Renders user data with Jinja2.

    Undefined placeholders are errors rather than empty strings, so malformed
    boot data is never silently sent to a machine.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self._logger = logger or logging.getLogger(__name__)
        self._env = Environment(
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            autoescape=False,
        )

    def render(self, template: str, context: Dict[str, Any]) -> str:
        try:
            return self._env.from_string(template).render(**context)
        except TemplateError as e:
            self._logger.error(f"Failed to render user data: {e}")
            raise RenderError(f"Failed to render user data: {e}", e) from e
