"""Template rendering infrastructure."""

from .jinja_user_data_renderer import JinjaUserDataRenderer

__all__ = ["JinjaUserDataRenderer"]
