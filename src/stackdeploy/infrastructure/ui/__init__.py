"""Operator output adapters."""

from .logging_ui import LoggingUserInterface

__all__ = ["LoggingUserInterface"]
