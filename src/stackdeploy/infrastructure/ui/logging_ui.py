"""Operator output backed by structured logging."""
from typing import Optional

import structlog

from stackdeploy.domain.base.ports import UserInterfacePort


class LoggingUserInterface(UserInterfacePort):
    """Sends operator messages to a structlog logger, tagged with the step name."""

    def __init__(self, step_name: str = "deploy", logger: Optional[structlog.BoundLogger] = None):
        self._logger = (logger or structlog.get_logger("stackdeploy.ui")).bind(step=step_name)

    def say(self, message: str) -> None:
        self._logger.info(message, kind="say")

    def message(self, message: str) -> None:
        self._logger.info(message, kind="message")

    def error(self, message: str) -> None:
        self._logger.error(message, kind="error")
