"""Port for operator-facing output."""

from abc import ABC, abstractmethod


class UserInterfacePort(ABC):
    """Port for reporting progress and errors to the operator."""

    @abstractmethod
    def say(self, message: str) -> None:
        """Announce a step of progress."""

    @abstractmethod
    def message(self, message: str) -> None:
        """Report informational detail."""

    @abstractmethod
    def error(self, message: str) -> None:
        """Report an error."""
