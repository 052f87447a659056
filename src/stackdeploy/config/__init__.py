"""Configuration package."""

from .schemas import DeployConfig, LoggingConfig

__all__ = ["DeployConfig", "LoggingConfig"]
