"""Configuration schemas."""

from .deploy_schema import DeployConfig
from .logging_schema import LogDestination, LogFileConfig, LoggingConfig

__all__ = [
    "DeployConfig",
    "LogDestination",
    "LogFileConfig",
    "LoggingConfig",
]
