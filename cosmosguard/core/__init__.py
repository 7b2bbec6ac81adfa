"""Core module initialization."""

from .config_manager import ConfigManager, CosmosGuardConfig, CosmosConfig, LoggingConfig
from .logging_config import setup_logging, get_logger, TRACE

__all__ = [
    "ConfigManager",
    "CosmosGuardConfig",
    "CosmosConfig",
    "LoggingConfig",
    "setup_logging",
    "get_logger",
    "TRACE",
]
