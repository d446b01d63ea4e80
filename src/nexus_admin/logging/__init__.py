"""
Logging system for the Nexus admin client.
"""

from .logger_config import (
    setup_logging, get_logger, set_log_level, close_logging, LoggerConfig, LIBRARY_LOGGER
)
from .log_formatter import StructuredFormatter, ContextFormatter

__all__ = [
    "setup_logging",
    "get_logger",
    "set_log_level",
    "close_logging",
    "LoggerConfig",
    "LIBRARY_LOGGER",
    "StructuredFormatter",
    "ContextFormatter"
]
