"""
Logger configuration and setup for the Nexus admin client.

The library only emits records through ``logging.getLogger(__name__)``
under the ``nexus_admin`` namespace. Applications embedding it may call
``setup_logging()`` once to attach console and optional rotating file
handlers to that namespace; the root logger is left to the application.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional, Dict
from dataclasses import dataclass

from ..config import get_config
from ..config.config_manager import AppConfig, LOG_LEVELS
from ..error_handling import ConfigurationError
from .log_formatter import StructuredFormatter, ContextFormatter

LIBRARY_LOGGER = "nexus_admin"


@dataclass
class LoggerConfig:
    """Configuration for logging system."""
    level: str = "INFO"
    file_path: Optional[str] = None
    format_string: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    max_file_size: int = 10  # MB
    backup_count: int = 5
    enable_console: bool = True
    enable_structured: bool = False

    @classmethod
    def from_app_config(cls, app_config: AppConfig) -> 'LoggerConfig':
        return cls(
            level=app_config.logging.level,
            file_path=app_config.logging.file,
            format_string=app_config.logging.format,
            max_file_size=app_config.logging.max_file_size,
            backup_count=app_config.logging.backup_count,
            enable_structured=app_config.logging.structured
        )


def parse_level(level: str) -> int:
    """
    Convert a level name to its logging constant.

    Raises:
        ConfigurationError: If the name is not a standard level
    """
    name = str(level).upper()
    if name not in LOG_LEVELS:
        raise ConfigurationError(
            f"Invalid log level: {name}. Valid levels: {LOG_LEVELS}",
            config_section="logging",
            config_key="level"
        )
    return getattr(logging, name)


class LoggingManager:
    """
    Configures the ``nexus_admin`` logger once with a console handler and an
    optional rotating file handler, and turns down urllib3/requests.
    """

    def __init__(self):
        self._handlers: Dict[str, logging.Handler] = {}
        self._configured = False
        self.config: Optional[LoggerConfig] = None

    @property
    def configured(self) -> bool:
        return self._configured

    def setup_logging(self, config: Optional[LoggerConfig] = None) -> None:
        """
        Set up the logging system with the specified configuration.

        Args:
            config: Logging configuration (uses app config if not provided)

        Raises:
            ConfigurationError: If the configured level is not a standard level
        """
        if self._configured:
            return

        if config is None:
            config = LoggerConfig.from_app_config(get_config())

        level = parse_level(config.level)
        self.config = config

        library_logger = logging.getLogger(LIBRARY_LOGGER)
        library_logger.setLevel(level)

        if config.enable_console:
            self._add_handler('console', logging.StreamHandler(sys.stderr), config, level)

        if config.file_path:
            Path(config.file_path).parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.handlers.RotatingFileHandler(
                filename=config.file_path,
                maxBytes=config.max_file_size * 1024 * 1024,
                backupCount=config.backup_count,
                encoding='utf-8'
            )
            self._add_handler('file', file_handler, config, level)

        # Connection pool chatter drowns out the client's own request records
        for logger_name in ('urllib3', 'requests'):
            logging.getLogger(logger_name).setLevel(logging.WARNING)

        self._configured = True
        library_logger.info(f"Logging system initialized with level: {config.level.upper()}")

    def _add_handler(self, name: str, handler: logging.Handler, config: LoggerConfig, level: int) -> None:
        handler.setLevel(level)
        if config.enable_structured:
            handler.setFormatter(StructuredFormatter())
        else:
            handler.setFormatter(ContextFormatter(config.format_string))

        logging.getLogger(LIBRARY_LOGGER).addHandler(handler)
        self._handlers[name] = handler

    def set_level(self, level: str) -> None:
        """
        Change the level of the ``nexus_admin`` logger and its handlers.

        Args:
            level: New logging level
        """
        log_level = parse_level(level)

        logging.getLogger(LIBRARY_LOGGER).setLevel(log_level)

        for handler in self._handlers.values():
            handler.setLevel(log_level)

        if self.config is not None:
            self.config.level = level.upper()

    def close_handlers(self) -> None:
        """Detach and close all handlers installed by this manager."""
        library_logger = logging.getLogger(LIBRARY_LOGGER)
        for handler in self._handlers.values():
            library_logger.removeHandler(handler)
            handler.close()

        self._handlers.clear()
        self._configured = False


# Global logging manager instance
_logging_manager = LoggingManager()


def setup_logging(config: Optional[LoggerConfig] = None) -> None:
    """
    Set up the global logging system.

    Args:
        config: Logging configuration
    """
    _logging_manager.setup_logging(config)


def get_logger(name: str) -> logging.Logger:
    """Get a logger inside the ``nexus_admin`` namespace."""
    if name != LIBRARY_LOGGER and not name.startswith(LIBRARY_LOGGER + "."):
        name = f"{LIBRARY_LOGGER}.{name}"
    return logging.getLogger(name)


def set_log_level(level: str) -> None:
    """
    Set the global logging level.

    Args:
        level: Logging level string
    """
    _logging_manager.set_level(level)


def close_logging() -> None:
    """Close logging system and clean up resources."""
    _logging_manager.close_handlers()
