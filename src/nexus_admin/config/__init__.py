"""
Configuration management for the Nexus admin client.
"""

from .config_manager import (
    ConfigManager, AppConfig, NexusConfig, LoggingConfig,
    get_config_manager, get_config, reset_config_manager
)

__all__ = [
    "ConfigManager",
    "AppConfig",
    "NexusConfig",
    "LoggingConfig",
    "get_config_manager",
    "get_config",
    "reset_config_manager"
]
