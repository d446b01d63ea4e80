"""
Configuration management system for the Nexus admin client.
"""

import os
import yaml
from pathlib import Path
from typing import Dict, Any, Optional, Union
from dataclasses import dataclass, field
import logging

from ..error_handling import ConfigurationError

logger = logging.getLogger(__name__)

PAYLOAD_FORMATS = ("json", "xml")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Values read verbatim from the environment, never type-converted
RAW_ENV_VARS = {"NEXUS_URL", "NEXUS_USERNAME", "NEXUS_PASSWORD", "LOG_FILE", "LOG_FORMAT"}


@dataclass
class NexusConfig:
    """Nexus server connection configuration."""
    base_url: str = "http://localhost:8081/nexus"
    username: Optional[str] = None
    password: Optional[str] = None
    timeout: float = 30
    payload_format: str = "json"  # json, xml
    verify_ssl: bool = True


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    file: Optional[str] = None
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    max_file_size: int = 10  # MB
    backup_count: int = 5
    structured: bool = False


@dataclass
class AppConfig:
    """Complete application configuration."""
    nexus: NexusConfig = field(default_factory=NexusConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


class ConfigManager:
    """
    Manages client configuration from multiple sources.

    Configuration is loaded in the following order (later sources override earlier):
    1. Default configuration
    2. Configuration file
    3. Environment variables
    """

    def __init__(self, config_file: Optional[Union[str, Path]] = None):
        """
        Initialize configuration manager.

        Args:
            config_file: Path to configuration file
        """
        self.config_file = Path(config_file) if config_file else None
        self._config: Optional[AppConfig] = None
        self._env_var_mapping = self._create_env_var_mapping()

    def _create_env_var_mapping(self) -> Dict[str, str]:
        """Create mapping of environment variables to config paths."""
        return {
            # Nexus configuration
            "NEXUS_URL": "nexus.base_url",
            "NEXUS_USERNAME": "nexus.username",
            "NEXUS_PASSWORD": "nexus.password",
            "NEXUS_TIMEOUT": "nexus.timeout",
            "NEXUS_PAYLOAD_FORMAT": "nexus.payload_format",
            "NEXUS_VERIFY_SSL": "nexus.verify_ssl",

            # Logging configuration
            "LOG_LEVEL": "logging.level",
            "LOG_FILE": "logging.file",
            "LOG_FORMAT": "logging.format",
            "LOG_MAX_SIZE": "logging.max_file_size",
            "LOG_BACKUP_COUNT": "logging.backup_count",
            "LOG_STRUCTURED": "logging.structured",
        }

    def load_config(self) -> AppConfig:
        """
        Load configuration from all sources.

        Returns:
            Complete application configuration

        Raises:
            ConfigurationError: If the merged configuration is invalid
        """
        if self._config is not None:
            return self._config

        config_dict = self._get_default_config()

        if self.config_file and self.config_file.exists():
            file_config = self._load_config_file(self.config_file)
            config_dict = self._merge_configs(config_dict, file_config)

        env_config = self._load_env_config()
        config_dict = self._merge_configs(config_dict, env_config)

        # ${VAR} references, e.g. password: ${NEXUS_ADMIN_PASSWORD}
        config_dict = self._substitute_env_vars(config_dict)

        self._validate_config(config_dict)

        self._config = self._dict_to_config(config_dict)

        return self._config

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default configuration values."""
        return {
            "nexus": {
                "base_url": "http://localhost:8081/nexus",
                "username": None,
                "password": None,
                "timeout": 30,
                "payload_format": "json",
                "verify_ssl": True
            },
            "logging": {
                "level": "INFO",
                "file": None,
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                "max_file_size": 10,
                "backup_count": 5,
                "structured": False
            }
        }

    def _load_config_file(self, config_path: Path) -> Dict[str, Any]:
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to configuration file

        Returns:
            Configuration dictionary
        """
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config = yaml.safe_load(f)
                logger.info(f"Loaded configuration from {config_path}")
                return config or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Failed to load config file {config_path}: {e}")
            return {}

    def _load_env_config(self) -> Dict[str, Any]:
        """
        Load configuration from environment variables.

        Returns:
            Configuration dictionary from environment variables
        """
        env_config = {}

        for env_var, config_path in self._env_var_mapping.items():
            value = os.getenv(env_var)
            if value is not None:
                if env_var not in RAW_ENV_VARS:
                    value = self._convert_env_value(value)
                self._set_nested_value(env_config, config_path, value)

        return env_config

    def _convert_env_value(self, value: str) -> Any:
        """
        Convert environment variable string to appropriate type.

        Args:
            value: String value from environment variable

        Returns:
            Converted value
        """
        if value.lower() in ('true', 'yes', 'on'):
            return True
        elif value.lower() in ('false', 'no', 'off'):
            return False

        try:
            return int(value)
        except ValueError:
            pass

        try:
            return float(value)
        except ValueError:
            pass

        return value

    def _set_nested_value(self, config: Dict[str, Any], path: str, value: Any) -> None:
        """
        Set a nested configuration value using dot notation.

        Args:
            config: Configuration dictionary
            path: Dot-separated path (e.g., 'nexus.base_url')
            value: Value to set
        """
        keys = path.split('.')
        current = config

        for key in keys[:-1]:
            if key not in current:
                current[key] = {}
            current = current[key]

        current[keys[-1]] = value

    def _substitute_env_vars(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """
        Substitute environment variables in configuration values.

        Args:
            config: Configuration dictionary

        Returns:
            Configuration with environment variables substituted
        """
        def substitute_recursive(obj):
            if isinstance(obj, dict):
                return {k: substitute_recursive(v) for k, v in obj.items()}
            elif isinstance(obj, list):
                return [substitute_recursive(item) for item in obj]
            elif isinstance(obj, str) and obj.startswith('${') and obj.endswith('}'):
                env_var = obj[2:-1]
                return os.getenv(env_var, obj)
            else:
                return obj

        return substitute_recursive(config)

    def _merge_configs(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge two configuration dictionaries.

        Args:
            base: Base configuration
            override: Override configuration

        Returns:
            Merged configuration
        """
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_configs(result[key], value)
            else:
                result[key] = value

        return result

    def _validate_config(self, config: Dict[str, Any]) -> None:
        """
        Validate configuration values.

        Args:
            config: Configuration dictionary

        Raises:
            ConfigurationError: If configuration is invalid

        Only the ``nexus`` section is checked here. The logging level is
        checked by ``setup_logging``, so a bad ``LOG_LEVEL`` cannot keep a
        client from being built.
        """
        nexus = config.get("nexus", {})

        payload_format = str(nexus.get("payload_format", "json")).lower()
        if payload_format not in PAYLOAD_FORMATS:
            raise ConfigurationError(
                f"Invalid payload format: {payload_format}. Valid formats: {PAYLOAD_FORMATS}",
                config_section="nexus",
                config_key="payload_format"
            )
        nexus["payload_format"] = payload_format

        timeout = nexus.get("timeout")
        if not isinstance(timeout, (int, float)) or isinstance(timeout, bool) or timeout <= 0:
            raise ConfigurationError(
                f"Invalid timeout: {timeout}. Must be a positive number of seconds",
                config_section="nexus",
                config_key="timeout"
            )

        config["logging"]["level"] = str(config["logging"].get("level", "INFO")).upper()

    def _dict_to_config(self, config_dict: Dict[str, Any]) -> AppConfig:
        """
        Convert configuration dictionary to AppConfig object.

        Args:
            config_dict: Configuration dictionary

        Returns:
            AppConfig object
        """
        try:
            return AppConfig(
                nexus=NexusConfig(**config_dict.get("nexus", {})),
                logging=LoggingConfig(**config_dict.get("logging", {}))
            )
        except TypeError as e:
            raise ConfigurationError(f"Unknown configuration key: {e}", cause=e)

    def get_config(self) -> AppConfig:
        """
        Get the current configuration.

        Returns:
            Application configuration
        """
        if self._config is None:
            return self.load_config()
        return self._config

    def reload_config(self) -> AppConfig:
        """
        Reload configuration from all sources.

        Returns:
            Reloaded application configuration
        """
        self._config = None
        return self.load_config()

    def save_config(self, config_path: Optional[Path] = None) -> None:
        """
        Save current configuration to file.

        Credentials are never written.

        Args:
            config_path: Path to save configuration file
        """
        if config_path is None:
            config_path = self.config_file or Path("nexus-admin.yaml")

        config = self.get_config()
        config_dict = {
            "nexus": {
                "base_url": config.nexus.base_url,
                "timeout": config.nexus.timeout,
                "payload_format": config.nexus.payload_format,
                "verify_ssl": config.nexus.verify_ssl
            },
            "logging": {
                "level": config.logging.level,
                "file": config.logging.file,
                "format": config.logging.format,
                "max_file_size": config.logging.max_file_size,
                "backup_count": config.logging.backup_count,
                "structured": config.logging.structured
            }
        }

        with open(config_path, 'w', encoding='utf-8') as f:
            yaml.dump(config_dict, f, default_flow_style=False, indent=2)

        logger.info(f"Configuration saved to {config_path}")


# Global configuration manager instance
_config_manager: Optional[ConfigManager] = None


def get_config_manager(config_file: Optional[Union[str, Path]] = None) -> ConfigManager:
    """
    Get the global configuration manager instance.

    Args:
        config_file: Path to configuration file (only used on first call)

    Returns:
        ConfigManager instance
    """
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager(config_file)
    return _config_manager


def reset_config_manager() -> None:
    """Drop the global configuration manager so the next call reloads."""
    global _config_manager
    _config_manager = None


def get_config() -> AppConfig:
    """
    Get the current application configuration.

    Returns:
        Application configuration
    """
    return get_config_manager().get_config()
