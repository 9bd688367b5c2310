#!/usr/bin/env python3
"""
Configuration Manager for icmp-echo

Features:
- JSON configuration file
- Environment variable overrides
- jsonschema validation of all parameters
- Default values matching the legacy pinger
"""

import copy
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import jsonschema

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised when a configuration value is rejected."""
    pass


class ConfigSchema:
    """Configuration schema with validation"""

    SCHEMA = {
        "type": "object",
        "required": ["version", "general", "icmp", "network", "cli"],
        "properties": {
            "version": {"type": "string", "pattern": r"^\d+\.\d+\.\d+$"},
            "general": {
                "type": "object",
                "required": ["log_level"],
                "properties": {
                    "log_level": {"type": "string", "enum": ["DEBUG", "INFO", "WARNING", "ERROR"]},
                    "colors_enabled": {"type": "boolean"}
                }
            },
            "icmp": {
                "type": "object",
                "required": ["payload_size", "checksum_mode"],
                "properties": {
                    "payload_size": {"type": "integer", "minimum": 0, "maximum": 65507},
                    "checksum_mode": {"type": "string", "enum": ["rfc792", "legacy"]}
                }
            },
            "network": {
                "type": "object",
                "required": ["timeout", "recv_buffer_size", "socket_type"],
                "properties": {
                    "timeout": {
                        "oneOf": [
                            {"type": "null"},
                            {"type": "number", "exclusiveMinimum": 0, "maximum": 3600}
                        ]
                    },
                    "recv_buffer_size": {"type": "integer", "minimum": 1, "maximum": 65535},
                    "socket_type": {"type": "string", "enum": ["raw", "dgram"]}
                }
            },
            "cli": {
                "type": "object",
                "required": ["count", "interval"],
                "properties": {
                    "count": {"type": "integer", "minimum": 1},
                    "interval": {"type": "number", "minimum": 0}
                }
            }
        }
    }

    @staticmethod
    def get_defaults() -> Dict[str, Any]:
        """Return default configuration"""
        return {
            "version": "1.0.0",
            "general": {
                "log_level": "WARNING",
                "colors_enabled": True
            },
            "icmp": {
                "payload_size": 56,
                "checksum_mode": "rfc792"
            },
            "network": {
                "timeout": None,
                "recv_buffer_size": 100,
                "socket_type": "raw"
            },
            "cli": {
                "count": 4,
                "interval": 1.0
            }
        }

    @classmethod
    def validate(cls, config: Dict[str, Any]) -> None:
        """
        Validate a configuration dictionary.

        Raises:
            ConfigError: With the path and message of the first violation
        """
        try:
            jsonschema.validate(instance=config, schema=cls.SCHEMA)
        except jsonschema.ValidationError as e:
            where = ".".join(str(p) for p in e.absolute_path) or "<root>"
            raise ConfigError(f"{where}: {e.message}") from e


class ConfigManager:
    """
    Configuration manager with file, env, and validation support

    Usage:
        config = ConfigManager("icmp_echo.json")
        config.load()
        size = config.get("icmp.payload_size")
        config.set("network.timeout", 2.0)
        config.save()
    """

    ENV_PREFIX = "ICMP_ECHO_"

    def __init__(self, config_file: Optional[str] = None):
        """
        Initialize configuration manager

        Args:
            config_file: Path to JSON config file (default: icmp_echo.json)
        """
        self.config_file = config_file or "icmp_echo.json"
        self.config = ConfigSchema.get_defaults()
        self.modified = False
        self._apply_env()

    def load(self, config_file: Optional[str] = None) -> bool:
        """
        Load configuration from file

        Args:
            config_file: Optional path override

        Returns:
            True if loaded successfully, False if defaults are in use
        """
        if config_file:
            self.config_file = config_file

        path = Path(self.config_file)

        if not path.exists():
            logger.warning("Config file not found: %s, using defaults", self.config_file)
            return False

        try:
            with open(path, 'r') as f:
                loaded_config = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Config load error: %s, using defaults", e)
            return False

        merged = ConfigSchema.get_defaults()
        if isinstance(loaded_config, dict):
            self._merge_config(merged, loaded_config)
        else:
            logger.warning("Config file %s is not a JSON object, using defaults", self.config_file)
            return False

        try:
            ConfigSchema.validate(merged)
        except ConfigError as e:
            logger.warning("Config validation failed (%s), using defaults", e)
            self.config = ConfigSchema.get_defaults()
            self._apply_env()
            return False

        self.config = merged
        self._apply_env()
        logger.debug("Config loaded: %s", self.config_file)
        return True

    def save(self, config_file: Optional[str] = None) -> bool:
        """
        Save configuration to file

        Args:
            config_file: Optional path override

        Returns:
            True if saved successfully
        """
        if config_file:
            self.config_file = config_file

        try:
            with open(self.config_file, 'w') as f:
                json.dump(self.config, f, indent=2)
        except OSError as e:
            logger.error("Config save error: %s", e)
            return False

        self.modified = False
        return True

    def _merge_config(self, base: Dict, override: Dict) -> None:
        """Deep merge configuration"""
        for key, value in override.items():
            if (key in base and
                    isinstance(base[key], dict) and
                    isinstance(value, dict)):
                self._merge_config(base[key], value)
            else:
                base[key] = value

    def validate(self) -> bool:
        """Validate the current configuration against the schema"""
        try:
            ConfigSchema.validate(self.config)
        except ConfigError as e:
            logger.warning("Validation error: %s", e)
            return False
        return True

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation

        Args:
            key: Configuration key (e.g., "network.timeout")
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        keys = key.split(".")
        value = self.config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def _parse_env_value(self, value: str) -> Any:
        """Parse environment variable value"""
        lowered = value.strip().lower()
        if lowered in ("none", "null", ""):
            return None
        if lowered in ("true", "yes"):
            return True
        if lowered in ("false", "no"):
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

    def _apply_env(self) -> None:
        """
        Layer ICMP_ECHO_* environment variables over the current config

        Every override goes through set(), so a bad value raises
        ConfigError instead of reaching the session.
        """
        def leaf_keys(section: Dict, prefix: str = ""):
            for name, value in section.items():
                if isinstance(value, dict):
                    yield from leaf_keys(value, f"{prefix}{name}.")
                else:
                    yield f"{prefix}{name}"

        modified = self.modified
        for key in leaf_keys(ConfigSchema.get_defaults()):
            env_value = os.environ.get(self.ENV_PREFIX + key.upper().replace(".", "_"))
            if env_value is not None:
                self.set(key, self._parse_env_value(env_value))
        self.modified = modified

    def set(self, key: str, value: Any) -> bool:
        """
        Set configuration value using dot notation

        The change is validated before it is kept.

        Raises:
            ConfigError: If the resulting configuration is invalid
        """
        candidate = copy.deepcopy(self.config)
        keys = key.split(".")

        current = candidate
        for k in keys[:-1]:
            if k not in current:
                current[k] = {}
            current = current[k]
        current[keys[-1]] = value

        ConfigSchema.validate(candidate)
        self.config = candidate
        self.modified = True
        return True

    def session_kwargs(self) -> Dict[str, Any]:
        """Export the settings EchoSession takes as keyword arguments"""
        return {
            "buffer_size": self.get("network.recv_buffer_size"),
            "timeout": self.get("network.timeout"),
            "socket_type": self.get("network.socket_type"),
            "strict_checksum": self.get("icmp.checksum_mode") != "legacy",
        }


def create_default_config(filename: str = "icmp_echo.json") -> bool:
    """Create default configuration file"""
    config = ConfigManager(filename)
    config.config = ConfigSchema.get_defaults()
    return config.save()


if __name__ == "__main__":
    create_default_config()
