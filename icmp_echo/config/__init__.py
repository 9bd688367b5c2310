from .config_manager import ConfigManager, ConfigSchema, ConfigError

__all__ = ['ConfigManager', 'ConfigSchema', 'ConfigError']
