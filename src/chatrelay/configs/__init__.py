from .config import AppConfig, ConfigError, get_app_config

__all__ = ["AppConfig", "ConfigError", "get_app_config"]
