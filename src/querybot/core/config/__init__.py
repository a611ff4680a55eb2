from querybot.core.config.app_config import AppConfig, LogLevel, QueryConfig
from querybot.core.config.config_loader import ConfigLoader

__all__ = ["AppConfig", "ConfigLoader", "LogLevel", "QueryConfig"]
