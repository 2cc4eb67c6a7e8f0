from .settings import ConfigManager, LoggingConfig, ProfileConfig

__all__ = ["ConfigManager", "LoggingConfig", "ProfileConfig"]
