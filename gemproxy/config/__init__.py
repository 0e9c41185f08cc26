from .backend import BackendSettings
from .logging import LoggingSettings
from .server import ServerSettings
from .settings import ConfigurationError, Settings, get_settings


__all__ = [
    "BackendSettings",
    "ConfigurationError",
    "LoggingSettings",
    "ServerSettings",
    "Settings",
    "get_settings",
]
