import os
import tomllib
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from gemproxy.core.logging import get_logger

from .backend import BackendSettings
from .logging import LoggingSettings
from .server import ServerSettings


__all__ = [
    "ConfigurationError",
    "Settings",
    "find_toml_config_file",
    "get_settings",
]


class ConfigurationError(Exception):
    """Raised when configuration loading or validation fails."""

    pass


def get_config_dir() -> Path:
    """Return the gemproxy directory under XDG_CONFIG_HOME."""
    xdg_config_home = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg_config_home) if xdg_config_home else Path.home() / ".config"
    return base / "gemproxy"


def find_toml_config_file() -> Path | None:
    """Find the TOML configuration file for gemproxy.

    Searches in the following order:
    1. .gemproxy.toml in current directory
    2. config.toml in XDG_CONFIG_HOME/gemproxy/

    Returns:
        Path to the first found configuration file, or None if not found.
    """
    current_dir_config = Path.cwd() / ".gemproxy.toml"
    if current_dir_config.exists():
        return current_dir_config

    xdg_config = get_config_dir() / "config.toml"
    if xdg_config.exists():
        return xdg_config

    return None


class Settings(BaseSettings):
    """
    Configuration settings for the gemproxy HTTP server.

    Settings are loaded from environment variables, .env files, and TOML configuration files.
    Environment variables take precedence over TOML values; explicit CLI values take
    precedence over both. Nested values use ``__`` in environment variable names,
    e.g. ``SERVER__PORT=9000`` or ``BACKEND__MODEL=flash``.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_nested_delimiter="__",
    )

    server: ServerSettings = Field(
        default_factory=ServerSettings,
        description="Server configuration settings",
    )

    logging: LoggingSettings = Field(
        default_factory=LoggingSettings,
        description="Console summary and detailed file logging",
    )

    backend: BackendSettings = Field(
        default_factory=BackendSettings,
        description="Upstream generation backend settings",
    )

    @property
    def server_url(self) -> str:
        """Get the complete server URL."""
        return f"http://{self.server.host}:{self.server.port}"

    def model_dump_safe(self) -> dict[str, Any]:
        """Dump settings as JSON-compatible data with secrets masked."""
        return self.model_dump(mode="json")

    @classmethod
    def load_toml_config(cls, toml_path: Path) -> dict[str, Any]:
        """Load configuration from a TOML file."""
        try:
            with toml_path.open("rb") as f:
                return tomllib.load(f)
        except OSError as e:
            raise ConfigurationError(
                f"Cannot read TOML config file {toml_path}: {e}"
            ) from e
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(f"Invalid TOML syntax in {toml_path}: {e}") from e

    @classmethod
    def load_config_file(cls, config_path: Path) -> dict[str, Any]:
        """Load configuration from a file based on its extension."""
        suffix = config_path.suffix.lower()

        if suffix == ".toml":
            return cls.load_toml_config(config_path)
        raise ConfigurationError(
            f"Unsupported config file format: {suffix}. "
            "Only TOML (.toml) files are supported."
        )

    @classmethod
    def from_config(
        cls,
        config_path: Path | str | None = None,
        cli_context: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> "Settings":
        """Create Settings from env, an optional TOML file and CLI overrides."""
        if config_path is None:
            config_path_env = os.environ.get("CONFIG_FILE")
            if config_path_env:
                config_path = Path(config_path_env)

        if isinstance(config_path, str):
            config_path = Path(config_path)

        if config_path is None:
            config_path = find_toml_config_file()

        config_data: dict[str, Any] = {}
        if config_path and config_path.exists():
            config_data = cls.load_config_file(config_path)
            get_logger(__name__).debug(
                "config_file_loaded", path=str(config_path), category="config"
            )

        try:
            settings = cls()

            for key, value in config_data.items():
                if not hasattr(settings, key):
                    continue
                section = getattr(settings, key)
                if isinstance(section, BaseModel) and isinstance(value, dict):
                    for nested_key, nested_value in value.items():
                        if nested_key not in type(section).model_fields:
                            get_logger(__name__).warning(
                                "config_key_ignored",
                                key=f"{key}.{nested_key}",
                                category="config",
                            )
                            continue
                        env_key = f"{key.upper()}__{nested_key.upper()}"
                        if os.getenv(env_key) is None:
                            setattr(section, nested_key, nested_value)

            if kwargs:
                _apply_overrides(settings, kwargs)

            if cli_context:
                _apply_cli_context(settings, cli_context)
        except (ValidationError, ValueError) as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

        return settings


def _apply_overrides(target: Any, overrides: dict[str, Any]) -> None:
    for k, v in overrides.items():
        sub = getattr(target, k, None)
        if isinstance(v, dict) and isinstance(sub, BaseModel):
            _apply_overrides(sub, v)
        else:
            setattr(target, k, v)


def _apply_cli_context(settings: Settings, cli_context: dict[str, Any]) -> None:
    # Only override when a value was explicitly given on the command line
    section_keys = {
        "server": {"host": "host", "port": "port"},
        "logging": {"log_level": "level", "log_file": "file"},
        "backend": {"model": "model"},
    }
    overrides: dict[str, dict[str, Any]] = {}
    for section, mapping in section_keys.items():
        for cli_key, field in mapping.items():
            if cli_context.get(cli_key) is not None:
                overrides.setdefault(section, {})[field] = cli_context[cli_key]
    if overrides:
        _apply_overrides(settings, overrides)


@lru_cache
def get_settings() -> Settings:
    """Get the process-wide settings instance."""
    return Settings.from_config()
