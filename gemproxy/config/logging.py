"""Logging configuration settings."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class LoggingSettings(BaseModel):
    """Console summary and detailed file sink configuration."""

    model_config = ConfigDict(validate_assignment=True)

    level: str = Field(
        default="INFO",
        description="Console logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    file: str | None = Field(
        default="gemproxy-http.log",
        description="Append-only detailed log file. Relative paths resolve against the working directory; empty disables it",
    )

    console: bool = Field(
        default=True,
        description="Emit one-line summaries to stderr",
    )

    colors: bool | None = Field(
        default=None,
        description="Force colored console output (defaults to auto-detecting a TTY)",
    )

    @field_validator("level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log level."""
        upper_v = v.upper()
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if upper_v not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return upper_v

    @field_validator("file", mode="before")
    @classmethod
    def validate_file(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = str(v).strip()
        return v or None
