"""Server configuration settings."""

from pydantic import BaseModel, ConfigDict, Field


class ServerSettings(BaseModel):
    """Server-specific configuration settings."""

    model_config = ConfigDict(validate_assignment=True)

    host: str = Field(
        default="127.0.0.1",
        description="Server host address",
    )

    port: int = Field(
        default=8000,
        description="Server port number",
        ge=1,
        le=65535,
    )

    install_signal_handlers: bool = Field(
        default=True,
        description="Take exclusive ownership of SIGINT/SIGTERM and exit immediately on them",
    )

    signal_reassert_interval: float = Field(
        default=5.0,
        description="Seconds between re-assertions of the shutdown signal handlers",
        gt=0,
    )

    stdin_interrupt: bool = Field(
        default=True,
        description="Watch a TTY stdin for the Ctrl+C byte as a shutdown trigger",
    )

    @property
    def display_address(self) -> str:
        """Address suitable for printing; wildcard binds show as localhost."""
        host = "localhost" if self.host in ("0.0.0.0", "::") else self.host
        return f"http://{host}:{self.port}"
