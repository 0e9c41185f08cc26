"""Upstream content-generation backend settings."""

import os

from pydantic import BaseModel, ConfigDict, Field, SecretStr


API_KEY_ENV_VARS = ("GEMINI_API_KEY", "GOOGLE_API_KEY")


class BackendSettings(BaseModel):
    """Settings for the already-authenticated generation backend."""

    model_config = ConfigDict(validate_assignment=True)

    model: str = Field(
        default="auto",
        description="Backend model name or alias; client-supplied model names are only logged",
    )

    api_key: SecretStr | None = Field(
        default=None,
        description="API key for the backend. Falls back to GEMINI_API_KEY / GOOGLE_API_KEY",
    )

    caller_tag: str = Field(
        default="http-server",
        description="Caller tag passed along with every generation call",
    )

    def resolved_api_key(self) -> str | None:
        if self.api_key is not None and self.api_key.get_secret_value():
            return self.api_key.get_secret_value()
        for name in API_KEY_ENV_VARS:
            value = os.environ.get(name)
            if value:
                return value
        return None
