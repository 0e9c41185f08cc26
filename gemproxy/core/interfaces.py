"""Contracts for the upstream content-generation collaborator.

The backend is already authenticated and owns transport and model invocation;
the proxy only needs a single-shot call and a streaming call, both keyed by
(request payload, caller tag, role tag).
"""

from collections.abc import AsyncIterator, Callable
from enum import Enum
from typing import Protocol, runtime_checkable

from google.genai import types
from pydantic import BaseModel, ConfigDict, Field


__all__ = [
    "ContentGenerator",
    "GenerationRequest",
    "LlmRole",
    "ModelResolver",
]


class LlmRole(str, Enum):
    """Role tag describing why the backend is being called."""

    MAIN = "main"


class GenerationRequest(BaseModel):
    """Payload handed to the backend for one generation."""

    model: str = Field(..., description="Resolved backend model name")
    contents: list[types.Content] = Field(
        default_factory=list, description="Ordered backend turns"
    )
    config: types.GenerateContentConfig = Field(
        default_factory=types.GenerateContentConfig,
        description="System instruction, tools and sampling parameters",
    )

    model_config = ConfigDict(arbitrary_types_allowed=True)


@runtime_checkable
class ContentGenerator(Protocol):
    """Backend capable of single-shot and streamed generation."""

    async def generate_content(
        self, request: GenerationRequest, caller_tag: str, role: LlmRole
    ) -> types.GenerateContentResponse:
        """Produce one aggregate generation event."""
        ...

    async def generate_content_stream(
        self, request: GenerationRequest, caller_tag: str, role: LlmRole
    ) -> AsyncIterator[types.GenerateContentResponse]:
        """Start a generation and return its lazy, finite event sequence."""
        ...


ModelResolver = Callable[[str], str]
