"""Content generator backed by the google-genai SDK."""

from collections.abc import AsyncIterator

from google import genai
from google.genai import types

from gemproxy.config.backend import BackendSettings
from gemproxy.core.interfaces import GenerationRequest, LlmRole
from gemproxy.core.logging import get_logger


logger = get_logger(__name__)


class GenAIContentGenerator:
    """Adapter exposing ``genai.Client`` through the ContentGenerator contract.

    The caller tag and role are recorded for tracing only; the SDK has no
    equivalent concept.
    """

    def __init__(self, client: genai.Client) -> None:
        self._client = client

    async def generate_content(
        self, request: GenerationRequest, caller_tag: str, role: LlmRole
    ) -> types.GenerateContentResponse:
        logger.debug(
            "backend_generate_content",
            model=request.model,
            caller_tag=caller_tag,
            role=role.value,
            turns=len(request.contents),
        )
        return await self._client.aio.models.generate_content(
            model=request.model,
            contents=request.contents,
            config=request.config,
        )

    async def generate_content_stream(
        self, request: GenerationRequest, caller_tag: str, role: LlmRole
    ) -> AsyncIterator[types.GenerateContentResponse]:
        logger.debug(
            "backend_generate_content_stream",
            model=request.model,
            caller_tag=caller_tag,
            role=role.value,
            turns=len(request.contents),
        )
        return await self._client.aio.models.generate_content_stream(
            model=request.model,
            contents=request.contents,
            config=request.config,
        )


def create_content_generator(settings: BackendSettings) -> GenAIContentGenerator | None:
    """Build the default generator, or None when no credentials are available."""
    api_key = settings.resolved_api_key()
    if not api_key:
        logger.warning(
            "content_generator_unavailable",
            reason="no API key configured",
            category="lifecycle",
        )
        return None
    return GenAIContentGenerator(genai.Client(api_key=api_key))
