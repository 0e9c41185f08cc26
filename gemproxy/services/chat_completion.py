"""Chat completion orchestration.

A request moves through parsing, conversion and dispatch (``prepare``), then
either a single-shot emit (``complete``) or a streamed emit (``stream``).
Nothing is retried: a failure after streaming has started cannot be replayed,
so it is reported in-band and the stream is still terminated with the
``[DONE]`` sentinel.
"""

import asyncio
import json
import time
import uuid
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from typing import Any

from google.genai import types
from pydantic import ValidationError

from gemproxy.core.errors import (
    BackendUnavailableError,
    GenerationError,
    InvalidRequestError,
)
from gemproxy.core.interfaces import (
    ContentGenerator,
    GenerationRequest,
    LlmRole,
    ModelResolver,
)
from gemproxy.core.logging import get_logger
from gemproxy.llms.formatters import (
    build__openai_chat__chunk,
    build__openai_chat__completion,
    convert__openai_chat_to_genai__messages,
    convert__openai_chat_to_genai__tools,
    extract__genai_response__parts,
    finish_reason_for,
    new_completion_id,
)
from gemproxy.models.openai import (
    ChatCompletion,
    ChatCompletionRequest,
    ToolCallPayload,
)
from gemproxy.services.model_alias import resolve_model
from gemproxy.services.openai_streaming import OpenAIStreamingFormatter


logger = get_logger(__name__)

DEFAULT_CALLER_TAG = "http-server"
UNKNOWN_ERROR_MESSAGE = "Unknown error occurred"


def new_request_id() -> str:
    return uuid.uuid4().hex[:8]


@dataclass
class RequestContext:
    """Per-request correlation data."""

    request_id: str = field(default_factory=new_request_id)
    client_ip: str = "unknown"
    started_at: float = field(default_factory=time.perf_counter)

    @property
    def elapsed_ms(self) -> int:
        return int((time.perf_counter() - self.started_at) * 1000)


@dataclass
class PreparedCompletion:
    """A parsed, converted request that is ready to be dispatched."""

    context: RequestContext
    request: ChatCompletionRequest
    generation: GenerationRequest

    @property
    def model(self) -> str:
        return self.generation.model

    @property
    def stream(self) -> bool:
        return bool(self.request.stream)


def _error_message(exc: BaseException) -> str:
    return str(exc) or UNKNOWN_ERROR_MESSAGE


class ChatCompletionService:
    """Drives one chat completion per call; holds no per-request state."""

    def __init__(
        self,
        content_generator: ContentGenerator | None,
        *,
        model: str = "auto",
        caller_tag: str = DEFAULT_CALLER_TAG,
        model_resolver: ModelResolver = resolve_model,
    ) -> None:
        self.content_generator = content_generator
        self.model = model
        self.caller_tag = caller_tag
        self.model_resolver = model_resolver

    def parse_request(self, body: bytes | str, context: RequestContext) -> ChatCompletionRequest:
        """Parse the raw body; malformed JSON or schema errors raise 400."""
        log = logger.bind(request_id=context.request_id)
        try:
            data = json.loads(body)
        except (ValueError, RecursionError) as e:
            log.warning(
                "request_rejected",
                client_ip=context.client_ip,
                reason="Invalid JSON body",
                elapsed_ms=context.elapsed_ms,
                detail={"error": str(e)},
            )
            raise InvalidRequestError("Invalid JSON body") from e

        try:
            return ChatCompletionRequest.model_validate(data)
        except ValidationError as e:
            log.warning(
                "request_rejected",
                client_ip=context.client_ip,
                reason="Invalid request body",
                elapsed_ms=context.elapsed_ms,
                detail={"errors": e.errors(include_url=False)},
            )
            raise InvalidRequestError(
                f"Invalid request body: {e.error_count()} validation error(s)",
                details={"errors": e.errors(include_url=False)},
            ) from e

    def build_generation_request(self, request: ChatCompletionRequest, model: str) -> GenerationRequest:
        converted = convert__openai_chat_to_genai__messages(request.messages)
        tools = convert__openai_chat_to_genai__tools(request.tools)

        config = types.GenerateContentConfig(
            system_instruction=(
                types.Content(parts=[types.Part(text=converted.system_instruction)])
                if converted.system_instruction
                else None
            ),
            tools=tools or None,
            temperature=request.temperature,
            max_output_tokens=request.max_tokens,
            top_p=request.top_p,
        )
        return GenerationRequest(model=model, contents=converted.contents, config=config)

    def prepare(self, body: bytes | str, context: RequestContext) -> PreparedCompletion:
        """Parse, convert and check that the backend can be dispatched to."""
        log = logger.bind(request_id=context.request_id)
        request = self.parse_request(body, context)

        model = self.model_resolver(self.model)
        log.info("model_resolved", raw_model=self.model, resolved_model=model)

        log.info(
            "request_received",
            client_ip=context.client_ip,
            mode="stream" if request.stream else "non-stream",
            msgs=len(request.messages),
            tools=len(request.tools or []),
            detail={
                "model": request.model,
                "stream": bool(request.stream),
                "tool_names": request.tool_names or None,
                "messages": [m.model_dump(exclude_none=True) for m in request.messages],
                "tools": [t.model_dump(exclude_none=True) for t in request.tools or []]
                or None,
                "temperature": request.temperature,
                "max_tokens": request.max_tokens,
                "top_p": request.top_p,
            },
        )

        generation = self.build_generation_request(request, model)

        if self.content_generator is None:
            error = BackendUnavailableError()
            log.error(
                "request_failed",
                error=error.message,
                elapsed_ms=context.elapsed_ms,
            )
            raise error

        return PreparedCompletion(context=context, request=request, generation=generation)

    def _log_completed(
        self,
        prepared: PreparedCompletion,
        text: str,
        tool_calls: list[ToolCallPayload],
    ) -> None:
        finish_reason = finish_reason_for(tool_calls)
        logger.info(
            "request_completed",
            request_id=prepared.context.request_id,
            elapsed_ms=prepared.context.elapsed_ms,
            finish_reason=finish_reason,
            text_chars=len(text),
            tool_calls=len(tool_calls),
            detail={
                "stream": prepared.stream,
                "text": text or None,
                "tool_calls": tool_calls or None,
            },
        )

    def _log_failed(self, prepared: PreparedCompletion, exc: BaseException) -> None:
        logger.error(
            "request_failed",
            request_id=prepared.context.request_id,
            elapsed_ms=prepared.context.elapsed_ms,
            error=_error_message(exc),
            stream=prepared.stream,
            exc_info=exc,
        )

    async def complete(self, prepared: PreparedCompletion) -> ChatCompletion:
        """Await one aggregate generation event and build the completion."""
        generator = self.content_generator
        if generator is None:
            raise BackendUnavailableError()

        try:
            response = await generator.generate_content(
                prepared.generation, self.caller_tag, LlmRole.MAIN
            )
            extracted = extract__genai_response__parts(response)
        except Exception as e:
            self._log_failed(prepared, e)
            raise GenerationError(_error_message(e)) from e

        completion = build__openai_chat__completion(
            prepared.model, extracted.text, extracted.tool_calls
        )
        self._log_completed(prepared, extracted.text, extracted.tool_calls)
        return completion

    async def stream(self, prepared: PreparedCompletion) -> AsyncIterator[str]:
        """Yield SSE events: role chunk, content chunks, closing chunk, sentinel.

        Tool calls are accumulated across the whole generation and reported
        once in the closing chunk.
        """
        formatter = OpenAIStreamingFormatter
        chunk_id = new_completion_id()
        model = prepared.model

        def emit(**delta: Any) -> str:
            return formatter.format_data_event(
                build__openai_chat__chunk(chunk_id, model, **delta)
            )

        yield emit(role="assistant")

        text_fragments: list[str] = []
        collected_tool_calls: list[ToolCallPayload] = []
        try:
            generator = self.content_generator
            if generator is None:
                raise BackendUnavailableError()

            events = await generator.generate_content_stream(
                prepared.generation, self.caller_tag, LlmRole.MAIN
            )
            async for event in events:
                extracted = extract__genai_response__parts(event)
                if extracted.text:
                    text_fragments.append(extracted.text)
                    yield emit(content=extracted.text)
                collected_tool_calls.extend(extracted.tool_calls)

            if collected_tool_calls:
                yield emit(tool_calls=collected_tool_calls, finish_reason="tool_calls")
            else:
                yield emit(finish_reason="stop")
        except asyncio.CancelledError:
            logger.info(
                "stream_cancelled",
                request_id=prepared.context.request_id,
                elapsed_ms=prepared.context.elapsed_ms,
            )
            raise
        except Exception as e:
            self._log_failed(prepared, e)
            yield formatter.format_error_event(_error_message(e))
        else:
            self._log_completed(prepared, "".join(text_fragments), collected_tool_calls)

        yield formatter.format_done()
