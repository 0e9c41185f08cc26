"""google-genai generation events -> OpenAI chat completion envelopes."""

import json
import time
import uuid
from dataclasses import dataclass, field
from typing import Any

from google.genai import types

from gemproxy.models.openai import (
    ChatCompletion,
    ChatCompletionChunk,
    ChunkDelta,
    CompletionMessage,
    FinishReason,
    ToolCallPayload,
)


TOOL_CALL_ID_PREFIX = "call_"
COMPLETION_ID_PREFIX = "chatcmpl-"
UNKNOWN_FUNCTION_NAME = "unknown"


def _short_hex(length: int = 12) -> str:
    return uuid.uuid4().hex[:length]


def new_tool_call_id() -> str:
    """Fresh caller-visible tool call id (``call_`` + 12 lowercase hex chars).

    Uniqueness is probabilistic: ids come from a process-wide random source.
    """
    return f"{TOOL_CALL_ID_PREFIX}{_short_hex()}"


def new_completion_id() -> str:
    return f"{COMPLETION_ID_PREFIX}{_short_hex()}"


@dataclass
class ExtractedResponse:
    """Text and tool calls found in one generation event."""

    text: str = ""
    tool_calls: list[ToolCallPayload] = field(default_factory=list)


def _tool_call_from_function_call(call: types.FunctionCall) -> ToolCallPayload:
    return {
        "id": new_tool_call_id(),
        "type": "function",
        "function": {
            "name": call.name or UNKNOWN_FUNCTION_NAME,
            "arguments": json.dumps(call.args or {}),
        },
    }


def extract__genai_response__parts(
    response: types.GenerateContentResponse,
) -> ExtractedResponse:
    """Split one generation event into concatenated text and tool calls.

    Parts are visited in order across all candidates; every function-call part
    gets a newly generated id.
    """
    extracted = ExtractedResponse()
    text_fragments: list[str] = []

    for candidate in response.candidates or []:
        content = candidate.content
        if content is None:
            continue
        for part in content.parts or []:
            if part.text:
                text_fragments.append(part.text)
            if part.function_call is not None:
                extracted.tool_calls.append(
                    _tool_call_from_function_call(part.function_call)
                )

    extracted.text = "".join(text_fragments)
    return extracted


def finish_reason_for(tool_calls: list[ToolCallPayload]) -> FinishReason:
    return "tool_calls" if tool_calls else "stop"


def build__openai_chat__completion(
    model: str,
    text: str,
    tool_calls: list[ToolCallPayload] | None = None,
    completion_id: str | None = None,
    created: int | None = None,
) -> ChatCompletion:
    """Assemble a non-streaming completion.

    With tool calls the message content is null and the finish reason is
    ``tool_calls``; otherwise it carries ``text`` and finishes with ``stop``.
    Usage is always zeroed.
    """
    message: CompletionMessage
    if tool_calls:
        message = {"role": "assistant", "content": None, "tool_calls": tool_calls}
    else:
        message = {"role": "assistant", "content": text}

    return {
        "id": completion_id or new_completion_id(),
        "object": "chat.completion",
        "created": created if created is not None else int(time.time()),
        "model": model,
        "choices": [
            {
                "index": 0,
                "message": message,
                "finish_reason": finish_reason_for(tool_calls or []),
            }
        ],
        "usage": {"prompt_tokens": 0, "completion_tokens": 0, "total_tokens": 0},
    }


_UNSET: Any = object()


def build__openai_chat__chunk(
    chunk_id: str,
    model: str,
    *,
    role: str = _UNSET,
    content: str | None = _UNSET,
    tool_calls: list[ToolCallPayload] = _UNSET,
    finish_reason: FinishReason | None = None,
    created: int | None = None,
) -> ChatCompletionChunk:
    """Assemble one streaming chunk; the delta only holds the fields passed."""
    delta: ChunkDelta = {}
    if role is not _UNSET:
        delta["role"] = role
    if content is not _UNSET:
        delta["content"] = content
    if tool_calls is not _UNSET:
        delta["tool_calls"] = tool_calls

    return {
        "id": chunk_id,
        "object": "chat.completion.chunk",
        "created": created if created is not None else int(time.time()),
        "model": model,
        "choices": [{"index": 0, "delta": delta, "finish_reason": finish_reason}],
    }
