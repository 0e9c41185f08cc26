"""Pydantic and TypedDict shapes for the OpenAI-compatible surface."""

from .openai import (
    ChatCompletion,
    ChatCompletionChunk,
    ChatCompletionRequest,
    OpenAIContentPart,
    OpenAIMessage,
    OpenAITool,
    OpenAIToolCall,
    ToolCallPayload,
)


__all__ = [
    "ChatCompletion",
    "ChatCompletionChunk",
    "ChatCompletionRequest",
    "OpenAIContentPart",
    "OpenAIMessage",
    "OpenAITool",
    "OpenAIToolCall",
    "ToolCallPayload",
]
