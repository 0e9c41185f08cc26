"""OpenAI chat <-> google-genai content formatters."""

from .genai_to_openai import (
    ExtractedResponse,
    build__openai_chat__chunk,
    build__openai_chat__completion,
    extract__genai_response__parts,
    finish_reason_for,
    new_completion_id,
    new_tool_call_id,
)
from .openai_to_genai import (
    ConvertedMessages,
    convert__openai_chat_to_genai__messages,
    convert__openai_chat_to_genai__tools,
    extract_text_content,
)


__all__ = [
    "ConvertedMessages",
    "ExtractedResponse",
    "build__openai_chat__chunk",
    "build__openai_chat__completion",
    "convert__openai_chat_to_genai__messages",
    "convert__openai_chat_to_genai__tools",
    "extract__genai_response__parts",
    "extract_text_content",
    "finish_reason_for",
    "new_completion_id",
    "new_tool_call_id",
]
