"""Server-Sent Events framing for OpenAI-compatible streams."""

import json
from typing import Any


SSE_MEDIA_TYPE = "text/event-stream"
SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


class OpenAIStreamingFormatter:
    """Formats chunks and terminators as OpenAI-style SSE events."""

    @staticmethod
    def format_data_event(data: Any) -> str:
        """
        Format a data event for OpenAI-compatible Server-Sent Events.

        Args:
            data: JSON-serializable event payload

        Returns:
            Formatted SSE string
        """
        json_data = json.dumps(data, separators=(",", ":"), ensure_ascii=False)
        return f"data: {json_data}\n\n"

    @staticmethod
    def format_error_event(message: str) -> str:
        """Best-effort in-stream error once headers are already sent."""
        return OpenAIStreamingFormatter.format_data_event(
            {"error": {"message": message}}
        )

    @staticmethod
    def format_done() -> str:
        """Format the terminating sentinel event."""
        return "data: [DONE]\n\n"
