"""Tests for OpenAI SSE framing."""

import json

import pytest

from gemproxy.services.openai_streaming import (
    SSE_HEADERS,
    OpenAIStreamingFormatter,
)


@pytest.mark.unit
class TestOpenAIStreamingFormatter:
    def test_format_data_event(self) -> None:
        data = {"type": "test", "message": "hello"}
        result = OpenAIStreamingFormatter.format_data_event(data)
        assert result == 'data: {"type":"test","message":"hello"}\n\n'

    def test_format_data_event_keeps_unicode(self) -> None:
        result = OpenAIStreamingFormatter.format_data_event({"text": "héllo ✓"})
        assert "héllo ✓" in result
        assert json.loads(result[len("data: ") :]) == {"text": "héllo ✓"}

    def test_format_error_event(self) -> None:
        result = OpenAIStreamingFormatter.format_error_event("boom")
        assert result == 'data: {"error":{"message":"boom"}}\n\n'

    def test_format_done(self) -> None:
        assert OpenAIStreamingFormatter.format_done() == "data: [DONE]\n\n"


@pytest.mark.unit
def test_sse_headers_disable_buffering() -> None:
    assert SSE_HEADERS["Cache-Control"] == "no-cache"
    assert SSE_HEADERS["Connection"] == "keep-alive"
