"""Tests for extracting backend events and building OpenAI envelopes."""

import json
import re

import pytest
from google.genai import types

from gemproxy.llms.formatters import (
    build__openai_chat__chunk,
    build__openai_chat__completion,
    extract__genai_response__parts,
    new_completion_id,
    new_tool_call_id,
)
from tests.helpers import function_call_part, make_response, text_part


TOOL_CALL_ID = re.compile(r"^call_[0-9a-f]{12}$")


@pytest.mark.unit
class TestExtractResponseParts:
    def test_text_parts_are_concatenated(self) -> None:
        extracted = extract__genai_response__parts(
            make_response(text_part("Hel"), text_part("lo"))
        )
        assert extracted.text == "Hello"
        assert extracted.tool_calls == []

    def test_function_calls_get_fresh_ids(self) -> None:
        extracted = extract__genai_response__parts(
            make_response(
                text_part("calling"),
                function_call_part("get_weather", {"city": "Oslo"}),
                function_call_part("get_time"),
            )
        )

        assert extracted.text == "calling"
        first, second = extracted.tool_calls
        assert TOOL_CALL_ID.match(first["id"])
        assert TOOL_CALL_ID.match(second["id"])
        assert first["id"] != second["id"]
        assert first["type"] == "function"
        assert first["function"]["name"] == "get_weather"
        assert json.loads(first["function"]["arguments"]) == {"city": "Oslo"}
        assert second["function"]["arguments"] == "{}"

    def test_multiple_candidates_in_order(self) -> None:
        response = types.GenerateContentResponse(
            candidates=[
                types.Candidate(content=types.Content(parts=[text_part("a")])),
                types.Candidate(content=None),
                types.Candidate(content=types.Content(parts=[text_part("b")])),
            ]
        )
        assert extract__genai_response__parts(response).text == "ab"

    def test_empty_response(self) -> None:
        extracted = extract__genai_response__parts(types.GenerateContentResponse())
        assert extracted.text == ""
        assert extracted.tool_calls == []


@pytest.mark.unit
class TestIds:
    def test_tool_call_id_format(self) -> None:
        ids = {new_tool_call_id() for _ in range(50)}
        assert len(ids) == 50
        assert all(TOOL_CALL_ID.match(i) for i in ids)

    def test_completion_id_format(self) -> None:
        assert re.match(r"^chatcmpl-[0-9a-f]{12}$", new_completion_id())


@pytest.mark.unit
class TestBuildCompletion:
    def test_text_completion(self) -> None:
        completion = build__openai_chat__completion(
            "gemini-2.5-pro", "hello", completion_id="chatcmpl-abc", created=123
        )

        assert completion == {
            "id": "chatcmpl-abc",
            "object": "chat.completion",
            "created": 123,
            "model": "gemini-2.5-pro",
            "choices": [
                {
                    "index": 0,
                    "message": {"role": "assistant", "content": "hello"},
                    "finish_reason": "stop",
                }
            ],
            "usage": {"prompt_tokens": 0, "completion_tokens": 0, "total_tokens": 0},
        }

    def test_tool_call_completion_has_null_content(self) -> None:
        tool_calls = extract__genai_response__parts(
            make_response(function_call_part("ping", {}))
        ).tool_calls

        completion = build__openai_chat__completion("m", "ignored", tool_calls)

        choice = completion["choices"][0]
        assert choice["finish_reason"] == "tool_calls"
        assert choice["message"]["content"] is None
        assert choice["message"]["tool_calls"] == tool_calls
        assert completion["id"].startswith("chatcmpl-")

    def test_empty_text_completion(self) -> None:
        completion = build__openai_chat__completion("m", "")
        assert completion["choices"][0]["message"] == {
            "role": "assistant",
            "content": "",
        }
        assert completion["choices"][0]["finish_reason"] == "stop"


@pytest.mark.unit
class TestBuildChunk:
    def test_delta_only_contains_given_fields(self) -> None:
        chunk = build__openai_chat__chunk("chatcmpl-1", "m", role="assistant", created=1)
        assert chunk == {
            "id": "chatcmpl-1",
            "object": "chat.completion.chunk",
            "created": 1,
            "model": "m",
            "choices": [
                {"index": 0, "delta": {"role": "assistant"}, "finish_reason": None}
            ],
        }

    def test_closing_chunk(self) -> None:
        chunk = build__openai_chat__chunk("chatcmpl-1", "m", finish_reason="stop")
        assert chunk["choices"][0]["delta"] == {}
        assert chunk["choices"][0]["finish_reason"] == "stop"

    def test_content_chunk(self) -> None:
        chunk = build__openai_chat__chunk("chatcmpl-1", "m", content="hi")
        assert chunk["choices"][0]["delta"] == {"content": "hi"}
