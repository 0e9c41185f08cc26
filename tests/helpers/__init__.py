from .genai import (
    FakeContentGenerator,
    function_call_part,
    make_response,
    parse_sse,
    text_part,
    text_response,
)


__all__ = [
    "FakeContentGenerator",
    "function_call_part",
    "make_response",
    "parse_sse",
    "text_part",
    "text_response",
]
