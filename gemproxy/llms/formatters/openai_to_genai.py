"""OpenAI chat request -> google-genai contents and tools."""

from collections.abc import Sequence
from dataclasses import dataclass, field

from google.genai import types

from gemproxy.llms.formatters.shared.utils import parse_tool_arguments
from gemproxy.models.openai import OpenAIContentPart, OpenAIMessage, OpenAITool


UNKNOWN_FUNCTION_NAME = "unknown"
SYSTEM_INSTRUCTION_SEPARATOR = "\n\n"


@dataclass
class ConvertedMessages:
    """Backend view of an OpenAI conversation."""

    system_instruction: str | None = None
    contents: list[types.Content] = field(default_factory=list)


def extract_text_content(content: str | list[OpenAIContentPart] | None) -> str:
    """Plain text of a message; text parts are joined by newlines, others ignored."""
    if not content:
        return ""
    if isinstance(content, str):
        return content
    return "\n".join(part.text for part in content if part.type == "text" and part.text)


def _collect_tool_call_names(messages: Sequence[OpenAIMessage]) -> dict[str, str]:
    names: dict[str, str] = {}
    for msg in messages:
        if msg.role == "assistant" and msg.tool_calls:
            for call in msg.tool_calls:
                names[call.id] = call.function.name
    return names


def _assistant_parts(msg: OpenAIMessage) -> list[types.Part]:
    parts: list[types.Part] = []

    text = extract_text_content(msg.content)
    if text:
        parts.append(types.Part(text=text))

    for call in msg.tool_calls or []:
        arguments = parse_tool_arguments(call.function.arguments)
        parts.append(
            types.Part(
                function_call=types.FunctionCall(
                    name=call.function.name, args=arguments.value
                )
            )
        )

    return parts


def convert__openai_chat_to_genai__messages(
    messages: Sequence[OpenAIMessage],
) -> ConvertedMessages:
    """Convert OpenAI messages to a system instruction plus backend turns.

    System messages accumulate into one instruction. Consecutive tool results
    are buffered and flushed as a single user turn of function responses right
    before the next non-tool message, and at the end. Assistant messages with
    neither text nor tool calls produce no turn. Never raises.
    """
    result = ConvertedMessages()
    tool_call_names = _collect_tool_call_names(messages)
    pending_tool_responses: list[types.Part] = []

    def flush_tool_responses() -> None:
        if pending_tool_responses:
            result.contents.append(
                types.Content(role="user", parts=list(pending_tool_responses))
            )
            pending_tool_responses.clear()

    for msg in messages:
        if msg.role == "tool":
            func_name = (
                msg.name
                or (tool_call_names.get(msg.tool_call_id) if msg.tool_call_id else None)
                or UNKNOWN_FUNCTION_NAME
            )
            pending_tool_responses.append(
                types.Part(
                    function_response=types.FunctionResponse(
                        name=func_name,
                        response={"content": extract_text_content(msg.content)},
                    )
                )
            )
            continue

        flush_tool_responses()

        if msg.role == "system":
            text = extract_text_content(msg.content)
            if result.system_instruction:
                result.system_instruction = (
                    f"{result.system_instruction}{SYSTEM_INSTRUCTION_SEPARATOR}{text}"
                )
            else:
                result.system_instruction = text
        elif msg.role == "user":
            result.contents.append(
                types.Content(
                    role="user",
                    parts=[types.Part(text=extract_text_content(msg.content))],
                )
            )
        elif msg.role == "assistant":
            parts = _assistant_parts(msg)
            if parts:
                result.contents.append(types.Content(role="model", parts=parts))

    flush_tool_responses()
    return result


def convert__openai_chat_to_genai__tools(
    tools: Sequence[OpenAITool] | None,
) -> list[types.Tool]:
    """Map function-type tool declarations to one backend Tool.

    Parameter schemas are forwarded verbatim without validation. Returns an
    empty list when no function tools remain.
    """
    declarations = [
        types.FunctionDeclaration(
            name=tool.function.name,
            description=tool.function.description,
            parameters_json_schema=tool.function.parameters,
        )
        for tool in tools or []
        if tool.type == "function" and tool.function is not None
    ]

    if not declarations:
        return []
    return [types.Tool(function_declarations=declarations)]
