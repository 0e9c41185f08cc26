"""OpenAI-compatible chat completion shapes.

Inbound requests are pydantic models so that an invalid role or a missing
``messages`` array is rejected while parsing. Outbound envelopes are plain
TypedDicts: they are assembled once by the response builders and serialized
immediately.
"""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from typing_extensions import NotRequired, TypedDict


OpenAIMessageRole = Literal["system", "user", "assistant", "tool"]
FinishReason = Literal["stop", "tool_calls"]


# Inbound request models
class OpenAIContentPart(BaseModel):
    """One typed content part; only ``text`` parts carry meaning here."""

    type: str = Field(..., description="Content part type")
    text: str | None = Field(None, description="Text for text parts")

    model_config = ConfigDict(extra="allow")


class OpenAIFunctionCall(BaseModel):
    """Function invocation carried by an assistant message."""

    name: str = Field(..., description="The name of the function")
    arguments: str | dict[str, Any] = Field(
        "",
        description="Arguments as a JSON string (not guaranteed to be valid JSON); some clients send an object",
    )

    model_config = ConfigDict(extra="allow")


class OpenAIToolCall(BaseModel):
    """Tool invocation made by the assistant in an earlier turn."""

    id: str = Field(..., description="Invocation id, referenced by tool messages")
    type: str = Field("function", description="Tool call type")
    function: OpenAIFunctionCall

    model_config = ConfigDict(extra="allow")


class OpenAIMessage(BaseModel):
    """OpenAI-compatible conversation message."""

    role: Annotated[
        OpenAIMessageRole, Field(description="The role of the message sender")
    ]
    content: Annotated[
        str | list[OpenAIContentPart] | None,
        Field(description="Plain text or an ordered list of typed parts"),
    ] = None
    name: Annotated[
        str | None, Field(description="Function name for tool messages (optional)")
    ] = None
    tool_calls: Annotated[
        list[OpenAIToolCall] | None,
        Field(description="Tool calls made by the assistant"),
    ] = None
    tool_call_id: str | None = Field(
        None,
        description="Tool call this message is responding to (only for tool messages)",
    )

    model_config = ConfigDict(extra="allow")


class OpenAIFunctionDefinition(BaseModel):
    """Function declaration offered to the model."""

    name: str = Field(..., description="The name of the function")
    description: str | None = Field(
        None, description="A description of what the function does"
    )
    parameters: dict[str, Any] | None = Field(
        None, description="JSON Schema for the arguments, passed through verbatim"
    )

    model_config = ConfigDict(extra="allow")


class OpenAITool(BaseModel):
    """OpenAI tool definition; non-function tool types are tolerated and skipped."""

    type: str = Field("function", description="The type of tool")
    function: OpenAIFunctionDefinition | None = None

    model_config = ConfigDict(extra="allow")


class ChatCompletionRequest(BaseModel):
    """Fields of an OpenAI chat completion request that the proxy consumes."""

    model: str | None = Field(
        None, description="Client-requested model; logged only"
    )
    messages: list[OpenAIMessage] = Field(
        ..., description="A list of messages comprising the conversation so far"
    )
    tools: list[OpenAITool] | None = Field(
        None, description="A list of tools the model may call"
    )
    stream: bool | None = Field(
        False, description="Whether to stream back partial progress"
    )
    temperature: float | None = Field(None, description="Sampling temperature")
    max_tokens: int | None = Field(
        None, description="The maximum number of tokens to generate"
    )
    top_p: float | None = Field(None, description="Nucleus sampling parameter")

    model_config = ConfigDict(extra="allow")

    @property
    def tool_names(self) -> list[str]:
        return [t.function.name for t in self.tools or [] if t.function is not None]


# Outbound response envelopes
class FunctionPayload(TypedDict):
    name: str
    arguments: str


class ToolCallPayload(TypedDict):
    """Outbound tool call; ``id`` is always freshly synthesized."""

    id: str
    type: Literal["function"]
    function: FunctionPayload


class CompletionMessage(TypedDict):
    role: Literal["assistant"]
    content: str | None
    tool_calls: NotRequired[list[ToolCallPayload]]


class CompletionChoice(TypedDict):
    index: int
    message: CompletionMessage
    finish_reason: FinishReason


class Usage(TypedDict):
    prompt_tokens: int
    completion_tokens: int
    total_tokens: int


class ChatCompletion(TypedDict):
    id: str
    object: Literal["chat.completion"]
    created: int
    model: str
    choices: list[CompletionChoice]
    usage: Usage


class ChunkDelta(TypedDict, total=False):
    role: str
    content: str | None
    tool_calls: list[ToolCallPayload]


class ChunkChoice(TypedDict):
    index: int
    delta: ChunkDelta
    finish_reason: FinishReason | None


class ChatCompletionChunk(TypedDict):
    id: str
    object: Literal["chat.completion.chunk"]
    created: int
    model: str
    choices: list[ChunkChoice]


class ErrorDetail(TypedDict):
    message: str


class ErrorBody(TypedDict):
    error: ErrorDetail
