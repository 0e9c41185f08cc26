"""Helpers shared by the request and response formatters."""

import json
from dataclasses import dataclass, field
from typing import Any


RAW_ARGUMENTS_KEY = "raw"


@dataclass(frozen=True)
class ToolArguments:
    """Tool-call arguments as either parsed JSON or a raw-string fallback.

    ``value`` is always a mapping the backend accepts: the decoded JSON object
    when ``structured`` is true, otherwise ``{"raw": <original string>}``.
    """

    raw: str
    structured: bool
    value: dict[str, Any] = field(default_factory=dict)


def parse_tool_arguments(arguments: str | dict[str, Any] | None) -> ToolArguments:
    """Leniently parse an opaque tool-call argument string; never raises.

    Anything that does not decode to a JSON object (invalid JSON, arrays,
    scalars, empty strings) degrades to the raw-string fallback.
    """
    if isinstance(arguments, dict):
        return ToolArguments(raw=json.dumps(arguments), structured=True, value=arguments)

    raw = "" if arguments is None else str(arguments)
    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError):
        parsed = None

    if isinstance(parsed, dict):
        return ToolArguments(raw=raw, structured=True, value=parsed)
    return ToolArguments(raw=raw, structured=False, value={RAW_ARGUMENTS_KEY: raw})
