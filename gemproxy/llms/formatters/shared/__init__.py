from .utils import ToolArguments, parse_tool_arguments


__all__ = ["ToolArguments", "parse_tool_arguments"]
