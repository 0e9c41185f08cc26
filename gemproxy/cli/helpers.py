"""CLI helper utilities for gemproxy."""

from rich_toolkit import RichToolkit, RichToolkitTheme
from rich_toolkit.styles import TaggedStyle


def get_rich_toolkit() -> RichToolkit:
    theme = RichToolkitTheme(
        style=TaggedStyle(tag_width=11),
        theme={
            "tag.title": "white on #1a73e8",
            "tag": "white on #185abc",
            "placeholder": "grey85",
            "text": "white",
            "selected": "#185abc",
            "result": "grey85",
            "progress": "on #185abc",
            "error": "bold red",
            "success": "bold green",
            "warning": "bold yellow",
            "info": "blue",
            "version": "cyan",
            "config": "cyan",
            "server": "green",
            "model": "magenta",
        },
    )

    return RichToolkit(theme=theme)


def bold(text: str) -> str:
    return f"[bold]{text}[/bold]"


def code(text: str) -> str:
    return f"[cyan]{text}[/cyan]"
