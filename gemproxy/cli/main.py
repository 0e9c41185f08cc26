"""Main entry point for the gemproxy command line."""

from pathlib import Path

import typer

from gemproxy._version import __version__
from gemproxy.cli.helpers import get_rich_toolkit

from .commands.serve import serve


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        toolkit = get_rich_toolkit()
        toolkit.print(f"gemproxy {__version__}", tag="version")
        raise typer.Exit()


app = typer.Typer(
    rich_markup_mode="rich",
    add_completion=False,
    no_args_is_help=True,
    pretty_exceptions_enable=False,
)


@app.callback()
def app_main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to a TOML configuration file",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
) -> None:
    """gemproxy - OpenAI-compatible chat completions over a generative-content backend."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config


app.command(name="serve")(serve)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
