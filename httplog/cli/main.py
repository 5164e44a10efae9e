"""Typer CLI entry point for the httplog demo.

Provides:
- httplog serve --json --concise
- httplog version
"""

import os

from dotenv import load_dotenv

# Load .env file before options are read
load_dotenv()

import typer
import uvicorn
from rich.console import Console

from httplog import __version__
from httplog.config import get_options

cli = typer.Typer(
    name="httplog",
    help="Structured HTTP request logging demo server.",
    add_completion=False,
)

# Disable colors if NO_COLOR env var is set (standard convention)
console = Console(no_color=os.getenv("NO_COLOR") is not None)


@cli.command()
def serve(
    host: str = typer.Option(None, "--host", help="Bind address (default: HTTPLOG_HOST or 127.0.0.1)"),
    port: int = typer.Option(None, "--port", "-p", help="Bind port (default: HTTPLOG_PORT or 8000)"),
    json_format: bool = typer.Option(None, "--json/--console", help="Render records as JSON"),
    concise: bool = typer.Option(None, "--concise/--no-concise", help="Log entry lines and header/body detail"),
):
    """Run the demo application under uvicorn."""
    from httplog.demo import create_app

    overrides = {}
    if json_format is not None:
        overrides["json_format"] = json_format
    if concise is not None:
        overrides["concise"] = concise
    options = get_options().model_copy(update=overrides)

    host = host or os.getenv("HTTPLOG_HOST", "127.0.0.1")
    port = port or int(os.getenv("HTTPLOG_PORT", "8000"))

    console.print(f"[bold cyan]httplog demo[/bold cyan] on http://{host}:{port}")
    uvicorn.run(create_app(options), host=host, port=port, log_config=None)


@cli.command()
def version():
    """Show version information."""
    console.print(f"httplog v{__version__}")


if __name__ == "__main__":
    cli()
