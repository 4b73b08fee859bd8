"""
Docpress CLI - Command-line interface.

Run the server, trigger cleanup on a running server, and inspect settings.
"""

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from docpress.client import DEFAULT_BASE_URL, DocpressClient, ServerUnavailableError
from docpress.config import get_settings
from docpress.core.exceptions import ConfigurationError

app = typer.Typer(
    name="docpress",
    help="docpress - processed-file lifecycle server for document conversions",
    no_args_is_help=True,
)
console = Console()


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Bind address"),
    port: int = typer.Option(5000, "--port", "-p", help="Bind port"),
):
    """Run the API server."""
    import uvicorn

    from docpress.api.app import create_app

    try:
        settings = get_settings()
    except ConfigurationError as e:
        console.print(f"[red]Invalid configuration: {e}[/red]")
        raise typer.Exit(1)

    console.print(
        Panel.fit(
            f"[bold blue]docpress[/bold blue]\n"
            f"Listening on http://{host}:{port}\n"
            f"Output directory: {settings.output_dir}",
        )
    )
    uvicorn.run(create_app(settings), host=host, port=port)


@app.command()
def cleanup(
    url: str = typer.Option(DEFAULT_BASE_URL, "--url", "-u", help="Server base URL"),
):
    """Trigger a cleanup sweep on a running server."""
    with DocpressClient(url) as client:
        try:
            result = client.cleanup()
        except ServerUnavailableError as e:
            console.print(f"[red]{e.message}[/red]")
            raise typer.Exit(1)

    console.print(f"[green]Cleaned {result.cleaned} expired file(s)[/green]")


@app.command("config")
def show_config():
    """Show effective settings."""
    try:
        settings = get_settings()
    except ConfigurationError as e:
        console.print(f"[red]Invalid configuration: {e}[/red]")
        raise typer.Exit(1)

    table = Table(title="docpress Settings")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    for name, value in settings.model_dump().items():
        if isinstance(value, list):
            value = ", ".join(value)
        table.add_row(name, str(value))

    console.print(table)


@app.command()
def version():
    """Show docpress version."""
    from docpress import __version__

    console.print(f"docpress v{__version__}")


if __name__ == "__main__":
    app()
