"""Command line: run the server, or publish/unpublish once."""
import logging
from typing import Annotated

import typer

from dimagram.config import API_HOST, API_PORT
from dimagram.core.errors import DimagramError
from dimagram.core.publisher import PublishReport

app = typer.Typer(
    name="dimagram",
    help="Dimagram backend: album queue, daily publish, media upload.",
    no_args_is_help=True,
)


@app.callback()
def main() -> None:
    """Dimagram backend tool."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(name)s: %(message)s")


def _report(verb: str, report: PublishReport) -> None:
    typer.echo(f"Successfully {verb} {report.item.id} ({report.item.url})")
    if report.pointer is not None:
        typer.echo(f"Live item: {report.pointer.id}")
    for warning in report.warnings:
        typer.echo(f"Warning: {warning.describe()}", err=True)


@app.command()
def server(
    host: Annotated[str, typer.Option(help="Interface to bind.")] = API_HOST,
    port: Annotated[int, typer.Option("--port", "-p", help="Port to run the server on.")] = API_PORT,
    reload: Annotated[bool, typer.Option(help="Reload on code changes.")] = False,
) -> None:
    """Start the web server."""
    import uvicorn

    uvicorn.run("dimagram.api.app:app", host=host, port=port, reload=reload)


@app.command()
def publish() -> None:
    """Publish the first album item as today's item and archive it."""
    from dimagram.api.state import get_state

    try:
        report = get_state().publisher.publish()
    except DimagramError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    _report("published", report)


@app.command()
def unpublish() -> None:
    """Move the most recently published item back to the album front."""
    from dimagram.api.state import get_state

    try:
        report = get_state().publisher.unpublish()
    except DimagramError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    _report("unpublished", report)
