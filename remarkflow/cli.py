import json
import logging
import sys
from pathlib import Path
from typing import Optional

import typer
from decouple import config as env_config
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from . import __version__
from .markup import find_interactions
from .models import ErrorResult
from .parsing import InteractionParser

app = typer.Typer(help="remarkflow: interaction blocks for markdown flow documents")

logger = logging.getLogger(__name__)

LOG_LEVEL = env_config("REMARKFLOW_LOG_LEVEL", default="WARNING", cast=str)


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        typer.echo(__version__)
        raise typer.Exit()


def _configure_logging(verbose: bool):
    logging.basicConfig(
        level=LOG_LEVEL.upper(),
        format="%(levelname)s %(name)s: %(message)s",
    )
    if verbose:
        logging.getLogger("remarkflow").setLevel(logging.DEBUG)


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    )
):
    """remarkflow: interaction blocks for markdown flow documents"""
    pass


@app.command()
def parse(
    block: str = typer.Argument(..., help="Interaction block, e.g. '?[Yes | No]'"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    """
    Parse one interaction block and print the typed result as JSON.

    Exits with status 1 when the block is malformed.
    """
    _configure_logging(verbose)
    result = InteractionParser().parse(block)

    if isinstance(result, ErrorResult):
        Console(stderr=True).print(f"[red]✗ {escape(result.message)}[/red]")
        raise typer.Exit(1)

    typer.echo(result.model_dump_json(indent=2))


@app.command()
def display(
    block: str = typer.Argument(..., help="Interaction block, e.g. '?[%{{name}}...Your name]'"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    """
    Print the display properties for one interaction block as JSON.

    Malformed blocks fall back to a placeholder holding the raw text.
    """
    _configure_logging(verbose)
    properties = InteractionParser().parse_for_display(block)
    typer.echo(json.dumps(properties.as_properties(), indent=2, ensure_ascii=False))


@app.command()
def scan(
    source: str = typer.Argument(..., help="Markdown file to scan, or - for stdin"),
    as_json: bool = typer.Option(False, "--json", help="Print elements as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    """
    List every interaction block in a markdown document.

    Examples:
        remarkflow scan lesson.md
        cat lesson.md | remarkflow scan - --json
    """
    _configure_logging(verbose)
    console = Console()

    if source == "-":
        text = sys.stdin.read()
    else:
        path = Path(source)
        if not path.exists():
            console.print(f"[red]Error: {escape(str(path))} not found[/red]")
            raise typer.Exit(1)
        text = path.read_text(encoding="utf-8")

    nodes = find_interactions(text)
    logger.debug(f"Found {len(nodes)} interaction blocks in {source}")

    if as_json:
        typer.echo(
            json.dumps([n.as_element() for n in nodes], indent=2, ensure_ascii=False)
        )
        return

    if not nodes:
        console.print("[yellow]No interaction blocks found[/yellow]")
        return

    table = Table(title=f"Interaction blocks in {escape(source)}")
    table.add_column("Line", justify="right", style="cyan")
    table.add_column("Variable", style="green")
    table.add_column("Buttons")
    table.add_column("Values")
    table.add_column("Placeholder", style="magenta")

    for node in nodes:
        props = node.properties
        # block text may contain [brackets], keep rich from reading them as markup
        table.add_row(
            str(text.count("\n", 0, node.start) + 1),
            Text(props.variable_name or ""),
            Text(" | ".join(props.button_texts or ())),
            Text(" | ".join(props.button_values or ())),
            Text(props.placeholder if props.placeholder is not None else ""),
        )
    console.print(table)


if __name__ == "__main__":
    app()
