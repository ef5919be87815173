"""CLI interface for schemaparse using Typer framework."""

import importlib
import json as jsonlib
import logging
import sys
from pathlib import Path
from typing import Annotated, Any, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from schemaparse import __description__, __version__
from schemaparse.compiler import compile_schema
from schemaparse.config import LogLevel, load_config, resolve_options
from schemaparse.constants import LOGGER_NAME, MISSING
from schemaparse.errors import SchemaParseError
from schemaparse.leaves import LEAVES

app = typer.Typer(
    name="schemaparse",
    help=__description__,
    add_completion=False,
    rich_markup_mode="rich"
)

console = Console()

_LOG_LEVELS = {
    LogLevel.ERROR: logging.ERROR,
    LogLevel.WARN: logging.WARNING,
    LogLevel.INFO: logging.INFO,
    LogLevel.DEBUG: logging.DEBUG,
}


def version_callback(value: bool) -> None:
    """Show version information and exit."""
    if value:
        console.print(f"schemaparse version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option("--version", "-v", callback=version_callback, help="Show version and exit")
    ] = False,
) -> None:
    """schemaparse - Schema-driven value parsing and validation."""


def _configure_logging(level: LogLevel | str) -> None:
    """Route schemaparse log records through rich at the requested level."""
    package_logger = logging.getLogger(LOGGER_NAME)
    package_logger.setLevel(_LOG_LEVELS[LogLevel(level)])
    if not any(isinstance(h, RichHandler) for h in package_logger.handlers):
        package_logger.addHandler(RichHandler(console=Console(stderr=True), show_path=False))


def _load_schema(target: str) -> Any:
    """Resolve a ``package.module:attribute`` reference to a schema descriptor.

    Raises:
        ImportError: If the module cannot be imported or the attribute is missing
        ValueError: If the reference is malformed
    """
    module_name, sep, attribute = target.partition(":")
    if not sep or not module_name or not attribute:
        raise ValueError(f"schema must be given as module:attribute, got '{target}'")

    module = importlib.import_module(module_name)
    obj: Any = module
    for part in attribute.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as e:
            raise ImportError(f"'{module_name}' has no attribute '{attribute}'") from e
    return obj


def _read_input(input_path: str) -> Any:
    """Read a JSON document from a file or from stdin when the path is '-'."""
    if input_path == "-":
        return jsonlib.loads(sys.stdin.read())

    path = Path(input_path)
    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {path}")
    with open(path, encoding="utf-8") as f:
        return jsonlib.load(f)


@app.command()
def check(
    schema: Annotated[str, typer.Argument(help="Schema descriptor or parser as module:attribute")],
    input_path: Annotated[str, typer.Argument(metavar="INPUT", help="JSON file to parse, or - for stdin")],
    required: Annotated[
        Optional[bool],
        typer.Option("--required/--optional", help="Fail when the input is missing (overrides config)")
    ] = None,
    default: Annotated[
        Optional[str],
        typer.Option("--default", help="Raw default value as JSON (overrides config)")
    ] = None,
    config_path: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Path to .schemaparse.json")
    ] = None,
    log_level: Annotated[
        Optional[LogLevel],
        typer.Option("--log-level", help="Logging level (overrides config)")
    ] = None,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Only report success or failure")
    ] = False,
) -> None:
    """Parse a JSON document with a schema and print the canonical result."""
    try:
        config = load_config(config_path)
        _configure_logging(log_level or config.logging.level)

        overrides: dict[str, Any] = {}
        if required is not None:
            overrides["required"] = required
        if default is not None:
            overrides["default"] = jsonlib.loads(default)
        options = resolve_options(config.options, **overrides)

        parser = compile_schema(_load_schema(schema), options)
        value = _read_input(input_path)
        result = parser(value)
    except SchemaParseError as e:
        console.print(f"[red]Error:[/red] {type(e).__name__}: {escape(str(e))}")
        raise typer.Exit(1)
    except (ValueError, ImportError, FileNotFoundError) as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    except Exception as e:
        console.print(f"[red]Error:[/red] {type(e).__name__}: {escape(str(e))}")
        raise typer.Exit(1)

    if quiet:
        console.print("[green]OK[/green]")
    elif result is MISSING:
        console.print("[dim](missing)[/dim]")
    else:
        console.print_json(data=result, default=str)


@app.command()
def leaves() -> None:
    """List the bundled leaf transforms."""
    table = Table(title="Leaf transforms")
    table.add_column("Name", style="cyan")
    table.add_column("Description")

    for name, func in LEAVES.items():
        doc = (func.__doc__ or "").strip().splitlines()
        table.add_row(name, doc[0] if doc else "")

    console.print(table)


if __name__ == "__main__":
    app()
