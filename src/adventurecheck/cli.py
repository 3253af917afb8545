"""adventurecheck CLI - typer application entry point."""

from __future__ import annotations

import atexit
import json
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from adventurecheck.config import DEFAULT_CONFIG_NAME, ValidatorConfig, load_config
from adventurecheck.errors import AdventureCheckError
from adventurecheck.loader import load_document
from adventurecheck.models import render_description
from adventurecheck.observability import close_file_logging, configure_logging, get_logger
from adventurecheck.registry import AdventureRegistry
from adventurecheck.validator import ValidationResult, validate

# Load environment variables from .env file
load_dotenv()

app = typer.Typer(
    name="advcheck",
    help="adventurecheck: Validate branching narrative adventures before publishing.",
    no_args_is_help=True,
)
console = Console()
log = get_logger(__name__)

# Default data directory when neither the command line nor the config names one
DEFAULT_DATA_DIR = Path("data")

# Global state set by the callback, used by commands
_config: ValidatorConfig = ValidatorConfig()


@app.callback()
def main(
    verbose: Annotated[
        int,
        typer.Option(
            "-v",
            "--verbose",
            count=True,
            help="Increase verbosity: -v for INFO, -vv for DEBUG.",
        ),
    ] = 0,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help=f"Configuration file (default: ./{DEFAULT_CONFIG_NAME} if present).",
            envvar="ADVCHECK_CONFIG",
        ),
    ] = None,
    log_file: Annotated[
        Path | None,
        typer.Option("--log-file", help="Append all log events to this JSONL file."),
    ] = None,
) -> None:
    """adventurecheck: Validate branching narrative adventures before publishing."""
    global _config

    configure_logging(verbosity=verbose, log_file=log_file)
    if log_file is not None:
        atexit.register(close_file_logging)

    if config is None and Path(DEFAULT_CONFIG_NAME).exists():
        config = Path(DEFAULT_CONFIG_NAME)

    if config is None:
        _config = ValidatorConfig()
        return

    try:
        _config = load_config(config)
    except AdventureCheckError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from e
    log.debug("config_loaded", path=str(config))


def _resolve_data_dir(data_dir: Path | None) -> Path:
    """Resolve the data directory: argument, then config, then ./data."""
    if data_dir is not None:
        return data_dir
    if _config.data_dir is not None:
        return _config.data_dir
    return DEFAULT_DATA_DIR


def _load_registry(data_dir: Path | None) -> AdventureRegistry:
    resolved = _resolve_data_dir(data_dir)
    try:
        return AdventureRegistry.from_index(resolved, _config.index_name)
    except AdventureCheckError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from e


def _print_result(name: str, result: ValidationResult) -> None:
    """Print one adventure's findings."""
    if result.is_valid:
        console.print(f"[green]✓[/green] [bold]{escape(name)}[/bold]: {result.summary}")
    else:
        console.print(f"[red]✗[/red] [bold]{escape(name)}[/bold]: {result.summary}")

    for error in result.errors:
        console.print(f"  [red]error[/red]   {escape(error)}")
    for warning in result.warnings:
        console.print(f"  [yellow]warning[/yellow] {escape(warning)}")


def _stats_table(title: str, results: dict[str, ValidationResult]) -> Table:
    table = Table(title=title)
    table.add_column("Adventure", style="cyan")
    table.add_column("Nodes", justify="right")
    table.add_column("Endings", justify="right")
    table.add_column("Connections", justify="right")
    table.add_column("Errors", justify="right")
    table.add_column("Warnings", justify="right")

    for name, result in results.items():
        errors = f"[red]{len(result.errors)}[/red]" if result.errors else "0"
        warnings = f"[yellow]{len(result.warnings)}[/yellow]" if result.warnings else "0"
        table.add_row(
            escape(name),
            str(result.stats.total_nodes),
            str(result.stats.total_endings),
            str(result.stats.total_connections),
            errors,
            warnings,
        )
    return table


@app.command()
def version() -> None:
    """Show version information."""
    from adventurecheck import __version__

    console.print(f"adventurecheck v{__version__}")


@app.command("validate")
def validate_files(
    files: Annotated[
        list[Path],
        typer.Argument(help="Adventure JSON files to validate."),
    ],
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print results as JSON keyed by file path."),
    ] = False,
) -> None:
    """Validate adventure files.

    Exits with code 1 if any file has errors or cannot be loaded.
    """
    results: dict[str, ValidationResult] = {}
    for path in files:
        try:
            document = load_document(path)
        except AdventureCheckError as e:
            failed = ValidationResult()
            failed.add_error(str(e))
            results[str(path)] = failed
            continue
        results[str(path)] = validate(document, _config)

    if as_json:
        payload = {name: result.to_dict() for name, result in results.items()}
        typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))
    else:
        for name, result in results.items():
            _print_result(name, result)
        console.print()
        console.print(_stats_table("Adventure Stats", results))

    if any(not result.is_valid for result in results.values()):
        raise typer.Exit(1)


@app.command()
def check(
    data_dir: Annotated[
        Path | None,
        typer.Argument(help="Data directory holding the adventure index (default: ./data)."),
    ] = None,
) -> None:
    """Validate the adventure index and every adventure it lists."""
    registry = _load_registry(data_dir)
    results = registry.validate_all(_config)

    for adventure_id, result in results.items():
        if not result.is_valid or result.warnings:
            _print_result(adventure_id, result)

    console.print()
    console.print(_stats_table(f"Adventures in {registry.data_dir}", results))
    console.print()

    failed = [adventure_id for adventure_id, result in results.items() if not result.is_valid]
    if failed:
        console.print(f"[red]{len(failed)} of {len(results)} adventures have errors.[/red]")
        raise typer.Exit(1)
    console.print(f"[green]All {len(results)} adventures are valid.[/green]")


@app.command("list")
def list_adventures(
    data_dir: Annotated[
        Path | None,
        typer.Argument(help="Data directory holding the adventure index (default: ./data)."),
    ] = None,
) -> None:
    """List indexed adventures."""
    registry = _load_registry(data_dir)

    table = Table(title=f"Adventures in {registry.data_dir}")
    table.add_column("ID", style="cyan")
    table.add_column("Title", style="bold")
    table.add_column("File", style="dim")
    table.add_column("Description")

    for entry in registry:
        description = render_description(entry.description) if entry.description else "-"
        table.add_row(escape(entry.id), escape(entry.title), escape(entry.file), escape(description))

    console.print(table)
