"""
CLI entry point for Armor.

This module provides the Typer-based command-line interface for Armor.
It is meant for checking a configuration before deploying it.

Commands:
    headers     Show the header mutations a config file produces
    validate    Check that a config file is usable
    defaults    Show the header mutations for the secure defaults

Architecture Note:
    The CLI is intentionally thin - it loads the config and delegates to
    the policy engine. Applications use armor.create() or the middleware
    directly and never go through the CLI.
"""

import json
import traceback
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from armor import __version__
from armor.errors import ArmorError
from armor.policy import PolicyEngine, create
from armor.schema import HeaderMutation, MutationAction, load_config

# Initialize Typer app with metadata
app = typer.Typer(
    name="armor",
    help="Derive security headers for HTTP responses.",
    add_completion=False,
    no_args_is_help=True,
)

# Rich console for formatted output
console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold]armor[/bold] version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """
    Armor - Security header policy engine.

    Merge a declarative configuration with secure defaults and show the
    headers every response will carry.
    """
    pass


ConfigArgument = Annotated[
    Path,
    typer.Argument(
        help="Path to the Armor config YAML file.",
        exists=True,
        readable=True,
        resolve_path=True,
    ),
]

JsonOption = Annotated[
    bool,
    typer.Option(
        "--json",
        help="Output results in JSON format.",
    ),
]


@app.command()
def headers(
    config_path: ConfigArgument,
    json_output: JsonOption = False,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            help="Show the resolved configuration as well.",
        ),
    ] = False,
    debug: Annotated[
        bool,
        typer.Option(
            "--debug",
            help="Enable debug mode with full error tracebacks.",
        ),
    ] = False,
) -> None:
    """
    Show the header mutations a config file produces.

    Example:
        $ armor headers armor.yaml
    """
    engine = _load_engine(config_path, json_output, debug)
    if verbose and not json_output:
        console.print(f"[dim]Loaded config: {config_path}[/dim]")
        for key, value in engine.resolve().model_dump().items():
            console.print(f"[dim]  {key}: {value!r}[/dim]")
        console.print()

    mutations = engine.derive()
    if json_output:
        _output_json_mutations(mutations)
    else:
        _display_mutations(mutations)


@app.command()
def validate(
    config_path: ConfigArgument,
    json_output: JsonOption = False,
) -> None:
    """
    Check that a config file is usable.

    Exits with code 1 if the file can't be loaded or the configuration
    is incomplete.

    Example:
        $ armor validate armor.yaml
    """
    engine = _load_engine(config_path, json_output, debug=False)
    count = len(engine.derive())
    if json_output:
        print(json.dumps({"valid": True, "path": str(config_path), "mutations": count}, indent=2))
    else:
        console.print(f"[green]✓[/green] {config_path} is valid ({count} header mutations)")


@app.command()
def defaults(json_output: JsonOption = False) -> None:
    """
    Show the header mutations for the secure defaults.

    Example:
        $ armor defaults --json
    """
    mutations = create().derive()
    if json_output:
        _output_json_mutations(mutations)
    else:
        _display_mutations(mutations)


def _load_engine(config_path: Path, json_output: bool, debug: bool) -> PolicyEngine:
    """Load a config file into an engine, exiting with code 1 on failure."""
    try:
        return create(load_config(config_path))
    except ArmorError as e:
        if json_output:
            _output_json_error(e, debug)
        else:
            console.print(f"[red]Error loading config: {e.message}[/red]")
            if e.suggestion:
                console.print(f"[yellow]Suggestion: {e.suggestion}[/yellow]")
            if debug:
                console.print(f"[dim]{traceback.format_exc()}[/dim]")
        raise typer.Exit(code=1)


def _display_mutations(mutations: list[HeaderMutation]) -> None:
    """Display mutations as a table."""
    table = Table(show_header=True, header_style="bold")
    table.add_column("#", style="dim", width=3)
    table.add_column("Action", width=8)
    table.add_column("Header", style="cyan")
    table.add_column("Value")

    for index, mutation in enumerate(mutations, start=1):
        if mutation.action == MutationAction.SET:
            action = "[green]set[/green]"
        else:
            action = "[yellow]delete[/yellow]"
        table.add_row(str(index), action, mutation.name, mutation.value or "")

    console.print(table)


def _output_json_mutations(mutations: list[HeaderMutation]) -> None:
    """Output mutations in JSON format."""
    output = [mutation.model_dump(mode="json") for mutation in mutations]
    print(json.dumps(output, indent=2))


def _output_json_error(error: ArmorError, include_traceback: bool = False) -> None:
    """Output an error in JSON format."""
    output = {"error": True, **error.to_dict()}
    if include_traceback:
        output["traceback"] = traceback.format_exc()
    print(json.dumps(output, indent=2, default=str))


if __name__ == "__main__":
    app()
