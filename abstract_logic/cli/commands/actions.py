"""CLI — Logic action inspection and invocation commands."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from abstract_logic.config import Settings
from abstract_logic.exceptions import AbstractLogicError
from abstract_logic.logging import configure_logging
from abstract_logic.manager import LogicManager, import_logic_class

app = typer.Typer(help="List and call the actions of a logic class.")
console = Console()


def _parse_args(pairs: list[str]) -> dict[str, Any]:
    """Turn ``key=value`` pairs into call arguments, JSON-decoding values when possible."""
    args: dict[str, Any] = {}
    for pair in pairs:
        key, sep, raw = pair.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"expected key=value, got '{pair}'", param_hint="--arg")
        try:
            args[key] = json.loads(raw)
        except json.JSONDecodeError:
            args[key] = raw
    return args


def _apply_logging_settings(ctx: typer.Context, settings: Settings) -> None:
    """Configure logging from the settings' logging block.

    Skipped when ``--log-level`` was given on the command line or when no
    settings source set a logging block.
    """
    options = ctx.obj or {}
    if options.get("log_level") or "logging" not in settings.model_fields_set:
        return
    cfg = settings.logging
    configure_logging(
        level=cfg.level,
        format=options.get("log_format") or cfg.format,
        log_file=str(cfg.file) if cfg.file else None,
    )


@app.command("list")
def list_actions(
    target: str = typer.Argument(help="Logic class as 'pkg.module:Class'."),
    json_output: bool = typer.Option(False, "--json", help="Output raw JSON."),
) -> None:
    """List the actions declared on a logic class."""
    try:
        logic_class = import_logic_class(target)
    except ImportError as exc:
        console.print(f"[red]Error: {escape(str(exc))}[/red]")
        raise typer.Exit(2)

    description = logic_class.describe()
    if json_output:
        typer.echo(json.dumps(description, indent=2))
        return

    table = Table(title=f"{description['logic']} actions")
    table.add_column("Action", style="cyan")
    table.add_column("Needs")
    table.add_column("Verified")
    table.add_column("Description")

    for spec in description["actions"]:
        table.add_row(
            spec["name"],
            ", ".join(spec["needs"]) or "-",
            ", ".join(spec["verified"]) or "-",
            spec["description"].split("\n")[0],
        )
    console.print(table)


@app.command("call")
def call_action(
    ctx: typer.Context,
    target: str = typer.Argument(help="Logic class as 'pkg.module:Class'."),
    action_name: str = typer.Argument(help="Action to invoke."),
    arg: list[str] = typer.Option([], "--arg", "-a", help="Argument as key=value (repeatable)."),
    name: Optional[str] = typer.Option(
        None, "--name", help="Registry name for the target (defaults to the class name)."
    ),
    config: Optional[Path] = typer.Option(
        None, "--config", help="YAML settings file with modules and logic config."
    ),
    json_output: bool = typer.Option(False, "--json", help="Output the Result as JSON."),
) -> None:
    """Invoke one action and print its Result.

    Exit code 0 on success, 1 on a failed Result, 2 when the call itself is invalid.
    """
    args = _parse_args(arg)
    try:
        logic_class = import_logic_class(target)
        settings = Settings.load(config_file=config)
        _apply_logging_settings(ctx, settings)
        manager = LogicManager.from_settings(settings)
        logic_name = name or logic_class.__name__
        manager.load(logic_name, logic_class)
        result = manager.lookup(logic_name).call(action_name, **args)
    except (ImportError, AbstractLogicError) as exc:
        console.print(f"[red]Error: {escape(str(exc))}[/red]")
        raise typer.Exit(2)

    if json_output:
        typer.echo(json.dumps(result.to_dict(), default=str))
    elif result:
        console.print(f"[green]ok[/green] {escape(repr(result.value))}")
    else:
        console.print(f"[yellow]failed[/yellow] {escape(str(result.key))}: {escape(str(result.error))}")

    if not result:
        raise typer.Exit(1)
