"""abstract-logic CLI — Entry point.

Usage:
    abstract-logic actions list <pkg.module:Class>
    abstract-logic actions call <pkg.module:Class> <action> -a key=value ...
"""

from __future__ import annotations

from typing import Optional

import typer

from abstract_logic.cli.commands import actions
from abstract_logic.logging import configure_logging

app = typer.Typer(
    name="abstract-logic",
    help="abstract-logic — Inspect and invoke logic module actions.",
    no_args_is_help=True,
    pretty_exceptions_enable=False,
)

app.add_typer(actions.app, name="actions")


@app.callback()
def main_callback(
    ctx: typer.Context,
    log_level: Optional[str] = typer.Option(
        None, "--log-level", help="debug, info, warning, error or critical."
    ),
    log_format: Optional[str] = typer.Option(None, "--log-format", help="console or json."),
) -> None:
    configure_logging(level=log_level or "warning", format=log_format or "console")
    # Subcommands read the explicit choices to decide whether a settings
    # file may override them.
    ctx.obj = {"log_level": log_level, "log_format": log_format}


if __name__ == "__main__":
    app()
