"""Root Typer application, mounts sub-commands."""

from __future__ import annotations

import logging

import typer
from rich.logging import RichHandler

app = typer.Typer(
    name="pacup",
    help="pacup - Pick repo and AUR upgrades from one numbered list.",
    no_args_is_help=True,
)


@app.callback()
def root(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=verbose, show_path=verbose)],
        force=True,
    )


def _register_commands() -> None:
    from pacup.cli.commands.list_cmd import app as list_app
    from pacup.cli.commands.upgrade_cmd import app as upgrade_app

    app.add_typer(list_app, name="list", help="List available upgrades")
    app.add_typer(upgrade_app, name="upgrade", help="Select upgrades interactively")


_register_commands()


def main() -> None:
    app()
