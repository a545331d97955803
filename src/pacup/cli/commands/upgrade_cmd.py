"""pacup upgrade - Pick which upgrades to install."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from pacup.cli.options import ConfigOption, DevelOption, OutputOption, TimeUpdateOption, resolve_settings
from pacup.core.aur_client import AURClient
from pacup.core.local_db import LocalDB, LocalDBError
from pacup.core.upgrade_flow import SelectionInputError, upgrade_packages
from pacup.core.vcs_store import VCSStore, VCSStoreError
from pacup.output.formatters import output_selection

app = typer.Typer()
console = Console()
# Progress, warnings and the prompt; stdout carries only the formatted result
err_console = Console(stderr=True)


@app.callback(invoke_without_command=True)
def upgrade(
    output: str = OutputOption,
    config: Optional[Path] = ConfigOption,
    devel: Optional[bool] = DevelOption,
    time_update: Optional[bool] = TimeUpdateOption,
    no_confirm: bool = typer.Option(False, "--noconfirm", help="Upgrade everything without asking"),
) -> None:
    """List repo and AUR upgrades, ask which to keep, print the resolved sets."""
    cfg = resolve_settings(config, devel=devel, time_update=time_update, no_confirm=no_confirm)

    vcs_store = None
    if cfg.devel:
        try:
            vcs_store = VCSStore.from_settings(cfg)
        except VCSStoreError as e:
            err_console.print(f"[magenta]Warning:[/magenta] {e}; skipping development packages")

    try:
        repo_names, aur_names = upgrade_packages(
            LocalDB.from_settings(cfg),
            AURClient.from_settings(cfg),
            vcs_store,
            devel=cfg.devel,
            time_update=cfg.time_update,
            no_confirm=cfg.no_confirm,
            console=err_console,
        )
    except (LocalDBError, SelectionInputError) as e:
        typer.echo(f"error: {e}", err=True)
        raise typer.Exit(code=1)

    if output == "table" and not repo_names and not aur_names:
        console.print("[dim]there is nothing to do[/dim]")
        return

    output_selection(repo_names, aur_names, output, out=console)
