"""pacup list - List available upgrades."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from pacup.cli.options import ConfigOption, DevelOption, OutputOption, TimeUpdateOption, resolve_settings
from pacup.core.aur_client import AURClient
from pacup.core.local_db import LocalDB, LocalDBError
from pacup.core.upgrade_checker import list_upgrades
from pacup.core.upgrade_flow import warning_printer
from pacup.core.vcs_store import VCSStore, VCSStoreError
from pacup.models.upgrade import sort_by_repository
from pacup.output.formatters import output_upgrades

app = typer.Typer()
console = Console()
# Progress, warnings and the prompt; stdout carries only the formatted result
err_console = Console(stderr=True)


@app.callback(invoke_without_command=True)
def list_cmd(
    output: str = OutputOption,
    config: Optional[Path] = ConfigOption,
    devel: Optional[bool] = DevelOption,
    time_update: Optional[bool] = TimeUpdateOption,
) -> None:
    """List upgrades from the sync databases and the AUR without prompting."""
    cfg = resolve_settings(config, devel=devel, time_update=time_update)

    vcs_store = None
    if cfg.devel:
        try:
            vcs_store = VCSStore.from_settings(cfg)
        except VCSStoreError as e:
            err_console.print(f"[magenta]Warning:[/magenta] {e}; skipping development packages")

    try:
        with err_console.status("[bold cyan]Reading package databases…") as status:
            def on_progress(message: str) -> None:
                status.update(f"[bold cyan]{message}")

            aur_ups, repo_ups = list_upgrades(
                LocalDB.from_settings(cfg),
                AURClient.from_settings(cfg),
                vcs_store,
                devel=cfg.devel,
                time_update=cfg.time_update,
                on_warning=warning_printer(err_console),
                on_progress=on_progress,
            )
    except LocalDBError as e:
        typer.echo(f"error: {e}", err=True)
        raise typer.Exit(code=1)

    repo_ups = sort_by_repository(repo_ups)
    if output == "table" and not aur_ups and not repo_ups:
        console.print("[green]All packages are up to date[/green]")
        return

    output_upgrades(aur_ups, repo_ups, output, out=console)
