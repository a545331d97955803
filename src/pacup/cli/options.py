"""Shared CLI options."""

from __future__ import annotations

import dataclasses
from pathlib import Path
from typing import Optional

import typer

from pacup.config.settings import Settings, load_settings, settings

OutputOption = typer.Option("table", "--output", "-o", help="Output format: table, json, yaml")
ConfigOption = typer.Option(None, "--config", "-c", help="Path to a pacup config.yaml")
DevelOption = typer.Option(None, "--devel/--no-devel", help="Check development (VCS) packages")
TimeUpdateOption = typer.Option(
    None, "--timeupdate/--no-timeupdate", help="Treat newer AUR modification times as upgrades",
)


def resolve_settings(
    config: Optional[Path],
    devel: Optional[bool] = None,
    time_update: Optional[bool] = None,
    no_confirm: Optional[bool] = None,
) -> Settings:
    """Settings for one invocation: config file first, then CLI flags."""
    cfg = dataclasses.replace(load_settings(config) if config else settings)
    if devel is not None:
        cfg.devel = devel
    if time_update is not None:
        cfg.time_update = time_update
    if no_confirm:
        cfg.no_confirm = True
    return cfg
