"""Table / JSON / YAML output dispatch."""

from __future__ import annotations

import json
from typing import Any

import yaml
from rich.console import Console

from pacup.models import OutputFormat
from pacup.models.upgrade import Upgrade

console = Console()


def _upgrades_to_dict(aur_upgrades: list[Upgrade], repo_upgrades: list[Upgrade]) -> dict[str, Any]:
    return {
        "repo": [u.to_dict() for u in repo_upgrades],
        "aur": [u.to_dict() for u in aur_upgrades],
    }


def _selection_to_dict(repo_names: set[str], aur_names: set[str]) -> dict[str, Any]:
    return {"repo": sorted(repo_names), "aur": sorted(aur_names)}


def output_upgrades(
    aur_upgrades: list[Upgrade],
    repo_upgrades: list[Upgrade],
    fmt: str,
    out: Console | None = None,
) -> None:
    out = out or console
    kind = OutputFormat.from_str(fmt)
    if kind == OutputFormat.JSON:
        data = _upgrades_to_dict(aur_upgrades, repo_upgrades)
        out.print_json(json.dumps(data, indent=2))
    elif kind == OutputFormat.YAML:
        data = _upgrades_to_dict(aur_upgrades, repo_upgrades)
        out.print(yaml.dump(data, default_flow_style=False), markup=False, highlight=False)
    else:
        from pacup.output.tables import upgrades_table
        out.print(upgrades_table(aur_upgrades, repo_upgrades))


def output_selection(
    repo_names: set[str],
    aur_names: set[str],
    fmt: str,
    out: Console | None = None,
) -> None:
    out = out or console
    kind = OutputFormat.from_str(fmt)
    if kind == OutputFormat.JSON:
        data = _selection_to_dict(repo_names, aur_names)
        out.print_json(json.dumps(data, indent=2))
    elif kind == OutputFormat.YAML:
        data = _selection_to_dict(repo_names, aur_names)
        out.print(yaml.dump(data, default_flow_style=False), markup=False, highlight=False)
    else:
        from pacup.output.tables import selection_table
        out.print(selection_table(repo_names, aur_names))
