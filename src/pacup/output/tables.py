"""Rich renderables for upgrade listings."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from pacup.core.selection import internal_to_display
from pacup.core.version_diff import get_version_diff
from pacup.models import UpgradeSource
from pacup.models.upgrade import Upgrade
from pacup.output.themes import styled_repository, styled_source

# Column the "old -> new" part is right-aligned against
LINE_WIDTH = 70


def upgrade_line(upgrade: Upgrade, number: int) -> Text:
    """Render one numbered ``repo/name  old -> new`` line."""
    left, right = get_version_diff(upgrade.local_version, upgrade.remote_version)
    head = Text.from_markup(
        f"[magenta]{number:2d} [/magenta]"
        f"{styled_repository(escape(upgrade.repository))}/[cyan]{escape(upgrade.name)}[/cyan]"
    )
    diff = Text.from_markup(f"{left} -> {right}")

    width = LINE_WIDTH - len(upgrade.repository) - len(upgrade.name) + len(Text.from_markup(left).plain)
    if diff.cell_len < width:
        diff.pad_left(width - diff.cell_len)
    return head + diff


def print_upgrades(console: Console, upgrades: list[Upgrade], start: int) -> None:
    """Print upgrades numbered from ``len(upgrades) + start - 1`` down to ``start``."""
    for k, upgrade in enumerate(upgrades):
        console.print(upgrade_line(upgrade, len(upgrades) + start - k - 1), soft_wrap=True)


def upgrades_table(aur_upgrades: list[Upgrade], repo_upgrades: list[Upgrade]) -> Table:
    table = Table(title="Available Upgrades", expand=True)
    table.add_column("#", justify="right", style="magenta")
    table.add_column("Source", no_wrap=True)
    table.add_column("Repository", no_wrap=True)
    table.add_column("Package", style="cyan", no_wrap=True)
    table.add_column("Installed")
    table.add_column("Available")

    total_foreign, total_repo = len(aur_upgrades), len(repo_upgrades)
    rows = [(UpgradeSource.REPO, i, u) for i, u in enumerate(repo_upgrades)]
    rows += [(UpgradeSource.AUR, i, u) for i, u in enumerate(aur_upgrades)]
    for source, index, u in rows:
        left, right = get_version_diff(u.local_version, u.remote_version)
        table.add_row(
            str(internal_to_display(source, index, total_foreign, total_repo)),
            styled_source(u.source),
            styled_repository(escape(u.repository)),
            escape(u.name),
            left,
            right,
        )
    return table


def selection_table(repo_names: set[str], aur_names: set[str]) -> Table:
    table = Table(title="Packages to Upgrade", expand=False)
    table.add_column("Source", no_wrap=True)
    table.add_column("Package", style="cyan")
    for name in sorted(repo_names):
        table.add_row(styled_source(UpgradeSource.REPO), escape(name))
    for name in sorted(aur_names):
        table.add_row(styled_source(UpgradeSource.AUR), escape(name))
    return table
