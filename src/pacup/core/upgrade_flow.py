"""Interactive upgrade selection: list, number, prompt, resolve."""

from __future__ import annotations

import logging
import sys
from typing import Callable, TextIO

from rich.console import Console

from pacup.core.local_db import LocalDB
from pacup.core.selection import parse_selection, resolve_selection
from pacup.core.upgrade_checker import ProgressCallback, WarningCallback, list_upgrades
from pacup.core.vcs_store import VCSStore
from pacup.models.upgrade import sort_by_repository
from pacup.output.tables import print_upgrades

logger = logging.getLogger(__name__)

# Longest selection line accepted from the terminal
MAX_LINE_LENGTH = 4096

PROMPT = "Packages to upgrade (eg: 1 2 3, 1-3 or ^4), empty for all"


class SelectionInputError(Exception):
    """Raised when the selection line cannot be read."""


def read_selection_line(stream: TextIO | None = None, max_length: int = MAX_LINE_LENGTH) -> str:
    """Read one line of selection tokens.

    Raises SelectionInputError at end of input or when the line is longer
    than ``max_length``.
    """
    stream = stream or sys.stdin
    try:
        line = stream.readline(max_length + 1)
    except (OSError, UnicodeDecodeError) as e:
        raise SelectionInputError(f"Could not read selection: {e}") from e

    if line == "":
        raise SelectionInputError("Unexpected end of input")
    if line.endswith("\n"):
        line = line[:-1]
    elif len(line) > max_length:
        raise SelectionInputError(f"Selection longer than {max_length} characters")
    return line.rstrip("\r")


def warning_printer(console: Console) -> WarningCallback:
    def on_warning(message: str) -> None:
        console.print(f"[magenta]Warning:[/magenta] {message}")
    return on_warning


def progress_printer(console: Console) -> ProgressCallback:
    def on_progress(message: str) -> None:
        console.print(f"[bold][cyan]::[/cyan] {message}[/bold]")
    return on_progress


def upgrade_packages(
    local_db: LocalDB,
    foreign_index,
    vcs_store: VCSStore | None = None,
    *,
    devel: bool = False,
    time_update: bool = False,
    no_confirm: bool = False,
    read_line: Callable[[], str] | None = None,
    console: Console | None = None,
) -> tuple[set[str], set[str]]:
    """List upgrades, let the user pick, and return (repo names, aur names).

    With ``no_confirm`` the prompt is skipped and everything is selected.
    Input errors propagate before anything is resolved.
    """
    console = console or Console()
    aur_ups, repo_ups = list_upgrades(
        local_db,
        foreign_index,
        vcs_store,
        devel=devel,
        time_update=time_update,
        on_warning=warning_printer(console),
        on_progress=progress_printer(console),
    )
    if not aur_ups and not repo_ups:
        return set(), set()

    repo_ups = sort_by_repository(repo_ups)
    total = len(aur_ups) + len(repo_ups)
    console.print(f"[bold blue]::[/bold blue] {total} [bold]Packages to upgrade.[/bold]")
    print_upgrades(console, repo_ups, len(aur_ups) + 1)
    print_upgrades(console, aur_ups, 1)

    tokens: list[str] = []
    if not no_confirm:
        console.print(f"[bold green]==> {PROMPT}[/bold green]")
        console.print("[bold green]==>[/bold green] ", end="")
        line = (read_line or read_selection_line)()
        tokens = line.split()
        logger.debug("Selection tokens: %s", tokens)

    selection = parse_selection(tokens, len(aur_ups), len(repo_ups))
    return resolve_selection(aur_ups, repo_ups, selection)
