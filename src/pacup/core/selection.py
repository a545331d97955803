"""Map numbered upgrade lines to list positions and resolve user selections.

Upgrades are displayed as two stacked lists, repo upgrades first, with
numbers counting down to 1 at the last foreign entry. With ``F`` foreign and
``R`` repo upgrades::

    F+R   repo[0]
    ...
    F+1   repo[R-1]
    F     aur[0]
    ...
    1     aur[F-1]

Selection tokens are ``N``, ``A-B`` (either direction) or either form
prefixed with ``^`` to exclude. Bad tokens and out-of-range numbers are
ignored.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from pacup.models import UpgradeSource
from pacup.models.upgrade import Upgrade

_NUMBER_RE = re.compile(r"[+-]?[0-9]+")
_RANGE_RE = re.compile(r"([0-9]+)-([0-9]+)")


def display_to_internal(
    display: int, total_foreign: int, total_repo: int
) -> tuple[UpgradeSource, int] | None:
    """Return (list, index) for a display number, or None if out of range."""
    if display < 1 or display > total_foreign + total_repo:
        return None
    if display <= total_foreign:
        return UpgradeSource.AUR, total_foreign - display
    return UpgradeSource.REPO, total_foreign + total_repo - display


def internal_to_display(
    source: UpgradeSource, index: int, total_foreign: int, total_repo: int
) -> int:
    """Inverse of display_to_internal."""
    if source == UpgradeSource.REPO:
        return total_foreign + total_repo - index
    return total_foreign - index


def _range_bounds(token: str) -> tuple[int, int]:
    match = _RANGE_RE.fullmatch(token)
    if match is None:
        raise ValueError(f"invalid range: {token!r}")
    start, end = int(match.group(1)), int(match.group(2))
    if end < start:
        start, end = end, start
    return start, end


def build_range(token: str) -> list[int]:
    """Expand ``"A-B"`` into the inclusive list of numbers between A and B."""
    start, end = _range_bounds(token)
    return list(range(start, end + 1))


def _token_numbers(token: str, total: int) -> range | list[int] | None:
    """Numbers named by a token. Ranges are clipped to 1..total before expanding."""
    if _NUMBER_RE.fullmatch(token):
        return [int(token)]
    try:
        start, end = _range_bounds(token)
    except ValueError:
        return None
    return range(max(start, 1), min(end, total) + 1)


@dataclass
class Selection:
    """Per-list internal indices chosen for upgrade, plus raw exclusions."""

    include_foreign: set[int] = field(default_factory=set)
    include_repo: set[int] = field(default_factory=set)
    exclude_foreign: set[int] = field(default_factory=set)
    exclude_repo: set[int] = field(default_factory=set)

    @property
    def is_empty(self) -> bool:
        """No usable token was given: everything is upgraded."""
        return not (
            self.include_foreign or self.include_repo
            or self.exclude_foreign or self.exclude_repo
        )

    def skipped_foreign(self, total_foreign: int) -> set[int]:
        if self.is_empty:
            return set()
        return set(range(total_foreign)) - self.include_foreign

    def skipped_repo(self, total_repo: int) -> set[int]:
        if self.is_empty:
            return set()
        return set(range(total_repo)) - self.include_repo


def apply_selection_policy(
    include_foreign: set[int],
    include_repo: set[int],
    exclude_foreign: set[int],
    exclude_repo: set[int],
    total_foreign: int,
    total_repo: int,
) -> Selection:
    """Combine raw include and exclude sets into a Selection.

    If nothing was included but something was excluded, everything is
    included first. Exclusions are then removed from their own list.
    """
    include_foreign = set(include_foreign)
    include_repo = set(include_repo)
    if not include_foreign and not include_repo and (exclude_foreign or exclude_repo):
        include_foreign = set(range(total_foreign))
        include_repo = set(range(total_repo))

    return Selection(
        include_foreign=include_foreign - exclude_foreign,
        include_repo=include_repo - exclude_repo,
        exclude_foreign=set(exclude_foreign),
        exclude_repo=set(exclude_repo),
    )


def parse_selection(tokens: list[str], total_foreign: int, total_repo: int) -> Selection:
    """Parse selection tokens against the current display numbering."""
    raw: dict[tuple[UpgradeSource, bool], set[int]] = {
        (UpgradeSource.AUR, False): set(),
        (UpgradeSource.REPO, False): set(),
        (UpgradeSource.AUR, True): set(),
        (UpgradeSource.REPO, True): set(),
    }

    for token in tokens:
        negate = token.startswith("^")
        if negate:
            token = token[1:]
        numbers = _token_numbers(token, total_foreign + total_repo)
        if numbers is None:
            continue
        for number in numbers:
            target = display_to_internal(number, total_foreign, total_repo)
            if target is None:
                continue
            source, index = target
            raw[(source, negate)].add(index)

    return apply_selection_policy(
        raw[(UpgradeSource.AUR, False)],
        raw[(UpgradeSource.REPO, False)],
        raw[(UpgradeSource.AUR, True)],
        raw[(UpgradeSource.REPO, True)],
        total_foreign,
        total_repo,
    )


def resolve_selection(
    aur_upgrades: list[Upgrade],
    repo_upgrades: list[Upgrade],
    selection: Selection,
) -> tuple[set[str], set[str]]:
    """Return (repo names, aur names) to upgrade.

    ``repo_upgrades`` must be in display order, the same order the
    selection was parsed against.
    """
    skip_repo = selection.skipped_repo(len(repo_upgrades))
    skip_aur = selection.skipped_foreign(len(aur_upgrades))

    repo_names = {u.name for i, u in enumerate(repo_upgrades) if i not in skip_repo}
    aur_names = {u.name for i, u in enumerate(aur_upgrades) if i not in skip_aur}
    return repo_names, aur_names
