"""Upgrade candidate models."""

from __future__ import annotations

from dataclasses import dataclass
from functools import cmp_to_key

from pacup.models import UpgradeSource


@dataclass(frozen=True)
class Upgrade:
    name: str
    repository: str
    local_version: str
    remote_version: str
    source: UpgradeSource = UpgradeSource.REPO

    def to_dict(self) -> dict[str, str]:
        return {
            "name": self.name,
            "repository": self.repository,
            "local_version": self.local_version,
            "remote_version": self.remote_version,
            "source": self.source.value,
        }


def _compare_repository(a: Upgrade, b: Upgrade) -> int:
    """Order repositories descending, case-insensitively first.

    When one repository name is a prefix of the other they compare equal.
    """
    for ca, cb in zip(a.repository, b.repository):
        la, lb = ca.lower(), cb.lower()
        if la != lb:
            return -1 if la > lb else 1
        if ca != cb:
            return -1 if ca > cb else 1
    return 0


def sort_by_repository(upgrades: list[Upgrade]) -> list[Upgrade]:
    """Return the upgrades in display order, grouped by repository."""
    return sorted(upgrades, key=cmp_to_key(_compare_repository))
