"""Installed, sync and foreign package models."""

from __future__ import annotations

from dataclasses import dataclass, field


def _first(values: list[str] | None, default: str = "") -> str:
    return values[0] if values else default


def _int(values: list[str] | None) -> int:
    try:
        return int(_first(values, "0"))
    except ValueError:
        return 0


@dataclass
class InstalledPackage:
    name: str = ""
    version: str = ""
    build_date: int = 0
    groups: list[str] = field(default_factory=list)
    ignored: bool = False

    @classmethod
    def from_desc(cls, d: dict[str, list[str]]) -> InstalledPackage:
        """Build from the sections of a local database ``desc`` file."""
        return cls(
            name=_first(d.get("NAME")),
            version=_first(d.get("VERSION")),
            build_date=_int(d.get("BUILDDATE")),
            groups=list(d.get("GROUPS", [])),
        )


@dataclass
class SyncPackage:
    name: str = ""
    version: str = ""
    db: str = ""

    @classmethod
    def from_desc(cls, d: dict[str, list[str]], db: str) -> SyncPackage:
        return cls(
            name=_first(d.get("NAME")),
            version=_first(d.get("VERSION")),
            db=db,
        )


@dataclass
class ForeignPackage:
    name: str = ""
    version: str = ""
    last_modified: int = 0

    @classmethod
    def from_dict(cls, d: dict) -> ForeignPackage:
        """Build from one entry of an AUR RPC ``info`` response."""
        return cls(
            name=d.get("Name", ""),
            version=d.get("Version", ""),
            last_modified=int(d.get("LastModified") or 0),
        )
