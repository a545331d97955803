"""Data models for pacup."""

from __future__ import annotations

import enum


class UpgradeSource(enum.Enum):
    REPO = "repo"
    AUR = "aur"
    DEVEL = "devel"


class OutputFormat(enum.Enum):
    TABLE = "table"
    JSON = "json"
    YAML = "yaml"

    @classmethod
    def from_str(cls, s: str) -> OutputFormat:
        for member in cls:
            if member.value == s:
                return member
        return cls.TABLE
