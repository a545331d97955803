"""Persisted HEAD tracking for development (VCS) packages."""

from __future__ import annotations

import json
import logging
import os
import subprocess
import threading
from dataclasses import dataclass, field
from pathlib import Path

from pacup.config.settings import Settings

logger = logging.getLogger(__name__)

GIT_TIMEOUT = 15.0


class VCSStoreError(Exception):
    """Raised when the VCS store file cannot be read or written."""


def git_ls_remote(url: str, branch: str) -> str | None:
    """Return the commit ``branch`` points to on ``url``, or None on failure."""
    try:
        proc = subprocess.run(
            ["git", "ls-remote", url, branch],
            capture_output=True,
            text=True,
            timeout=GIT_TIMEOUT,
            env={**os.environ, "GIT_TERMINAL_PROMPT": "0"},
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        logger.warning("git ls-remote %s failed: %s", url, e)
        return None
    if proc.returncode != 0:
        logger.warning("git ls-remote %s exited with %d", url, proc.returncode)
        return None
    line = proc.stdout.strip().splitlines()
    if not line:
        return None
    return line[0].split()[0]


@dataclass
class VCSSource:
    branch: str = "HEAD"
    sha: str = ""
    protocols: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, d: dict) -> VCSSource:
        return cls(
            branch=d.get("branch", "HEAD") or "HEAD",
            sha=d.get("sha", ""),
            protocols=list(d.get("protocols", [])),
        )

    def to_dict(self) -> dict:
        return {"branch": self.branch, "sha": self.sha, "protocols": self.protocols}

    def remote_url(self, url: str) -> str:
        if "://" in url or not self.protocols:
            return url
        return f"{self.protocols[0]}://{url}"


@dataclass
class VCSInfo:
    name: str
    sources: dict[str, VCSSource] = field(default_factory=dict)

    def needs_update(self) -> bool:
        """True if any tracked source moved past the recorded commit.

        Sources whose remote cannot be queried are not counted.
        """
        for url, source in self.sources.items():
            current = git_ls_remote(source.remote_url(url), source.branch)
            if current is None:
                continue
            if current != source.sha:
                logger.debug("%s: %s moved %s -> %s", self.name, url, source.sha, current)
                return True
        return False


class VCSStore:
    """JSON file of ``{package: {source_url: {branch, sha, protocols}}}``."""

    def __init__(self, path: Path):
        self.path = path
        self._entries: dict[str, VCSInfo] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, cfg: Settings) -> VCSStore:
        return cls(cfg.vcs_file).load()

    def load(self) -> VCSStore:
        if not self.path.exists():
            self._entries = {}
            return self
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise VCSStoreError(f"Could not read {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise VCSStoreError(f"Unexpected content in {self.path}")

        self._entries = {
            name: VCSInfo(
                name=name,
                sources={url: VCSSource.from_dict(src) for url, src in (sources or {}).items()},
            )
            for name, sources in data.items()
        }
        return self

    def save(self) -> None:
        data = {
            name: {url: src.to_dict() for url, src in info.sources.items()}
            for name, info in self._entries.items()
        }
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        except OSError as e:
            raise VCSStoreError(f"Could not write {self.path}: {e}") from e

    def entries(self) -> dict[str, VCSInfo]:
        with self._lock:
            return dict(self._entries)

    def remove(self, names: list[str]) -> None:
        """Drop entries and persist the store right away."""
        with self._lock:
            removed = [n for n in names if self._entries.pop(n, None) is not None]
            if not removed:
                return
            logger.debug("Removed stale VCS entries: %s", ", ".join(removed))
            self.save()
