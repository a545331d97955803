"""Read-only access to the pacman local and sync databases."""

from __future__ import annotations

import fnmatch
import logging
import tarfile
from pathlib import Path

from pacup.config.settings import Settings
from pacup.models.package import InstalledPackage, SyncPackage
from pacup.utils.version_compare import vercmp

logger = logging.getLogger(__name__)


class LocalDBError(Exception):
    """Raised when the package databases cannot be read."""


def parse_desc(text: str) -> dict[str, list[str]]:
    """Parse a pacman ``desc`` file into ``{SECTION: [values...]}``."""
    sections: dict[str, list[str]] = {}
    current: str | None = None
    for raw in text.splitlines():
        line = raw.strip()
        if not line:
            current = None
            continue
        if line.startswith("%") and line.endswith("%") and len(line) > 2:
            current = line[1:-1]
            sections.setdefault(current, [])
        elif current is not None:
            sections[current].append(line)
    return sections


def parse_pacman_conf(text: str) -> tuple[list[str], list[str], list[str]]:
    """Extract repositories, IgnorePkg and IgnoreGroup from pacman.conf.

    Returns (repos in file order, ignored packages, ignored groups).
    """
    repos: list[str] = []
    ignore_pkg: list[str] = []
    ignore_group: list[str] = []
    section = ""
    for raw in text.splitlines():
        line = raw.split("#", 1)[0].strip()
        if not line:
            continue
        if line.startswith("[") and line.endswith("]"):
            section = line[1:-1].strip()
            if section != "options" and section not in repos:
                repos.append(section)
            continue
        if section != "options" or "=" not in line:
            continue
        key, value = (part.strip() for part in line.split("=", 1))
        if key == "IgnorePkg":
            ignore_pkg.extend(value.split())
        elif key == "IgnoreGroup":
            ignore_group.extend(value.split())
    return repos, ignore_pkg, ignore_group


class LocalDB:
    """Installed packages plus the configured sync databases.

    Everything is loaded once on first use and never mutated afterwards, so
    one instance can be queried from several threads.
    """

    def __init__(
        self,
        db_path: Path,
        pacman_conf: Path,
        extra_ignore: list[str] | None = None,
    ):
        self.db_path = db_path
        self.pacman_conf = pacman_conf
        self.extra_ignore = list(extra_ignore or [])
        self._installed: list[InstalledPackage] | None = None
        self._sync: dict[str, dict[str, SyncPackage]] = {}
        self._repos: list[str] = []
        self._ignore_pkg: list[str] = []
        self._ignore_group: list[str] = []

    @classmethod
    def from_settings(cls, cfg: Settings) -> LocalDB:
        return cls(cfg.db_path, cfg.pacman_conf, extra_ignore=cfg.ignore)

    def _load(self) -> None:
        if self._installed is not None:
            return
        try:
            conf_text = self.pacman_conf.read_text(encoding="utf-8")
        except OSError as e:
            raise LocalDBError(f"Could not read {self.pacman_conf}: {e}") from e

        repos, ignore_pkg, ignore_group = parse_pacman_conf(conf_text)
        self._repos = repos
        self._ignore_pkg = ignore_pkg + self.extra_ignore
        self._ignore_group = ignore_group
        self._sync = {repo: self._read_sync_db(repo) for repo in repos}
        self._installed = self._read_local_db()
        logger.debug(
            "Loaded %d installed packages and %d sync databases",
            len(self._installed), len(self._sync),
        )

    def _read_local_db(self) -> list[InstalledPackage]:
        local_dir = self.db_path / "local"
        if not local_dir.is_dir():
            raise LocalDBError(f"Local database not found at {local_dir}")

        packages: list[InstalledPackage] = []
        for desc in sorted(local_dir.glob("*/desc")):
            try:
                fields = parse_desc(desc.read_text(encoding="utf-8"))
            except OSError as e:
                raise LocalDBError(f"Could not read {desc}: {e}") from e
            pkg = InstalledPackage.from_desc(fields)
            if pkg.name:
                pkg.ignored = self._matches_ignore(pkg)
                packages.append(pkg)
        return packages

    def _read_sync_db(self, repo: str) -> dict[str, SyncPackage]:
        db_file = self.db_path / "sync" / f"{repo}.db"
        if not db_file.exists():
            logger.debug("Sync database %s missing, skipping", db_file)
            return {}

        packages: dict[str, SyncPackage] = {}
        try:
            with tarfile.open(db_file, "r:*") as tar:
                for member in tar:
                    if not member.isfile() or not member.name.endswith("/desc"):
                        continue
                    handle = tar.extractfile(member)
                    if handle is None:
                        continue
                    fields = parse_desc(handle.read().decode("utf-8", errors="replace"))
                    pkg = SyncPackage.from_desc(fields, db=repo)
                    if pkg.name:
                        packages[pkg.name] = pkg
        except (tarfile.TarError, OSError) as e:
            raise LocalDBError(f"Could not read sync database {db_file}: {e}") from e
        return packages

    @property
    def sync_dbs(self) -> list[str]:
        self._load()
        return list(self._repos)

    def installed(self) -> list[InstalledPackage]:
        self._load()
        return list(self._installed or [])

    def split_installed(self) -> tuple[list[InstalledPackage], list[InstalledPackage]]:
        """Split installed packages into (found in a sync db, foreign)."""
        self._load()
        repo_pkgs: list[InstalledPackage] = []
        foreign_pkgs: list[InstalledPackage] = []
        for pkg in self._installed or []:
            if any(pkg.name in db for db in self._sync.values()):
                repo_pkgs.append(pkg)
            else:
                foreign_pkgs.append(pkg)
        return repo_pkgs, foreign_pkgs

    def new_version(self, pkg: InstalledPackage) -> SyncPackage | None:
        """Return the sync package if it is newer than the installed one.

        Only the first database (in pacman.conf order) carrying the package
        is considered.
        """
        self._load()
        for repo in self._repos:
            candidate = self._sync.get(repo, {}).get(pkg.name)
            if candidate is None:
                continue
            if vercmp(pkg.version, candidate.version) < 0:
                return candidate
            return None
        return None

    def _matches_ignore(self, pkg: InstalledPackage) -> bool:
        """True if IgnorePkg or IgnoreGroup matches the package."""
        if any(fnmatch.fnmatchcase(pkg.name, pat) for pat in self._ignore_pkg):
            return True
        return any(
            fnmatch.fnmatchcase(group, pat)
            for group in pkg.groups
            for pat in self._ignore_group
        )
