"""Application configuration and defaults."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)


def _default_config_dir() -> Path:
    """Return the pacup configuration directory.

    Checks PACUP_CONFIG_HOME first, then XDG_CONFIG_HOME.
    """
    config_home = os.environ.get("PACUP_CONFIG_HOME", "")
    if config_home:
        return Path(config_home)
    xdg = os.environ.get("XDG_CONFIG_HOME", "")
    if xdg:
        return Path(xdg) / "pacup"
    return Path.home() / ".config" / "pacup"


def _default_cache_dir() -> Path:
    cache_home = os.environ.get("PACUP_CACHE_HOME", "")
    if cache_home:
        return Path(cache_home)
    xdg = os.environ.get("XDG_CACHE_HOME", "")
    if xdg:
        return Path(xdg) / "pacup"
    return Path.home() / ".cache" / "pacup"


@dataclass
class Settings:
    config_dir: Path = field(default_factory=_default_config_dir)
    cache_dir: Path = field(default_factory=_default_cache_dir)
    pacman_conf: Path = Path("/etc/pacman.conf")
    db_path: Path = Path("/var/lib/pacman")
    aur_url: str = "https://aur.archlinux.org"
    request_timeout: float = 10.0
    devel: bool = False
    time_update: bool = False
    no_confirm: bool = False
    ignore: list[str] = field(default_factory=list)

    @property
    def config_file(self) -> Path:
        return self.config_dir / "config.yaml"

    @property
    def vcs_file(self) -> Path:
        return self.cache_dir / "vcs.json"


_PATH_FIELDS = {"config_dir", "cache_dir", "pacman_conf", "db_path"}


def load_settings(path: Path | None = None) -> Settings:
    """Build settings from defaults, overlaid with the YAML config file.

    A missing file gives plain defaults. Unreadable files and unknown keys
    are logged and ignored.
    """
    loaded = Settings()
    config_file = path or loaded.config_file
    if not config_file.exists():
        return loaded

    try:
        data = yaml.safe_load(config_file.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError):
        logger.warning("Failed to read config file %s", config_file, exc_info=True)
        return loaded
    if not isinstance(data, dict):
        return loaded

    known = {f.name for f in fields(Settings)}
    for key, value in data.items():
        attr = str(key).replace("-", "_")
        if attr not in known:
            logger.debug("Unknown config key %r in %s", key, config_file)
            continue
        if attr in _PATH_FIELDS:
            value = Path(value).expanduser()
        elif attr == "ignore":
            value = value.split() if isinstance(value, str) else list(value or [])
        setattr(loaded, attr, value)
    return loaded


# Global singleton
settings = load_settings()
