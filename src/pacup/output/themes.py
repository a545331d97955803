"""Color maps for upgrade listings."""

from pacup.models import UpgradeSource

VERSION_STYLES: dict[str, str] = {
    "version_old": "red",
    "version_new": "bold green",
    "release_old": "red",
    "release_new": "green",
    "invalid": "red",
}

SOURCE_COLORS: dict[UpgradeSource, str] = {
    UpgradeSource.REPO: "blue",
    UpgradeSource.AUR: "magenta",
    UpgradeSource.DEVEL: "yellow",
}

# Same order as the ANSI foreground codes 31-36
HASH_COLORS: tuple[str, ...] = ("red", "green", "yellow", "blue", "magenta", "cyan")

INVALID_VERSION = f"[{VERSION_STYLES['invalid']}]Invalid Version[/{VERSION_STYLES['invalid']}]"


def style(text: str, key: str) -> str:
    if not text:
        return text
    color = VERSION_STYLES.get(key, "white")
    return f"[{color}]{text}[/{color}]"


def hash_color(name: str) -> str:
    """Pick a stable color for a repository name (djb2 hash)."""
    h = 5381
    for byte in name.encode("utf-8"):
        h = (byte + (h << 5) + h) & 0xFFFFFFFFFFFFFFFF
    return HASH_COLORS[h % len(HASH_COLORS)]


def styled_repository(name: str) -> str:
    color = hash_color(name)
    return f"[bold {color}]{name}[/bold {color}]"


def styled_source(source: UpgradeSource) -> str:
    color = SOURCE_COLORS.get(source, "white")
    return f"[{color}]{source.value}[/{color}]"
