"""Side-by-side version display for upgrade lines."""

from __future__ import annotations

from rich.markup import escape

from pacup.output.themes import INVALID_VERSION, style
from pacup.utils.version_compare import CompleteVersion, InvalidVersionError, parse_complete_version


def _parse(version: str) -> CompleteVersion | None:
    try:
        return parse_complete_version(version)
    except InvalidVersionError:
        return None


def _join(version: str, release: str) -> str:
    return f"{version}-{release}" if release else version


def get_version_diff(old_version: str, new_version: str) -> tuple[str, str]:
    """Return (left, right) rich-markup strings for an old -> new version.

    When only the release changed, the releases are highlighted; otherwise
    the whole version portion is. An unparsable side becomes the invalid
    version marker and never raises.
    """
    old = _parse(old_version)
    new = _parse(new_version)

    left = INVALID_VERSION if old is None else ""
    right = INVALID_VERSION if new is None else ""

    if old is not None and new is not None:
        old_ver, new_ver = escape(old.full_version), escape(new.full_version)
        old_rel, new_rel = escape(old.release), escape(new.release)
        if (old.epoch, old.version) == (new.epoch, new.version):
            left = _join(old_ver, style(old_rel, "release_old"))
            right = _join(new_ver, style(new_rel, "release_new"))
        else:
            left = _join(style(old_ver, "version_old"), old_rel)
            right = _join(style(new_ver, "version_new"), new_rel)
    elif old is not None:
        left = escape(_join(old.full_version, old.release))
    elif new is not None:
        right = escape(_join(new.full_version, new.release))

    return left, right
