"""Pacman package version parsing and comparison."""

from __future__ import annotations

import string
from dataclasses import dataclass

_DIGITS = frozenset(string.digits)
_ALPHA = frozenset(string.ascii_letters)
_ALNUM = _DIGITS | _ALPHA
_PKGVER_EXTRA = frozenset("._+")


class InvalidVersionError(ValueError):
    """Raised when a string does not follow the ``[epoch:]version[-release]`` grammar."""


@dataclass(frozen=True)
class CompleteVersion:
    epoch: int
    version: str
    release: str = ""

    @property
    def full_version(self) -> str:
        """The epoch-qualified version, without the release."""
        if self.epoch:
            return f"{self.epoch}:{self.version}"
        return self.version


def _valid_pkgver(version: str) -> bool:
    if not version or version[0] not in _ALNUM:
        return False
    return all(c in _ALNUM or c in _PKGVER_EXTRA for c in version[1:])


def parse_complete_version(s: str) -> CompleteVersion:
    """Parse a full package version string.

    Raises InvalidVersionError when the string has more than one epoch or
    release separator, a non-numeric epoch, or illegal version characters.
    """
    epoch = 0
    parts = s.split(":")
    if len(parts) > 2:
        raise InvalidVersionError(f"invalid version format: {s}")
    if len(parts) == 2:
        try:
            epoch = int(parts[0])
        except ValueError:
            raise InvalidVersionError(f"invalid epoch in version: {s}") from None

    parts = parts[-1].split("-")
    if len(parts) > 2:
        raise InvalidVersionError(f"invalid version format: {s}")
    release = parts[1] if len(parts) == 2 else ""

    if not _valid_pkgver(parts[0]):
        raise InvalidVersionError(f"invalid version format: {s}")
    return CompleteVersion(epoch=epoch, version=parts[0], release=release)


def _is_alpha_at(s: str, i: int) -> bool:
    return i < len(s) and s[i] in _ALPHA


def _rpmvercmp(a: str, b: str) -> int:
    """Compare two version segments the way rpm and alpm do."""
    if a == b:
        return 0

    one = two = 0
    end1 = end2 = 0
    len_a, len_b = len(a), len(b)

    while one < len_a and two < len_b:
        while one < len_a and a[one] not in _ALNUM:
            one += 1
        while two < len_b and b[two] not in _ALNUM:
            two += 1
        if one >= len_a or two >= len_b:
            break

        # Different separator lengths decide on their own
        if (one - end1) != (two - end2):
            return -1 if (one - end1) < (two - end2) else 1

        end1, end2 = one, two
        if a[end1] in _DIGITS:
            while end1 < len_a and a[end1] in _DIGITS:
                end1 += 1
            while end2 < len_b and b[end2] in _DIGITS:
                end2 += 1
            isnum = True
        else:
            while end1 < len_a and a[end1] in _ALPHA:
                end1 += 1
            while end2 < len_b and b[end2] in _ALPHA:
                end2 += 1
            isnum = False

        seg1, seg2 = a[one:end1], b[two:end2]

        # Segment types differ: numeric is always newer than alpha
        if not seg2:
            return 1 if isnum else -1

        if isnum:
            seg1 = seg1.lstrip("0")
            seg2 = seg2.lstrip("0")
            if len(seg1) != len(seg2):
                return 1 if len(seg1) > len(seg2) else -1

        if seg1 != seg2:
            return -1 if seg1 < seg2 else 1

        one, two = end1, end2

    if one >= len_a and two >= len_b:
        return 0

    # A leftover alpha segment never beats an empty one: 1.0a < 1.0 < 1.0.1
    if (one >= len_a and not _is_alpha_at(b, two)) or _is_alpha_at(a, one):
        return -1
    return 1


def _split_evr(evr: str) -> tuple[str, str, str | None]:
    """Split ``evr`` into epoch, version and release (``None`` when absent)."""
    i = 0
    while i < len(evr) and evr[i] in _DIGITS:
        i += 1
    release_sep = evr.rfind("-", i)

    if i < len(evr) and evr[i] == ":":
        epoch = evr[:i] or "0"
        start = i + 1
    else:
        epoch = "0"
        start = 0

    if release_sep != -1:
        return epoch, evr[start:release_sep], evr[release_sep + 1:]
    return epoch, evr[start:], None


def vercmp(a: str, b: str) -> int:
    """Compare two full package versions.

    Returns -1 if ``a`` is older than ``b``, 0 if equal, 1 if newer. Releases
    are only compared when both versions carry one.
    """
    if a == b:
        return 0

    epoch_a, ver_a, rel_a = _split_evr(a)
    epoch_b, ver_b, rel_b = _split_evr(b)

    ret = _rpmvercmp(epoch_a, epoch_b)
    if ret == 0:
        ret = _rpmvercmp(ver_a, ver_b)
        if ret == 0 and rel_a is not None and rel_b is not None:
            ret = _rpmvercmp(rel_a, rel_b)
    return ret


def is_newer(current: str, candidate: str) -> bool:
    """Return True if candidate is newer than current."""
    return vercmp(current, candidate) < 0
