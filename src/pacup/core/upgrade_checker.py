"""Collect upgrade candidates from the sync databases, the AUR and VCS packages."""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from typing import Callable

from rich.markup import escape

from pacup.core.local_db import LocalDB
from pacup.core.vcs_store import VCSStore, VCSStoreError
from pacup.core.version_diff import get_version_diff
from pacup.models import UpgradeSource
from pacup.models.package import InstalledPackage
from pacup.models.upgrade import Upgrade
from pacup.utils.version_compare import vercmp

logger = logging.getLogger(__name__)

# Both callbacks receive rich markup.
WarningCallback = Callable[[str], None]
ProgressCallback = Callable[[str], None]

AUR_REPOSITORY = "aur"
DEVEL_REPOSITORY = "devel"
LATEST_COMMIT = "latest-commit"


def _warn(on_warning: WarningCallback | None, message: str) -> None:
    logger.info(message)
    if on_warning:
        on_warning(message)


def _ignoring(name: str, left: str, right: str) -> str:
    return f"[cyan]{name}[/cyan] ignoring package upgrade ({left} => {right})"


def upgrades_from_repos(
    local_db: LocalDB,
    repo_pkgs: list[InstalledPackage],
    on_warning: WarningCallback | None = None,
) -> list[Upgrade]:
    """Find installed packages with a newer version in a sync database."""
    results: list[Upgrade] = []
    for pkg in repo_pkgs:
        new_pkg = local_db.new_version(pkg)
        if new_pkg is None:
            continue
        if pkg.ignored:
            _warn(on_warning, _ignoring(pkg.name, pkg.version, new_pkg.version))
            continue
        results.append(Upgrade(
            name=pkg.name,
            repository=new_pkg.db,
            local_version=pkg.version,
            remote_version=new_pkg.version,
            source=UpgradeSource.REPO,
        ))
    return results


def upgrades_from_devel(
    foreign_pkgs: list[InstalledPackage],
    vcs_store: VCSStore,
    on_warning: WarningCallback | None = None,
) -> list[Upgrade]:
    """Find tracked VCS packages whose upstream moved on.

    Entries that need an update but are no longer installed are removed
    from the store.
    """
    installed = {p.name: p for p in foreign_pkgs}
    results: list[Upgrade] = []

    for name, info in vcs_store.entries().items():
        if not info.needs_update():
            continue

        pkg = installed.get(name)
        if pkg is None:
            try:
                vcs_store.remove([name])
            except VCSStoreError:
                logger.warning("Could not remove stale VCS entry %s", name, exc_info=True)
            continue

        if pkg.ignored:
            _warn(on_warning, _ignoring(pkg.name, pkg.version, "git"))
            continue
        results.append(Upgrade(
            name=pkg.name,
            repository=DEVEL_REPOSITORY,
            local_version=pkg.version,
            remote_version=LATEST_COMMIT,
            source=UpgradeSource.DEVEL,
        ))
    return results


def _compare_foreign(
    foreign_pkgs: list[InstalledPackage],
    foreign_index,
    time_update: bool,
    on_warning: WarningCallback | None,
) -> list[Upgrade]:
    if not foreign_pkgs:
        return []
    index = foreign_index.info([p.name for p in foreign_pkgs])

    results: list[Upgrade] = []
    for pkg in foreign_pkgs:
        remote = index.get(pkg.name)
        if remote is None:
            continue

        newer = vercmp(pkg.version, remote.version) < 0
        rebuilt = time_update and remote.last_modified > pkg.build_date
        if not (newer or rebuilt):
            continue

        if pkg.ignored:
            left, right = get_version_diff(pkg.version, remote.version)
            _warn(on_warning, _ignoring(pkg.name, left, right))
            continue
        results.append(Upgrade(
            name=remote.name,
            repository=AUR_REPOSITORY,
            local_version=pkg.version,
            remote_version=remote.version,
            source=UpgradeSource.AUR,
        ))
    return results


def upgrades_from_aur(
    foreign_pkgs: list[InstalledPackage],
    foreign_index,
    vcs_store: VCSStore | None = None,
    *,
    devel: bool = False,
    time_update: bool = False,
    on_warning: WarningCallback | None = None,
    on_progress: ProgressCallback | None = None,
) -> list[Upgrade]:
    """Find foreign packages with a newer version in the AUR.

    ``foreign_index`` is anything with an ``info(names)`` method returning a
    ``{name: ForeignPackage}`` mapping. When ``devel`` is set the VCS check
    runs alongside the AUR comparison and both must finish before this
    returns. A failing VCS check is logged; a failing AUR query raises.
    Records are deduplicated by name; AUR records come before devel ones.
    """
    with ThreadPoolExecutor(max_workers=2) as executor:
        futures: dict[Future, UpgradeSource] = {
            executor.submit(_compare_foreign, foreign_pkgs, foreign_index, time_update, on_warning):
                UpgradeSource.AUR,
        }
        if devel and vcs_store is not None:
            if on_progress:
                on_progress("Checking development packages...")
            futures[executor.submit(upgrades_from_devel, foreign_pkgs, vcs_store, on_warning)] = (
                UpgradeSource.DEVEL
            )

    results: list[Upgrade] = []
    seen: set[str] = set()
    # Both futures are done here. AUR records merge first.
    for fut, source in futures.items():
        if source == UpgradeSource.DEVEL:
            try:
                found = fut.result()
            except Exception as e:
                logger.error("Development package check failed: %s", e, exc_info=True)
                _warn(on_warning, f"Development package check failed: {escape(str(e))}")
                continue
        else:
            found = fut.result()

        for upgrade in found:
            if upgrade.name in seen:
                logger.debug("Skipping duplicate upgrade for %s", upgrade.name)
                continue
            seen.add(upgrade.name)
            results.append(upgrade)
    return results


def list_upgrades(
    local_db: LocalDB,
    foreign_index,
    vcs_store: VCSStore | None = None,
    *,
    devel: bool = False,
    time_update: bool = False,
    on_warning: WarningCallback | None = None,
    on_progress: ProgressCallback | None = None,
) -> tuple[list[Upgrade], list[Upgrade]]:
    """Check the sync databases and the AUR concurrently.

    Returns (aur_upgrades, repo_upgrades). A source that fails is logged and
    contributes an empty list; the other source's results are kept.
    """
    repo_pkgs, foreign_pkgs = local_db.split_installed()
    found: dict[UpgradeSource, list[Upgrade]] = {
        UpgradeSource.AUR: [],
        UpgradeSource.REPO: [],
    }

    with ThreadPoolExecutor(max_workers=2) as executor:
        if on_progress:
            on_progress("Searching databases for updates...")
        repo_future = executor.submit(upgrades_from_repos, local_db, repo_pkgs, on_warning)

        if on_progress:
            on_progress("Searching AUR for updates...")
        aur_future = executor.submit(
            upgrades_from_aur,
            foreign_pkgs,
            foreign_index,
            vcs_store,
            devel=devel,
            time_update=time_update,
            on_warning=on_warning,
            on_progress=on_progress,
        )

        futures = {repo_future: UpgradeSource.REPO, aur_future: UpgradeSource.AUR}
        for fut in as_completed(futures):
            source = futures[fut]
            try:
                found[source] = fut.result()
            except Exception as e:
                logger.error("Upgrade check for %s failed: %s", source.value, e, exc_info=True)
                _warn(on_warning, f"Could not check {source.value} for updates: {escape(str(e))}")

    return found[UpgradeSource.AUR], found[UpgradeSource.REPO]
