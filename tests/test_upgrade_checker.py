import threading

import pytest

from conftest import FakeIndex, FakeLocalDB, FakeVCSStore, foreign, installed, sync
from pacup.core.aur_client import AURError
from pacup.core.local_db import LocalDBError
from pacup.core.upgrade_checker import (
    LATEST_COMMIT,
    list_upgrades,
    upgrades_from_aur,
    upgrades_from_devel,
    upgrades_from_repos,
)
from pacup.models import UpgradeSource
from pacup.models.upgrade import Upgrade


class TestRepoUpgrades:
    def test_newer_sync_version_is_reported_with_db_name(self):
        db = FakeLocalDB(newer={"A": sync("A", "1.0-2", "extra")})
        result = upgrades_from_repos(db, [installed("A", "1.0-1"), installed("C", "3.0-1")])
        assert result == [Upgrade("A", "extra", "1.0-1", "1.0-2", UpgradeSource.REPO)]

    def test_ignored_package_is_warned_not_listed(self):
        warnings = []
        db = FakeLocalDB(newer={"A": sync("A", "1.0-2")})
        result = upgrades_from_repos(db, [installed("A", "1.0-1", ignored=True)], warnings.append)
        assert result == []
        assert len(warnings) == 1
        assert "A" in warnings[0]
        assert "1.0-1 => 1.0-2" in warnings[0]


class TestAurUpgrades:
    def test_newer_version(self):
        index = FakeIndex([foreign("B", "2.1-1")])
        result = upgrades_from_aur([installed("B", "2.0-1")], index)
        assert result == [Upgrade("B", "aur", "2.0-1", "2.1-1", UpgradeSource.AUR)]

    def test_same_or_older_version_is_skipped(self):
        index = FakeIndex([foreign("B", "2.0-1"), foreign("C", "0.9-1")])
        assert upgrades_from_aur([installed("B", "2.0-1"), installed("C", "1.0-1")], index) == []

    def test_packages_missing_from_index_are_skipped(self):
        index = FakeIndex([])
        assert upgrades_from_aur([installed("local-only", "1.0-1")], index) == []

    def test_no_foreign_packages_skips_the_query(self):
        index = FakeIndex([])
        assert upgrades_from_aur([], index) == []
        assert index.calls == []

    def test_time_update_reports_newer_modification(self):
        index = FakeIndex([foreign("B", "2.0-1", last_modified=200)])
        pkgs = [installed("B", "2.0-1", build_date=100)]
        assert upgrades_from_aur(pkgs, index) == []
        result = upgrades_from_aur(pkgs, index, time_update=True)
        assert [u.name for u in result] == ["B"]

    def test_time_update_ignores_older_modification(self):
        index = FakeIndex([foreign("B", "2.0-1", last_modified=50)])
        pkgs = [installed("B", "2.0-1", build_date=100)]
        assert upgrades_from_aur(pkgs, index, time_update=True) == []

    def test_ignored_package_warns_with_version_delta(self):
        warnings = []
        index = FakeIndex([foreign("B", "2.1-1")])
        result = upgrades_from_aur([installed("B", "2.0-1", ignored=True)], index, on_warning=warnings.append)
        assert result == []
        assert len(warnings) == 1
        assert "[red]2.0[/red]-1" in warnings[0]
        assert "[bold green]2.1[/bold green]-1" in warnings[0]

    def test_index_failure_propagates(self):
        index = FakeIndex(error=AURError("boom"))
        with pytest.raises(AURError):
            upgrades_from_aur([installed("B", "2.0-1")], index)

    def test_devel_results_join_the_list(self):
        index = FakeIndex([foreign("B", "2.1-1")])
        store = FakeVCSStore({"C-git": True})
        pkgs = [installed("B", "2.0-1"), installed("C-git", "r10.abc-1")]
        result = upgrades_from_aur(pkgs, index, store, devel=True)
        assert sorted(u.name for u in result) == ["B", "C-git"]

    def test_devel_is_skipped_when_disabled(self):
        store = FakeVCSStore({"C-git": True})
        result = upgrades_from_aur([installed("C-git", "r10-1")], FakeIndex([]), store, devel=False)
        assert result == []

    def test_duplicates_are_dropped(self):
        index = FakeIndex([foreign("C-git", "r20-1")])
        store = FakeVCSStore({"C-git": True})
        result = upgrades_from_aur([installed("C-git", "r10-1")], index, store, devel=True)
        assert [u.name for u in result] == ["C-git"]

    def test_aur_record_wins_even_when_devel_finishes_first(self):
        devel_done = threading.Event()

        class SlowIndex(FakeIndex):
            def info(self, names):
                devel_done.wait(timeout=5)
                return super().info(names)

        class SignallingStore(FakeVCSStore):
            def entries(self):
                try:
                    return super().entries()
                finally:
                    devel_done.set()

        index = SlowIndex([foreign("C-git", "r20-1")])
        store = SignallingStore({"C-git": True})
        result = upgrades_from_aur([installed("C-git", "r10-1")], index, store, devel=True)
        assert result == [Upgrade("C-git", "aur", "r10-1", "r20-1", UpgradeSource.AUR)]

    def test_devel_failure_keeps_aur_results(self):
        warnings = []
        index = FakeIndex([foreign("B", "2.1-1")])
        store = FakeVCSStore({"C-git": RuntimeError("git exploded")})
        pkgs = [installed("B", "2.0-1"), installed("C-git", "r10-1")]
        result = upgrades_from_aur(pkgs, index, store, devel=True, on_warning=warnings.append)
        assert [u.name for u in result] == ["B"]
        assert any("git exploded" in w for w in warnings)

    def test_waits_for_slow_devel_check(self):
        release = threading.Event()

        class SlowStore(FakeVCSStore):
            def entries(self):
                release.wait(timeout=5)
                return super().entries()

        index = FakeIndex([foreign("B", "2.1-1")])
        store = SlowStore({"C-git": True})
        pkgs = [installed("B", "2.0-1"), installed("C-git", "r10-1")]
        threading.Timer(0.1, release.set).start()
        result = upgrades_from_aur(pkgs, index, store, devel=True)
        assert sorted(u.name for u in result) == ["B", "C-git"]


class TestDevelUpgrades:
    def test_installed_package_needing_update(self):
        store = FakeVCSStore({"C-git": True})
        result = upgrades_from_devel([installed("C-git", "r10.abc-1")], store)
        assert result == [Upgrade("C-git", "devel", "r10.abc-1", LATEST_COMMIT, UpgradeSource.DEVEL)]

    def test_up_to_date_entries_are_ignored(self):
        store = FakeVCSStore({"C-git": False, "gone-git": False})
        assert upgrades_from_devel([installed("C-git", "r10-1")], store) == []
        assert store.removed == []

    def test_stale_entry_is_removed(self):
        store = FakeVCSStore({"gone-git": True})
        assert upgrades_from_devel([], store) == []
        assert store.removed == ["gone-git"]

    def test_ignored_package_warns(self):
        warnings = []
        store = FakeVCSStore({"C-git": True})
        result = upgrades_from_devel([installed("C-git", "r10-1", ignored=True)], store, warnings.append)
        assert result == []
        assert len(warnings) == 1
        assert "r10-1 => git" in warnings[0]


class TestListUpgrades:
    def test_both_sources(self, two_source_db):
        db, index = two_source_db
        aur, repo = list_upgrades(db, index)
        assert [u.name for u in aur] == ["B"]
        assert [u.name for u in repo] == ["A"]

    def test_foreign_failure_keeps_repo_results(self, two_source_db):
        db, _ = two_source_db
        warnings = []
        aur, repo = list_upgrades(db, FakeIndex(error=AURError("AUR down")), on_warning=warnings.append)
        assert aur == []
        assert repo == [Upgrade("A", "core", "1.0-1", "1.0-2", UpgradeSource.REPO)]
        assert any("AUR down" in w for w in warnings)

    def test_repo_failure_keeps_foreign_results(self, two_source_db):
        db, index = two_source_db
        db.fail_new = LocalDBError("db locked")
        aur, repo = list_upgrades(db, index)
        assert repo == []
        assert [u.name for u in aur] == ["B"]

    def test_both_failing_returns_empty_lists(self, two_source_db):
        db, _ = two_source_db
        db.fail_new = LocalDBError("db locked")
        assert list_upgrades(db, FakeIndex(error=AURError("down"))) == ([], [])

    def test_split_failure_propagates(self):
        db = FakeLocalDB(fail_split=LocalDBError("no database"))
        with pytest.raises(LocalDBError):
            list_upgrades(db, FakeIndex([]))

    def test_progress_messages(self, two_source_db):
        db, index = two_source_db
        messages = []
        list_upgrades(db, index, FakeVCSStore({}), devel=True, on_progress=messages.append)
        assert "Searching databases for updates..." in messages
        assert "Searching AUR for updates..." in messages
        assert "Checking development packages..." in messages
