"""Shared fakes for the package database, the AUR and the VCS store."""

from __future__ import annotations

import io

import pytest
from rich.console import Console

from pacup.models.package import ForeignPackage, InstalledPackage, SyncPackage


class FakeLocalDB:
    def __init__(self, repo_pkgs=(), foreign_pkgs=(), newer=None, fail_split=None, fail_new=None):
        self.repo_pkgs = list(repo_pkgs)
        self.foreign_pkgs = list(foreign_pkgs)
        self.newer = dict(newer or {})
        self.fail_split = fail_split
        self.fail_new = fail_new

    def split_installed(self):
        if self.fail_split:
            raise self.fail_split
        return list(self.repo_pkgs), list(self.foreign_pkgs)

    def new_version(self, pkg):
        if self.fail_new:
            raise self.fail_new
        return self.newer.get(pkg.name)


class FakeIndex:
    def __init__(self, packages=(), error=None):
        self.packages = {p.name: p for p in packages}
        self.error = error
        self.calls = []

    def info(self, names):
        self.calls.append(list(names))
        if self.error:
            raise self.error
        return {n: self.packages[n] for n in names if n in self.packages}


class FakeVCSInfo:
    def __init__(self, name, needs):
        self.name = name
        self.needs = needs

    def needs_update(self):
        if isinstance(self.needs, Exception):
            raise self.needs
        return self.needs


class FakeVCSStore:
    def __init__(self, needs: dict):
        self._entries = {name: FakeVCSInfo(name, flag) for name, flag in needs.items()}
        self.removed = []

    def entries(self):
        return dict(self._entries)

    def remove(self, names):
        self.removed.extend(names)
        for n in names:
            self._entries.pop(n, None)


def installed(name, version, build_date=0, ignored=False):
    return InstalledPackage(name=name, version=version, build_date=build_date, ignored=ignored)


def sync(name, version, db="core"):
    return SyncPackage(name=name, version=version, db=db)


def foreign(name, version, last_modified=0):
    return ForeignPackage(name=name, version=version, last_modified=last_modified)


@pytest.fixture
def console_buffer():
    """A plain console writing into a StringIO, returned as (console, buffer)."""
    buf = io.StringIO()
    return Console(file=buf, force_terminal=False, color_system=None, width=200), buf


@pytest.fixture
def two_source_db():
    """A@1.0-1 from core with 1.0-2 available, B@2.0-1 foreign with 2.1-1 in the AUR."""
    db = FakeLocalDB(
        repo_pkgs=[installed("A", "1.0-1")],
        foreign_pkgs=[installed("B", "2.0-1")],
        newer={"A": sync("A", "1.0-2", "core")},
    )
    index = FakeIndex([foreign("B", "2.1-1")])
    return db, index
