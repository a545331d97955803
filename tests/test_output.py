import json

import yaml

from pacup.models import OutputFormat, UpgradeSource
from pacup.models.upgrade import Upgrade, sort_by_repository
from pacup.output.formatters import output_selection, output_upgrades
from pacup.output.tables import print_upgrades, upgrade_line
from pacup.output.themes import HASH_COLORS, hash_color, styled_repository


def test_upgrade_line_alignment():
    line = upgrade_line(Upgrade("A", "core", "1.0-1", "1.0-2"), 2)
    assert line.plain == " 2 core/A" + " " * 56 + "1.0-1 -> 1.0-2"


def test_upgrade_line_aligns_arrow_column():
    short = upgrade_line(Upgrade("a", "core", "1-1", "2-1"), 1).plain
    longer = upgrade_line(Upgrade("abcdef", "extra", "1-1", "2-1"), 1).plain
    assert short.index("->") == longer.index("->")


def test_upgrade_line_overlong_name_is_not_truncated():
    name = "x" * 90
    line = upgrade_line(Upgrade(name, "core", "1.0-1", "1.0-2"), 10).plain
    assert line == f"10 core/{name}1.0-1 -> 1.0-2"


def test_print_upgrades_counts_down(console_buffer):
    console, buf = console_buffer
    ups = [Upgrade("a", "core", "1-1", "2-1"), Upgrade("b", "core", "1-1", "2-1")]
    print_upgrades(console, ups, 4)
    lines = buf.getvalue().splitlines()
    assert lines[0].startswith(" 5 core/a")
    assert lines[1].startswith(" 4 core/b")


def test_hash_color_is_stable():
    assert hash_color("core") == hash_color("core")
    assert hash_color("core") in HASH_COLORS
    assert hash_color("") == HASH_COLORS[5381 % len(HASH_COLORS)]
    assert styled_repository("aur").startswith(f"[bold {hash_color('aur')}]")


class TestSortByRepository:
    def names(self, repos):
        return [u.repository for u in sort_by_repository([Upgrade(r, r, "1", "2") for r in repos])]

    def test_descending(self):
        assert self.names(["core", "extra", "multilib"]) == ["multilib", "extra", "core"]

    def test_case_insensitive_first(self):
        assert self.names(["Alpha", "beta"]) == ["beta", "Alpha"]

    def test_prefixes_keep_their_order(self):
        assert self.names(["core", "core-testing"]) == ["core", "core-testing"]
        assert self.names(["core-testing", "core"]) == ["core-testing", "core"]

    def test_stable_within_repository(self):
        ups = [Upgrade("b", "core", "1", "2"), Upgrade("a", "core", "1", "2")]
        assert [u.name for u in sort_by_repository(ups)] == ["b", "a"]


def test_output_format_defaults_to_table():
    assert OutputFormat.from_str("json") == OutputFormat.JSON
    assert OutputFormat.from_str("yaml") == OutputFormat.YAML
    assert OutputFormat.from_str("bogus") == OutputFormat.TABLE


def test_output_upgrades_json(console_buffer):
    console, buf = console_buffer
    aur = [Upgrade("B", "aur", "2.0-1", "2.1-1", UpgradeSource.AUR)]
    repo = [Upgrade("A", "core", "1.0-1", "1.0-2")]
    output_upgrades(aur, repo, "json", out=console)
    data = json.loads(buf.getvalue())
    assert data["repo"][0] == {
        "name": "A",
        "repository": "core",
        "local_version": "1.0-1",
        "remote_version": "1.0-2",
        "source": "repo",
    }
    assert data["aur"][0]["source"] == "aur"


def test_output_upgrades_table_lists_packages(console_buffer):
    console, buf = console_buffer
    output_upgrades([], [Upgrade("openssl", "core", "3.0-1", "3.1-1")], "table", out=console)
    text = buf.getvalue()
    assert "Available Upgrades" in text
    assert "openssl" in text


def test_output_selection_yaml(console_buffer):
    console, buf = console_buffer
    output_selection({"b", "a"}, {"x"}, "yaml", out=console)
    assert yaml.safe_load(buf.getvalue()) == {"repo": ["a", "b"], "aur": ["x"]}


def test_output_selection_table(console_buffer):
    console, buf = console_buffer
    output_selection({"a"}, {"x"}, "table", out=console)
    text = buf.getvalue()
    assert "Packages to Upgrade" in text
    assert "x" in text
