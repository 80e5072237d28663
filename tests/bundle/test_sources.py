"""Tests for rulebundle.bundle.sources — rule file discovery."""

import os
from pathlib import Path

import pytest
import structlog.testing

from rulebundle.bundle.sources import (
    RuleKind,
    collect_rule_files,
    discover_sources,
)
from rulebundle.core.errors import InvalidInputError


class TestRuleKind:
    """Suffix classification."""

    @pytest.mark.parametrize(
        ("name", "kind"),
        [
            ("adult.drl", RuleKind.COMPILED_RULE),
            ("adult.dsl", RuleKind.DIALECT_DEFINITION),
            ("adult.dslr", RuleKind.EXPANDED_DIALECT_RULE),
            ("ADULT.DRL", None),
            ("adult.drl.bak", None),
            ("readme.md", None),
        ],
    )
    def test_for_name(self, name, kind):
        assert RuleKind.for_name(name) is kind

    def test_compilable(self):
        assert RuleKind.COMPILED_RULE.compilable
        assert RuleKind.EXPANDED_DIALECT_RULE.compilable
        assert not RuleKind.DIALECT_DEFINITION.compilable


class TestCollectRuleFiles:
    """Recursive walk."""

    def test_recurses_and_filters(self, write_rule, tmp_path):
        write_rule("a.drl")
        write_rule("nested/deeper/b.dslr")
        write_rule("nested/c.dsl")
        write_rule("nested/notes.txt")
        found = collect_rule_files(tmp_path / "rules")
        assert sorted(p.name for p in found) == ["a.drl", "b.dslr", "c.dsl"]

    def test_name_order_within_directory(self, write_rule, tmp_path):
        for name in ["zeta.drl", "alpha.drl", "mid.drl"]:
            write_rule(name)
        names = [p.name for p in collect_rule_files(tmp_path / "rules")]
        assert names == ["alpha.drl", "mid.drl", "zeta.drl"]

    def test_empty_directory(self, tmp_path):
        (tmp_path / "empty").mkdir()
        assert collect_rule_files(tmp_path / "empty") == []

    def test_missing_directory_is_empty(self, tmp_path):
        assert collect_rule_files(tmp_path / "missing") == []

    def test_unreadable_subdirectory_is_skipped(self, write_rule, tmp_path, monkeypatch):
        """A subdirectory that cannot be listed contributes nothing and is logged."""
        write_rule("ok.drl")
        locked = write_rule("locked/hidden.drl").parent
        real_scandir = os.scandir

        def scandir(path):
            if Path(path) == locked:
                raise PermissionError(13, "Permission denied", str(path))
            return real_scandir(path)

        monkeypatch.setattr(os, "scandir", scandir)
        with structlog.testing.capture_logs() as logs:
            names = [p.name for p in collect_rule_files(tmp_path / "rules")]

        assert names == ["ok.drl"]
        [warning] = [e for e in logs if e["event"] == "discovery.listing_failed"]
        assert warning["log_level"] == "warning"
        assert warning["directory"] == str(locked)
        assert "Permission denied" in warning["error"]


class TestDiscoverSources:
    """Manifest construction."""

    def test_manifest(self, write_rule, tmp_path):
        write_rule("adult.drl")
        write_rule("dialect/adult.dsl", "")
        write_rule("dialect/adult.dslr", "")
        manifest = discover_sources(tmp_path / "rules").unwrap()

        assert manifest.root == (tmp_path / "rules").absolute()
        assert manifest.relative_paths == ["adult.drl", "dialect/adult.dsl", "dialect/adult.dslr"]
        assert len(manifest) == 3
        assert manifest.compilable == 2
        assert [f.relative_path for f in manifest.of_kind(RuleKind.DIALECT_DEFINITION)] == [
            "dialect/adult.dsl"
        ]

    def test_relative_root(self, write_rule, tmp_path):
        """Relative roots resolve against the working directory."""
        write_rule("adult.drl")
        manifest = discover_sources("rules").unwrap()
        assert manifest.root == tmp_path / "rules"

    def test_empty_folder_is_ok(self, tmp_path):
        (tmp_path / "rules").mkdir()
        manifest = discover_sources(tmp_path / "rules").unwrap()
        assert len(manifest) == 0
        assert manifest.compilable == 0

    def test_missing_folder(self, tmp_path):
        result = discover_sources(tmp_path / "missing")
        assert isinstance(result.error, InvalidInputError)
        assert result.error.context.source_root == str(tmp_path / "missing")

    def test_file_instead_of_folder(self, write_rule):
        path = write_rule("adult.drl")
        assert isinstance(discover_sources(path).error, InvalidInputError)
