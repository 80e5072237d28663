"""Tests for rulebundle.bundle.extractor — writing archives."""

import zipfile

from rulebundle.bundle.compiler import compile_staged
from rulebundle.bundle.extractor import write_archive
from rulebundle.bundle.sources import discover_sources
from rulebundle.bundle.staging import stage_sources
from rulebundle.core.errors import BundleIOError, EngineFailureError
from tests._support.fake_engine import FakeEngine


def _module(engine, rules_dir):
    return compile_staged(engine, stage_sources(discover_sources(rules_dir).unwrap()).unwrap()).unwrap()


class TestWriteArchive:
    def test_writes_zip(self, engine, rules_dir, tmp_path):
        out = tmp_path / "out.jar"
        assert write_archive(_module(engine, rules_dir), out).unwrap() == out
        with zipfile.ZipFile(out) as archive:
            assert "META-INF/kmodule.xml" in archive.namelist()
            assert "rules/adult.drl" in archive.namelist()

    def test_creates_parent_directories(self, engine, rules_dir, tmp_path):
        out = tmp_path / "a" / "b" / "c" / "out.jar"
        write_archive(_module(engine, rules_dir), out).unwrap()
        assert out.is_file()

    def test_overwrites_existing(self, engine, rules_dir, tmp_path):
        out = tmp_path / "out.jar"
        out.write_bytes(b"stale")
        write_archive(_module(engine, rules_dir), out).unwrap()
        assert zipfile.is_zipfile(out)

    def test_parent_is_a_file(self, engine, rules_dir, tmp_path):
        (tmp_path / "blocker").write_text("not a directory")
        result = write_archive(_module(engine, rules_dir), tmp_path / "blocker" / "out.jar")
        assert isinstance(result.error, BundleIOError)
        assert result.error.context.output_path == str(tmp_path / "blocker" / "out.jar")

    def test_serialization_failure(self, rules_dir, tmp_path):
        engine = FakeEngine(explode_on="serialize")
        result = write_archive(_module(engine, rules_dir), tmp_path / "out.jar")
        assert isinstance(result.error, EngineFailureError)
        assert not (tmp_path / "out.jar").exists()
