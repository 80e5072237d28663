"""Tests for rulebundle.engine.resolver — engine configuration."""

from importlib.metadata import EntryPoint

import pytest

from rulebundle.core.errors import ConfigError
from rulebundle.engine import ENTRY_POINT_GROUP, RuleEngine, resolve_engine
from tests._support import fake_engine
from tests._support.fake_engine import FakeEngine

FAKE = "tests._support.fake_engine"


def _failing_factory():
    raise RuntimeError("license expired")


class TestResolveByReference:
    """module:attr references."""

    def test_class_is_instantiated(self):
        engine = resolve_engine(f"{FAKE}:FakeEngine")
        assert isinstance(engine, FakeEngine)

    def test_each_call_builds_a_new_instance(self):
        assert resolve_engine(f"{FAKE}:FakeEngine") is not resolve_engine(f"{FAKE}:FakeEngine")

    def test_factory_is_called(self):
        assert isinstance(resolve_engine(f"{FAKE}:create_engine"), FakeEngine)

    def test_instance_is_used_as_is(self):
        assert resolve_engine(f"{FAKE}:default_engine") is fake_engine.default_engine

    def test_falls_back_to_settings(self, monkeypatch):
        monkeypatch.setenv("RULEBUNDLE_ENGINE", f"{FAKE}:FakeEngine")
        assert isinstance(resolve_engine(), RuleEngine)

    def test_explicit_ref_beats_settings(self, monkeypatch):
        monkeypatch.setenv("RULEBUNDLE_ENGINE", "nowhere:Nothing")
        assert isinstance(resolve_engine(f"{FAKE}:FakeEngine"), FakeEngine)


class TestResolveErrors:
    """Every misconfiguration is a ConfigError."""

    def test_nothing_configured(self):
        with pytest.raises(ConfigError, match="No rule engine configured"):
            resolve_engine()

    def test_unknown_module(self):
        with pytest.raises(ConfigError, match="Cannot import"):
            resolve_engine("no_such_module_anywhere:Engine")

    def test_unknown_attribute(self):
        with pytest.raises(ConfigError, match="Cannot import"):
            resolve_engine(f"{FAKE}:NoSuchEngine")

    def test_not_an_engine(self):
        with pytest.raises(ConfigError, match="does not implement"):
            resolve_engine(f"{FAKE}:_ZIP_EPOCH")

    def test_factory_failure(self, monkeypatch):
        monkeypatch.setattr(fake_engine, "broken_factory", _failing_factory, raising=False)
        with pytest.raises(ConfigError, match="license expired"):
            resolve_engine(f"{FAKE}:broken_factory")


class TestResolveByEntryPoint:
    """Bare names are looked up in the rulebundle.engines group."""

    def test_entry_point(self, monkeypatch):
        ep = EntryPoint(name="fake", value=f"{FAKE}:FakeEngine", group=ENTRY_POINT_GROUP)

        def fake_entry_points(group, name):
            return [ep] if (group, name) == (ENTRY_POINT_GROUP, "fake") else []

        monkeypatch.setattr("rulebundle.engine.resolver.entry_points", fake_entry_points)
        assert isinstance(resolve_engine("fake"), FakeEngine)

    def test_unknown_entry_point(self, monkeypatch):
        monkeypatch.setattr("rulebundle.engine.resolver.entry_points", lambda group, name: [])
        with pytest.raises(ConfigError, match="No rule engine named 'drools'"):
            resolve_engine("drools")

    def test_broken_entry_point(self, monkeypatch):
        ep = EntryPoint(name="broken", value="no_such_module_anywhere:Engine", group=ENTRY_POINT_GROUP)
        monkeypatch.setattr("rulebundle.engine.resolver.entry_points", lambda group, name: [ep])
        with pytest.raises(ConfigError, match="Cannot load"):
            resolve_engine("broken")
