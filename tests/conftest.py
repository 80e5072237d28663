"""
Shared pytest fixtures for rulebundle tests.

This module provides:
- Settings and logging isolation between tests
- A fresh fake rule engine per test
- Rule-source folders built on ``tmp_path``

Usage:
    def test_build(engine, rules_dir, tmp_path):
        report = compile_bundle(rules_dir, tmp_path / "out.jar", engine=engine)
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Callable, Generator

import pytest
import structlog

from rulebundle.core.settings import clear_settings_cache
from tests._support.fake_engine import FakeEngine
from tests._support.rule_sources import ADULT_RULE, BROKEN_RULE


# =============================================================================
# Isolation
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Generator[None, None, None]:
    """Drop RULEBUNDLE_* env vars and cached settings around every test."""
    for key in list(os.environ):
        if key.startswith("RULEBUNDLE_"):
            monkeypatch.delenv(key)
    # keep a stray .env in the working directory out of the tests
    monkeypatch.chdir(tmp_path)
    clear_settings_cache()
    yield
    clear_settings_cache()
    structlog.reset_defaults()


# =============================================================================
# Engine and source fixtures
# =============================================================================


@pytest.fixture
def engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def write_rule(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write ``content`` to ``rules/<relative>`` and return the file path."""
    root = tmp_path / "rules"

    def _write(relative: str, content: str = ADULT_RULE) -> Path:
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def rules_dir(write_rule: Callable[[str, str], Path], tmp_path: Path) -> Path:
    """A rules folder with one valid ``adult.drl``."""
    write_rule("adult.drl", ADULT_RULE)
    return tmp_path / "rules"


@pytest.fixture
def broken_rules_dir(write_rule: Callable[[str, str], Path], tmp_path: Path) -> Path:
    """A rules folder with one valid and one broken rule file."""
    write_rule("adult.drl", ADULT_RULE)
    write_rule("broken/bad.drl", BROKEN_RULE)
    return tmp_path / "rules"
