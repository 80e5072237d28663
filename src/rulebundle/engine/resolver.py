"""Resolve the configured rule engine.

An engine reference is either ``"package.module:attr"`` or the name of an
entry point in the ``rulebundle.engines`` group. The referenced object may
be a ready engine instance, or a class/zero-argument factory that returns
one.

Usage::

    from rulebundle.engine.resolver import resolve_engine

    engine = resolve_engine()                           # from RULEBUNDLE_ENGINE
    engine = resolve_engine("acme_rules.engine:AcmeEngine")
"""

from __future__ import annotations

import importlib
from importlib.metadata import entry_points
from typing import Any

from rulebundle.core.errors import ConfigError
from rulebundle.core.logging import get_logger
from rulebundle.core.settings import get_settings
from rulebundle.engine.protocol import RuleEngine

logger = get_logger(__name__)

ENTRY_POINT_GROUP = "rulebundle.engines"


def _import_ref(ref: str) -> Any:
    module_path, _, attr_path = ref.partition(":")
    try:
        obj: Any = importlib.import_module(module_path)
        for part in attr_path.split("."):
            obj = getattr(obj, part)
    except (ImportError, AttributeError) as e:
        raise ConfigError(f"Cannot import rule engine {ref!r}: {e}", cause=e) from e
    return obj


def _load_entry_point(name: str) -> Any:
    matches = entry_points(group=ENTRY_POINT_GROUP, name=name)
    if not matches:
        raise ConfigError(
            f"No rule engine named {name!r} in entry-point group {ENTRY_POINT_GROUP!r}"
        )
    entry_point = next(iter(matches))
    try:
        return entry_point.load()
    except (ImportError, AttributeError) as e:
        raise ConfigError(f"Cannot load rule engine entry point {name!r}: {e}", cause=e) from e


def resolve_engine(ref: str | None = None) -> RuleEngine:
    """Return a rule engine for ``ref``, falling back to ``RULEBUNDLE_ENGINE``.

    Raises:
        ConfigError: If no engine is configured, the reference cannot be
            imported, or the object does not satisfy :class:`RuleEngine`.
    """
    ref = ref or get_settings().engine
    if not ref:
        raise ConfigError(
            "No rule engine configured. Set RULEBUNDLE_ENGINE or pass --engine "
            "('module:attr' or an entry-point name)."
        )

    obj = _import_ref(ref) if ":" in ref else _load_entry_point(ref)

    # classes satisfy the runtime protocol check too, so instantiate them first
    if isinstance(obj, type) or (callable(obj) and not isinstance(obj, RuleEngine)):
        try:
            obj = obj()
        except Exception as e:
            raise ConfigError(f"Rule engine factory {ref!r} failed: {e}", cause=e) from e

    if not isinstance(obj, RuleEngine):
        raise ConfigError(
            f"Rule engine {ref!r} resolved to {type(obj).__name__}, which does not "
            "implement new_build_session/register_module/new_container"
        )

    logger.debug("engine.resolved", ref=ref, engine=type(obj).__name__)
    return obj


__all__ = ["ENTRY_POINT_GROUP", "resolve_engine"]
