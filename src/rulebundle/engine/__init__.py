"""Rule engine seam: structural protocols and configuration-driven resolution."""

from rulebundle.engine.protocol import (
    BuildSession,
    Container,
    ModuleId,
    RuleEngine,
    StatelessSession,
)
from rulebundle.engine.resolver import ENTRY_POINT_GROUP, resolve_engine

__all__ = [
    "BuildSession",
    "Container",
    "ModuleId",
    "RuleEngine",
    "StatelessSession",
    "ENTRY_POINT_GROUP",
    "resolve_engine",
]
